"""Exceptions raised while evaluating gem dependency files."""

from __future__ import annotations


class GemDepsError(Exception):
    """Base class for all gem-deps errors."""


class UsageError(GemDepsError, ValueError):
    """Raised when a statement is given an invalid combination of options."""


class VersionMismatchError(GemDepsError):
    """Raised when the Ruby runtime does not satisfy a `ruby` statement."""


class RuntimeUnavailableError(GemDepsError, RuntimeError):
    """Raised when no Ruby runtime could be detected."""


class DslSyntaxError(GemDepsError, ValueError):
    """Raised when a dependency file cannot be parsed."""

    def __init__(self, message: str, path: str = "<string>", line: int = 0) -> None:
        """Initialize the error with its location in the dependency file."""
        self.path = path
        self.line = line
        super().__init__(f"{path}:{line}: {message}")


class UndefinedStatementError(GemDepsError, NameError):
    """Raised when a dependency file calls a statement that does not exist."""


class StatementError(GemDepsError, TypeError):
    """Raised when a known statement is called with the wrong arguments."""


class RequirementError(GemDepsError, ValueError):
    """Raised when a gem version or requirement cannot be parsed."""
