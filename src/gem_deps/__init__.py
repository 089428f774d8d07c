"""The `gem-deps` APIs."""

__version__ = "0.1.0"

from .api import DepedencyAPI, GemDependencyAPI
from .errors import (
    DslSyntaxError,
    GemDepsError,
    RequirementError,
    RuntimeUnavailableError,
    StatementError,
    UndefinedStatementError,
    UsageError,
    VersionMismatchError,
)
from .models import GemDependency
from .parser import Statement, StatementKind, parse
from .request_set import RequestSet
from .runtime import NATIVE_PLATFORM, RubyRuntime
from .sources import DEFAULT_SOURCES, SourceList, sources
from .vendor_set import VendorSet, VendorSpecification

__all__ = [
    "DEFAULT_SOURCES",
    "NATIVE_PLATFORM",
    "DepedencyAPI",
    "DslSyntaxError",
    "GemDependency",
    "GemDependencyAPI",
    "GemDepsError",
    "RequestSet",
    "RequirementError",
    "RubyRuntime",
    "RuntimeUnavailableError",
    "SourceList",
    "Statement",
    "StatementError",
    "StatementKind",
    "UndefinedStatementError",
    "UsageError",
    "VendorSet",
    "VendorSpecification",
    "VersionMismatchError",
    "parse",
    "sources",
]
