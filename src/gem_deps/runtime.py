"""The Ruby runtime that `ruby` and `platform` statements are checked against."""

from __future__ import annotations

import functools
import logging
import subprocess
from dataclasses import dataclass
from shutil import which

from .errors import RuntimeUnavailableError

logger = logging.getLogger(__name__)

NATIVE_PLATFORM = "ruby"
"""The platform identifier of the runtime evaluating the dependency file."""

RUBY_PROBE = (
    'print RUBY_VERSION, " ", '
    '(defined?(RUBY_ENGINE) ? RUBY_ENGINE : "ruby"), " ", '
    "(defined?(RUBY_ENGINE_VERSION) ? RUBY_ENGINE_VERSION : RUBY_VERSION)"
)


@dataclass(frozen=True)
class RubyRuntime:
    """Version and engine of a Ruby interpreter."""

    version: str
    engine: str = "ruby"
    engine_version: str | None = None

    @staticmethod
    @functools.lru_cache(maxsize=None)
    def detect(executable: str = "ruby") -> RubyRuntime:
        """Ask the Ruby interpreter on the PATH for its version and engine."""
        ruby_path = which(executable)
        if ruby_path is None:
            msg = f"{executable} executable not found in PATH"
            raise RuntimeUnavailableError(msg)
        try:
            output = subprocess.check_output(  # noqa: S603
                [ruby_path, "-e", RUBY_PROBE],
                stderr=subprocess.DEVNULL,
                text=True,
            )
        except (OSError, subprocess.CalledProcessError) as e:
            msg = f"Unable to query {ruby_path} for its version: {e!s}"
            raise RuntimeUnavailableError(msg) from e
        fields = output.split()
        if len(fields) != 3:  # noqa: PLR2004
            msg = f"Unexpected output from {ruby_path}: {output!r}"
            raise RuntimeUnavailableError(msg)
        version, engine, engine_version = fields
        runtime = RubyRuntime(version=version, engine=engine, engine_version=engine_version)
        logger.debug("Detected %s at %s", runtime, ruby_path)
        return runtime

    def __str__(self) -> str:
        """Return a human readable description of the runtime."""
        if self.engine == NATIVE_PLATFORM or self.engine_version is None:
            return f"{self.engine} {self.version}"
        return f"{self.engine} {self.engine_version} (ruby {self.version})"
