"""Registry of gems that are provided by a local directory instead of a gem source."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from .runtime import NATIVE_PLATFORM

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VendorSpecification:
    """A vendored gem as seen by the surrounding resolver."""

    name: str
    version: str
    platform: str
    directory: Path
    source: str | None = None

    @property
    def full_name(self) -> str:
        """Name and version, plus the platform for non-native gems."""
        if self.platform == NATIVE_PLATFORM:
            return f"{self.name}-{self.version}"
        return f"{self.name}-{self.version}-{self.platform}"


class VendorSet:
    """Maps gem names to the directories that vendor them."""

    def __init__(self) -> None:
        """Initialize an empty vendor set."""
        self._directories: dict[str, Path] = {}

    def add_vendor_gem(self, name: str, directory: str | Path) -> None:
        """Register `directory` as the source of the gem `name`."""
        if not isinstance(directory, Path):
            directory = Path(directory)
        previous = self._directories.get(name)
        if previous is not None and previous != directory:
            logger.warning("Gem %s was vendored from %s; now using %s", name, previous, directory)
        self._directories[name] = directory
        logger.debug("Vendoring gem %s from %s", name, directory)

    @property
    def directories(self) -> dict[str, Path]:
        """Vendored gem names and their directories."""
        return dict(self._directories)

    def load_spec(
        self,
        name: str,
        version: str,
        platform: str = NATIVE_PLATFORM,
        source: str | None = None,
    ) -> VendorSpecification:
        """Look up the vendored gem `name`.

        Raises:
            KeyError: if `name` was never vendored

        """
        directory = self._directories[name]
        return VendorSpecification(
            name=name,
            version=version,
            platform=platform,
            directory=directory,
            source=source,
        )

    def __contains__(self, name: object) -> bool:
        """Check whether a gem name is vendored."""
        return name in self._directories

    def __len__(self) -> int:
        """Return the number of vendored gems."""
        return len(self._directories)
