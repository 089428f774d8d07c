"""Collects the gems requested by a dependency file."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .api import GemDependencyAPI
from .models import GemDependency
from .vendor_set import VendorSet

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator
    from pathlib import Path

    from .runtime import RubyRuntime
    from .sources import SourceList

logger = logging.getLogger(__name__)


class RequestSet:
    """The set of gem requests to be resolved and installed later."""

    def __init__(self, *dependencies: GemDependency) -> None:
        """Initialize the request set with optional initial `dependencies`."""
        self.dependencies: list[GemDependency] = list(dependencies)
        self.vendor_set: VendorSet = VendorSet()

    def gem(self, name: str, *requirements: str) -> GemDependency:
        """Request the gem `name` matching every one of `requirements`."""
        dependency = GemDependency(name, requirements)
        logger.debug("Requesting %s", dependency)
        self.dependencies.append(dependency)
        return dependency

    def load_gemdeps(
        self,
        path: str | Path,
        without_groups: Iterable[str] = (),
        source_list: SourceList | None = None,
        runtime: RubyRuntime | None = None,
    ) -> GemDependencyAPI:
        """Evaluate the dependency file at `path`, adding its gems to this set."""
        gem_deps = GemDependencyAPI(self, path, source_list=source_list, runtime=runtime)
        gem_deps.without_groups = without_groups
        return gem_deps.load()

    def to_obj(self) -> list[dict[str, Any]]:
        """Convert the requests to a list of dictionaries."""
        return [dependency.to_obj() for dependency in self.dependencies]

    def __iter__(self) -> Iterator[GemDependency]:
        """Iterate over the requests in the order they were made."""
        return iter(self.dependencies)

    def __len__(self) -> int:
        """Return the number of requests."""
        return len(self.dependencies)

    def __contains__(self, name: object) -> bool:
        """Check whether a gem name has been requested."""
        return any(dependency.name == name for dependency in self.dependencies)
