"""The list of gem sources shared by every dependency file in the process."""

from __future__ import annotations

import functools
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

logger = logging.getLogger(__name__)

DEFAULT_SOURCES: tuple[str, ...] = ("https://rubygems.org/",)


class SourceList:
    """An ordered, mutable list of gem source URLs. Duplicates are allowed."""

    def __init__(self, urls: Iterable[str] = DEFAULT_SOURCES) -> None:
        """Initialize the source list, by default with `DEFAULT_SOURCES`."""
        self._urls: list[str] = list(urls)

    def clear(self) -> None:
        """Remove every source."""
        self._urls.clear()

    def append(self, url: str) -> None:
        """Add a source after all of the existing ones."""
        logger.debug("Adding gem source %s", url)
        self._urls.append(url)

    def reset(self) -> None:
        """Restore the default sources."""
        self._urls = list(DEFAULT_SOURCES)

    def to_list(self) -> list[str]:
        """Return a copy of the sources."""
        return list(self._urls)

    def __iter__(self) -> Iterator[str]:
        """Iterate over the sources in insertion order."""
        return iter(self._urls)

    def __len__(self) -> int:
        """Return the number of sources."""
        return len(self._urls)

    def __getitem__(self, index: int) -> str:
        """Get the source at `index`."""
        return self._urls[index]

    def __eq__(self, other: object) -> bool:
        """Compare with another `SourceList` or a plain list of URLs."""
        if isinstance(other, SourceList):
            return self._urls == other._urls
        if isinstance(other, list):
            return self._urls == other
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        """Get the representation of the source list."""
        return f"{self.__class__.__name__}({self._urls!r})"


@functools.lru_cache(maxsize=None)
def sources() -> SourceList:
    """Return the process-wide source list."""
    return SourceList()
