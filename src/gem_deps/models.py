"""Dependency requests produced by a gem dependency file."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

from semantic_version import SimpleSpec, Version

from .errors import RequirementError

if TYPE_CHECKING:
    from collections.abc import Iterable

VERSION_MATCH = re.compile(r"^[0-9]+(?:\.[0-9A-Za-z]+)*(?:-[0-9A-Za-z\-]+(?:\.[0-9A-Za-z\-]+)*)?$")
REQUIREMENT_MATCH = re.compile(r"^\s*(=|!=|>=|<=|>|<|~>)?\s*([0-9][0-9A-Za-z.\-]*)\s*$")
SEGMENT_MATCH = re.compile(r"[0-9]+|[A-Za-z]+")

# Module-level constants to avoid function calls in defaults
_WILDCARD_SPEC = SimpleSpec("*")


def _segments(version_string: str) -> list[int | str]:
    """Split a RubyGems version into its numeric and alphabetic segments.

    A `-` starts a prerelease, so `1.0.0-rc1` is read as `1.0.0.pre.rc1`.
    """
    return [int(s) if s.isdigit() else s for s in SEGMENT_MATCH.findall(version_string.replace("-", ".pre."))]


def _release(segments: list[int | str]) -> list[int]:
    """The numeric segments in front of the first alphabetic one."""
    release: list[int] = []
    for segment in segments:
        if not isinstance(segment, int):
            break
        release.append(segment)
    return release


def parse_version(version_string: str) -> Version:
    """Parse a RubyGems version string into a semantic version.

    RubyGems allows any number of numeric segments; everything after the third is dropped. Segments
    from the first alphabetic one onward become the prerelease, so `1.0.rc1` is `1.0.0-rc.1`.
    """
    if not isinstance(version_string, str) or VERSION_MATCH.match(version_string.strip()) is None:
        msg = f"Invalid gem version {version_string!r}"
        raise RequirementError(msg)
    segments = _segments(version_string.strip())
    release = _release(segments)
    prerelease = tuple(str(s) for s in segments[len(release) :])
    major, minor, patch = (release + [0, 0])[:3]
    return Version(major=major, minor=minor, patch=patch, prerelease=prerelease or None)


def _bump(version_string: str) -> Version:
    """Return the exclusive upper bound of a `~>` requirement.

    Prerelease segments are dropped before the last remaining segment is removed, so `~> 1.0.rc1`
    is bounded by `2.0.0`.
    """
    segments = _release(_segments(version_string))
    if len(segments) > 1:
        segments.pop()
    segments[-1] += 1
    return parse_version(".".join(map(str, segments)))


def parse_requirement(requirement: str) -> list[str]:
    """Translate a single Ruby requirement (e.g. `~> 1.2`) into `SimpleSpec` clauses."""
    m = REQUIREMENT_MATCH.match(requirement) if isinstance(requirement, str) else None
    if m is None:
        msg = f"Invalid gem requirement {requirement!r}"
        raise RequirementError(msg)
    op, version_string = m.group(1) or "=", m.group(2)
    version = parse_version(version_string)
    if op == "=":
        return [f"=={version}"]
    if op == "~>":
        return [f">={version}", f"<{_bump(version_string)}"]
    return [f"{op}{version}"]


def parse_requirements(requirements: Iterable[str]) -> SimpleSpec:
    """Combine Ruby requirement strings into a single `SimpleSpec`."""
    clauses = [clause for requirement in requirements for clause in parse_requirement(requirement)]
    if not clauses:
        return _WILDCARD_SPEC
    return SimpleSpec(",".join(clauses))


class GemDependency:
    """A request for a gem, as forwarded to a `RequestSet`."""

    def __init__(self, name: str, requirements: Iterable[str] = ()) -> None:
        """Initialize a gem dependency.

        Args:
            name: Name of the gem
            requirements: Ruby requirement strings such as `"~> 1.0"` or `">= 1.0.2"`

        """
        self.name: str = name
        self.requirements: tuple[str, ...] = tuple(requirements)
        self.spec: SimpleSpec = parse_requirements(self.requirements)

    def match(self, version: str | Version) -> bool:
        """True if `version` satisfies every requirement of this dependency."""
        if isinstance(version, str):
            version = parse_version(version)
        return self.spec.match(version)

    def to_obj(self) -> dict[str, Any]:
        """Convert the dependency to a dictionary representation."""
        return {"name": self.name, "requirements": list(self.requirements)}

    def __str__(self) -> str:
        """Return string representation of the dependency."""
        if not self.requirements:
            return self.name
        return f"{self.name} ({', '.join(self.requirements)})"

    def __repr__(self) -> str:
        """Return the representation of the dependency."""
        return f"{self.__class__.__name__}({self.name!r}, {self.requirements!r})"

    def __eq__(self, other: object) -> bool:
        """Check equality with another dependency."""
        return (
            isinstance(other, GemDependency)
            and self.name == other.name
            and self.requirements == other.requirements
        )

    def __lt__(self, other: object) -> bool:
        """Compare dependencies for sorting."""
        if not isinstance(other, GemDependency):
            msg = "Need a GemDependency"
            raise TypeError(msg)
        return (self.name, self.requirements) < (other.name, other.requirements)

    def __hash__(self) -> int:
        """Compute hash for the dependency."""
        return hash((self.name, self.requirements))
