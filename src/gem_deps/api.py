"""A semi-compatible evaluator for Bundler Gemfiles and Isolate `gem.deps.rb` files."""

from __future__ import annotations

import functools
import logging
from collections import defaultdict
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Any

from .errors import RequirementError, StatementError, UndefinedStatementError, UsageError, VersionMismatchError
from .parser import Statement, StatementKind, parse
from .runtime import NATIVE_PLATFORM, RubyRuntime
from .sources import SourceList, sources

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator

    from .request_set import RequestSet
    from .vendor_set import VendorSet

logger = logging.getLogger(__name__)

BLOCK_STATEMENTS = frozenset({StatementKind.GROUP, StatementKind.PLATFORM, StatementKind.PLATFORMS})


class GemDependencyAPI:
    """Evaluates a gem dependency file against a `RequestSet`.

    Every `gem` statement is recorded in `dependency_groups` under each group it belongs to and,
    unless one of those groups is in `without_groups`, forwarded to the request set.

    An instance evaluates exactly one file and is then discarded.
    """

    def __init__(
        self,
        request_set: RequestSet,
        path: str | Path,
        source_list: SourceList | None = None,
        runtime: RubyRuntime | None = None,
    ) -> None:
        """Create an evaluator that adds the dependencies described in `path` to `request_set`.

        Args:
            request_set: Receives a request for every gem that is not excluded
            path: The dependency file to evaluate
            source_list: Gem sources to update; defaults to the process-wide `sources()`
            runtime: The runtime checked by `ruby` statements; detected on first use if omitted

        """
        if not isinstance(path, Path):
            path = Path(path)
        self.request_set = request_set
        self.path: Path = path
        self.source_list: SourceList = sources() if source_list is None else source_list

        self.current_groups: tuple[str, ...] | None = None
        self.dependency_groups: defaultdict[str, list[list[Any]]] = defaultdict(list)
        self.vendor_set: VendorSet = request_set.vendor_set
        self._without_groups: set[str] = set()
        self._default_sources = True
        self._runtime = runtime

    @property
    def gem_deps_file(self) -> str:
        """The basename of the file the dependencies are loaded from."""
        return self.path.name

    @property
    def runtime(self) -> RubyRuntime:
        """The Ruby runtime `ruby` statements are checked against."""
        if self._runtime is None:
            self._runtime = RubyRuntime.detect()
        return self._runtime

    @property
    def without_groups(self) -> set[str]:
        """Groups whose gems are recorded in `dependency_groups` but never requested."""
        return self._without_groups

    @without_groups.setter
    def without_groups(self, groups: str | Iterable[str]) -> None:
        if isinstance(groups, str):
            groups = [groups]
        self._without_groups = set(groups)

    def load(self) -> GemDependencyAPI:
        """Read, parse and evaluate the dependency file."""
        logger.debug("Loading gem dependencies from %s", self.path)
        text = self.path.read_text(encoding="utf-8")
        self.execute(parse(text, str(self.path)))
        return self

    def execute(self, statements: Iterable[Statement]) -> None:
        """Evaluate `statements` in order, stopping at the first failure."""
        for statement in statements:
            self._dispatch(statement)

    def _dispatch(self, statement: Statement) -> None:  # noqa: C901
        location = f"{self.gem_deps_file}:{statement.line}"
        try:
            kind = statement.kind
        except ValueError as e:
            msg = f"undefined statement `{statement.name}' in {location}"
            raise UndefinedStatementError(msg) from e

        if kind in BLOCK_STATEMENTS:
            if statement.body is None:
                msg = f"`{kind.value}' requires a block in {location}"
                raise StatementError(msg)
            block = functools.partial(self.execute, statement.body)
        elif statement.body is not None:
            logger.warning("Ignoring the block passed to `%s' in %s", kind.value, location)

        args, options = statement.args, statement.options
        if kind is StatementKind.GEM:
            if not args:
                msg = f"`gem' requires a gem name in {location}"
                raise StatementError(msg)
            try:
                self.gem(*args, **options)
            except RequirementError as e:
                msg = f"{e} in {location}"
                raise RequirementError(msg) from e
        elif kind is StatementKind.GROUP:
            if not args or options:
                msg = f"`group' requires one or more group names in {location}"
                raise StatementError(msg)
            self.group(*args, block=block)
        elif kind in (StatementKind.PLATFORM, StatementKind.PLATFORMS):
            if len(args) != 1 or options:
                msg = f"`{kind.value}' requires exactly one platform in {location}"
                raise StatementError(msg)
            self.platform(args[0], block)
        elif kind is StatementKind.RUBY:
            if len(args) != 1:
                msg = f"`ruby' requires exactly one version in {location}"
                raise StatementError(msg)
            self.ruby(args[0], **options)
        elif kind is StatementKind.SOURCE:
            if len(args) != 1 or options:
                msg = f"`source' requires exactly one URL in {location}"
                raise StatementError(msg)
            self.source(args[0])

    def gem(self, name: str, /, *requirements: str, **options: Any) -> None:
        """Declare a dependency on the gem `name`.

        Recognised options are `path` (a directory vendoring the gem), `group` and `groups`. Any
        other options are kept with the declaration in `dependency_groups` but not forwarded.
        """
        directory = options.pop("path", None)
        if directory is not None:
            self.vendor_set.add_vendor_gem(name, directory)

        all_groups: dict[str, None] = {}
        group = options.pop("group", None)
        if isinstance(group, list):
            all_groups.update(dict.fromkeys(group))
        elif group is not None:
            all_groups[group] = None
        groups = options.pop("groups", None)
        if groups is not None:
            if isinstance(groups, str):
                groups = [groups]
            all_groups.update(dict.fromkeys(groups))
        if self.current_groups is not None:
            all_groups.update(dict.fromkeys(self.current_groups))

        for group_name in all_groups:
            gem_arguments: list[Any] = [name, *requirements]
            if options:
                gem_arguments.append(dict(options))
            self.dependency_groups[group_name].append(gem_arguments)

        excluded = self.without_groups.intersection(all_groups)
        if excluded:
            logger.info("Skipping gem %s from excluded groups %s", name, ", ".join(sorted(excluded)))
            return

        self.request_set.gem(name, *requirements)

    @contextmanager
    def _in_groups(self, groups: tuple[str, ...]) -> Iterator[None]:
        self.current_groups = groups
        try:
            yield
        finally:
            self.current_groups = None

    def group(self, *groups: str, block: Callable[[], object]) -> None:
        """Evaluate `block` with every gem it declares placed in `groups`."""
        with self._in_groups(groups):
            block()

    def platform(self, what: str, block: Callable[[], object]) -> None:
        """Evaluate `block` only when `what` names the native Ruby platform."""
        if what == NATIVE_PLATFORM:
            block()
        else:
            logger.info("Skipping dependencies for platform %s", what)

    platforms = platform

    def ruby(self, version: str, /, **options: Any) -> bool:
        """Restrict this dependency file to the given Ruby `version`.

        The `engine` and `engine_version` options come from Bundler; only the engine name is checked.
        """
        engine = options.get("engine")
        engine_version = options.get("engine_version")

        if engine is not None and engine_version is None:
            msg = "you must specify engine_version along with the ruby engine"
            raise UsageError(msg)

        runtime = self.runtime
        if runtime.version != version:
            msg = f"Your Ruby version is {runtime.version}, but your {self.gem_deps_file} requires {version}"
            raise VersionMismatchError(msg)

        if engine is not None and engine != runtime.engine:
            msg = f"Your ruby engine is {runtime.engine}, but your {self.gem_deps_file} requires {engine}"
            raise VersionMismatchError(msg)

        return True

    def source(self, url: str) -> None:
        """Add `url` as a gem source, replacing the default sources on first use."""
        if self._default_sources:
            self.source_list.clear()
        self._default_sources = False
        self.source_list.append(url)

    def to_obj(self) -> dict[str, Any]:
        """Summarize the evaluation as a JSON-serializable dictionary."""
        return {
            "file": self.gem_deps_file,
            "dependencies": self.request_set.to_obj(),
            "groups": dict(self.dependency_groups),
            "without": sorted(self.without_groups),
            "sources": self.source_list.to_list(),
            "vendored": {name: str(directory) for name, directory in self.vendor_set.directories.items()},
        }


# Misspelled name kept for backwards compatibility
DepedencyAPI = GemDependencyAPI
