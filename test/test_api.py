from pathlib import Path
from tempfile import TemporaryDirectory
from unittest import TestCase
from unittest.mock import patch

import pytest

from gem_deps.api import DepedencyAPI, GemDependencyAPI
from gem_deps.errors import (
    RequirementError,
    StatementError,
    UndefinedStatementError,
    UsageError,
    VersionMismatchError,
)
from gem_deps.models import GemDependency
from gem_deps.request_set import RequestSet
from gem_deps.runtime import RubyRuntime
from gem_deps.sources import SourceList, sources

RUBY_VERSION = "3.2.2"


def dep(name: str, *requirements: str) -> GemDependency:
    return GemDependency(name, requirements)


class TestGemDependencyAPI(TestCase):
    def setUp(self) -> None:
        self.set = RequestSet()
        self.vendor_set = self.set.vendor_set
        self.sources = SourceList()
        self.runtime = RubyRuntime(RUBY_VERSION, "ruby", RUBY_VERSION)
        self.gda = GemDependencyAPI(self.set, "gem.deps.rb", source_list=self.sources, runtime=self.runtime)

    def load(self, contents: str, name: str = "gem.deps.rb") -> GemDependencyAPI:
        with TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / name
            path.write_text(contents)
            self.gda = GemDependencyAPI(self.set, path, source_list=self.sources, runtime=self.runtime)
            return self.gda.load()

    def test_gem(self) -> None:
        self.gda.gem("a")

        assert self.set.dependencies == [dep("a")]
        assert self.gda.dependency_groups == {}

    def test_gem_group(self) -> None:
        self.gda.gem("a", group="test")

        assert self.gda.dependency_groups == {"test": [["a"]]}
        assert self.set.dependencies == [dep("a")]

    def test_gem_group_without(self) -> None:
        self.gda.without_groups.add("test")

        self.gda.gem("a", group="test")

        assert self.gda.dependency_groups == {"test": [["a"]]}
        assert self.set.dependencies == []

    def test_gem_groups(self) -> None:
        self.gda.gem("a", groups=["test", "development"])

        assert self.gda.dependency_groups == {"development": [["a"]], "test": [["a"]]}
        assert self.set.dependencies == [dep("a")]

    def test_gem_groups_partially_without(self) -> None:
        self.gda.without_groups = ["test"]

        self.gda.gem("a", groups=["test", "development"])

        assert self.gda.without_groups == {"test"}
        assert self.gda.dependency_groups == {"development": [["a"]], "test": [["a"]]}
        assert self.set.dependencies == []

    def test_gem_groups_scalar(self) -> None:
        self.gda.gem("a", groups="test")

        assert self.gda.dependency_groups == {"test": [["a"]]}

    def test_gem_residual_option_named_like_parameter(self) -> None:
        self.gda.gem("a", name="x", group="test")

        assert self.gda.dependency_groups == {"test": [["a", {"name": "x"}]]}
        assert self.set.dependencies == [dep("a")]

    def test_without_groups_string(self) -> None:
        self.gda.without_groups = "test"

        assert self.gda.without_groups == {"test"}

    def test_gem_path(self) -> None:
        with TemporaryDirectory() as directory:
            self.gda.gem("a", path=directory)

            assert self.set.dependencies == [dep("a")]
            assert self.gda.dependency_groups == {}
            loaded = self.vendor_set.load_spec("a", "1", "ruby")
            assert loaded.full_name == "a-1"
            assert loaded.directory == Path(directory)

    def test_gem_path_group(self) -> None:
        self.gda.gem("a", "~> 1.0", path="vendor/a", group="test")

        assert self.gda.dependency_groups == {"test": [["a", "~> 1.0"]]}
        assert "a" in self.vendor_set

    def test_gem_requirement(self) -> None:
        self.gda.gem("a", "~> 1.0")

        assert self.set.dependencies == [dep("a", "~> 1.0")]

    def test_gem_requirements(self) -> None:
        self.gda.gem("b", "~> 1.0", ">= 1.0.2")

        assert self.set.dependencies == [dep("b", "~> 1.0", ">= 1.0.2")]

    def test_gem_requirements_options(self) -> None:
        self.gda.gem("c", git="https://example/c.git")

        assert self.set.dependencies == [dep("c")]
        assert self.gda.dependency_groups == {}

    def test_gem_requirements_options_group(self) -> None:
        self.gda.gem("c", "~> 1.0", git="https://example/c.git", group="test")

        assert self.gda.dependency_groups == {"test": [["c", "~> 1.0", {"git": "https://example/c.git"}]]}
        assert self.set.dependencies == [dep("c", "~> 1.0")]

    def test_gem_deps_file(self) -> None:
        assert self.gda.gem_deps_file == "gem.deps.rb"

        gda = GemDependencyAPI(self.set, "foo/Gemfile")

        assert gda.gem_deps_file == "Gemfile"

    def test_group(self) -> None:
        self.gda.group("test", block=lambda: self.gda.gem("a"))

        assert self.gda.dependency_groups["test"] == [["a"]]
        assert self.set.dependencies == [dep("a")]
        assert self.gda.current_groups is None

    def test_group_multiple(self) -> None:
        self.gda.group("a", block=lambda: self.gda.gem("a", group="b", groups=["c", "d"]))

        for group in ("a", "b", "c", "d"):
            assert self.gda.dependency_groups[group] == [["a"]]
        assert self.set.dependencies == [dep("a")]

    def test_group_without(self) -> None:
        self.gda.without_groups = {"test"}

        self.gda.group("test", block=lambda: self.gda.gem("a"))
        self.gda.gem("b")

        assert self.gda.dependency_groups == {"test": [["a"]]}
        assert self.set.dependencies == [dep("b")]

    def test_group_restored_after_error(self) -> None:
        def block() -> None:
            self.gda.gem("a")
            msg = "boom"
            raise RuntimeError(msg)

        with pytest.raises(RuntimeError, match="boom"):
            self.gda.group("test", block=block)

        assert self.gda.current_groups is None
        self.gda.gem("b")
        assert self.gda.dependency_groups == {"test": [["a"]]}
        assert self.set.dependencies == [dep("a"), dep("b")]

    def test_load(self) -> None:
        gda = self.load(
            """\
gem 'a'

group :test do
  gem 'b'
end
"""
        )

        assert gda.dependency_groups == {"test": [["b"]]}
        assert self.set.dependencies == [dep("a"), dep("b")]

    def test_load_gemfile(self) -> None:
        gda = self.load(
            """\
source "https://gems.example"

ruby "3.2.2", engine: "ruby", engine_version: "3.2.2"

gem "rails", "~> 7.0", ">= 7.0.4"
gem "local", path: "vendor/local"

group :development, :test do
  gem "rspec", require: false
end

platforms :jruby do
  gem "jdbc"
end
""",
            name="Gemfile",
        )

        assert self.sources == ["https://gems.example"]
        assert self.set.dependencies == [dep("rails", "~> 7.0", ">= 7.0.4"), dep("local"), dep("rspec")]
        assert gda.dependency_groups == {
            "development": [["rspec", {"require": False}]],
            "test": [["rspec", {"require": False}]],
        }
        assert gda.vendor_set.directories == {"local": Path("vendor/local")}

    def test_load_group_without(self) -> None:
        with TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "Gemfile"
            path.write_text("gem 'a'\n\ngroup :test do\n  gem 'b'\nend\n")
            gda = self.set.load_gemdeps(path, without_groups=["test"], source_list=self.sources, runtime=self.runtime)

        assert gda.dependency_groups == {"test": [["b"]]}
        assert self.set.dependencies == [dep("a")]

    def test_load_residual_options_named_like_parameters(self) -> None:
        gda = self.load("ruby '3.2.2', version: 'x'\ngem 'a', name: 'x', group: :test\n")

        assert gda.dependency_groups == {"test": [["a", {"name": "x"}]]}
        assert self.set.dependencies == [dep("a")]

    def test_load_invalid_requirement(self) -> None:
        with pytest.raises(RequirementError, match=r"Invalid gem requirement 'banana' in gem.deps.rb:2"):
            self.load("gem 'a'\ngem 'b', 'banana'\n")

        with pytest.raises(RequirementError, match=r"Invalid gem requirement 1 in gem.deps.rb:1"):
            self.load("gem 'c', 1\n")

    def test_load_aborts_at_first_failure(self) -> None:
        with pytest.raises(VersionMismatchError):
            self.load("gem 'a'\nruby '0.0.0'\ngem 'b'\n")

        assert self.set.dependencies == [dep("a")]

    def test_load_group_restored_after_failure(self) -> None:
        with pytest.raises(UndefinedStatementError, match=r"undefined statement `frobnicate' in gem.deps.rb:3"):
            self.load("group :test do\n  gem 'a'\n  frobnicate 'x'\nend\n")

        assert self.gda.current_groups is None
        assert self.gda.dependency_groups == {"test": [["a"]]}

    def test_load_group_without_block(self) -> None:
        with pytest.raises(StatementError, match="requires a block"):
            self.load("group :test\n")

    def test_load_source_arguments(self) -> None:
        with pytest.raises(StatementError, match="exactly one URL"):
            self.load("source 'http://a.example', 'http://b.example'\n")

    def test_load_ignores_gem_block(self) -> None:
        self.load("gem 'a' do\n  gem 'b'\nend\n")

        assert self.set.dependencies == [dep("a")]

    def test_name_typo(self) -> None:
        assert DepedencyAPI is GemDependencyAPI

    def test_platform_mswin(self) -> None:
        self.gda.platform("mswin", lambda: self.gda.gem("a"))

        assert self.set.dependencies == []
        assert self.gda.dependency_groups == {}

    def test_platform_ruby(self) -> None:
        self.gda.platform("ruby", lambda: self.gda.gem("a"))

        assert self.set.dependencies == [dep("a")]

    def test_platforms(self) -> None:
        self.gda.platforms("ruby", lambda: self.gda.gem("a"))

        assert self.set.dependencies == [dep("a")]

    def test_ruby(self) -> None:
        assert self.gda.ruby(RUBY_VERSION)
        assert self.set.dependencies == []
        assert self.sources == ["https://rubygems.org/"]

    def test_ruby_engine(self) -> None:
        self.gda = GemDependencyAPI(self.set, "gem.deps.rb", runtime=RubyRuntime(RUBY_VERSION, "jruby", "1.7.6"))

        assert self.gda.ruby(RUBY_VERSION, engine="jruby", engine_version="1.7.6")

    def test_ruby_engine_mismatch_engine(self) -> None:
        with pytest.raises(VersionMismatchError) as e:
            self.gda.ruby(RUBY_VERSION, engine="jruby", engine_version="1.7.4")

        assert str(e.value) == "Your ruby engine is ruby, but your gem.deps.rb requires jruby"

    def test_ruby_engine_no_engine_version(self) -> None:
        with pytest.raises(UsageError) as e:
            self.gda.ruby(RUBY_VERSION, engine="jruby")

        assert str(e.value) == "you must specify engine_version along with the ruby engine"

    def test_ruby_mismatch(self) -> None:
        with pytest.raises(VersionMismatchError) as e:
            self.gda.ruby("1.8.0")

        assert str(e.value) == f"Your Ruby version is {RUBY_VERSION}, but your gem.deps.rb requires 1.8.0"

    def test_ruby_detects_runtime(self) -> None:
        gda = GemDependencyAPI(self.set, "Gemfile", source_list=self.sources)
        with patch.object(RubyRuntime, "detect", return_value=RubyRuntime("2.7.8")) as detect:
            assert gda.ruby("2.7.8")
            assert gda.ruby("2.7.8")

        detect.assert_called_once_with()

    def test_source(self) -> None:
        self.gda.source("http://first.example")

        assert self.sources == ["http://first.example"]
        assert self.gda.source_list is self.sources

        self.gda.source("http://second.example")

        assert self.sources == ["http://first.example", "http://second.example"]

    def test_source_duplicates(self) -> None:
        self.gda.source("http://first.example")
        self.gda.source("http://first.example")

        assert self.sources == ["http://first.example", "http://first.example"]

    def test_default_source_list(self) -> None:
        gda = GemDependencyAPI(self.set, "Gemfile")

        assert gda.source_list is sources()

    def test_to_obj(self) -> None:
        self.gda.without_groups = {"test"}
        self.gda.gem("a", "~> 1.0")
        self.gda.gem("b", group="test", require=False)
        self.gda.gem("c", path="vendor/c")

        assert self.gda.to_obj() == {
            "file": "gem.deps.rb",
            "dependencies": [
                {"name": "a", "requirements": ["~> 1.0"]},
                {"name": "c", "requirements": []},
            ],
            "groups": {"test": [["b", {"require": False}]]},
            "without": ["test"],
            "sources": ["https://rubygems.org/"],
            "vendored": {"c": "vendor/c"},
        }
