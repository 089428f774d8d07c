"""Configuration settings for gem-deps."""

from __future__ import annotations

from enum import Enum
from pathlib import Path  # noqa: TC003

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    CliImplicitFlag,
    SettingsConfigDict,
)

from .runtime import RubyRuntime


class OutputFormat(str, Enum):
    """Output formats for gem-deps."""

    json = "json"
    dot = "dot"


class Settings(BaseSettings):
    """Settings for gem-deps."""

    target: Path = Field(
        default=Path("Gemfile"),
        description="""Gem dependency file to evaluate, such as a Gemfile or
            gem.deps.rb.""",
    )
    without: list[str] = Field(
        default_factory=list,
        description="""Groups whose gems are recorded but not requested. May be
            repeated or given as a comma separated list.""",
    )
    force: CliImplicitFlag[bool] = Field(
        default=False,
        description="""Force the overwrite of the output file if it already
        exists.""",
    )
    log_level: str = Field(default="info", description="Log level")
    output_file: Path | None = Field(
        default=None,
        description="""Output file path. If not provided, the output will be
        written to stdout.""",
    )
    output_format: OutputFormat = Field(
        default=OutputFormat.json,
        description="""Output format: `json` for the requested gems, groups and
            sources, or `dot` for a Graphviz graph of the groups.""",
    )
    ruby_version: str | None = Field(
        default=None,
        description="""Ruby version that `ruby` statements are checked against.
            By default the `ruby` executable on the PATH is queried.""",
    )
    ruby_engine: str = Field(
        default="ruby",
        description="""Ruby engine used together with `--ruby_version`.""",
    )
    ruby_engine_version: str | None = Field(
        default=None,
        description="""Ruby engine version used together with `--ruby_version`.""",
    )
    version: CliImplicitFlag[bool] = Field(
        default=False,
        description="""Show the version of gem-deps and exit.""",
    )

    model_config = SettingsConfigDict(
        cli_parse_args=True,
        cli_prog_name="gem-deps",
        env_prefix="GEM_DEPS_",
    )

    def runtime(self) -> RubyRuntime | None:
        """The configured Ruby runtime, or None to detect it when first needed."""
        if self.ruby_version is None:
            return None
        return RubyRuntime(
            version=self.ruby_version,
            engine=self.ruby_engine,
            engine_version=self.ruby_engine_version,
        )
