"""Command-line interface for gem-deps."""

from __future__ import annotations

import json
import logging
import sys
from typing import TYPE_CHECKING

from . import __version__ as gem_deps_version
from .config import OutputFormat, Settings
from .errors import GemDepsError
from .graph import to_dot
from .logger import setup_logger
from .request_set import RequestSet

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger(__name__)


def main(argv: Sequence[str] | None = None) -> int:
    """Evaluate a gem dependency file and print what it requests."""
    settings = Settings(_cli_parse_args=True if argv is None else list(argv))  # type: ignore[call-arg]
    setup_logger(settings.log_level)

    logger.debug("Starting gem-deps with settings: %s", settings)

    if settings.version:
        logger.info("gem-deps version %s", gem_deps_version)
        return 0

    if settings.output_file is None:
        output_write = sys.stdout.write
    else:
        output_write = settings.output_file.write_text
        if not settings.force and settings.output_file.exists():
            logger.error("%s already exists!\nRe-run with `--force` to overwrite the file.", settings.output_file)
            return 1

    request_set = RequestSet()
    try:
        gem_deps = request_set.load_gemdeps(
            settings.target,
            without_groups=settings.without,
            runtime=settings.runtime(),
        )
    except FileNotFoundError:
        logger.error("%s does not exist", settings.target)  # noqa: TRY400
        return 1
    except GemDepsError as e:
        logger.error("%s", e)  # noqa: TRY400
        return 1

    if not request_set.dependencies:
        logger.warning("%s does not request any gems", settings.target)

    if settings.output_format == OutputFormat.dot:
        output_write(to_dot(gem_deps).source)
    elif settings.output_format == OutputFormat.json:
        output_write(json.dumps(gem_deps.to_obj(), indent=4))
    else:
        msg = f"TODO: Implement output format {settings.output_format}"
        raise NotImplementedError(msg)

    if settings.output_file is not None:
        logger.info("Output saved to %s", settings.output_file.absolute())
    return 0
