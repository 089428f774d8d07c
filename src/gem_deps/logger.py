"""Logging configuration for the gem-deps command line."""

from __future__ import annotations

import logging
from typing import TextIO

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logger(level: str, stream: TextIO | None = None) -> None:
    """Send log records at `level` or above to `stream` (stderr by default)."""
    level_value = logging.getLevelName(level.upper())
    if not isinstance(level_value, int):
        level_value = logging.INFO
    root_logger = logging.getLogger()
    root_logger.setLevel(level_value)
    # Replace any existing handlers so repeated calls do not duplicate output
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(handler)
