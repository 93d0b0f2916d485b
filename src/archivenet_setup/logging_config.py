"""Logging configuration for the setup command."""

from __future__ import annotations

import logging
import os
import sys

SIMPLE_FORMAT = "%(levelname)-8s | %(message)s"
DETAILED_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d | %(message)s"

LOG_LEVEL_ENV = "LOG_LEVEL"
DEFAULT_LOG_LEVEL = "INFO"


def setup_logging(level: str | None = None) -> None:
    """Configure logging for the whole process.

    Args:
        level: Log level override. If not provided, uses LOG_LEVEL env var or INFO.
    """
    level_name = (level or os.environ.get(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL)).upper()
    log_level = getattr(logging, level_name, logging.INFO)

    fmt = DETAILED_FORMAT if log_level == logging.DEBUG else SIMPLE_FORMAT

    # stdout is reserved for help and the completion message.
    logging.basicConfig(
        level=log_level,
        format=fmt,
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
        force=True,
    )

    logging.getLogger("mcp").setLevel(logging.WARNING)
