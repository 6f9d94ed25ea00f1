"""Logging configuration for the application."""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

WEB_LOGGERS = ("fastapi", "starlette")

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    """Configure application logging with a single formatted stdout handler.

    Args:
        level: The log level string (DEBUG, INFO, WARNING, ERROR).
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        stream=sys.stdout,
        force=True,
    )


def set_log_level(logger_name: str, level: str) -> bool:
    """Set the level of one named logger.

    Args:
        logger_name: Name of the logger to adjust, e.g. ``starlette``.
        level: The log level string; unknown names are ignored with a warning.

    Returns:
        True when the level was applied.
    """
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        logger.warning("Unrecognised log level %r - unable to set logging level for %s", level, logger_name)
        return False
    logging.getLogger(logger_name).setLevel(numeric)
    return True
