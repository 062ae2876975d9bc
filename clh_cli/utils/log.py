"""
Logging helpers.

Log records go to stdout. The verbosity of everything under the `clh_cli`
logger follows the resolved `log_level` key and is re-applied after every
resolution step.
"""

from __future__ import annotations

import logging
import sys

PACKAGE_LOGGER = "clh_cli"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Level names accepted for log_level (case-insensitive)
LEVEL_NAMES: dict[str, int] = {
    "panic": logging.CRITICAL,
    "fatal": logging.CRITICAL,
    "critical": logging.CRITICAL,
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
    "trace": logging.DEBUG,
}

MOST_VERBOSE_LEVEL = logging.DEBUG


def parse_log_level(name: str) -> int:
    """
    Parse a level name into a logging level.

    Raises:
        ValueError: If the name is not a known level
    """
    try:
        return LEVEL_NAMES[name.strip().lower()]
    except KeyError:
        raise ValueError(f"not a valid log level: {name!r}") from None


def set_log_level(level: int) -> None:
    """Apply a level to the package logger."""
    logging.getLogger(PACKAGE_LOGGER).setLevel(level)


def configure_logging(level: int = logging.INFO) -> None:
    """Send log records to stdout with a plain text format."""
    logging.basicConfig(stream=sys.stdout, format=LOG_FORMAT, level=logging.INFO)
    set_log_level(level)
