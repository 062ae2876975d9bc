"""Utility helpers."""

from clh_cli.utils.log import configure_logging, parse_log_level, set_log_level

__all__ = ["configure_logging", "parse_log_level", "set_log_level"]
