"""
Configuration errors.

Raised by the resolver; the CLI turns each of them into exit status 1.
"""


class ConfigError(Exception):
    """Base error for configuration resolution and persistence."""


class ConfigLoadError(ConfigError):
    """An explicitly requested config file exists but cannot be loaded."""


class ConfigPersistError(ConfigError):
    """The resolved configuration could not be written to disk."""
