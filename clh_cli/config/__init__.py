"""
Configuration System

Manages configuration for clh with a layered approach.

Configuration Priority (highest to lowest):
    1. Explicit overrides (e.g. `clh use-context <name>`)
    2. Command-line flags
    3. Config file passed with --config
    4. Discovered config file (/etc/clh, ~/.clh, ./.clh)
    5. Environment variables (CLH_* prefix)
    6. Built-in defaults

Modules:
    settings: ClhConfig layered store
    resolver: Two-phase resolution and persistence
    defaults: Default values and constants
    errors: Configuration exceptions
"""

from clh_cli.config.errors import ConfigError, ConfigLoadError, ConfigPersistError
from clh_cli.config.resolver import (
    ConfigResolution,
    persist,
    resolve_log_level,
    resolve_phase_one,
    resolve_phase_two,
    switch_context,
)
from clh_cli.config.settings import ClhConfig

__all__ = [
    "ClhConfig",
    "ConfigResolution",
    "ConfigError",
    "ConfigLoadError",
    "ConfigPersistError",
    "persist",
    "resolve_log_level",
    "resolve_phase_one",
    "resolve_phase_two",
    "switch_context",
]
