"""
Configuration Resolution

Resolves the configuration of one clh invocation in two phases and writes it
back to disk.

Phase one (before flags are parsed):
    environment -> first discovered config file -> log level

Phase two (after flags are parsed):
    flags -> explicit --config file -> log level -> active context
    -> context-scoped flags and defaults

Both phases work on a ConfigResolution, which commands receive instead of a
process-wide configuration object.

Example:
    >>> resolution = resolve_phase_one()
    >>> resolve_phase_two(resolution, CLIFlags(context="staging", endpoint="https://x"))
    >>> resolution.profile().endpoint
    'https://x'
    >>> persist(resolution)
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

import yaml

from clh_cli.config.defaults import (
    CONFIG_DIR_MODE,
    CONFIG_FILE_MODE,
    CONFIG_FILENAME,
    CONTEXT_KEYS,
    DEFAULT_CONTEXT,
    DEFAULT_ENDPOINT,
    DEFAULT_LOG_LEVEL,
    GLOBAL_KEYS,
    LOCAL_CONFIG_DIR,
    SYSTEM_CONFIG_DIR,
    USER_CONFIG_DIRNAME,
)
from clh_cli.config.errors import ConfigError, ConfigLoadError, ConfigPersistError
from clh_cli.config.settings import ClhConfig
from clh_cli.types import CLIFlags, ContextProfile
from clh_cli.utils.log import MOST_VERBOSE_LEVEL, parse_log_level, set_log_level

logger = logging.getLogger(__name__)


@dataclass
class ConfigResolution:
    """
    Configuration resolved for one invocation.

    Attributes:
        store: Layered key/value store
        home: Home directory of the current user
        context: Active context name, final once phase two has run
        log_level: Logging level in effect
        unreadable_config: Explicit config file that exists but failed to load
    """

    store: ClhConfig
    home: Path
    context: str = DEFAULT_CONTEXT
    log_level: int = logging.INFO
    unreadable_config: Path | None = None

    @property
    def default_config_path(self) -> Path:
        """Persistence target used when no config file was ever read."""
        return self.home / USER_CONFIG_DIRNAME / CONFIG_FILENAME

    @property
    def config_path(self) -> Path:
        """Resolved `config` key, i.e. where persist() writes."""
        value = self.store.get_str("config")
        return Path(value) if value else self.default_config_path

    def profile(self) -> ContextProfile:
        """Endpoint and credentials of the active context."""
        return ContextProfile(
            name=self.context,
            endpoint=self.store.get_str(f"{self.context}.endpoint") or DEFAULT_ENDPOINT,
            username=self.store.get_str(f"{self.context}.username") or None,
            secret_key=self.store.get_str(f"{self.context}.secret_key") or None,
        )


def resolve_home(home: str | Path | None = None) -> Path:
    """
    Locate the current user's home directory.

    Raises:
        ConfigError: If the home directory cannot be determined
    """
    if home is not None:
        return Path(home)
    try:
        return Path.home()
    except (RuntimeError, KeyError) as e:
        raise ConfigError(f"Can't determine home directory: {e}") from e


def config_search_paths(home: Path) -> list[Path]:
    """Directories searched for the base config file, in order."""
    return [SYSTEM_CONFIG_DIR, home / USER_CONFIG_DIRNAME, LOCAL_CONFIG_DIR]


def resolve_log_level(store: ClhConfig) -> int:
    """
    Apply the `log_level` key to the package logger.

    An unknown level name falls back to the most verbose level; it is
    reported but never aborts the invocation.

    Returns:
        The level now in effect
    """
    try:
        level = parse_log_level(store.get_str("log_level"))
    except ValueError as e:
        level = MOST_VERBOSE_LEVEL
        set_log_level(level)
        logger.error(f"Error in log level parsing, fall back to DEBUG: {e}")
        return level

    set_log_level(level)
    return level


def _merge_discovered(store: ClhConfig, search_paths: list[Path]) -> None:
    """Merge the first config file found on the search path, if any."""
    for directory in search_paths:
        candidate = directory / CONFIG_FILENAME
        try:
            if not candidate.is_file():
                continue
        except OSError as e:
            # An inaccessible search directory counts as "not found"
            logger.debug(f"Can't access {candidate}: {e}")
            continue

        try:
            store.merge_config_file(candidate)
        except (OSError, yaml.YAMLError, ConfigLoadError) as e:
            logger.debug(f"Can't read config {candidate}: {e}")
            return
        logger.debug(f"Using config file {candidate}")
        return

    searched = ", ".join(str(path) for path in search_paths)
    logger.debug(f"Can't read config: {CONFIG_FILENAME} not found in [{searched}]")


def resolve_phase_one(
    env: Mapping[str, str] | None = None,
    home: str | Path | None = None,
    search_paths: list[Path] | None = None,
) -> ConfigResolution:
    """
    Resolve everything available before command-line flags are parsed.

    Args:
        env: Environment to read CLH_* variables from (default: os.environ)
        home: Home directory override (default: the current user's home)
        search_paths: Directories to search for config.yaml
            (default: /etc/clh, ~/.clh, ./.clh)

    Returns:
        A ConfigResolution ready for resolve_phase_two

    Raises:
        ConfigError: If the home directory cannot be determined
    """
    store = ClhConfig(env=env)
    store.set_default("log_level", DEFAULT_LOG_LEVEL)
    store.set_default("context", DEFAULT_CONTEXT)

    # Environment only
    resolve_log_level(store)

    home_dir = resolve_home(home)
    if search_paths is None:
        search_paths = config_search_paths(home_dir)

    _merge_discovered(store, search_paths)

    # Environment + discovered file
    level = resolve_log_level(store)

    return ConfigResolution(
        store=store,
        home=home_dir,
        context=store.get_str("context") or DEFAULT_CONTEXT,
        log_level=level,
    )


def _merge_explicit(resolution: ConfigResolution, explicit: Path) -> None:
    """
    Merge the --config file on top of the discovered one.

    A missing file is the future persistence target. A file that exists but
    cannot be loaded is reported and remembered so persist() won't clobber it.
    """
    try:
        if not explicit.exists():
            logger.debug(f"Config file {explicit} does not exist yet")
            return
        resolution.store.merge_config_file(explicit)
    except (OSError, yaml.YAMLError, ConfigLoadError) as e:
        resolution.unreadable_config = explicit
        logger.error(f"Can't read config {explicit}: {e}")
        return
    logger.debug(f"Using config file {explicit}")


def check_context_name(name: str) -> str:
    """
    Reject context names that collide with a global key.

    Raises:
        ConfigError: If the name is a global key such as `log_level`
    """
    if name.lower() in GLOBAL_KEYS:
        raise ConfigError(f"Context name {name!r} is reserved for a global setting")
    return name


def resolve_phase_two(resolution: ConfigResolution, flags: CLIFlags) -> ConfigResolution:
    """
    Resolve flags, the explicit config file and the active context.

    Args:
        resolution: Result of resolve_phase_one, updated in place
        flags: Parsed command-line flags

    Returns:
        The same resolution, now final

    Raises:
        ConfigError: If the active context name is reserved
    """
    store = resolution.store

    for key, value in flags.global_flags().items():
        store.bind_flag(key, value)

    # + flags
    resolve_log_level(store)

    if flags.config:
        _merge_explicit(resolution, Path(flags.config))

    # + explicit config file
    resolution.log_level = resolve_log_level(store)

    resolution.context = check_context_name(store.get_str("context") or DEFAULT_CONTEXT)

    if store.config_file_used is not None:
        store.set_default("config", str(store.config_file_used))
    else:
        store.set_default("config", str(resolution.default_config_path))

    context = resolution.context
    for key in CONTEXT_KEYS:
        store.register_key(f"{context}.{key}")
    for key, value in flags.context_flags().items():
        store.bind_flag(f"{context}.{key}", value)
    store.set_default(f"{context}.endpoint", DEFAULT_ENDPOINT)

    logger.debug(f"Active context: {context}")
    return resolution


def persist(resolution: ConfigResolution) -> Path:
    """
    Write the entire resolved configuration to the config file.

    Every key of every context is written; nothing is filtered or redacted.
    An existing file is overwritten in place.

    Returns:
        Path of the written file

    Raises:
        ConfigPersistError: If the target failed to load, or cannot be written
    """
    path = resolution.config_path

    if resolution.unreadable_config == path:
        raise ConfigPersistError(f"Refusing to overwrite {path}: it could not be read")

    try:
        if not path.parent.exists():
            path.parent.mkdir(mode=CONFIG_DIR_MODE, parents=True, exist_ok=True)
        payload = yaml.safe_dump(resolution.store.all_settings(), default_flow_style=False)
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, CONFIG_FILE_MODE)
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(payload)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigPersistError(f"Can't save config to {path}: {e}") from e

    logger.debug(f"Saved config to {path}")
    return path


def switch_context(resolution: ConfigResolution, new_context: str | None = None) -> Path:
    """
    Make a context the default and persist the configuration.

    Args:
        resolution: Resolved configuration
        new_context: Context to switch to; None keeps the current one

    Returns:
        Path of the written file

    Raises:
        ConfigError: If the name is reserved for a global setting
        ConfigPersistError: If the configuration cannot be written
    """
    if new_context:
        check_context_name(new_context)
        resolution.store.set("context", new_context)
        resolution.context = new_context
        logger.info(f"Switched to context {new_context}")

    return persist(resolution)
