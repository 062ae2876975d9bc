"""
ClhConfig - Layered Configuration Store

Every value is looked up through an ordered stack of layers; the first layer
holding the key wins.

Layers (highest to lowest):
    overrides  - set() calls made by commands (e.g. use-context)
    flags      - command-line flags that were actually supplied
    config     - config file data, merged in the order files were read
    env        - CLH_<KEY> environment variables
    defaults   - built-in defaults

Keys are dotted and case-insensitive. Context-scoped values live under the
context name, so `staging.endpoint` is the endpoint of the "staging" context
and maps to the CLH_STAGING_ENDPOINT environment variable.

Example:
    >>> config = ClhConfig(env={"CLH_LOG_LEVEL": "debug"})
    >>> config.set_default("log_level", "info")
    >>> config.get("log_level")
    'debug'
    >>> config.merge_config({"log_level": "warn"})
    >>> config.get("log_level")
    'warn'
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from copy import deepcopy
from pathlib import Path
from typing import Any

import yaml

from clh_cli.config.defaults import ENV_PREFIX
from clh_cli.config.errors import ConfigLoadError


def load_yaml_config(path: str | Path) -> dict[str, Any]:
    """
    Read a YAML config file into a mapping.

    Args:
        path: Path to the YAML file

    Returns:
        Parsed mapping; an empty file yields an empty dict

    Raises:
        FileNotFoundError: If the file does not exist
        OSError: If the file cannot be read
        yaml.YAMLError: If the file is not valid YAML
        ConfigLoadError: If the top level is not a mapping
    """
    path = Path(path)
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigLoadError(
            f"Config root must be a mapping in {path}, got {type(data).__name__}"
        )
    return data


def _normalize(data: Mapping[Any, Any]) -> dict[str, Any]:
    """Lower-case all keys, recursively."""
    result: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, Mapping):
            value = _normalize(value)
        result[str(key).lower()] = value
    return result


def _deep_merge(base: dict[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Merge override into a copy of base; nested mappings merge key by key."""
    result = deepcopy(base)
    for key, value in override.items():
        current = result.get(key)
        if isinstance(current, dict) and isinstance(value, Mapping):
            result[key] = _deep_merge(current, value)
        else:
            result[key] = deepcopy(value)
    return result


def _flatten(data: Mapping[str, Any], prefix: str = "") -> dict[str, Any]:
    flat: dict[str, Any] = {}
    for key, value in data.items():
        dotted = f"{prefix}{key}"
        if isinstance(value, Mapping):
            flat.update(_flatten(value, f"{dotted}."))
        else:
            flat[dotted] = value
    return flat


def _lookup(data: Mapping[str, Any], key: str) -> Any:
    node: Any = data
    for part in key.split("."):
        if not isinstance(node, Mapping) or part not in node:
            return None
        node = node[part]
    return node


class ClhConfig:
    """Layered key/value configuration for one clh invocation."""

    def __init__(
        self,
        env: Mapping[str, str] | None = None,
        env_prefix: str = ENV_PREFIX,
    ) -> None:
        """
        Initialize an empty store.

        Args:
            env: Environment to read CLH_* variables from (default: os.environ)
            env_prefix: Prefix for environment variable names
        """
        self.env_prefix = env_prefix
        self._env: dict[str, str] = dict(os.environ if env is None else env)

        self._overrides: dict[str, Any] = {}
        self._registered: set[str] = set()
        self._flags: dict[str, Any] = {}
        self._config: dict[str, Any] = {}
        self._defaults: dict[str, Any] = {}

        self.config_file_used: Path | None = None
        """Last config file merged into the store, if any"""

    # === Layer population ===

    def env_key(self, key: str) -> str:
        """Environment variable name for a config key."""
        return f"{self.env_prefix}_{key.upper().replace('.', '_')}"

    def set_default(self, key: str, value: Any) -> None:
        """Set the built-in fallback for a key."""
        self._defaults[key.lower()] = value

    def bind_flag(self, key: str, value: Any) -> None:
        """Bind a command-line flag value; None means the flag was not supplied."""
        if value is None:
            return
        self._flags[key.lower()] = value

    def register_key(self, key: str) -> None:
        """Make a key known without giving it a value, so its env value is persisted."""
        self._registered.add(key.lower())

    def set(self, key: str, value: Any) -> None:
        """Override a key above every other source."""
        self._overrides[key.lower()] = value

    def merge_config(self, data: Mapping[str, Any]) -> None:
        """Merge config file data on top of everything merged so far."""
        self._config = _deep_merge(self._config, _normalize(data))

    def merge_config_file(self, path: str | Path) -> None:
        """
        Load a YAML file and merge it into the config layer.

        Raises:
            FileNotFoundError, OSError, yaml.YAMLError, ConfigLoadError:
                propagated from load_yaml_config; the store is left untouched
        """
        path = Path(path)
        self.merge_config(load_yaml_config(path))
        self.config_file_used = path

    # === Lookup ===

    def _env_value(self, key: str) -> str | None:
        # Empty variables count as unset
        return self._env.get(self.env_key(key)) or None

    def get(self, key: str, default: Any = None) -> Any:
        """Resolve a key through all layers, highest precedence first."""
        key = key.lower()

        for layer in (self._overrides, self._flags):
            if key in layer:
                return layer[key]

        value = _lookup(self._config, key)
        if value is not None:
            return value

        value = self._env_value(key)
        if value is not None:
            return value

        return self._defaults.get(key, default)

    def get_str(self, key: str) -> str:
        """Resolve a key as a string; missing keys yield an empty string."""
        value = self.get(key)
        return "" if value is None else str(value)

    def keys(self) -> list[str]:
        """All dotted keys known to any layer except the environment."""
        known: set[str] = set(self._defaults)
        known.update(self._registered)
        known.update(_flatten(self._config))
        known.update(self._flags)
        known.update(self._overrides)
        return sorted(known)

    def all_settings(self) -> dict[str, Any]:
        """
        Resolve every known key into a nested mapping.

        Environment variables contribute values for known keys but never add
        keys of their own.
        """
        settings: dict[str, Any] = {}
        for key in self.keys():
            value = self.get(key)
            if value is None:
                continue

            node = settings
            *parents, leaf = key.split(".")
            for part in parents:
                child = node.get(part)
                if not isinstance(child, dict):
                    child = {}
                    node[part] = child
                node = child
            node[leaf] = value
        return settings

