"""
Defaults

Built-in values and fixed names used during configuration resolution.
"""

from pathlib import Path

VERSION_STRING = "clh v0.1 -- HEAD"

# Environment variables are CLH_<KEY>, e.g. CLH_LOG_LEVEL, CLH_STAGING_ENDPOINT
ENV_PREFIX = "CLH"

CONFIG_NAME = "config"
CONFIG_TYPE = "yaml"
CONFIG_FILENAME = f"{CONFIG_NAME}.{CONFIG_TYPE}"

SYSTEM_CONFIG_DIR = Path("/etc/clh")
USER_CONFIG_DIRNAME = ".clh"
LOCAL_CONFIG_DIR = Path(".") / ".clh"

DEFAULT_LOG_LEVEL = "info"
DEFAULT_CONTEXT = "default"
DEFAULT_ENDPOINT = "https://api.cloudlethub.com/"

# Global keys, bound regardless of the active context
GLOBAL_KEYS = ("log_level", "config", "context")

# Keys bound under "<context>."
CONTEXT_KEYS = ("endpoint", "username", "secret_key")

CONFIG_DIR_MODE = 0o700
CONFIG_FILE_MODE = 0o600
