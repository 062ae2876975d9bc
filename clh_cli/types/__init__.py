"""
Type Definitions

Pydantic models shared by the resolver and the CLI.

    - CLIFlags: Flag values of one invocation (None = not supplied)
    - ContextProfile: Endpoint and credentials of the active context
"""

from clh_cli.types.flags import CLIFlags
from clh_cli.types.profile import ContextProfile

__all__ = ["CLIFlags", "ContextProfile"]
