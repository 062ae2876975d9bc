"""
clh - CloudletHub command-line client

CloudletHub is a Continuous Delivery as a Service. This package provides the
``clh`` command together with the layered configuration it runs on.

Example:
    >>> from clh_cli import resolve_phase_one, resolve_phase_two, CLIFlags
    >>> resolution = resolve_phase_one()
    >>> resolve_phase_two(resolution, CLIFlags(context="staging"))
    >>> print(resolution.profile().endpoint)

Main Classes:
    ClhConfig: Layered key/value configuration store
    ConfigResolution: Resolved configuration handed to commands
    CLIFlags, ContextProfile: Typed views of flags and the active context
"""

__version__ = "0.1.0"


# Public API - lazy imports keep `clh version` cheap
def __getattr__(name: str):
    """Lazy import public API components."""

    if name == "ClhConfig":
        from clh_cli.config.settings import ClhConfig
        return ClhConfig

    if name in (
        "ConfigResolution",
        "resolve_phase_one",
        "resolve_phase_two",
        "resolve_log_level",
        "switch_context",
        "persist",
    ):
        from clh_cli.config import resolver
        return getattr(resolver, name)

    if name in ("CLIFlags", "ContextProfile"):
        from clh_cli import types
        return getattr(types, name)

    raise AttributeError(f"module 'clh_cli' has no attribute {name!r}")


__all__ = [
    # Configuration
    "ClhConfig",
    "ConfigResolution",
    "resolve_phase_one",
    "resolve_phase_two",
    "resolve_log_level",
    "switch_context",
    "persist",

    # Types
    "CLIFlags",
    "ContextProfile",

    # Version
    "__version__",
]
