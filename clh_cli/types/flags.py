"""Command-line flag values."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class CLIFlags(BaseModel):
    """
    Flags parsed for one invocation.

    Every field is None unless the flag was given on the command line, so a
    flag never shadows a config file or environment value it did not set.

    Attributes:
        log_level: --log_level / -l
        config: --config, explicit config file path
        context: --context / -c
        endpoint: --endpoint / -e, bound under the active context
        username: --username / -u, bound under the active context
        secret_key: --secret_key / -k, bound under the active context
    """

    model_config = ConfigDict(frozen=True)

    log_level: str | None = None
    config: str | None = None
    context: str | None = None

    endpoint: str | None = None
    username: str | None = None
    secret_key: str | None = None

    def merged_with(self, other: CLIFlags) -> CLIFlags:
        """Return flags where every value supplied in `other` wins."""
        supplied = other.model_dump(exclude_none=True)
        return self.model_copy(update=supplied)

    def global_flags(self) -> dict[str, str]:
        """Supplied flags that bind to global keys."""
        return self.model_dump(include={"log_level", "config", "context"}, exclude_none=True)

    def context_flags(self) -> dict[str, str]:
        """Supplied flags that bind under the active context."""
        return self.model_dump(
            include={"endpoint", "username", "secret_key"}, exclude_none=True
        )
