"""Active context profile."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class ContextProfile(BaseModel):
    """
    Endpoint and credentials resolved for one context.

    Attributes:
        name: Context name
        endpoint: CloudletHub API address
        username: Username, if configured
        secret_key: Secret key, if configured
    """

    model_config = ConfigDict(frozen=True)

    name: str
    endpoint: str
    username: str | None = None
    secret_key: str | None = None

    @property
    def masked_secret_key(self) -> str | None:
        """Secret key with all but the last four characters hidden."""
        if not self.secret_key:
            return None
        visible = self.secret_key[-4:] if len(self.secret_key) > 8 else ""
        return "*" * 8 + visible
