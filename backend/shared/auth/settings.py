"""Admin auth settings shared by every function endpoint."""

from pydantic import Field
from pydantic_settings import BaseSettings

DEFAULT_TOKEN_TTL_SECONDS = 43200  # 12 hours


class AuthSettings(BaseSettings):
    model_config = {"env_prefix": "ADMIN_"}

    # Shared admin secret (ADMIN_SECRET). Empty means "not configured": the
    # endpoints answer 500 instead of refusing to start.
    secret: str = ""

    # Lifetime of signed admin tokens issued after a successful verify.
    token_ttl_seconds: int = Field(default=DEFAULT_TOKEN_TTL_SECONDS, gt=0)

    @property
    def is_configured(self) -> bool:
        return bool(self.secret)
