"""Upstream AI gateway configuration via environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings


class AISettings(BaseSettings):
    model_config = {"env_prefix": "AI_"}

    # Empty means "not configured": generation requests answer 500.
    api_key: str = ""
    gateway_url: str = "https://ai.gateway.lovable.dev/v1/chat/completions"
    text_model: str = "google/gemini-3-flash-preview"
    image_model: str = "google/gemini-2.5-flash-image"
    request_timeout_seconds: float = Field(default=60.0, gt=0)
    text_max_tokens: int = Field(default=500, gt=0)
    text_temperature: float = Field(default=0.7, ge=0, le=2)

    # Requests allowed per rolling minute: per action for text, overall for images.
    text_rate_limit: int = Field(default=20, ge=1)
    image_rate_limit: int = Field(default=10, ge=1)

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)
