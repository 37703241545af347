"""Operator console configuration via environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings


class ConsoleSettings(BaseSettings):
    model_config = {"env_prefix": "CONSOLE_"}

    base_url: str = "http://localhost:8000"
    request_timeout_seconds: float = Field(default=30.0, gt=0)
    inactivity_timeout_seconds: float = Field(default=1800, gt=0)  # 30 minutes
    check_interval_seconds: float = Field(default=60, gt=0)
