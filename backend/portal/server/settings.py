"""Portal server configuration via environment variables."""

from typing import TYPE_CHECKING

from pydantic import field_validator
from pydantic_settings import BaseSettings

from shared.validators import StringListEnvSettingsSource, parse_string_list

if TYPE_CHECKING:
    from pydantic_settings.sources.base import PydanticBaseSettingsSource


class PortalSettings(BaseSettings):
    model_config = {"env_prefix": "PORTFOLIO_"}

    log_dir: str = "backend/logs/portal"
    cors_origins: list[str] = ["*"]
    database_path: str = "backend/storage/portfolio.db"
    # Optional JSON export imported once into an empty database.
    seed_file: str | None = None
    assets_dir: str = "backend/storage/assets"
    assets_base_url: str = "/assets"

    @field_validator("cors_origins", mode="before")
    @classmethod
    def validate_cors_origins(cls, v: str | list[str]) -> list[str]:
        return parse_string_list(v, allow_empty=True)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (init_settings, StringListEnvSettingsSource(settings_cls), dotenv_settings, file_secret_settings)
