"""Application configuration pulled from environment variables via pydantic."""
from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from utils.logging_utils import get_tagged_logger
logger = get_tagged_logger(__name__, tag="config")


class Settings(BaseSettings):
    """Environment-driven configuration for the weather proxy and dashboard."""
    model_config = SettingsConfigDict(env_prefix="DASHBOARD_", extra="ignore", populate_by_name=True)

    # Server-held credential; never sent to the dashboard.
    openweather_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("OPENWEATHER_API_KEY", "DASHBOARD_OPENWEATHER_API_KEY"),
    )
    openweather_base_url: str = "https://api.openweathermap.org"
    upstream_timeout_seconds: float = 10.0

    # Dashboard side
    proxy_url: str = "http://localhost:8000/api/weather"
    default_city: str = "London"
    geolocation_timeout_seconds: float = 10.0
    autocomplete_debounce_seconds: float = 0.5
    autocomplete_min_chars: int = 2
    autocomplete_limit: int = 5
    display_timezone: str = "UTC"

    log_level: str = "INFO"

    @field_validator("openweather_base_url", "proxy_url", mode="after")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize URLs to avoid double slashes."""
        return str(v).rstrip("/")


settings = Settings()


if __name__ == "__main__":
    logger.setLevel("DEBUG")
    logger.debug(f"Loaded settings: {settings.model_dump_json(indent=4, exclude={'openweather_api_key'})}")
