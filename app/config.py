"""Application configuration pulled from environment variables via pydantic."""
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from utils.logging_utils import get_tagged_logger
logger = get_tagged_logger(__name__, tag="config")


class Settings(BaseSettings):
    """Environment-driven configuration for the weather dashboard service."""
    model_config = SettingsConfigDict(env_prefix="WXDASH_", extra="ignore")

    forecast_source: str = "open_meteo"  # options: open_meteo
    geocode_url: str = "https://geocoding-api.open-meteo.com/v1/search"
    forecast_url: str = "https://api.open-meteo.com/v1/forecast"
    geocode_count: int = 5
    geocode_language: str = "en"
    http_timeout_seconds: float = 10.0

    hourly_points: int = 24
    favorites_limit: int = 12
    location_timeout_seconds: float = 10.0
    default_units: str = "metric"  # options: metric, imperial

    # Shown when nothing was viewed before.
    default_latitude: float = 19.0760
    default_longitude: float = 72.8777
    default_label: str = "Mumbai"

    storage_backend: str = "memory"  # options: memory, redis
    storage_redis_url: str | None = None
    storage_prefix: str = "wxdash:"
    session_ttl_seconds: int = 3600

    @field_validator("geocode_url", "forecast_url", mode="after")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize endpoint URLs so query strings attach cleanly."""
        return str(v).rstrip("/")

    @field_validator("default_units", "storage_backend", "forecast_source", mode="after")
    @classmethod
    def lower_case(cls, v: str) -> str:
        return str(v).strip().lower()


settings = Settings()


if __name__ == "__main__":
    logger.setLevel("DEBUG")
    logger.debug(f"Loaded settings: {settings.model_dump_json(indent=4)}")
