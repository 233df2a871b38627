"""Factory helpers for choosing a weather data source at startup."""

from __future__ import annotations

import functools

from app import config
from app.data_sources.base import CallableWeatherDataSource, WeatherDataSource
from app.data_sources.open_meteo_client import fetch_forecast, geocode
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="data_sources/factory")


DEFAULT_SOURCE_NAME = "open_meteo"


def build_data_source(settings: config.Settings | None = None) -> WeatherDataSource:
    """Instantiate the configured weather data source."""
    settings = settings or config.settings
    source = (settings.forecast_source or DEFAULT_SOURCE_NAME).lower()

    if source == "open_meteo":
        logger.info("Using Open-Meteo data source")
        return CallableWeatherDataSource(
            geocoder=functools.partial(
                geocode,
                count=settings.geocode_count,
                language=settings.geocode_language,
                url=settings.geocode_url,
                timeout=settings.http_timeout_seconds,
            ),
            forecaster=functools.partial(
                fetch_forecast,
                url=settings.forecast_url,
                timeout=settings.http_timeout_seconds,
            ),
        )

    raise ValueError(f"Unknown forecast source '{source}'")
