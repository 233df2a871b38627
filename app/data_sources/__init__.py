"""Data source factories for plugging different weather backends."""

from .base import CallableWeatherDataSource, WeatherDataSource
from .factory import build_data_source
from .open_meteo_client import GeocodeResult, fetch_forecast, geocode

__all__ = [
    "build_data_source",
    "WeatherDataSource",
    "CallableWeatherDataSource",
    "GeocodeResult",
    "fetch_forecast",
    "geocode",
]
