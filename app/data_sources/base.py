"""Interfaces and helpers for weather data sources."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Protocol

from app.data_sources.open_meteo_client import GeocodeResult


class WeatherDataSource(Protocol):
    """Interface for anything that can geocode places and provide forecasts."""

    def geocode(self, query: str) -> List[GeocodeResult]:
        """Return candidate places for a free-text query, best match first."""
        ...

    def fetch_forecast(
        self,
        latitude: float,
        longitude: float,
        *,
        timezone: str = "auto",
    ) -> Dict[str, Any]:
        """Return the raw forecast payload for a coordinate pair."""
        ...


@dataclass
class CallableWeatherDataSource(WeatherDataSource):
    """Wrap two callables so they can be swapped for different backends."""

    geocoder: Callable[..., List[GeocodeResult]]
    forecaster: Callable[..., Dict[str, Any]]

    def geocode(self, *args, **kwargs) -> List[GeocodeResult]:
        """Delegate to the configured geocoding callable."""
        return self.geocoder(*args, **kwargs)

    def fetch_forecast(self, *args, **kwargs) -> Dict[str, Any]:
        """Delegate to the configured forecast callable."""
        return self.forecaster(*args, **kwargs)
