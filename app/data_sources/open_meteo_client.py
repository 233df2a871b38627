"""Helpers for the Open-Meteo geocoding and forecast APIs."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests

from app.errors import MalformedPayloadError, NetworkFailure
from utils.logging_utils import get_tagged_logger
logger = get_tagged_logger(__name__, tag='open_meteo_client')

# Plain session: forecasts are never cached and failed requests are not retried.
session = requests.Session()

OPEN_METEO_GEOCODE_URL = "https://geocoding-api.open-meteo.com/v1/search"
OPEN_METEO_FORECAST_URL = "https://api.open-meteo.com/v1/forecast"

HOURLY_VARS = [
    "temperature_2m",
    "apparent_temperature",
    "relativehumidity_2m",
    "weathercode",
    "windspeed_10m",
]

DAILY_VARS = [
    "weathercode",
    "temperature_2m_max",
    "temperature_2m_min",
]


@dataclass
class GeocodeResult:
    """One candidate place returned by the geocoding API."""
    name: str
    latitude: float
    longitude: float
    admin1: Optional[str] = None
    country_code: Optional[str] = None

    @property
    def label(self) -> str:
        """Display label such as "Paris, Île-de-France, FR"."""
        parts = [self.name]
        if self.admin1:
            parts.append(self.admin1)
        parts.append(self.country_code or "")
        return ", ".join(parts)


def _get_json(url: str, params: Dict[str, Any], *, timeout: float, context: str) -> Any:
    """GET a JSON document, translating transport and decode problems into NetworkFailure."""
    try:
        resp = session.get(url, params=params, timeout=timeout)
        resp.raise_for_status()
    except requests.RequestException as exc:
        logger.warning("Open-Meteo request failed", extra={"context": context, "error": str(exc)})
        raise NetworkFailure(f"{context} request failed: {exc}") from exc

    try:
        return resp.json()
    except ValueError as exc:
        logger.warning("Open-Meteo returned a non-JSON body", extra={"context": context})
        raise MalformedPayloadError(f"{context} response is not JSON") from exc


def geocode(
    query: str,
    *,
    count: int = 5,
    language: str = "en",
    url: str = OPEN_METEO_GEOCODE_URL,
    timeout: float = 10,
) -> List[GeocodeResult]:
    """Search places by name; an empty list means nothing matched."""
    params = {
        "count": count,
        "language": language,
        "format": "json",
        "name": query,
    }

    data = _get_json(url, params, timeout=timeout, context="geocode")
    if not isinstance(data, dict):
        raise MalformedPayloadError("geocode response is not an object")

    out: List[GeocodeResult] = []
    for item in data.get("results") or []:
        try:
            out.append(
                GeocodeResult(
                    name=str(item["name"]),
                    latitude=float(item["latitude"]),
                    longitude=float(item["longitude"]),
                    admin1=item.get("admin1"),
                    country_code=item.get("country_code"),
                )
            )
        except (KeyError, TypeError, ValueError):
            logger.debug("Skipping incomplete geocode result", extra={"result": item})
    logger.info("Geocoded query", extra={"query": query, "results": len(out)})
    return out


def fetch_forecast(
    latitude: float,
    longitude: float,
    *,
    timezone: str = "auto",
    url: str = OPEN_METEO_FORECAST_URL,
    timeout: float = 10,
) -> Dict[str, Any]:
    """Fetch current, hourly, and daily forecast data as the raw decoded payload."""
    params = {
        "latitude": latitude,
        "longitude": longitude,
        "timezone": timezone,
        "current_weather": "true",
        "hourly": ",".join(HOURLY_VARS),
        "daily": ",".join(DAILY_VARS),
    }

    data = _get_json(url, params, timeout=timeout, context="forecast")
    if not isinstance(data, dict):
        raise MalformedPayloadError("forecast response is not an object")
    logger.debug("Fetched forecast", extra={"latitude": latitude, "longitude": longitude})
    return data
