"""Turn a loosely-shaped Open-Meteo forecast payload into dashboard-ready data.

The forecast endpoint returns parallel arrays that may be missing, shorter
than their `time` array, or padded with nulls, and `current_weather` may be
absent entirely. Every derived field here resolves through an ordered
fallback chain of accessors; the first one that yields a value wins.
"""
from __future__ import annotations

import datetime as dt
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, List, Mapping, Optional, Sequence, Tuple, TypeVar

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from app.errors import MalformedPayloadError
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="forecast_normalizer")

DEFAULT_HOURLY_POINTS = 24
DEFAULT_TIMEZONE = "auto"

T = TypeVar("T")


# ---------------------------------------------------------------------------
# Raw payload (provider field names)
# ---------------------------------------------------------------------------

class _LenientModel(BaseModel):
    """Ignore fields we do not use; accept either alias or attribute name."""
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class RawCurrentWeather(_LenientModel):
    """`current_weather` block of the forecast response."""
    temperature: Optional[float] = None
    wind_speed: Optional[float] = Field(default=None, validation_alias=AliasChoices("windspeed", "wind_speed"))
    weather_code: Optional[float] = Field(default=None, validation_alias=AliasChoices("weathercode", "weather_code"))
    relative_humidity: Optional[float] = Field(
        default=None, validation_alias=AliasChoices("relativehumidity", "relative_humidity")
    )
    uv_index: Optional[float] = None


class RawHourly(_LenientModel):
    """`hourly` block: parallel arrays aligned by index with `time`."""
    time: Optional[List[Optional[str]]] = None
    temperature_2m: Optional[List[Optional[float]]] = None
    apparent_temperature: Optional[List[Optional[float]]] = None
    relative_humidity_2m: Optional[List[Optional[float]]] = Field(
        default=None, validation_alias=AliasChoices("relativehumidity_2m", "relative_humidity_2m")
    )
    weather_code: Optional[List[Optional[float]]] = Field(
        default=None, validation_alias=AliasChoices("weathercode", "weather_code")
    )
    wind_speed_10m: Optional[List[Optional[float]]] = Field(
        default=None, validation_alias=AliasChoices("windspeed_10m", "wind_speed_10m")
    )
    pm2_5: Optional[List[Optional[float]]] = None
    pm10: Optional[List[Optional[float]]] = None
    uv_index: Optional[List[Optional[float]]] = None


class RawDaily(_LenientModel):
    """`daily` block: parallel arrays aligned by index with `time`."""
    time: Optional[List[Optional[str]]] = None
    weather_code: Optional[List[Optional[float]]] = Field(
        default=None, validation_alias=AliasChoices("weathercode", "weather_code")
    )
    temperature_max: Optional[List[Optional[float]]] = Field(
        default=None, validation_alias=AliasChoices("temperature_2m_max", "temperature_max")
    )
    temperature_min: Optional[List[Optional[float]]] = Field(
        default=None, validation_alias=AliasChoices("temperature_2m_min", "temperature_min")
    )


class RawForecastPayload(_LenientModel):
    """Untrusted forecast response; every block is optional."""
    current_weather: Optional[RawCurrentWeather] = None
    hourly: Optional[RawHourly] = None
    daily: Optional[RawDaily] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    timezone: Optional[str] = None


def parse_payload(data: Any) -> RawForecastPayload:
    """Validate a decoded JSON document, raising MalformedPayloadError if it has no usable structure."""
    if isinstance(data, RawForecastPayload):
        return data
    if not isinstance(data, Mapping):
        raise MalformedPayloadError(f"Forecast payload is not an object (got {type(data).__name__})")
    try:
        return RawForecastPayload.model_validate(dict(data))
    except ValidationError as exc:
        raise MalformedPayloadError(f"Forecast payload has unexpected structure: {exc.error_count()} error(s)") from exc


# ---------------------------------------------------------------------------
# Derived data
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CurrentConditions:
    """Snapshot of conditions right now; every field is resolved."""
    temperature_c: float
    feels_like_c: float
    humidity_pct: Optional[float]
    wind_kmh: float
    weather_code: int
    timezone: str


@dataclass(frozen=True)
class HourlyPoint:
    """One chart point. A missing temperature stays None until rendering."""
    time_label: str
    temperature_c: Optional[float]


@dataclass(frozen=True)
class DailyEntry:
    """One day in the forecast strip."""
    date: str
    weather_code: int
    min_c: float
    max_c: float


class AirQualityKind(str, Enum):
    PM25 = "pm25"
    PM10 = "pm10"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class AirQualityReading:
    """Latest particulate reading, pm2.5 preferred over pm10."""
    kind: AirQualityKind
    value: Optional[float] = None

    @classmethod
    def unavailable(cls) -> "AirQualityReading":
        return cls(kind=AirQualityKind.UNAVAILABLE)


@dataclass(frozen=True)
class NormalizedForecast:
    """Unit-agnostic result of normalize(); safe to re-render without refetching."""
    current: CurrentConditions
    hourly: List[HourlyPoint] = field(default_factory=list)
    daily: List[DailyEntry] = field(default_factory=list)
    air_quality: AirQualityReading = field(default_factory=AirQualityReading.unavailable)
    uv_index: Optional[float] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None


# ---------------------------------------------------------------------------
# Fallback chains
# ---------------------------------------------------------------------------

Accessor = Callable[[RawForecastPayload], Optional[Any]]


def _defined(value: Optional[T]) -> Optional[T]:
    """NaN and infinities count as missing."""
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


def _at(values: Optional[Sequence[Optional[T]]], index: int) -> Optional[T]:
    """Element at `index`, or None when the array is absent, too short, or non-finite there."""
    if values is None or index < 0 or index >= len(values):
        return None
    return _defined(values[index])


def first_defined(payload: RawForecastPayload, accessors: Sequence[Accessor], default: T) -> T:
    """Evaluate accessors in order and return the first non-None result."""
    for accessor in accessors:
        value = _defined(accessor(payload))
        if value is not None:
            return value
    return default


def _current(payload: RawForecastPayload) -> RawCurrentWeather:
    return payload.current_weather or RawCurrentWeather()


def _hourly(payload: RawForecastPayload) -> RawHourly:
    return payload.hourly or RawHourly()


def _daily(payload: RawForecastPayload) -> RawDaily:
    return payload.daily or RawDaily()


WEATHER_CODE_CHAIN: Tuple[Accessor, ...] = (
    lambda p: _current(p).weather_code,
    lambda p: _at(_hourly(p).weather_code, 0),
)

TEMPERATURE_CHAIN: Tuple[Accessor, ...] = (
    lambda p: _current(p).temperature,
    lambda p: _at(_hourly(p).temperature_2m, 0),
)

# The chain ends at the resolved temperature, supplied as the default.
FEELS_LIKE_CHAIN: Tuple[Accessor, ...] = (
    lambda p: _at(_hourly(p).apparent_temperature, 0),
)

HUMIDITY_CHAIN: Tuple[Accessor, ...] = (
    lambda p: _at(_hourly(p).relative_humidity_2m, 0),
    lambda p: _current(p).relative_humidity,
)

WIND_CHAIN: Tuple[Accessor, ...] = (
    lambda p: _current(p).wind_speed,
    lambda p: _at(_hourly(p).wind_speed_10m, 0),
)

TIMEZONE_CHAIN: Tuple[Accessor, ...] = (
    lambda p: p.timezone,
)

UV_INDEX_CHAIN: Tuple[Accessor, ...] = (
    lambda p: _current(p).uv_index,
    lambda p: _at(_hourly(p).uv_index, 0),
)


def _first_element(values: Optional[Sequence[Optional[float]]]) -> Optional[float]:
    if not values:
        return None
    return _defined(values[0])


AIR_QUALITY_CHAIN: Tuple[Tuple[AirQualityKind, Accessor], ...] = (
    (AirQualityKind.PM25, lambda p: _first_element(_hourly(p).pm2_5)),
    (AirQualityKind.PM10, lambda p: _first_element(_hourly(p).pm10)),
)


# ---------------------------------------------------------------------------
# Normalizers
# ---------------------------------------------------------------------------

def normalize_current(payload: RawForecastPayload) -> CurrentConditions:
    """Resolve the current-conditions snapshot through its fallback chains."""
    temperature = first_defined(payload, TEMPERATURE_CHAIN, 0.0)
    return CurrentConditions(
        temperature_c=temperature,
        feels_like_c=first_defined(payload, FEELS_LIKE_CHAIN, temperature),
        humidity_pct=first_defined(payload, HUMIDITY_CHAIN, None),
        wind_kmh=first_defined(payload, WIND_CHAIN, 0.0),
        weather_code=int(first_defined(payload, WEATHER_CODE_CHAIN, 0)),
        timezone=first_defined(payload, TIMEZONE_CHAIN, DEFAULT_TIMEZONE),
    )


def hour_label(timestamp: Optional[str]) -> str:
    """Format an ISO local timestamp as "H:00"; unparseable input is returned as-is."""
    if not timestamp:
        return ""
    try:
        return f"{dt.datetime.fromisoformat(timestamp).hour}:00"
    except ValueError:
        logger.debug("Unparseable hourly timestamp", extra={"timestamp": timestamp})
        return timestamp


def normalize_hourly(payload: RawForecastPayload, limit: int = DEFAULT_HOURLY_POINTS) -> List[HourlyPoint]:
    """Zip the first `limit` hourly times with their temperatures, keeping every time."""
    hourly = _hourly(payload)
    times = (hourly.time or [])[:limit]
    return [
        HourlyPoint(time_label=hour_label(t), temperature_c=_at(hourly.temperature_2m, i))
        for i, t in enumerate(times)
    ]


def normalize_daily(payload: RawForecastPayload) -> List[DailyEntry]:
    """One entry per daily time; missing code/min/max default to 0 independently."""
    daily = _daily(payload)
    out: List[DailyEntry] = []
    for i, day in enumerate(daily.time or []):
        code = _at(daily.weather_code, i)
        low = _at(daily.temperature_min, i)
        high = _at(daily.temperature_max, i)
        out.append(
            DailyEntry(
                date=day or "",
                weather_code=int(code) if code is not None else 0,
                min_c=low if low is not None else 0.0,
                max_c=high if high is not None else 0.0,
            )
        )
    return out


def normalize_air_quality(payload: RawForecastPayload) -> AirQualityReading:
    """Latest pm2.5, else latest pm10, else unavailable."""
    for kind, accessor in AIR_QUALITY_CHAIN:
        value = accessor(payload)
        if value is not None:
            return AirQualityReading(kind=kind, value=value)
    return AirQualityReading.unavailable()


def normalize(raw: RawForecastPayload | Mapping[str, Any], *, hourly_limit: int = DEFAULT_HOURLY_POINTS) -> NormalizedForecast:
    """Derive current, hourly, daily, and air-quality data from a forecast payload."""
    payload = parse_payload(raw)
    result = NormalizedForecast(
        current=normalize_current(payload),
        hourly=normalize_hourly(payload, hourly_limit),
        daily=normalize_daily(payload),
        air_quality=normalize_air_quality(payload),
        uv_index=first_defined(payload, UV_INDEX_CHAIN, None),
        latitude=_defined(payload.latitude),
        longitude=_defined(payload.longitude),
    )
    logger.debug(
        "Normalized forecast",
        extra={
            "hourly_points": len(result.hourly),
            "daily_entries": len(result.daily),
            "air_quality": result.air_quality.kind.value,
        },
    )
    return result
