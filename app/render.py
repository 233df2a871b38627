"""Render normalized forecast data into the view model the browser paints.

The page itself is dumb: it copies these strings into text fields, feeds
`chart` to the line chart, moves the map marker to `map`, and lays out the
`forecast` strip. Unit conversion happens here and nowhere else.
"""
from __future__ import annotations

import datetime as dt
from decimal import ROUND_HALF_UP, Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from app.forecast_normalizer import AirQualityKind, AirQualityReading, DailyEntry, HourlyPoint, NormalizedForecast
from app.units import Units, speed_symbol, temperature_symbol, to_display_speed, to_display_temperature
from app.weather_codes import classify, icon_for

MAP_ZOOM = 8
NOT_AVAILABLE = "N/A"
PLACEHOLDER = "—"


class Place(BaseModel):
    """The location currently on screen. Replaced wholesale, never edited."""
    model_config = ConfigDict(frozen=True)

    lat: float
    lon: float
    label: str


class ChartSeries(BaseModel):
    """Hourly temperature line: labels and values in display units."""
    labels: List[str]
    values: List[float]


class MapMarker(BaseModel):
    lat: float
    lon: float
    zoom: int = MAP_ZOOM


class ForecastDay(BaseModel):
    """One tile of the daily forecast strip."""
    date: str
    weekday: str
    icon: str
    text: str


class DashboardView(BaseModel):
    """Everything the page shows for one place in one unit system."""
    place_label: str
    timezone: str
    updated: str
    temperature: str
    feels_like: str
    humidity: str
    wind: str
    theme: str
    icon: str
    description: str
    chart: ChartSeries
    map: MapMarker
    forecast: List[ForecastDay]
    air_quality: str
    uv_index: str
    units: Units
    unit_button: str


def format_number(value: float) -> str:
    """Round to a whole number, halves away from zero."""
    rounded = Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return str(int(rounded))


def _temperature_text(celsius: float, units: Units) -> str:
    return f"{format_number(to_display_temperature(celsius, units))}{temperature_symbol(units)}"


def _weekday(date: str) -> str:
    try:
        return dt.date.fromisoformat(date).strftime("%a")
    except ValueError:
        return date


def render_chart(hourly: List[HourlyPoint], units: Units) -> ChartSeries:
    """Missing temperatures render as 0 so the chart keeps one value per label."""
    return ChartSeries(
        labels=[point.time_label for point in hourly],
        values=[
            to_display_temperature(point.temperature_c if point.temperature_c is not None else 0.0, units)
            for point in hourly
        ],
    )


def render_forecast_strip(daily: List[DailyEntry], units: Units) -> List[ForecastDay]:
    return [
        ForecastDay(
            date=day.date,
            weekday=_weekday(day.date),
            icon=f"wi {icon_for(day.weather_code).value}",
            text=(f"{format_number(to_display_temperature(day.min_c, units))}° / "
                  f"{format_number(to_display_temperature(day.max_c, units))}°"),
        )
        for day in daily
    ]


def render_air_quality(reading: AirQualityReading) -> str:
    if reading.kind is AirQualityKind.PM25:
        return f"PM2.5: {format_number(reading.value)} µg/m³"
    if reading.kind is AirQualityKind.PM10:
        return f"PM10: {format_number(reading.value)} µg/m³"
    return NOT_AVAILABLE


def _place_label(place: Place, forecast: NormalizedForecast) -> str:
    if place.label:
        return place.label
    lat = forecast.latitude if forecast.latitude is not None else place.lat
    lon = forecast.longitude if forecast.longitude is not None else place.lon
    return f"{lat:.2f}, {lon:.2f}"


def render_dashboard(
    place: Place,
    forecast: NormalizedForecast,
    units: Units,
    *,
    updated_at: Optional[dt.datetime] = None,
) -> DashboardView:
    """Build the complete view for `place` from unit-agnostic forecast data."""
    units = Units(units)
    current = forecast.current
    classification = classify(current.weather_code)
    updated_at = updated_at or dt.datetime.now()

    return DashboardView(
        place_label=_place_label(place, forecast),
        timezone=current.timezone,
        updated=f"Updated {updated_at:%Y-%m-%d %H:%M}",
        temperature=_temperature_text(current.temperature_c, units),
        feels_like=_temperature_text(current.feels_like_c, units),
        humidity=f"{format_number(current.humidity_pct)}%" if current.humidity_pct is not None else PLACEHOLDER,
        wind=f"{format_number(to_display_speed(current.wind_kmh, units))} {speed_symbol(units)}",
        theme=f"theme-{classification.theme.value}",
        icon=f"big-icon wi {classification.icon.value}",
        description=classification.description,
        chart=render_chart(forecast.hourly, units),
        map=MapMarker(lat=place.lat, lon=place.lon),
        forecast=render_forecast_strip(forecast.daily, units),
        air_quality=render_air_quality(forecast.air_quality),
        uv_index=f"{forecast.uv_index:g}" if forecast.uv_index is not None else NOT_AVAILABLE,
        units=units,
        unit_button=temperature_symbol(units),
    )
