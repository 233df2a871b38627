"""Metric/imperial conversion for display values.

All data inside the dashboard stays metric (Celsius, km/h); conversion only
happens when a value is about to be shown.
"""
from __future__ import annotations

from enum import Enum

KMH_PER_MPH = 1.609


class Units(str, Enum):
    """Display unit system."""
    METRIC = "metric"
    IMPERIAL = "imperial"

    def toggled(self) -> "Units":
        """Return the other unit system."""
        return Units.IMPERIAL if self is Units.METRIC else Units.METRIC


def to_display_temperature(celsius: float, unit: Units | str) -> float:
    """Convert a Celsius temperature into the requested unit system."""
    if Units(unit) is Units.IMPERIAL:
        return celsius * 9 / 5 + 32
    return celsius


def to_display_speed(kmh: float, unit: Units | str) -> float:
    """Convert a km/h speed into the requested unit system."""
    if Units(unit) is Units.IMPERIAL:
        return kmh / KMH_PER_MPH
    return kmh


def temperature_symbol(unit: Units | str) -> str:
    return "°F" if Units(unit) is Units.IMPERIAL else "°C"


def speed_symbol(unit: Units | str) -> str:
    return "mph" if Units(unit) is Units.IMPERIAL else "km/h"
