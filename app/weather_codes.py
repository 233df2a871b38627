"""Classify WMO weather codes into UI theme, icon, and short description.

Open-Meteo reports sky/precipitation state as a small integer (WMO code).
The dashboard needs three views of it: a coarse background theme, a Weather
Icons CSS class, and a human label. Each view is an explicit table with a
default arm, so any integer (known or not) classifies cleanly.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Optional


class Theme(str, Enum):
    """Background theme category."""
    SUNNY = "sunny"
    RAIN = "rain"
    SNOW = "snow"
    DEFAULT = "default"


class Icon(str, Enum):
    """Weather Icons CSS class for a code."""
    CLEAR = "wi-day-sunny"
    MAINLY_CLEAR = "wi-day-sunny-overcast"
    PARTLY_CLOUDY = "wi-day-cloudy"
    OVERCAST = "wi-cloud"
    FOG = "wi-fog"
    RAIN = "wi-rain"
    SNOW = "wi-snow"
    THUNDERSTORM = "wi-thunderstorm"
    NOT_AVAILABLE = "wi-na"


SUNNY_CODES: FrozenSet[int] = frozenset({0, 1, 2})
RAIN_CODES: FrozenSet[int] = frozenset({51, 53, 55, 61, 63, 65, 80, 81, 82})
SNOW_CODES: FrozenSet[int] = frozenset({71, 73, 75, 85, 86})
FOG_CODES: FrozenSet[int] = frozenset({45, 48})
THUNDERSTORM_CODES: FrozenSet[int] = frozenset({95, 96, 99})

UNKNOWN_DESCRIPTION = "—"

_EXACT_ICONS: Dict[int, Icon] = {
    0: Icon.CLEAR,
    1: Icon.MAINLY_CLEAR,
    2: Icon.PARTLY_CLOUDY,
    3: Icon.OVERCAST,
}

_ICON_GROUPS = (
    (FOG_CODES, Icon.FOG),
    (RAIN_CODES, Icon.RAIN),
    (SNOW_CODES, Icon.SNOW),
    (THUNDERSTORM_CODES, Icon.THUNDERSTORM),
)

_THEME_GROUPS = (
    (SUNNY_CODES, Theme.SUNNY),
    (RAIN_CODES, Theme.RAIN),
    (SNOW_CODES, Theme.SNOW),
)

DESCRIPTIONS: Dict[int, str] = {
    0: "Clear",
    1: "Mainly clear",
    2: "Partly cloudy",
    3: "Overcast",
    45: "Fog",
    48: "Rime fog",
    51: "Light drizzle",
    53: "Drizzle",
    55: "Dense drizzle",
    61: "Light rain",
    63: "Rain",
    65: "Heavy rain",
    71: "Light snow",
    73: "Snow",
    75: "Heavy snow",
    80: "Rain showers",
    81: "Showers",
    82: "Heavy showers",
    95: "Thunderstorm",
}


@dataclass(frozen=True)
class WeatherClassification:
    """All UI categories derived from one weather code."""
    code: Optional[int]
    theme: Theme
    icon: Icon
    description: str


def _coerce_code(code: object) -> Optional[int]:
    """Accept ints and integral floats (61.0); anything else is unknown."""
    if isinstance(code, bool):
        return None
    if isinstance(code, int):
        return code
    if isinstance(code, float) and code.is_integer():
        return int(code)
    return None


def theme_for(code: object) -> Theme:
    value = _coerce_code(code)
    for codes, theme in _THEME_GROUPS:
        if value in codes:
            return theme
    return Theme.DEFAULT


def icon_for(code: object) -> Icon:
    value = _coerce_code(code)
    if value in _EXACT_ICONS:
        return _EXACT_ICONS[value]
    for codes, icon in _ICON_GROUPS:
        if value in codes:
            return icon
    return Icon.NOT_AVAILABLE


def description_for(code: object) -> str:
    return DESCRIPTIONS.get(_coerce_code(code), UNKNOWN_DESCRIPTION)


def classify(code: object) -> WeatherClassification:
    """Map a weather code to its theme, icon, and description. Never raises."""
    return WeatherClassification(
        code=_coerce_code(code),
        theme=theme_for(code),
        icon=icon_for(code),
        description=description_for(code),
    )
