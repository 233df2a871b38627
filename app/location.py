"""Device-location providers consumed by the dashboard orchestrator."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol, Tuple

from app.errors import LocationUnavailableError


class LocationProvider(Protocol):
    """Anything that can (eventually) report the device's coordinates."""

    async def get_position(self) -> Tuple[float, float]:
        """Return (latitude, longitude) or raise LocationUnavailableError."""
        ...


@dataclass
class StaticLocationProvider(LocationProvider):
    """Coordinates the browser already resolved and posted to us."""
    latitude: float
    longitude: float

    async def get_position(self) -> Tuple[float, float]:
        return self.latitude, self.longitude


@dataclass
class DeniedLocationProvider(LocationProvider):
    """The browser reported a geolocation error (denied, unavailable, timeout)."""
    reason: Optional[str] = None

    async def get_position(self) -> Tuple[float, float]:
        raise LocationUnavailableError(self.reason or "location denied")
