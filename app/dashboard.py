"""Dashboard orchestration: geocode -> fetch -> normalize -> render -> persist.

One `DashboardOrchestrator` owns the state of one open dashboard: the place on
screen, the unit system, the last normalized forecast and the rendered view.
All methods run on the asyncio event loop. Blocking provider calls are pushed
to a worker thread, so the only suspension points are the geocode request,
the forecast request and the device-location wait. Overlapping loads are not
cancelled; whichever finishes last decides what is shown.
"""
from __future__ import annotations

import asyncio
import datetime as dt
from enum import Enum
from typing import Callable, List, Optional

from pydantic import BaseModel

from app.data_sources.base import WeatherDataSource
from app.errors import LocationUnavailableError, NetworkFailure, StorageError
from app.favorites import FavoriteEntry, FavoritesStore, LastSeenStore
from app.forecast_normalizer import DEFAULT_HOURLY_POINTS, NormalizedForecast, normalize
from app.location import LocationProvider
from app.render import DashboardView, Place, render_dashboard
from app.units import Units
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="dashboard")

MY_LOCATION_LABEL = "My location"
DEFAULT_LOCATION_TIMEOUT_SECONDS = 10.0


class Status(str, Enum):
    """Status-line messages shown under the search bar."""
    READY = ""
    LOADING = "Loading weather..."
    UPDATED = "Updated successfully."
    LOAD_FAILED = "Failed to load weather."
    SEARCHING = "Searching..."
    NOT_FOUND = "Location not found"
    SEARCH_ERROR = "Search error"
    LOCATING = "Getting location..."
    LOCATION_UNSUPPORTED = "Geolocation not supported"
    LOCATION_FAILED = "Location denied or failed"
    NO_PLACE = "No place to save"
    SAVED = "Saved to favorites"
    REMOVED = "Removed from favorites"
    STORAGE_FAILED = "Could not update favorites"


class LoadPhase(str, Enum):
    IDLE = "idle"
    LOADING = "loading"


class FavoriteView(BaseModel):
    index: int
    label: str
    lat: float
    lon: float


class DashboardState(BaseModel):
    """Serializable snapshot handed to the HTTP layer."""
    status: str
    phase: LoadPhase
    units: Units
    place: Optional[Place] = None
    view: Optional[DashboardView] = None
    favorites: List[FavoriteView] = []


class DashboardOrchestrator:
    """Sequences user actions against providers, the normalizer, and storage."""

    def __init__(
        self,
        data_source: WeatherDataSource,
        favorites: FavoritesStore,
        last_seen: LastSeenStore,
        *,
        units: Units | str = Units.METRIC,
        default_place: Optional[Place] = None,
        location_provider: Optional[LocationProvider] = None,
        location_timeout: float = DEFAULT_LOCATION_TIMEOUT_SECONDS,
        hourly_limit: int = DEFAULT_HOURLY_POINTS,
        clock: Callable[[], dt.datetime] = dt.datetime.now,
    ) -> None:
        self.data_source = data_source
        self.favorites = favorites
        self.last_seen = last_seen
        self.units = Units(units)
        self.default_place = default_place
        self.location_provider = location_provider
        self.location_timeout = location_timeout
        self.hourly_limit = hourly_limit
        self._clock = clock

        self.status: Status = Status.READY
        self.place: Optional[Place] = None
        self.forecast: Optional[NormalizedForecast] = None
        self.view: Optional[DashboardView] = None
        self._loaded_at: Optional[dt.datetime] = None
        self._in_flight = 0

    @property
    def phase(self) -> LoadPhase:
        return LoadPhase.LOADING if self._in_flight else LoadPhase.IDLE

    async def load_place(self, lat: float, lon: float, label: str) -> bool:
        """Fetch and show a place; on failure keep whatever was shown before."""
        self._in_flight += 1
        self.status = Status.LOADING
        logger.info("Loading place", extra={"lat": lat, "lon": lon, "label": label})
        try:
            raw = await asyncio.to_thread(self.data_source.fetch_forecast, lat, lon, timezone="auto")
            forecast = normalize(raw, hourly_limit=self.hourly_limit)
            place = Place(lat=lat, lon=lon, label=label)
            loaded_at = self._clock()
            view = render_dashboard(place, forecast, self.units, updated_at=loaded_at)
        except NetworkFailure as exc:
            logger.warning("Failed to load weather", extra={"lat": lat, "lon": lon, "error": str(exc)})
            self.status = Status.LOAD_FAILED
            return False
        finally:
            self._in_flight -= 1

        self.place, self.forecast, self.view, self._loaded_at = place, forecast, view, loaded_at
        self.status = Status.UPDATED
        try:
            self.last_seen.save(lat, lon, label)
        except StorageError as exc:
            logger.warning("Failed to persist last-seen place", extra={"error": str(exc)})
        return True

    async def search(self, query: str) -> bool:
        """Geocode `query` and load the best match."""
        query = (query or "").strip()
        if not query:
            return False
        self.status = Status.SEARCHING
        try:
            results = await asyncio.to_thread(self.data_source.geocode, query)
        except NetworkFailure as exc:
            logger.warning("Geocoding failed", extra={"query": query, "error": str(exc)})
            self.status = Status.SEARCH_ERROR
            return False
        if not results:
            self.status = Status.NOT_FOUND
            return False
        best = results[0]
        return await self.load_place(best.latitude, best.longitude, best.label)

    async def use_device_location(self, provider: Optional[LocationProvider] = None) -> bool:
        """Load the device's position, waiting at most `location_timeout` seconds for it."""
        provider = provider or self.location_provider
        if provider is None:
            self.status = Status.LOCATION_UNSUPPORTED
            return False
        self.status = Status.LOCATING
        try:
            lat, lon = await asyncio.wait_for(provider.get_position(), timeout=self.location_timeout)
        except (LocationUnavailableError, asyncio.TimeoutError) as exc:
            logger.warning("Device location unavailable", extra={"error": str(exc) or type(exc).__name__})
            self.status = Status.LOCATION_FAILED
            return False
        return await self.load_place(lat, lon, MY_LOCATION_LABEL)

    def toggle_units(self) -> Units:
        """Flip metric/imperial and re-render the cached forecast without refetching."""
        self.units = self.units.toggled()
        if self.place is not None and self.forecast is not None:
            self.view = render_dashboard(self.place, self.forecast, self.units, updated_at=self._loaded_at)
        return self.units

    def save_favorite(self, label: Optional[str] = None) -> Optional[List[FavoriteEntry]]:
        """Save the current place; a blank label falls back to the label on screen."""
        if self.place is None:
            self.status = Status.NO_PLACE
            return None
        label = (label or "").strip()
        if not label:
            label = self.view.place_label if self.view is not None else self.place.label
        try:
            entries = self.favorites.add(label, self.place.lat, self.place.lon)
        except StorageError as exc:
            logger.warning("Failed to save favorite", extra={"label": label, "error": str(exc)})
            self.status = Status.STORAGE_FAILED
            return None
        self.status = Status.SAVED
        return entries

    def remove_favorite(self, index: int) -> Optional[List[FavoriteEntry]]:
        """Drop the favorite at `index`; IndexError when there is none."""
        try:
            entries = self.favorites.remove(index)
        except StorageError as exc:
            logger.warning("Failed to remove favorite", extra={"index": index, "error": str(exc)})
            self.status = Status.STORAGE_FAILED
            return None
        self.status = Status.REMOVED
        return entries

    async def load_favorite(self, index: int) -> bool:
        entry = self.favorites.get(index)
        return await self.load_place(entry.lat, entry.lon, entry.label)

    async def restore(self) -> bool:
        """Show the last-seen place, or the default place on first visit."""
        last = self.last_seen.load()
        if last is not None:
            return await self.load_place(last.lat, last.lon, last.label)
        if self.default_place is not None:
            return await self.load_place(self.default_place.lat, self.default_place.lon, self.default_place.label)
        return False

    def snapshot(self) -> DashboardState:
        return DashboardState(
            status=self.status.value,
            phase=self.phase,
            units=self.units,
            place=self.place,
            view=self.view,
            favorites=[
                FavoriteView(index=i, label=e.display_label, lat=e.lat, lon=e.lon)
                for i, e in enumerate(self.favorites.list())
            ],
        )
