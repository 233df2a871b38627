"""Saved places and the last-seen place, persisted in a key-value store."""
from __future__ import annotations

import time
from dataclasses import asdict, dataclass
from typing import Any, Callable, List, Optional

from app.storage.base import KeyValueStore
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="favorites")

FAVORITES_KEY = "wt_favs"
LAST_SEEN_KEY = "wt_last"
DEFAULT_FAVORITES_LIMIT = 12


@dataclass(frozen=True)
class FavoriteEntry:
    """A saved place; (lat, lon) identifies it."""
    label: str
    lat: float
    lon: float

    @property
    def key(self) -> tuple[float, float]:
        return (self.lat, self.lon)

    @property
    def display_label(self) -> str:
        return self.label or f"{self.lat:.2f},{self.lon:.2f}"


@dataclass(frozen=True)
class LastSeenPlace:
    """The most recently loaded place, with the wall-clock time it was saved."""
    lat: float
    lon: float
    label: str
    saved_at_epoch_ms: int


def _entry_from_dict(item: Any) -> Optional[FavoriteEntry]:
    try:
        return FavoriteEntry(label=str(item.get("label") or ""), lat=float(item["lat"]), lon=float(item["lon"]))
    except (AttributeError, KeyError, TypeError, ValueError):
        logger.debug("Skipping unreadable favorite", extra={"item": item})
        return None


class FavoritesStore:
    """Most-recent-first list of saved places, deduplicated by coordinate and capped."""

    def __init__(self, store: KeyValueStore, *, limit: int = DEFAULT_FAVORITES_LIMIT, key: str = FAVORITES_KEY) -> None:
        self._store = store
        self.limit = limit
        self.key = key

    def list(self) -> List[FavoriteEntry]:
        raw = self._store.get(self.key)
        if not isinstance(raw, list):
            return []
        return [entry for entry in (_entry_from_dict(item) for item in raw) if entry is not None]

    def _write(self, entries: List[FavoriteEntry]) -> List[FavoriteEntry]:
        capped = entries[: self.limit]
        self._store.set(self.key, [asdict(e) for e in capped])
        return capped

    def add(self, label: str, lat: float, lon: float) -> List[FavoriteEntry]:
        """Put a place at the front; an existing entry with the same coordinates is replaced."""
        new = FavoriteEntry(label=label, lat=float(lat), lon=float(lon))
        entries = [new] + [e for e in self.list() if e.key != new.key]
        logger.info("Saving favorite", extra={"label": label, "lat": lat, "lon": lon})
        return self._write(entries)

    def remove(self, index: int) -> List[FavoriteEntry]:
        """Drop the entry at `index`; out-of-range indices raise IndexError."""
        entries = self.list()
        if index < 0 or index >= len(entries):
            raise IndexError(f"No favorite at index {index}")
        removed = entries.pop(index)
        logger.info("Removing favorite", extra={"label": removed.label})
        return self._write(entries)

    def get(self, index: int) -> FavoriteEntry:
        entries = self.list()
        if index < 0 or index >= len(entries):
            raise IndexError(f"No favorite at index {index}")
        return entries[index]


class LastSeenStore:
    """Single overwrite-on-save record of the last successfully loaded place."""

    def __init__(self, store: KeyValueStore, *, key: str = LAST_SEEN_KEY,
                 clock: Callable[[], float] = time.time) -> None:
        self._store = store
        self.key = key
        self._clock = clock

    def save(self, lat: float, lon: float, label: str) -> LastSeenPlace:
        record = LastSeenPlace(lat=lat, lon=lon, label=label, saved_at_epoch_ms=int(self._clock() * 1000))
        self._store.set(self.key, {"lat": record.lat, "lon": record.lon, "label": record.label,
                                   "t": record.saved_at_epoch_ms})
        return record

    def load(self) -> Optional[LastSeenPlace]:
        raw = self._store.get(self.key)
        if not isinstance(raw, dict):
            return None
        try:
            return LastSeenPlace(
                lat=float(raw["lat"]),
                lon=float(raw["lon"]),
                label=str(raw.get("label") or ""),
                saved_at_epoch_ms=int(raw.get("t") or 0),
            )
        except (KeyError, TypeError, ValueError):
            logger.warning("Ignoring unreadable last-seen record")
            return None
