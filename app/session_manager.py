"""Registry of per-browser dashboard orchestrators with an idle TTL."""
import threading
import time
import uuid
from typing import Optional

from app.config import Settings, settings
from app.dashboard import DashboardOrchestrator
from app.data_sources import WeatherDataSource, build_data_source
from app.favorites import FavoritesStore, LastSeenStore
from app.render import Place
from app.storage import KeyValueStore, build_store
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="session_manager")


class DashboardSessions:
    """Thread-safe map of session id -> orchestrator; idle sessions expire."""

    def __init__(self, ttl_seconds: int = 3600) -> None:
        self.ttl = ttl_seconds
        self._sessions: dict[str, dict] = {}
        self._lock = threading.Lock()

    def _generate_id(self) -> str:
        return str(uuid.uuid4())

    def create(self, orchestrator: DashboardOrchestrator) -> str:
        with self._lock:
            sid = self._generate_id()
            self._sessions[sid] = {"orchestrator": orchestrator, "exp": time.monotonic() + self.ttl}
            return sid

    def get(self, session_id: str) -> Optional[DashboardOrchestrator]:
        """Return the orchestrator, refreshing its TTL, or None if missing/expired."""
        with self._lock:
            data = self._sessions.get(session_id)
            if not data:
                return None
            now = time.monotonic()
            if data["exp"] < now:
                self._sessions.pop(session_id, None)
                return None
            data["exp"] = now + self.ttl
            return data["orchestrator"]

    def delete(self, session_id: str) -> None:
        with self._lock:
            self._sessions.pop(session_id, None)

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()


def build_orchestrator(
    store: KeyValueStore,
    data_source: WeatherDataSource,
    cfg: Settings | None = None,
) -> DashboardOrchestrator:
    """Wire an orchestrator to the shared store and data source using configured defaults."""
    cfg = cfg or settings
    return DashboardOrchestrator(
        data_source,
        FavoritesStore(store, limit=cfg.favorites_limit),
        LastSeenStore(store),
        units=cfg.default_units,
        default_place=Place(lat=cfg.default_latitude, lon=cfg.default_longitude, label=cfg.default_label),
        location_timeout=cfg.location_timeout_seconds,
        hourly_limit=cfg.hourly_points,
    )


_store: KeyValueStore = build_store(settings)
_data_source: WeatherDataSource = build_data_source(settings)
_sessions = DashboardSessions(ttl_seconds=settings.session_ttl_seconds)


def use_in_memory_state_for_tests(data_source: WeatherDataSource | None = None, ttl_seconds: int = 3600) -> KeyValueStore:
    """Reset store/sessions (and optionally the data source) for test isolation."""
    global _store, _data_source, _sessions
    from app.storage import InMemoryKeyValueStore

    _store = InMemoryKeyValueStore()
    _sessions = DashboardSessions(ttl_seconds=ttl_seconds)
    if data_source is not None:
        _data_source = data_source
    return _store


def create_session() -> tuple[str, DashboardOrchestrator]:
    """Create a fresh dashboard bound to the shared store."""
    orchestrator = build_orchestrator(_store, _data_source)
    sid = _sessions.create(orchestrator)
    logger.info("Created dashboard session", extra={"session_id": sid})
    return sid, orchestrator


def get_session(session_id: str) -> Optional[DashboardOrchestrator]:
    return _sessions.get(session_id)


def delete_session(session_id: str) -> None:
    _sessions.delete(session_id)


def clear_sessions() -> None:
    _sessions.clear()
