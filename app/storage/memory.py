"""In-memory key-value store, intended for development and tests."""

import json
import threading
from typing import Any, Optional

from app.storage.base import KeyValueStore
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="storage/in_memory_store")


class InMemoryKeyValueStore(KeyValueStore):
    """Thread-safe dict of JSON strings; values round-trip like a real backend."""

    def __init__(self) -> None:
        logger.debug("Initializing InMemoryKeyValueStore")
        self._data: dict[str, str] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        """Return the decoded value for key, or None if missing/corrupt."""
        with self._lock:
            raw = self._data.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning("Discarding unreadable stored value", extra={"key": key})
            return None

    def set(self, key: str, value: Any) -> None:
        """Store a JSON-compatible value."""
        raw = json.dumps(value)
        with self._lock:
            self._data[key] = raw

    def delete(self, key: str) -> None:
        """Remove a key if it exists."""
        with self._lock:
            self._data.pop(key, None)

    def clear(self) -> None:
        """Remove all keys."""
        with self._lock:
            self._data.clear()
