"""Redis-backed key-value store for favorites and the last-seen place."""

import json
from typing import Any, Optional

from app.errors import StorageError
from app.storage.base import KeyValueStore
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="storage/redis_store")


class RedisKeyValueStore(KeyValueStore):
    """Stores values as JSON strings under a key prefix; entries never expire."""

    def __init__(self, client, prefix: str = "wxdash:") -> None:
        """Initialize with a Redis client and a key prefix."""
        logger.debug("Initializing RedisKeyValueStore")
        self.client = client
        self.prefix = prefix

    def _key(self, key: str) -> str:
        """Return the namespaced Redis key."""
        return f"{self.prefix}{key}"

    def get(self, key: str) -> Optional[Any]:
        """Fetch and decode a value, or None if missing/unreadable."""
        try:
            raw = self.client.get(self._key(key))
        except Exception as exc:  # pragma: no cover
            logger.error("Failed to read key from Redis: %s", exc)
            return None
        if not raw:
            return None
        try:
            if isinstance(raw, bytes):
                raw = raw.decode("utf-8")
            return json.loads(raw)
        except ValueError as exc:
            logger.error("Failed to decode stored value for %s: %s", key, exc)
            return None

    def set(self, key: str, value: Any) -> None:
        """Serialize and write a value; backend failures surface as StorageError."""
        payload = json.dumps(value).encode("utf-8")
        try:
            self.client.set(self._key(key), payload)
        except Exception as exc:
            logger.error("Failed to write key to Redis: %s", exc)
            raise StorageError(f"could not write {key}") from exc

    def delete(self, key: str) -> None:
        """Delete a key if present."""
        try:
            self.client.delete(self._key(key))
        except Exception as exc:  # pragma: no cover
            logger.error("Failed to delete key from Redis: %s", exc)

    def clear(self) -> None:
        """Best-effort clear for all keys under the configured prefix."""
        try:
            for key in self.client.scan_iter(f"{self.prefix}*"):
                self.client.delete(key)
        except Exception as exc:  # pragma: no cover
            logger.error("Failed to clear keys from Redis: %s", exc)
