"""Pick the key-value backend for favorites and last-seen state."""

from __future__ import annotations

try:
    import redis  # type: ignore
except ImportError:  # pragma: no cover - optional dependency
    redis = None

from app import config
from app.storage.base import KeyValueStore
from app.storage.memory import InMemoryKeyValueStore
from app.storage.redis import RedisKeyValueStore
from utils.logging_utils import get_tagged_logger, mask_url

logger = get_tagged_logger(__name__, tag="storage/factory")


def build_store(settings: config.Settings | None = None) -> KeyValueStore:
    """Return a Redis store when configured and reachable, otherwise in-memory."""
    settings = settings or config.settings
    backend = settings.storage_backend
    if backend not in ("memory", "redis"):
        raise ValueError(f"Unknown storage backend '{backend}'")

    if backend == "redis":
        if not settings.storage_redis_url:
            raise ValueError("storage_redis_url must be set for the redis storage backend")
        if redis is None:
            logger.warning("redis package not installed; falling back to InMemoryKeyValueStore")
            return InMemoryKeyValueStore()
        masked = mask_url(settings.storage_redis_url)
        try:
            client = redis.Redis.from_url(settings.storage_redis_url)
            client.ping()
            logger.info("Using RedisKeyValueStore", extra={"redis_url": masked})
            return RedisKeyValueStore(client, prefix=settings.storage_prefix)
        except Exception as exc:  # pragma: no cover
            logger.warning("Falling back to InMemoryKeyValueStore (Redis unavailable)",
                           extra={"redis_url": masked, "error": str(exc)})

    return InMemoryKeyValueStore()
