"""Shared protocol for key-value storage backends."""

from typing import Any, Optional, Protocol


class KeyValueStore(Protocol):
    """Protocol for small JSON documents stored under well-known keys."""

    def get(self, key: str) -> Optional[Any]:
        """Return the decoded value, or None if missing or unreadable."""

    def set(self, key: str, value: Any) -> None:
        """Serialize and store a JSON-compatible value, replacing any previous one."""

    def delete(self, key: str) -> None:
        """Delete a key without raising if it is absent."""

    def clear(self) -> None:
        """Remove every key owned by this store."""
