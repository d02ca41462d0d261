"""Cache interfaces.

The throttle depends on this abstraction (not the concrete implementation):
a key-value store holding integer counts with a per-key time-to-live.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import timedelta


class AbstractCache(ABC):
    """Interface for TTL-capable counter stores."""

    @abstractmethod
    def get(self, key: str) -> int | None:
        """Return the stored value for key.

        Args:
            key: Cache key.

        Returns:
            The stored integer, or None if missing/expired.
        """
        raise NotImplementedError

    @abstractmethod
    def set(self, key: str, value: int, ttl: timedelta | None) -> None:
        """Store value under key, overwriting any previous value and TTL.

        Args:
            key: Cache key.
            value: Non-negative integer to store.
            ttl: Time-to-live counted from now, or None for no expiry.

        Raises:
            CacheError: If the write cannot be performed.
        """
        raise NotImplementedError

    @abstractmethod
    def expire(self, key: str) -> timedelta | None:
        """Return the remaining time-to-live for key.

        Returns:
            Remaining TTL, or None when the key is absent or has no TTL.
        """
        raise NotImplementedError

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete the entry for key. Deleting an absent key is a no-op.

        Raises:
            CacheError: If the delete cannot be performed.
        """
        raise NotImplementedError

    @abstractmethod
    def clear(self) -> None:
        """Remove every entry."""
        raise NotImplementedError
