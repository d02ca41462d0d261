"""In-memory TTL cache used as the throttle's counter store.

Notes:
- Per-process only: running multiple workers gives each worker its own counts.
- Thread-safe: uses a lock around shared state. The lock protects the store,
  not the read-then-write sequences callers build on top of it.
- Bounded: past max_entries, expired entries are dropped first, then the least
  recently used live ones. Evicting a live counter resets that identity before
  its window ends, so size max_entries above the number of concurrently
  throttled identities.
"""

from __future__ import annotations

import hashlib
import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from datetime import timedelta
from typing import Callable

from throttle.adapters.cache.base import AbstractCache
from throttle.core.errors import CacheError

logger = logging.getLogger(__name__)


@dataclass
class CacheItem:
    """Container for cached values with expiration metadata."""

    value: int
    expires_at: float | None


def _hash_key(key: str) -> str:
    """Hash a cache key for logging without exposing the identity inside it."""
    return hashlib.sha256(key.encode()).hexdigest()[:16]


class InMemoryTTLCache(AbstractCache):
    """Thread-safe, in-memory TTL cache with LRU eviction.

    Each entry carries its own expiry, written explicitly on every ``set``.
    Expired entries are dropped lazily when read and opportunistically on
    writes.

    Attributes:
        max_entries: Maximum number of cached items (None for unlimited).
    """

    def __init__(
        self,
        max_entries: int | None = 1024,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the cache.

        Args:
            max_entries: Capacity before least recently used entries are evicted.
            clock: Monotonic time source returning seconds.
        """
        self._max_entries = max_entries
        self._clock = clock
        self._store: OrderedDict[str, CacheItem] = OrderedDict()
        self._lock = threading.RLock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    def __repr__(self) -> str:  # pragma: no cover - representation only
        return (
            f"InMemoryTTLCache(max_entries={self._max_entries}, "
            f"size={len(self._store)}, hits={self._hits}, misses={self._misses}, "
            f"evictions={self._evictions})"
        )

    def get(self, key: str) -> int | None:
        """Retrieve a cached value if it exists and is not expired.

        Args:
            key: Cache key.

        Returns:
            Cached value or None if not found/expired.
        """

        with self._lock:
            item = self._get_live_locked(key)
            if item is None:
                self._misses += 1
                return None

            self._hits += 1
            self._store.move_to_end(key)  # mark as recently used
            logger.debug("cache.hit", extra={"cache_key": _hash_key(key)})
            return item.value

    def set(self, key: str, value: int, ttl: timedelta | None) -> None:
        """Store a value with its own TTL, evicting as needed.

        Args:
            key: Cache key.
            value: Non-negative count to store.
            ttl: Time-to-live from now, or None to keep the entry until removed.

        Raises:
            CacheError: If value is negative or ttl is not positive.
        """

        if value < 0:
            raise CacheError(
                code="cache_invalid_value",
                message="Cache values must be non-negative integers",
                details={"operation": "set", "value": value},
            )

        ttl_seconds = ttl.total_seconds() if ttl is not None else None
        if ttl_seconds is not None and ttl_seconds <= 0:
            raise CacheError(
                code="cache_invalid_ttl",
                message="Cache TTL must be positive",
                details={"operation": "set", "ttl_seconds": ttl_seconds},
            )

        with self._lock:
            now = self._clock()
            self._evict_expired_locked(now)
            expires_at = now + ttl_seconds if ttl_seconds is not None else None
            self._store[key] = CacheItem(value=value, expires_at=expires_at)
            self._store.move_to_end(key)
            self._evict_if_over_capacity_locked()

            logger.debug(
                "cache.set",
                extra={
                    "cache_key": _hash_key(key),
                    "size": len(self._store),
                    "ttl_s": ttl_seconds,
                },
            )

    def expire(self, key: str) -> timedelta | None:
        """Return the remaining TTL for key, or None if absent or unbounded."""

        with self._lock:
            now = self._clock()
            item = self._get_live_locked(key, now)
            if item is None or item.expires_at is None:
                return None

            remaining = timedelta(seconds=item.expires_at - now)
            if remaining <= timedelta(0):
                # Below timedelta resolution: treat as already expired
                self._evict_single(key)
                return None
            return remaining

    def remove(self, key: str) -> None:
        """Delete key if present."""

        with self._lock:
            removed = self._store.pop(key, None)
            logger.debug(
                "cache.remove",
                extra={"cache_key": _hash_key(key), "existed": removed is not None},
            )

    def clear(self) -> None:
        """Remove all cached entries and reset counters."""

        with self._lock:
            self._store.clear()
            self._hits = 0
            self._misses = 0
            self._evictions = 0

    def stats(self) -> dict[str, int | None]:
        """Return lightweight cache metrics without exposing keys or values."""

        with self._lock:
            return {
                "max_entries": self._max_entries,
                "entries": len(self._store),
                "hits": self._hits,
                "misses": self._misses,
                "evictions": self._evictions,
            }

    def _get_live_locked(self, key: str, now: float | None = None) -> CacheItem | None:
        item = self._store.get(key)
        if item is None:
            return None
        if self._is_expired(item, self._clock() if now is None else now):
            self._evict_single(key)
            logger.debug(
                "cache.miss",
                extra={"cache_key": _hash_key(key), "reason": "expired"},
            )
            return None
        return item

    def _evict_single(self, key: str) -> None:
        if key in self._store:
            self._store.pop(key, None)
            self._evictions += 1

    def _evict_expired_locked(self, now: float) -> None:
        expired_keys = [k for k, item in self._store.items() if self._is_expired(item, now)]
        for key in expired_keys:
            self._evict_single(key)

    def _evict_if_over_capacity_locked(self) -> None:
        if self._max_entries is None:
            return

        while len(self._store) > self._max_entries:
            # popitem(last=False) removes the least recently used entry
            self._store.popitem(last=False)
            self._evictions += 1

    @staticmethod
    def _is_expired(item: CacheItem, now: float) -> bool:
        return item.expires_at is not None and now >= item.expires_at
