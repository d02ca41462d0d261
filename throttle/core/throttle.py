"""Fixed-window attempt throttling for a single identity.

A ``Throttle`` counts attempts for one identity (e.g. an IP address) in a
TTL-capable cache. The first ``hit`` opens a window of ``window`` length;
later hits increment the count while keeping the remaining TTL, so the window
stays anchored at the first attempt. When the cache expires the entry, the
identity starts from zero again.

Usage:
    throttle = Throttle("127.0.0.1", 5, timedelta(minutes=1), "api_rate_limit_")
    if throttle.can_go(cache):
        throttle.hit(cache)
        ...  # process the request
    else:
        ...  # reject: rate limit exceeded

Notes:
- ``hit`` is a read-then-write sequence against the cache, not an atomic
  increment. Concurrent hits for the same identity can overwrite each other.
- A client can send up to ``2 * limit - 1`` attempts across a window boundary.
"""

from __future__ import annotations

import hashlib
import logging
import math
from dataclasses import dataclass
from datetime import timedelta

from throttle.adapters.cache.base import AbstractCache

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ThrottleStatus:
    """Point-in-time view of an identity's throttle state.

    Attributes:
        allowed: Whether another attempt would be admitted.
        limit: Max attempts per window.
        count: Attempts recorded in the current window.
        remaining: Attempts left in the current window (0 when blocked).
        reset_after: Time until the current window ends (the full window when
            no attempt has been recorded yet).
        retry_after_seconds: Suggested wait time in seconds when blocked.
    """

    allowed: bool
    limit: int
    count: int
    remaining: int
    reset_after: timedelta
    retry_after_seconds: int | None


@dataclass(frozen=True)
class Throttle:
    """Attempt counter for one identity against one cache.

    Attributes:
        identity: Subject being throttled. Only used to build the cache key.
        limit: Maximum attempts permitted within ``window``.
        window: Fixed period after which the attempt count resets.
        key_prefix: Namespace for cache keys to avoid collisions.
    """

    identity: str
    limit: int
    window: timedelta
    key_prefix: str

    def key(self) -> str:
        """Return the cache key for this identity."""
        return f"{self.key_prefix}{self.identity}"

    def count(self, cache: AbstractCache) -> int:
        """Return the attempts recorded in the current window (0 if none)."""
        value = cache.get(self.key())
        return 0 if value is None else value

    def can_go(self, cache: AbstractCache) -> bool:
        """Check whether the identity may make another attempt.

        Returns:
            True while the recorded count is below ``limit``.
        """
        return self.count(cache) < self.limit

    def get_expire(self, cache: AbstractCache) -> timedelta:
        """Return the time left in the current window.

        Falls back to the configured ``window`` when the cache has no expiry
        for the key.
        """
        remaining = cache.expire(self.key())
        if remaining is None:
            return self.window
        return remaining

    def hit(self, cache: AbstractCache) -> None:
        """Record an attempt.

        Writes ``count + 1`` (or 1 for the first attempt) with the window's
        remaining TTL, so repeated hits do not push the window forward.

        Raises:
            CacheError: If the cache write fails. Not retried.
        """
        key = self.key()
        expire = self.get_expire(cache)
        current = cache.get(key)

        value = 1 if current is None else current + 1
        cache.set(key, value, expire)

        logger.debug(
            "throttle.hit",
            extra={
                "identity_hash": hash_identity(self.identity),
                "count": value,
                "limit": self.limit,
                "ttl_s": expire.total_seconds(),
            },
        )

    def remove(self, cache: AbstractCache) -> None:
        """Clear the attempt count for the identity.

        Raises:
            CacheError: If the cache delete fails.
        """
        cache.remove(self.key())
        logger.info(
            "throttle.removed",
            extra={"identity_hash": hash_identity(self.identity)},
        )

    def status(self, cache: AbstractCache) -> ThrottleStatus:
        """Build a read-only snapshot used for rate limit headers."""
        count = self.count(cache)
        reset_after = self.get_expire(cache)
        allowed = count < self.limit
        retry_after = None
        if not allowed:
            retry_after = max(0, int(math.ceil(reset_after.total_seconds())))

        return ThrottleStatus(
            allowed=allowed,
            limit=self.limit,
            count=count,
            remaining=max(0, self.limit - count),
            reset_after=reset_after,
            retry_after_seconds=retry_after,
        )


def hash_identity(identity: str) -> str:
    """Hash the identity for logging without exposing it."""
    return hashlib.sha256(identity.encode()).hexdigest()[:16]
