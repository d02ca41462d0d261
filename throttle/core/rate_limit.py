"""Throttling dependency for FastAPI routes.

This module wires the Throttle and its cache into the HTTP layer.

Design goals:
- Minimal coupling: routes depend on a dependency function only.
- Swap-friendly: the counter store sits behind AbstractCache and is injected
  through ``get_cache`` so it can be replaced (or overridden in tests).
- One throttle per client identity, built from ThrottleSettings.

Strategy:
- Identity is the client host (IP address), "unknown" when unavailable.
- A request is admitted while the identity's count is below the limit; the
  admitted request is then recorded with ``hit``.
"""

from __future__ import annotations

import logging
import math
from datetime import timedelta
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from throttle.adapters.cache.base import AbstractCache
from throttle.adapters.cache.in_memory import InMemoryTTLCache
from throttle.core.config import settings
from throttle.core.throttle import Throttle, ThrottleStatus, hash_identity

logger = logging.getLogger(__name__)


_cache: AbstractCache | None = None
_cache_config: int | None = None


def get_cache() -> AbstractCache:
    """Return the process-wide counter store.

    The instance is cached in-module to preserve counts across requests.
    If configuration changes (primarily in tests), the cache is rebuilt.
    """

    global _cache, _cache_config

    config = settings.cache.max_entries
    if _cache is None or _cache_config != config:
        _cache = InMemoryTTLCache(max_entries=config)
        _cache_config = config

    return _cache


def build_throttle(identity: str) -> Throttle:
    """Build a Throttle for identity from the current settings."""

    return Throttle(
        identity=identity,
        limit=settings.throttle.limit,
        window=timedelta(seconds=settings.throttle.window_seconds),
        key_prefix=settings.throttle.key_prefix,
    )


def client_identity(request: Request) -> str:
    """Return the identity to throttle on for this request."""

    return request.client.host if request.client else "unknown"


def rate_limit_headers(state: ThrottleStatus) -> dict[str, str]:
    """Build X-RateLimit-* headers describing a throttle snapshot."""

    headers = {
        "X-RateLimit-Limit": str(state.limit),
        "X-RateLimit-Remaining": str(state.remaining),
        "X-RateLimit-Reset": str(max(0, math.ceil(state.reset_after.total_seconds()))),
    }
    if state.retry_after_seconds is not None:
        headers["Retry-After"] = str(state.retry_after_seconds)
    return headers


async def enforce_throttle(
    request: Request,
    cache: Annotated[AbstractCache, Depends(get_cache)],
) -> None:
    """FastAPI dependency enforcing the per-identity throttle.

    When enabled, rejects the request with HTTP 429 once the identity reached
    its limit; otherwise records the attempt.

    Raises:
        HTTPException: 429 Too Many Requests when the limit is reached.
        CacheError: When the attempt cannot be recorded (rendered as 503).
    """

    if not settings.throttle.enabled:
        return

    identity = client_identity(request)
    throttle = build_throttle(identity)

    if throttle.can_go(cache):
        throttle.hit(cache)
        logger.info(
            "throttle.allowed",
            extra={
                "identity_hash": hash_identity(identity),
                "limit": throttle.limit,
                "window_s": settings.throttle.window_seconds,
            },
        )
        return

    state = throttle.status(cache)
    logger.warning(
        "throttle.blocked",
        extra={
            "identity_hash": hash_identity(identity),
            "limit": state.limit,
            "count": state.count,
            "window_s": settings.throttle.window_seconds,
            "retry_after_s": state.retry_after_seconds,
        },
    )

    headers = rate_limit_headers(state) if settings.throttle.include_headers else None
    raise HTTPException(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        detail="Rate limit exceeded. Try again later.",
        headers=headers,
    )
