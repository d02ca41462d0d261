"""Application-level exception types.

This module defines domain errors used across the throttle, cache adapters
and the HTTP layer, enabling consistent error handling, logging, and API
responses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NotRequired, TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients.

    Fields are optional so each error can carry only what is relevant.
    """

    code: str
    message: str
    hint: str
    http_status: int
    retry_after: float
    cache_key: str
    operation: str
    ttl_seconds: float
    value: int
    request_id: str
    context: NotRequired[dict[str, Any]]


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when input/config validation fails."""


class AuthenticationAppError(AppError):
    """Raised when authentication/authorization fails."""


class CacheError(AppError):
    """Raised by cache adapters when a write or delete cannot be performed.

    The throttle never handles this error itself: it propagates to whoever
    called ``hit`` or ``remove``.
    """
