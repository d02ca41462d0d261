"""Admin API key authentication.

Admin endpoints (e.g. resetting an identity's throttle) are guarded by an
X-API-Key header validated against APP_ADMIN_API_KEYS.
"""

from __future__ import annotations

import hashlib
import logging
from typing import Annotated

from fastapi import Header

from throttle.core.config import settings
from throttle.core.errors import AuthenticationAppError

logger = logging.getLogger(__name__)


def parse_api_keys(keys_string: str | None) -> set[str]:
    """Parse comma-separated API keys into a set.

    Examples:
        >>> parse_api_keys("key1, key2 ,key3")
        {'key1', 'key2', 'key3'}
        >>> parse_api_keys(None)
        set()
    """
    if not keys_string:
        return set()

    return {key.strip() for key in keys_string.split(",") if key.strip()}


def validate_api_key(provided_key: str | None) -> None:
    """Validate that the provided key is one of the configured admin keys.

    Args:
        provided_key: API key to validate (None when the header is missing).

    Raises:
        AuthenticationAppError: If the key is missing/invalid or no keys are configured.
    """
    if not settings.app.admin_auth_required:
        return

    valid_keys = parse_api_keys(settings.app.admin_api_keys)
    if not valid_keys:
        logger.error(
            "admin_auth.failed",
            extra={"reason": "api_keys_not_configured"},
        )
        raise AuthenticationAppError(
            code="api_keys_not_configured",
            message="Admin authentication is enabled but no API keys are configured",
            details={
                "hint": "Set APP_ADMIN_API_KEYS or disable auth with APP_ADMIN_AUTH_REQUIRED=false"
            },
        )

    if not provided_key:
        logger.warning("admin_auth.failed", extra={"reason": "missing_api_key"})
        raise AuthenticationAppError(
            code="missing_api_key",
            message="Missing API key. Provide X-API-Key header.",
        )

    if provided_key not in valid_keys:
        logger.warning(
            "admin_auth.failed",
            extra={
                "reason": "invalid_api_key",
                "api_key_hash": hashlib.sha256(provided_key.encode()).hexdigest()[:16],
            },
        )
        raise AuthenticationAppError(
            code="invalid_api_key",
            message="Invalid or missing API key",
        )


async def verify_admin_api_key(
    x_api_key: Annotated[str | None, Header(alias="X-API-Key")] = None,
) -> None:
    """FastAPI dependency for admin endpoints.

    Raises:
        AuthenticationAppError: Rendered as 403 by the global exception handlers.
    """
    validate_api_key(x_api_key)
    logger.debug("admin_auth.success")
