"""Throttle endpoints: caller status, a guarded probe and admin reset."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response, status

from throttle.adapters.cache.base import AbstractCache
from throttle.core.auth import verify_admin_api_key
from throttle.core.config import settings
from throttle.core.rate_limit import (
    build_throttle,
    client_identity,
    enforce_throttle,
    get_cache,
    rate_limit_headers,
)
from throttle.schemas.throttle import PingResponse, ThrottleStatusResponse

router = APIRouter(tags=["Throttle"])


@router.get("/throttle/status", response_model=ThrottleStatusResponse)
def throttle_status(
    request: Request,
    response: Response,
    cache: Annotated[AbstractCache, Depends(get_cache)],
) -> ThrottleStatusResponse:
    """Report the caller's throttle state without recording an attempt."""

    state = build_throttle(client_identity(request)).status(cache)
    if settings.throttle.include_headers:
        response.headers.update(rate_limit_headers(state))
    return ThrottleStatusResponse.from_status(state)


@router.get(
    "/ping",
    response_model=PingResponse,
    dependencies=[Depends(enforce_throttle)],
)
def ping() -> PingResponse:
    """Throttled endpoint: each admitted call counts as one attempt."""

    return PingResponse()


@router.delete(
    "/throttle/{identity}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(verify_admin_api_key)],
)
def reset_throttle(
    identity: str,
    cache: Annotated[AbstractCache, Depends(get_cache)],
) -> Response:
    """Clear the attempt count of an identity (admin only).

    Cache failures propagate as CacheError and are rendered as 503.
    """

    build_throttle(identity).remove(cache)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
