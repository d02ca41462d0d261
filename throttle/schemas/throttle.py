"""Pydantic schemas for throttle responses."""

from __future__ import annotations

from pydantic import BaseModel, Field

from throttle.core.throttle import ThrottleStatus


class ThrottleStatusResponse(BaseModel):
    """Current throttle state of the calling client."""

    allowed: bool = Field(..., description="Whether the next attempt would be admitted.")
    limit: int = Field(..., description="Maximum attempts per window.")
    count: int = Field(..., description="Attempts recorded in the current window.")
    remaining: int = Field(..., description="Attempts left in the current window.")
    reset_after_seconds: float = Field(
        ...,
        description=(
            "Seconds until the current window ends; the full window length when "
            "no attempt has been recorded yet."
        ),
    )
    retry_after_seconds: int | None = Field(
        default=None,
        description="Suggested wait before retrying (only set when blocked).",
    )

    @classmethod
    def from_status(cls, state: ThrottleStatus) -> "ThrottleStatusResponse":
        return cls(
            allowed=state.allowed,
            limit=state.limit,
            count=state.count,
            remaining=state.remaining,
            reset_after_seconds=state.reset_after.total_seconds(),
            retry_after_seconds=state.retry_after_seconds,
        )


class PingResponse(BaseModel):
    """Response of the throttled ping endpoint."""

    status: str = Field("ok", description="Always 'ok' when the request was admitted.")
