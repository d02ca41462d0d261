"""Pytest configuration and fixtures shared across all test modules.

Environment variables are set before any import of ``throttle.core.config``
so the global settings object is built from test values.
"""

import os

import pytest

os.environ["APP_ENV"] = "testing"

os.environ.setdefault("APP_ADMIN_AUTH_REQUIRED", "true")
os.environ.setdefault("APP_ADMIN_API_KEYS", "test-admin-key-123,test-admin-key-456")
os.environ.setdefault("THROTTLE_LIMIT", "3")
os.environ.setdefault("THROTTLE_WINDOW_SECONDS", "60")
os.environ.setdefault("THROTTLE_KEY_PREFIX", "test_")

from throttle.adapters.cache.in_memory import InMemoryTTLCache  # noqa: E402


class FakeClock:
    """Deterministic monotonic clock used to test expiration logic."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.current = start

    def __call__(self) -> float:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += seconds


class SteppingClock:
    """Clock returning the given readings in order, then repeating the last one."""

    def __init__(self, *readings: float) -> None:
        self._readings = list(readings)

    def __call__(self) -> float:
        if len(self._readings) > 1:
            return self._readings.pop(0)
        return self._readings[0]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> InMemoryTTLCache:
    return InMemoryTTLCache(max_entries=None, clock=clock)


@pytest.fixture
def stepping_clock() -> type[SteppingClock]:
    return SteppingClock
