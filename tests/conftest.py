"""Pytest configuration and fixtures shared across all test modules.

Environment variables are set before any import that might build settings.
"""

import os

os.environ["APP_ENV"] = "testing"
os.environ.setdefault("APP_RATE_LIMIT_ENABLED", "true")
os.environ.setdefault("APP_RATE_LIMIT_MAX_REQUESTS", "10")
os.environ.setdefault("APP_RATE_LIMIT_WINDOW_MS", "60000")

import pytest

from authguard.core.rate_limit import reset_rate_limiter


class FakeClock:
    """Deterministic millisecond clock used to test window expiry."""

    def __init__(self, start: float = 1_000_000.0) -> None:
        self.current = start

    def __call__(self) -> float:
        return self.current

    def advance(self, ms: float) -> None:
        self.current += ms


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture(autouse=True)
def _isolated_rate_limiter():
    """Give every test a fresh process-wide limiter."""
    reset_rate_limiter()
    yield
    reset_rate_limiter()
