"""Rate limiter interfaces.

Request-handling code should depend on this abstraction (not the concrete
implementation) so the storage backend can be swapped later with minimal
changes.
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable

# Returns a monotonically non-decreasing reading in milliseconds.
Clock = Callable[[], float]

DEFAULT_MAX_REQUESTS = 10
DEFAULT_WINDOW_MS = 60_000


def monotonic_ms() -> float:
    """Default limiter clock: ``time.monotonic()`` expressed in milliseconds."""
    return time.monotonic() * 1000.0


@dataclass(frozen=True)
class RateLimitConfig:
    """Limit applied to a single identifier.

    Attributes:
        max_requests: Allowed checks per window. Not validated here; a
            non-positive value admits only the first call of each window.
        window_ms: Window length in milliseconds.
    """

    max_requests: int = DEFAULT_MAX_REQUESTS
    window_ms: int = DEFAULT_WINDOW_MS


@dataclass
class RateLimitRecord:
    """Tracking state for one identifier within its current window.

    Attributes:
        count: Allowed checks observed in the current window (starts at 1).
        reset_at: Clock reading (ms) at which the window ends.
    """

    count: int
    reset_at: float


@dataclass(frozen=True)
class RateLimitResult:
    """Result of a rate limit check/consume operation.

    Attributes:
        allowed: Whether the request is allowed to proceed.
        limit: Max requests per window.
        remaining: Remaining requests in the current window (0 when blocked).
        reset_at: Clock reading (ms) when the current window resets.
        retry_after_seconds: Suggested wait time in seconds when blocked.
    """

    allowed: bool
    limit: int
    remaining: int
    reset_at: float
    retry_after_seconds: int | None


class AbstractRateLimiter(ABC):
    """Interface for rate limiters."""

    @abstractmethod
    def consume(self, identifier: str, config: RateLimitConfig | None = None) -> RateLimitResult:
        """Check and record one request for the given identifier.

        Args:
            identifier: Rate limit scope (e.g. ``"login:<ip>"``).
            config: Limit to apply; limiter defaults when omitted.

        Returns:
            RateLimitResult describing whether it was allowed.
        """
        raise NotImplementedError

    def check(self, identifier: str, config: RateLimitConfig | None = None) -> bool:
        """Return True when the request is allowed, False when denied."""
        return self.consume(identifier, config).allowed

    @abstractmethod
    def reset(self, identifier: str | None = None) -> None:
        """Forget one identifier, or every identifier when None."""
        raise NotImplementedError
