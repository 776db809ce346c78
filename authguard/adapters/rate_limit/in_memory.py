"""In-memory fixed-window rate limiter.

Notes:
- Per-process only: running multiple workers multiplies the effective limit.
- Thread-safe: uses a lock around shared state.
- The window starts at the first call after expiry, not on clock boundaries.
"""

from __future__ import annotations

import logging
import math
import threading
from dataclasses import replace

from authguard.adapters.rate_limit.base import (
    AbstractRateLimiter,
    Clock,
    RateLimitConfig,
    RateLimitRecord,
    RateLimitResult,
    monotonic_ms,
)

logger = logging.getLogger(__name__)


class InMemoryFixedWindowRateLimiter(AbstractRateLimiter):
    """Rate limiter using a fixed time window per identifier.

    Each identifier owns one RateLimitRecord. The first check creates it with
    ``count=1``; later checks inside the window increment it until
    ``max_requests`` is reached, after which checks are denied without
    touching the record. Once ``reset_at`` has passed, the next check
    overwrites the record and opens a new window.

    Requests near a window boundary can burst up to twice the limit; this is
    inherent to fixed windows and is kept as is.

    Important:
        Records are never evicted by ``consume``. Long-running processes that
        see many distinct identifiers should call ``sweep_expired`` now and
        then.
    """

    def __init__(
        self,
        config: RateLimitConfig | None = None,
        *,
        clock: Clock = monotonic_ms,
    ) -> None:
        """Initialize the in-memory rate limiter.

        Args:
            config: Default limit used when a call does not pass its own.
            clock: Time source returning milliseconds.
        """
        self._config = config or RateLimitConfig()
        self._clock = clock
        self._lock = threading.RLock()
        self._records: dict[str, RateLimitRecord] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __repr__(self) -> str:  # pragma: no cover - representation only
        return (
            f"InMemoryFixedWindowRateLimiter(max_requests={self._config.max_requests}, "
            f"window_ms={self._config.window_ms}, tracked={len(self._records)})"
        )

    @property
    def config(self) -> RateLimitConfig:
        return self._config

    def _build_allowed_result(self, config: RateLimitConfig, record: RateLimitRecord) -> RateLimitResult:
        return RateLimitResult(
            allowed=True,
            limit=config.max_requests,
            remaining=max(0, config.max_requests - record.count),
            reset_at=record.reset_at,
            retry_after_seconds=None,
        )

    def _build_blocked_result(
        self, config: RateLimitConfig, record: RateLimitRecord, now: float
    ) -> RateLimitResult:
        retry_after = max(0, int(math.ceil((record.reset_at - now) / 1000.0)))
        return RateLimitResult(
            allowed=False,
            limit=config.max_requests,
            remaining=0,
            reset_at=record.reset_at,
            retry_after_seconds=retry_after,
        )

    def consume(self, identifier: str, config: RateLimitConfig | None = None) -> RateLimitResult:
        """Check the identifier's window and record the request if allowed.

        Lookup, comparison and increment happen under one lock so concurrent
        callers cannot both slip under the limit.

        Args:
            identifier: Rate limit scope (e.g. ``"login:203.0.113.7"``).
            config: Limit to apply; the limiter's default when omitted.

        Returns:
            RateLimitResult with the allowance decision and metadata.
        """
        cfg = config or self._config

        with self._lock:
            now = self._clock()
            record = self._records.get(identifier)

            if record is None or record.reset_at <= now:
                record = RateLimitRecord(count=1, reset_at=now + cfg.window_ms)
                self._records[identifier] = record
                return self._build_allowed_result(cfg, record)

            if record.count >= cfg.max_requests:
                return self._build_blocked_result(cfg, record, now)

            record.count += 1
            return self._build_allowed_result(cfg, record)

    def check_rate_limit(
        self,
        identifier: str,
        max_requests: int | None = None,
        window_ms: int | None = None,
    ) -> bool:
        """Boolean decision with per-call overrides of the default limit.

        Examples:
            >>> limiter = InMemoryFixedWindowRateLimiter(clock=lambda: 0.0)
            >>> [limiter.check_rate_limit("ip-A", 2) for _ in range(3)]
            [True, True, False]
        """
        config = RateLimitConfig(
            max_requests=self._config.max_requests if max_requests is None else max_requests,
            window_ms=self._config.window_ms if window_ms is None else window_ms,
        )
        return self.consume(identifier, config).allowed

    def get_record(self, identifier: str) -> RateLimitRecord | None:
        """Return a copy of the identifier's record, or None if untracked."""
        with self._lock:
            record = self._records.get(identifier)
            return replace(record) if record is not None else None

    def reset(self, identifier: str | None = None) -> None:
        with self._lock:
            if identifier is None:
                self._records.clear()
            else:
                self._records.pop(identifier, None)

    def sweep_expired(self) -> int:
        """Drop records whose window has already ended.

        Returns:
            Number of records removed.
        """
        with self._lock:
            now = self._clock()
            expired = [key for key, record in self._records.items() if record.reset_at <= now]
            for key in expired:
                del self._records[key]

        if expired:
            logger.debug(
                "rate_limit.swept",
                extra={"removed": len(expired), "tracked": len(self)},
            )
        return len(expired)
