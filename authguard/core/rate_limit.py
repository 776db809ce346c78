"""Rate limiting for authentication routes.

This module wires the rate limiting adapter into the HTTP layer.

Design goals:
- Minimal coupling: routes depend on a dependency function only.
- Swap-friendly: storage backend can be replaced behind an abstract interface.
- Scoped keys: each guarded action gets its own budget per client IP, so
  exhausting ``login`` does not block ``register``.
"""

from __future__ import annotations

import hashlib
import logging
import threading
from typing import Awaitable, Callable

from fastapi import Request

from authguard.adapters.rate_limit.base import RateLimitConfig
from authguard.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter
from authguard.core.audit import log_auth_event
from authguard.core.client_ip import get_request_client_ip
from authguard.core.config import settings
from authguard.core.errors import RateLimitExceededError
from authguard.schemas.auth_event import AuthEvent, AuthEventType

logger = logging.getLogger(__name__)


_limiter: InMemoryFixedWindowRateLimiter | None = None
_limiter_config: RateLimitConfig | None = None
_limiter_lock = threading.Lock()


def _default_config() -> RateLimitConfig:
    return RateLimitConfig(
        max_requests=settings.app.rate_limit_max_requests,
        window_ms=settings.app.rate_limit_window_ms,
    )


def get_rate_limiter() -> InMemoryFixedWindowRateLimiter:
    """Return a process-wide rate limiter instance.

    The instance is cached in-module to preserve state across requests.
    If configuration changes (primarily in tests), the limiter is rebuilt.
    Creation happens under a module lock so concurrent first calls share
    one instance and no counts are lost.

    Returns:
        InMemoryFixedWindowRateLimiter: Configured limiter instance.
    """

    global _limiter, _limiter_config

    config = _default_config()

    with _limiter_lock:
        if _limiter is None or _limiter_config != config:
            _limiter = InMemoryFixedWindowRateLimiter(config)
            _limiter_config = config

        return _limiter


def reset_rate_limiter() -> None:
    """Discard the process-wide limiter and all of its records."""

    global _limiter, _limiter_config

    with _limiter_lock:
        _limiter = None
        _limiter_config = None


def check_rate_limit(
    identifier: str,
    max_requests: int | None = None,
    window_ms: int | None = None,
) -> bool:
    """Decide whether ``identifier`` may make another request right now.

    Omitted limits fall back to ``APP_RATE_LIMIT_MAX_REQUESTS`` and
    ``APP_RATE_LIMIT_WINDOW_MS`` (10 requests per 60 000 ms by default).
    """

    return get_rate_limiter().check_rate_limit(identifier, max_requests, window_ms)


def build_rate_limit_key(action: str, client_ip: str) -> str:
    """Namespace the limiter key by action, e.g. ``login:203.0.113.7``."""

    return f"{action}:{client_ip}"


def _hash_limiter_key(key: str) -> str:
    """Hash the rate limit key for logging without exposing client IPs."""
    return hashlib.sha256(key.encode()).hexdigest()[:16]


def require_rate_limit(
    action: str,
    *,
    max_requests: int | None = None,
    window_ms: int | None = None,
) -> Callable[[Request], Awaitable[None]]:
    """Build a FastAPI dependency that throttles ``action`` per client IP.

    Usage:
        @router.post("/login", dependencies=[Depends(require_rate_limit("login", max_requests=5))])
        async def login(...): ...

    Args:
        action: Scope name used in the limiter key and error message.
        max_requests: Per-route override of the configured limit.
        window_ms: Per-route override of the configured window.

    Returns:
        Async dependency raising RateLimitExceededError when throttled.
    """

    async def enforce_rate_limit(request: Request) -> None:
        if not settings.app.rate_limit_enabled:
            return

        limiter = get_rate_limiter()
        defaults = limiter.config
        config = RateLimitConfig(
            max_requests=defaults.max_requests if max_requests is None else max_requests,
            window_ms=defaults.window_ms if window_ms is None else window_ms,
        )

        client_ip = get_request_client_ip(request)
        key = build_rate_limit_key(action, client_ip)
        key_hash = _hash_limiter_key(key)

        result = limiter.consume(key, config)
        if result.allowed:
            logger.info(
                "rate_limit.allowed",
                extra={
                    "action": action,
                    "key_hash": key_hash,
                    "limit": result.limit,
                    "remaining": result.remaining,
                    "window_ms": config.window_ms,
                },
            )
            return

        retry_after = result.retry_after_seconds or 0
        logger.warning(
            "rate_limit.exceeded",
            extra={
                "action": action,
                "key_hash": key_hash,
                "limit": result.limit,
                "remaining": result.remaining,
                "window_ms": config.window_ms,
                "retry_after_s": retry_after,
            },
        )
        log_auth_event(
            AuthEvent(
                type=AuthEventType.RATE_LIMITED.value,
                ip_address=client_ip,
                details={"action": action, "path": request.url.path, "limit": result.limit},
            )
        )

        raise RateLimitExceededError.for_action(
            action,
            retry_after=retry_after,
            limit=result.limit,
        )

    return enforce_rate_limit
