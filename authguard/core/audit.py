"""Authentication event logging.

Auth flows call ``log_auth_event`` for logins, registrations, throttling and
so on. Logging problems must never block those flows, so every failure is
caught here and reported only through the returned result.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Mapping

from authguard.core.logging import utc_timestamp
from authguard.schemas.auth_event import AuthEvent

logger = logging.getLogger("authguard.audit")


@dataclass(frozen=True)
class AuthEventLogResult:
    """Outcome of ``log_auth_event``.

    ``success`` is always True. ``logged`` is False when the record was
    dropped, in which case ``error`` names the reason.
    """

    success: bool = True
    logged: bool = True
    record: dict[str, Any] | None = None
    error: str | None = None


def _coerce_event(event: AuthEvent | Mapping[str, Any]) -> AuthEvent:
    if isinstance(event, AuthEvent):
        return event
    return AuthEvent.model_validate(dict(event))


def _json_safe(value: Any) -> Any:
    # Round-trip so the formatter never meets an unserializable object
    try:
        return json.loads(json.dumps(value, default=str))
    except (TypeError, ValueError):
        # Circular structures: keep the event, lose only the detail shape
        return repr(value)


def log_auth_event(event: AuthEvent | Mapping[str, Any]) -> AuthEventLogResult:
    """Append an authentication event to the operational log.

    Args:
        event: AuthEvent or mapping with ``type`` and optional ``email``,
            ``user_id``/``userId``, ``ip_address``/``ipAddress``, ``details``.

    Returns:
        AuthEventLogResult; never raises.
    """
    try:
        record = _coerce_event(event).to_log_record(utc_timestamp())
        record["details"] = _json_safe(record["details"])
        logger.info("auth_event", extra=record)
        return AuthEventLogResult(record=record)
    except Exception as exc:  # noqa: BLE001 - auth flows must not see logging faults
        return AuthEventLogResult(logged=False, error=f"{type(exc).__name__}: {exc}")
