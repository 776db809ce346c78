"""Client IP resolution from proxy headers.

Precedence:
1. First entry of ``X-Forwarded-For`` (non-empty after trimming)
2. ``X-Real-IP``
3. The literal ``"unknown"``

Header names are matched case-insensitively so both Starlette ``Headers``
and plain dicts work.
"""

from __future__ import annotations

from typing import Mapping

from fastapi import Request

UNKNOWN_CLIENT_IP = "unknown"


def _header(headers: Mapping[str, str], name: str) -> str | None:
    value = headers.get(name)
    if value is not None:
        return value
    for key, candidate in headers.items():
        if key.lower() == name:
            return candidate
    return None


def _forwarded_ip(headers: Mapping[str, str]) -> str | None:
    forwarded_for = (_header(headers, "x-forwarded-for") or "").strip()
    if forwarded_for:
        first = forwarded_for.split(",")[0].strip()
        if first:
            return first

    real_ip = (_header(headers, "x-real-ip") or "").strip()
    return real_ip or None


def get_client_ip(headers: Mapping[str, str] | None) -> str:
    """Resolve the client IP from request headers.

    Args:
        headers: Inbound request headers (any mapping).

    Returns:
        The client IP string, or ``"unknown"`` when no usable header exists.

    Examples:
        >>> get_client_ip({"x-forwarded-for": "1.2.3.4, 5.6.7.8"})
        '1.2.3.4'
        >>> get_client_ip({"x-real-ip": "9.9.9.9"})
        '9.9.9.9'
        >>> get_client_ip({"x-forwarded-for": ""})
        'unknown'
    """
    if not headers:
        return UNKNOWN_CLIENT_IP
    return _forwarded_ip(headers) or UNKNOWN_CLIENT_IP


def get_request_client_ip(request: Request) -> str:
    """Resolve the client IP for a FastAPI request.

    Proxy headers win; otherwise the socket peer address is used before
    falling back to ``"unknown"``.
    """
    forwarded = _forwarded_ip(request.headers)
    if forwarded:
        return forwarded
    if request.client and request.client.host:
        return request.client.host
    return UNKNOWN_CLIENT_IP
