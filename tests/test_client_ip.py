"""Unit tests for client IP resolution."""

from unittest.mock import Mock

import pytest
from starlette.datastructures import Headers

from authguard.core.client_ip import get_client_ip, get_request_client_ip


@pytest.mark.parametrize(
    ("headers", "expected"),
    [
        ({"x-forwarded-for": "1.2.3.4, 5.6.7.8"}, "1.2.3.4"),
        ({"x-forwarded-for": "  1.2.3.4  "}, "1.2.3.4"),
        ({"x-real-ip": "9.9.9.9"}, "9.9.9.9"),
        ({"x-forwarded-for": "1.2.3.4", "x-real-ip": "9.9.9.9"}, "1.2.3.4"),
        ({}, "unknown"),
        ({"x-forwarded-for": ""}, "unknown"),
        ({"x-forwarded-for": "   "}, "unknown"),
        ({"x-forwarded-for": "", "x-real-ip": "9.9.9.9"}, "9.9.9.9"),
        ({"X-Forwarded-For": "4.4.4.4"}, "4.4.4.4"),
        ({"X-Real-IP": "8.8.8.8"}, "8.8.8.8"),
    ],
)
def test_get_client_ip_precedence(headers: dict, expected: str) -> None:
    assert get_client_ip(headers) == expected


def test_get_client_ip_handles_none() -> None:
    assert get_client_ip(None) == "unknown"


def test_get_client_ip_accepts_starlette_headers() -> None:
    headers = Headers(headers={"X-Forwarded-For": "10.0.0.1, 10.0.0.2"})

    assert get_client_ip(headers) == "10.0.0.1"


def test_request_client_ip_prefers_proxy_headers() -> None:
    request = Mock()
    request.headers = Headers(headers={"x-real-ip": "9.9.9.9"})
    request.client.host = "127.0.0.1"

    assert get_request_client_ip(request) == "9.9.9.9"


def test_request_client_ip_falls_back_to_peer_address() -> None:
    request = Mock()
    request.headers = Headers(headers={})
    request.client.host = "127.0.0.1"

    assert get_request_client_ip(request) == "127.0.0.1"


def test_request_client_ip_unknown_without_peer() -> None:
    request = Mock()
    request.headers = Headers(headers={})
    request.client = None

    assert get_request_client_ip(request) == "unknown"
