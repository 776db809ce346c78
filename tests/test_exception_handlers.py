"""Tests for global exception handlers.

Validates that all exception types are handled consistently with
proper HTTP status codes, error format, and no information leakage.
"""

import asyncio
import json
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from authguard.core.errors import AppError, ErrorDetails, RateLimitExceededError
from authguard.core.exception_handlers import general_exception_handler, setup_exception_handlers


@pytest.fixture
def app_with_handlers() -> FastAPI:
    """Create FastAPI app with exception handlers registered."""
    app = FastAPI()
    setup_exception_handlers(app)
    return app


@pytest.fixture
def client(app_with_handlers: FastAPI) -> TestClient:
    return TestClient(app_with_handlers, raise_server_exceptions=False)


class TestRateLimitExceededError:
    def test_message_with_retry_after(self):
        exc = RateLimitExceededError.for_action("login", retry_after=30, limit=5)

        assert exc.code == "rate_limited"
        assert exc.message == "Too many login attempts. Please try again in 30 seconds."
        assert exc.details == {"action": "login", "retry_after": 30, "limit": 5, "remaining": 0}
        assert str(exc) == exc.message

    def test_message_without_retry_after(self):
        exc = RateLimitExceededError.for_action("registration")

        assert exc.message == "Too many registration attempts. Please try again later."
        assert exc.details == {"action": "registration"}

    def test_details_cover_only_rate_limit_fields(self):
        assert set(ErrorDetails.__annotations__) == {"action", "limit", "remaining", "retry_after"}


class TestAppErrorHandler:
    def test_app_error_returns_400(self, client: TestClient, app_with_handlers: FastAPI):
        @app_with_handlers.get("/test-validation")
        async def test_endpoint():
            raise AppError(code="invalid_identifier", message="Identifier is required")

        response = client.get("/test-validation")

        assert response.status_code == 400
        data = response.json()
        assert data["error"]["code"] == "invalid_identifier"
        assert data["error"]["message"] == "Identifier is required"
        assert "request_id" in data["error"]
        assert "details" not in data["error"]

    def test_rate_limit_error_returns_429_with_headers(self, client: TestClient, app_with_handlers: FastAPI):
        @app_with_handlers.get("/test-throttle")
        async def test_endpoint():
            raise RateLimitExceededError.for_action("login", retry_after=12, limit=5)

        response = client.get("/test-throttle")

        assert response.status_code == 429
        assert response.headers["Retry-After"] == "12"
        assert response.headers["X-RateLimit-Limit"] == "5"
        assert response.headers["X-RateLimit-Remaining"] == "0"
        assert int(response.headers["X-RateLimit-Reset"]) > 0
        data = response.json()
        assert data["error"]["details"]["retry_after"] == 12

    def test_error_response_format_is_consistent(self, client: TestClient, app_with_handlers: FastAPI):
        @app_with_handlers.get("/test-format")
        async def test_endpoint():
            raise AppError(code="test", message="test")

        data = client.get("/test-format").json()

        assert "error" in data
        assert "code" in data["error"]
        assert "message" in data["error"]
        assert "request_id" in data["error"]


class TestGeneralExceptionHandler:
    def test_unexpected_exception_returns_500(self, client: TestClient, app_with_handlers: FastAPI):
        @app_with_handlers.get("/boom")
        async def test_endpoint():
            raise RuntimeError("limiter store corrupted")

        response = client.get("/boom")

        assert response.status_code == 500
        assert response.json()["error"]["code"] == "internal_server_error"
        assert "corrupted" not in response.text

    def test_general_exception_handler_never_leaks_stack_trace(self):
        request = AsyncMock()
        request.url.path = "/test"
        request.method = "GET"

        exc = ValueError("Test error with details")
        response = asyncio.run(general_exception_handler(request, exc))

        response_text = bytes(response.body).decode()
        data = json.loads(response_text)
        assert response.status_code == 500
        assert "Traceback" not in response_text
        assert "ValueError" not in response_text
        assert "request_id" in data["error"]

    def test_setup_exception_handlers_registers_handlers(self, app_with_handlers: FastAPI):
        assert AppError in app_with_handlers.exception_handlers
        assert Exception in app_with_handlers.exception_handlers
