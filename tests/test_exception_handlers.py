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

from throttle.core.errors import (
    AppError,
    AuthenticationAppError,
    CacheError,
    ValidationAppError,
)
from throttle.core.exception_handlers import general_exception_handler, setup_exception_handlers


@pytest.fixture
def app_with_handlers() -> FastAPI:
    """Create FastAPI app with exception handlers registered."""
    app = FastAPI()
    setup_exception_handlers(app)
    return app


@pytest.fixture
def client(app_with_handlers: FastAPI) -> TestClient:
    return TestClient(app_with_handlers)


class TestAppErrorHandler:
    """Test handler for AppError and subclasses."""

    def test_validation_error_returns_400(self, client: TestClient, app_with_handlers: FastAPI):
        @app_with_handlers.get("/test-validation")
        async def test_endpoint():
            raise ValidationAppError(code="test_validation", message="Test validation error")

        response = client.get("/test-validation")

        assert response.status_code == 400
        data = response.json()
        assert data["error"]["code"] == "test_validation"
        assert data["error"]["message"] == "Test validation error"
        assert "request_id" in data["error"]
        assert "details" not in data["error"]

    def test_authentication_error_returns_403(self, client: TestClient, app_with_handlers: FastAPI):
        @app_with_handlers.get("/test-auth")
        async def test_endpoint():
            raise AuthenticationAppError(code="invalid_api_key", message="Invalid or missing API key")

        response = client.get("/test-auth")

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "invalid_api_key"

    def test_cache_error_returns_503_with_details(self, client: TestClient, app_with_handlers: FastAPI):
        @app_with_handlers.get("/test-cache")
        async def test_endpoint():
            raise CacheError(
                code="cache_invalid_ttl",
                message="Cache TTL must be positive",
                details={"operation": "set", "ttl_seconds": 0.0},
            )

        response = client.get("/test-cache")

        assert response.status_code == 503
        data = response.json()
        assert data["error"]["code"] == "cache_invalid_ttl"
        assert data["error"]["details"]["operation"] == "set"


class TestGeneralExceptionHandler:
    """Test fallback handler for unexpected exceptions."""

    def test_general_exception_handler_hides_internals(self):
        request = AsyncMock()
        request.url.path = "/test"
        request.method = "GET"

        exc = RuntimeError("Unexpected error: redis connection refused")
        response = asyncio.run(general_exception_handler(request, exc))

        body = bytes(response.body).decode()
        data = json.loads(body)
        assert response.status_code == 500
        assert data["error"]["code"] == "internal_server_error"
        assert "redis" not in body
        assert "RuntimeError" not in body

    def test_unhandled_exception_in_route_returns_500(self, app_with_handlers: FastAPI):
        @app_with_handlers.get("/boom")
        async def boom():
            raise KeyError("secret-internal-key")

        client = TestClient(app_with_handlers, raise_server_exceptions=False)
        response = client.get("/boom")

        assert response.status_code == 500
        assert "secret-internal-key" not in response.text


def test_setup_exception_handlers_registers_handlers(app_with_handlers: FastAPI):
    assert AppError in app_with_handlers.exception_handlers
    assert Exception in app_with_handlers.exception_handlers


def test_app_error_str_is_message():
    err = CacheError(code="cache_unavailable", message="Counter store unavailable")
    assert str(err) == "Counter store unavailable"
    assert isinstance(err, AppError)
