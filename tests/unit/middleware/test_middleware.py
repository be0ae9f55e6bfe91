"""Unit tests for middleware."""

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from api.middleware.logging import RequestLoggingMiddleware
from api.middleware.request_id import RequestIDMiddleware, resolve_request_id
from api.middleware.security import SecurityHeadersMiddleware


def _create_app_with_middleware() -> FastAPI:
    app = FastAPI()
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/test")
    async def _():
        return {"ok": True}

    @app.post("/api/v1/guest/content")
    async def _guest():
        return {"ok": True}

    return app


async def _request(method: str, path: str, **kwargs):
    transport = ASGITransport(app=_create_app_with_middleware())
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        return await c.request(method, path, **kwargs)


class TestSecurityHeadersMiddleware:
    @pytest.mark.asyncio
    async def test_baseline_headers(self):
        response = await _request("GET", "/test")

        assert response.headers["x-content-type-options"] == "nosniff"
        assert response.headers["x-frame-options"] == "DENY"
        assert response.headers["referrer-policy"] == "strict-origin-when-cross-origin"
        assert "cache-control" not in response.headers

    @pytest.mark.asyncio
    async def test_api_responses_not_cached(self):
        response = await _request("POST", "/api/v1/guest/content")

        assert response.headers["cache-control"] == "no-store"


class TestRequestIDMiddleware:
    @pytest.mark.asyncio
    async def test_generates_request_id_when_not_provided(self):
        response = await _request("GET", "/test")

        assert len(response.headers["x-request-id"]) == 36

    @pytest.mark.asyncio
    async def test_propagates_existing_request_id(self):
        response = await _request("GET", "/test", headers={"X-Request-ID": "custom-req-123"})

        assert response.headers["x-request-id"] == "custom-req-123"

    @pytest.mark.asyncio
    async def test_replaces_malformed_request_id(self):
        response = await _request("GET", "/test", headers={"X-Request-ID": "bad id\twith spaces"})

        assert response.headers["x-request-id"] != "bad id\twith spaces"

    def test_resolve_request_id(self):
        assert resolve_request_id("abc.DEF-123_x") == "abc.DEF-123_x"
        assert resolve_request_id("x" * 129) != "x" * 129
        assert resolve_request_id(None) != resolve_request_id(None)
