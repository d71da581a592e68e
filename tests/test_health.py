"""
MarkNote — Health and Middleware Tests
=======================================

What:  GET /health plus the cross-cutting middleware (request IDs).
"""

import logging
from unittest.mock import MagicMock, patch

import pytest

from marknote.middleware.logging import level_for_status
from marknote.middleware.request_id import RequestIdLogFilter, resolve_request_id


class TestHealth:

    @pytest.mark.asyncio
    async def test_healthy(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"
        assert body["version"]
        assert body["uptime_seconds"] >= 0

    @pytest.mark.asyncio
    async def test_database_down_is_503(self, test_client):
        broken = MagicMock()
        broken.connect.side_effect = OSError("connection refused")

        with patch("marknote.database.engine", broken):
            response = await test_client.get("/health")

        assert response.status_code == 503
        assert response.json()["status"] == "unhealthy"
        assert response.json()["database"] == "disconnected"


class TestRequestId:

    @pytest.mark.asyncio
    async def test_generated_when_absent(self, test_client):
        response = await test_client.get("/notes")

        assert len(response.headers["X-Request-ID"]) == 8

    @pytest.mark.asyncio
    async def test_client_value_echoed(self, test_client):
        response = await test_client.get("/notes", headers={"X-Request-ID": "abc123"})

        assert response.headers["X-Request-ID"] == "abc123"

    @pytest.mark.asyncio
    async def test_shown_on_error_page(self, test_client):
        response = await test_client.get(
            "/notes/not-a-uuid", headers={"X-Request-ID": "trace-404"}
        )

        assert response.status_code == 404
        assert "trace-404" in response.text

    @pytest.mark.asyncio
    async def test_malformed_client_value_replaced(self, test_client):
        response = await test_client.get("/notes", headers={"X-Request-ID": "bad id with spaces"})

        assert response.headers["X-Request-ID"] != "bad id with spaces"
        assert len(response.headers["X-Request-ID"]) == 8


class TestMiddlewareHelpers:

    def test_resolve_request_id(self):
        assert resolve_request_id("abc-123.x_y") == "abc-123.x_y"
        assert len(resolve_request_id(None)) == 8
        assert len(resolve_request_id("x" * 65)) == 8

    def test_level_for_status(self):
        assert level_for_status(200) == logging.INFO
        assert level_for_status(302) == logging.INFO
        assert level_for_status(404) == logging.WARNING
        assert level_for_status(503) == logging.ERROR

    def test_log_filter_outside_request(self):
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)

        assert RequestIdLogFilter().filter(record) is True
        assert record.request_id == "-"
