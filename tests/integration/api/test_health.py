"""
Integration tests for service endpoints.

Tests the /api/hello, /api/health and /api/status endpoints.
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, Mock, patch

import pytest


class TestHealthEndpoints:
    """Tests for health check endpoints."""

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_hello(self, async_client):
        response = await async_client.get("/api/hello")

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["message"] == "Hello World"
        assert data["timestamp"].endswith("Z")

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_health_endpoint(self, async_client):
        """Health never consults the stores."""
        with patch("docversions.api.health.document_table") as mock_table:
            mock_table.ping = AsyncMock(return_value=False)

            response = await async_client.get("/api/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        reported = datetime.fromisoformat(data["timestamp"].replace("Z", "+00:00"))
        assert abs((datetime.now(timezone.utc) - reported).total_seconds()) < 5
        mock_table.ping.assert_not_awaited()

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_status_endpoint(self, async_client, mock_gcs_client):
        with patch("docversions.api.health.document_table") as mock_table, patch(
            "docversions.api.health.get_gcs_client", return_value=mock_gcs_client
        ):
            mock_table.ping = AsyncMock(return_value=True)

            response = await async_client.get("/api/status")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["services"]["key_value_store"]["status"] == "connected"
        assert data["services"]["object_store"]["bucket"] == "test-bucket"

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_status_degraded(self, async_client):
        storage = Mock()
        storage.health_check_async = AsyncMock(return_value=False)

        with patch("docversions.api.health.document_table") as mock_table, patch(
            "docversions.api.health.get_gcs_client", return_value=storage
        ):
            mock_table.ping = AsyncMock(return_value=True)

            response = await async_client.get("/api/status")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "degraded"
        assert data["services"]["object_store"]["status"] == "unavailable"

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_process_time_header(self, async_client):
        response = await async_client.get("/api/health")

        assert "x-process-time" in response.headers
