"""Tests for FastAPI health and version endpoints."""

import pytest
from httpx import AsyncClient

from podcatalog.observability.events import AuditEventBus


class TestHealthEndpoint:
    """GET /health reports the API and audit worker."""

    @pytest.mark.anyio
    async def test_health_returns_200(self, client: AsyncClient) -> None:
        response = await client.get("/health")
        assert response.status_code == 200

    @pytest.mark.anyio
    async def test_health_degraded_without_worker(self, client: AsyncClient) -> None:
        data = (await client.get("/health")).json()
        assert data["status"] == "degraded"
        assert data["checks"] == {"api": True, "audit_worker": False}
        assert "environment" in data

    @pytest.mark.anyio
    async def test_health_ok_with_worker(self, client: AsyncClient, audit_bus: AuditEventBus) -> None:
        audit_bus.start()
        try:
            data = (await client.get("/health")).json()
        finally:
            await audit_bus.close()
        assert data["status"] == "ok"
        assert data["audit"]["dropped"] == 0


class TestVersionEndpoint:
    """GET /api/version returns application version info."""

    @pytest.mark.anyio
    async def test_version_returns_200(self, client: AsyncClient) -> None:
        response = await client.get("/api/version")
        assert response.status_code == 200

    @pytest.mark.anyio
    async def test_version_response_body(self, client: AsyncClient) -> None:
        response = await client.get("/api/version")
        data = response.json()
        assert data["name"] == "podcatalog"
        assert "version" in data
        assert "environment" in data
