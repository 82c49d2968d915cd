"""Health and diagnostics endpoint tests."""

import pytest


@pytest.mark.asyncio
async def test_health_returns_ok(client):
    """Health endpoint should return server status and version."""
    resp = await client.get("/api/v1/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["server"] == "ok"
    assert data["database"] == "ok"
    assert data["status"] == "healthy"
    assert "version" in data
    assert isinstance(data["request_count"], int)


@pytest.mark.asyncio
async def test_health_is_open(client):
    """No bearer token needed for either endpoint."""
    assert (await client.get("/api/v1/health")).status_code == 200
    assert (await client.get("/api/v1/diagnostics")).status_code == 200


@pytest.mark.asyncio
async def test_request_counter_increases(client):
    """Every request is counted, including ones that fail auth."""
    first = (await client.get("/api/v1/diagnostics")).json()["request_count"]
    await client.get("/api/v1/me")
    second = (await client.get("/api/v1/diagnostics")).json()["request_count"]
    assert second - first == 2
