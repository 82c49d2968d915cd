"""Tests for HTTP middleware — security headers, request IDs, counter.

Learn: There is no Redis in tests, so the rate limiter normally skips
itself. The rate limit tests swap get_redis for an in-memory counter
to drive the 429 path and the separate auth bucket.
"""

import pytest

from issuehub.config import settings
from issuehub.middleware import rate_limit
from issuehub.middleware.request_counter import RequestCounter


class CountingRedis:
    """Just enough of redis.asyncio.Redis for the fixed-window limiter."""

    def __init__(self, fail: bool = False):
        self.counts: dict[str, int] = {}
        self.fail = fail

    async def incr(self, key: str) -> int:
        if self.fail:
            raise ConnectionError("redis went away")
        self.counts[key] = self.counts.get(key, 0) + 1
        return self.counts[key]

    async def expire(self, key: str, seconds: int) -> bool:
        return True


@pytest.mark.asyncio
async def test_security_headers_on_health(client):
    """Health endpoint returns security headers."""
    r = await client.get("/api/v1/health")
    assert r.status_code == 200
    assert r.headers["X-Content-Type-Options"] == "nosniff"
    assert r.headers["X-Frame-Options"] == "DENY"
    assert r.headers["Referrer-Policy"] == "strict-origin-when-cross-origin"
    assert "Cache-Control" not in r.headers


@pytest.mark.asyncio
async def test_auth_routes_not_cached(client):
    r = await client.post("/api/v1/auth/login", json={})
    assert r.status_code == 400
    assert r.headers["Cache-Control"] == "no-store"


@pytest.mark.asyncio
async def test_request_id_generated(client):
    """Each request gets a unique X-Request-ID header."""
    r1 = await client.get("/api/v1/health")
    r2 = await client.get("/api/v1/health")
    assert "X-Request-ID" in r1.headers
    assert "X-Request-ID" in r2.headers
    assert r1.headers["X-Request-ID"] != r2.headers["X-Request-ID"]


@pytest.mark.asyncio
async def test_request_id_propagated(client):
    """Incoming X-Request-ID is propagated through the response."""
    custom_id = "test-trace-12345"
    r = await client.get(
        "/api/v1/health",
        headers={"X-Request-ID": custom_id},
    )
    assert r.headers["X-Request-ID"] == custom_id


@pytest.mark.asyncio
async def test_oversized_request_id_replaced(client):
    r = await client.get("/api/v1/health", headers={"X-Request-ID": "x" * 500})
    assert r.headers["X-Request-ID"] != "x" * 500


@pytest.mark.asyncio
async def test_no_hsts_on_http(client):
    """HSTS header is NOT set on HTTP connections (only HTTPS)."""
    r = await client.get("/api/v1/health")
    assert "Strict-Transport-Security" not in r.headers


@pytest.mark.asyncio
async def test_error_responses_have_headers(client):
    """Failures raised in dependencies still pass through the middleware."""
    r = await client.get("/api/v1/me")
    assert r.status_code == 401
    assert r.headers["X-Content-Type-Options"] == "nosniff"
    assert "X-Request-ID" in r.headers


def test_request_counter_standalone():
    counter = RequestCounter()
    assert counter.value == 0
    assert counter.increment() == 1
    assert counter.increment() == 2
    assert counter.value == 2


# ═══════════════════════════════════════════════════════════
# Rate limiting (Redis stubbed)
# ═══════════════════════════════════════════════════════════


@pytest.fixture()
def frozen_window(monkeypatch):
    """Pin the clock so every request lands in the same one-minute window."""
    monkeypatch.setattr(rate_limit.time, "time", lambda: 1_700_000_000.0)


@pytest.mark.asyncio
@pytest.mark.parametrize("path", ["/api/v1/auth/login", "/api/v1/auth/signup"])
async def test_auth_routes_get_strict_limit(client, monkeypatch, frozen_window, path):
    redis = CountingRedis()
    monkeypatch.setattr(rate_limit, "get_redis", lambda: redis)

    for _ in range(settings.rate_limit_auth_rpm):
        r = await client.post(path, json={})
        assert r.status_code == 400
        assert r.headers["X-RateLimit-Limit"] == str(settings.rate_limit_auth_rpm)

    r = await client.post(path, json={})
    assert r.status_code == 429
    assert r.headers["Retry-After"] == "60"
    assert all(":auth:" in key for key in redis.counts)


@pytest.mark.asyncio
async def test_api_bucket_separate_from_auth(client, monkeypatch, frozen_window):
    redis = CountingRedis()
    monkeypatch.setattr(rate_limit, "get_redis", lambda: redis)

    for _ in range(settings.rate_limit_auth_rpm + 1):
        await client.post("/api/v1/auth/login", json={})

    r = await client.get("/api/v1/health")
    assert r.status_code == 200
    assert r.headers["X-RateLimit-Limit"] == str(settings.rate_limit_rpm)
    assert r.headers["X-RateLimit-Remaining"] == str(settings.rate_limit_rpm - 1)


@pytest.mark.asyncio
async def test_redis_errors_do_not_block(client, monkeypatch):
    monkeypatch.setattr(rate_limit, "get_redis", lambda: CountingRedis(fail=True))
    r = await client.get("/api/v1/health")
    assert r.status_code == 200
    assert "X-RateLimit-Limit" not in r.headers
