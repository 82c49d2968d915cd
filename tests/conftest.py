"""Test fixtures — a fresh in-memory database per test.

Learn: Testing pattern for async SQLAlchemy + FastAPI:

1. Settings are read from the environment at import time, so the test
   database URL and cheap bcrypt rounds are set *before* issuehub is
   imported.
2. Each test gets its own in-memory SQLite engine. StaticPool keeps one
   connection alive, so every session in the test sees the same data.
3. get_db is overridden to hand out sessions from that engine. The real
   auth pipeline stays in place: tests sign up users and send real
   bearer tokens, exactly like a client would.

Redis is never initialized (ASGITransport doesn't run the lifespan), so
the rate limiter is a no-op here.
"""

import os

os.environ["ISSUEHUB_DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["ISSUEHUB_BCRYPT_ROUNDS"] = "4"
os.environ["ISSUEHUB_ENVIRONMENT"] = "development"

import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from issuehub.db.engine import get_db  # noqa: E402
from issuehub.db.models import Base  # noqa: E402
from issuehub.main import app  # noqa: E402

TEST_DB_URL = "sqlite+aiosqlite://"
PASSWORD = "correct-horse-battery"


@pytest_asyncio.fixture()
async def session_factory():
    """Per-test engine with all tables created."""
    engine = create_async_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest_asyncio.fixture()
async def db_session(session_factory):
    """Direct session for service- and oracle-level tests."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture()
async def client(session_factory):
    """HTTP client wired to the per-test database. Auth is NOT mocked."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture()
async def signup(client):
    """Factory: sign up a user, return (user_json, auth_headers).

    Learn: Returning a factory lets one test create as many distinct
    users as the scenario needs (owner, member, outsider).
    """

    async def _signup(email: str, name: str | None = None):
        r = await client.post(
            "/api/v1/auth/signup",
            json={"email": email, "name": name or email.split("@")[0], "password": PASSWORD},
        )
        assert r.status_code == 201, r.text
        body = r.json()
        return body["user"], {"Authorization": f"Bearer {body['token']}"}

    return _signup


@pytest_asyncio.fixture()
async def create_org(client):
    """Factory: create an organization as the given user, return its JSON."""

    async def _create(headers: dict, name: str = "Acme", key: str = "ACME"):
        r = await client.post(
            "/api/v1/organizations",
            json={"name": name, "key": key},
            headers=headers,
        )
        assert r.status_code == 201, r.text
        return r.json()

    return _create


@pytest_asyncio.fixture()
async def create_issue(client):
    """Factory: create an issue in an organization, return its JSON."""

    async def _create(headers: dict, org_id: str, **fields):
        body = {
            "organization_id": org_id,
            "title": "Set up project",
            "description": "Initialize repo and CI.",
            "status": "todo",
            **fields,
        }
        r = await client.post("/api/v1/issues", json=body, headers=headers)
        assert r.status_code == 201, r.text
        return r.json()

    return _create
