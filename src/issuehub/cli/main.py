"""issuehub CLI — run the server, create tables, seed demo data.

Usage:
    issuehub serve --reload             # Run the API with uvicorn
    issuehub init-db                    # Create tables (local dev; prod uses alembic)
    issuehub seed                       # Wipe and load demo users/orgs/issues
    issuehub ping                       # Hit /api/v1/health on a running server
"""

from __future__ import annotations

import asyncio
import json
import os
import sys

import click
import httpx

from issuehub import __version__

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

DEFAULT_API_URL = "http://localhost:3001"

SEED_PASSWORD = "Password123!"

SEED_USERS = [
    ("alice@example.com", "Alice"),
    ("boris@example.com", "Boris"),
    ("cecilie@example.com", "Cecilie"),
    ("david@example.com", "David"),
    ("eva@example.com", "Eva"),
]

SEED_ORGS = [
    ("Acme", "ACME"),
    ("Orbit", "ORBT"),
    ("Nimbus", "NIMB"),
    ("Kite", "KITE"),
    ("Vertex", "VRTX"),
]


def _api_url() -> str:
    return os.environ.get("ISSUEHUB_API_URL", DEFAULT_API_URL).rstrip("/")


def _pretty_json(data: dict | list) -> str:
    return json.dumps(data, indent=2, default=str)


# ---------------------------------------------------------------------------
# Database helpers
# ---------------------------------------------------------------------------


async def _create_tables() -> None:
    from issuehub.db.engine import engine
    from issuehub.db.models import Base

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    await engine.dispose()


async def _seed() -> dict[str, int]:
    """Replace all data with a small demo dataset. Returns row counts."""
    from sqlalchemy import delete

    from issuehub.auth.password import hash_password
    from issuehub.db.engine import async_session_factory, engine
    from issuehub.db.models import Issue, Organization, OrganizationMember, User
    from issuehub.validation import normalize_status

    async with async_session_factory() as db:
        for model in (Issue, OrganizationMember, Organization, User):
            await db.execute(delete(model))

        password_hash = hash_password(SEED_PASSWORD)
        users = [
            User(email=email, name=name, password_hash=password_hash)
            for email, name in SEED_USERS
        ]
        db.add_all(users)
        await db.flush()

        owner = users[0]
        orgs = []
        for name, key in SEED_ORGS:
            org = Organization(name=name, key=key, owner_id=owner.id)
            org.members = [OrganizationMember(user_id=owner.id)]
            orgs.append(org)
        db.add_all(orgs)
        await db.flush()

        acme, orbit = orgs[0], orgs[1]
        setup = Issue(
            organization_id=acme.id,
            title="Set up project",
            description="Initialize repo, CI, and basic structure.",
            status="todo",
        )
        search = Issue(
            organization_id=orbit.id,
            title="Issue search",
            description="Add text search on issue title and description.",
            status="todo",
        )
        db.add_all([setup, search])
        await db.flush()

        children = [
            (acme, "Create login screen", "Add login UI and token storage.", "in_progress", setup),
            (acme, "Create organization flow", "Allow creating org and switching between orgs.", "todo", setup),
            (orbit, "Sub-issues", "Support parent_issue_id and show children in details.", "todo", search),
            # legacy status, stored as in_review
            (orbit, "Polish UI", "Make it fast, clean, keyboard-friendly.", "backlog", None),
        ]
        for org, title, description, status, parent in children:
            db.add(
                Issue(
                    organization_id=org.id,
                    title=title,
                    description=description,
                    status=normalize_status(status),
                    parent_issue_id=parent.id if parent else None,
                )
            )
        await db.commit()

    await engine.dispose()
    return {"users": len(users), "organizations": len(orgs), "issues": 2 + len(children)}


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version=__version__, prog_name="issuehub")
def main():
    """issuehub — multi-tenant issue tracking API."""


@main.command()
@click.option("--host", default=None, help="Bind address (default: ISSUEHUB_HOST)")
@click.option("--port", "-p", type=int, default=None, help="Port (default: ISSUEHUB_PORT)")
@click.option("--reload", is_flag=True, help="Auto-reload on code changes")
def serve(host: str | None, port: int | None, reload: bool):
    """Run the API server."""
    import uvicorn

    from issuehub.config import settings

    uvicorn.run(
        "issuehub.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


@main.command("init-db")
def init_db():
    """Create all tables that don't exist yet."""
    asyncio.run(_create_tables())
    click.secho("Tables created.", fg="green")


@main.command()
@click.confirmation_option(prompt="This deletes ALL users, organizations and issues. Continue?")
def seed():
    """Wipe the database and load demo data."""
    counts = asyncio.run(_seed())
    click.secho("Seed complete.", fg="green")
    for name, count in counts.items():
        click.echo(f"  {name:14s} {count}")
    click.echo(f"  password for every seeded user: {SEED_PASSWORD}")


@main.command()
def ping():
    """Check a running server's /api/v1/health."""
    url = f"{_api_url()}/api/v1/health"
    try:
        r = httpx.get(url, timeout=5.0)
    except httpx.HTTPError as e:
        click.secho(f"Error: {url} not reachable ({e})", fg="red", err=True)
        sys.exit(1)

    if not r.headers.get("content-type", "").startswith("application/json"):
        click.secho(
            f"Error: {url} answered {r.status_code} without a JSON body",
            fg="red",
            err=True,
        )
        sys.exit(1)

    health = r.json()
    color = "green" if health.get("status") == "healthy" else "yellow"
    click.secho(f"{health.get('status', 'unknown')}", fg=color, bold=True)
    click.echo(_pretty_json(health))
    if r.status_code != 200:
        sys.exit(1)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    main()
