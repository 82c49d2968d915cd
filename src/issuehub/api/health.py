"""Health check endpoints.

Learn: /health verifies the server is running and the database is
reachable, and reports the per-process request counter. /diagnostics
returns just the counter. Neither requires authentication.
"""

import time

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from issuehub import __version__
from issuehub.db.engine import get_db
from issuehub.middleware.request_counter import request_counter

router = APIRouter()


@router.get("/health")
async def health_check(db: AsyncSession = Depends(get_db)):
    """Check server health and database connectivity."""
    started = time.perf_counter()
    checks = {"server": "ok", "version": __version__}

    try:
        await db.execute(text("SELECT 1"))
        checks["database"] = "ok"
    except Exception as e:
        checks["database"] = f"error: {type(e).__name__}"

    status = "healthy" if checks["database"] == "ok" else "degraded"
    return {
        "status": status,
        **checks,
        "latency_ms": round((time.perf_counter() - started) * 1000, 2),
        "request_count": request_counter.value,
    }


@router.get("/diagnostics")
async def diagnostics():
    return {"request_count": request_counter.value}
