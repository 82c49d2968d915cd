"""FastAPI application factory.

Learn: App factory pattern — create_app() returns a configured FastAPI
instance. Lifespan manages startup/shutdown (Redis, database engine).
Middleware, CORS, exception handlers and routers all registered here.

Every failure raised by the auth core, validation or services is an
IssueHubError subclass; one handler turns those into
{"detail": message} with the right status. Storage errors become a
bare 500 "Database error" — driver messages never reach clients.
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from issuehub import __version__
from issuehub.api import api_router
from issuehub.config import settings
from issuehub.errors import AuthFailure, IssueHubError
from issuehub.logging_setup import configure_logging

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Learn: Anything before `yield` runs at startup, after `yield` runs at shutdown.
    """
    logger.info(
        "issuehub.starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
    )

    from issuehub.db.redis_pool import close_redis, init_redis
    try:
        await init_redis()
        logger.info("issuehub.redis_connected", url=settings.redis_url)
    except Exception as e:
        # Redis is optional — only rate limiting depends on it
        logger.warning("issuehub.redis_unavailable", error=str(e))

    yield

    logger.info("issuehub.shutdown")
    await close_redis()

    from issuehub.db.engine import engine
    await engine.dispose()


# ─── Exception handlers ──────────────────────────────────


async def issuehub_error_handler(request: Request, exc: IssueHubError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthFailure) else None
    if exc.status_code >= 500:
        logger.error("request.internal_error", error=exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message},
        headers=headers,
    )


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("request.database_error", error_type=type(exc).__name__, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Database error"})


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Body/query shape errors are client faults like any other: 400."""
    return JSONResponse(status_code=400, content={"detail": "Invalid request"})


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    configure_logging(settings.log_level, settings.log_json)

    app = FastAPI(
        title="issuehub",
        description="Multi-tenant issue tracking API",
        version=__version__,
        lifespan=lifespan,
    )

    # ── Middleware stack ──────────────────────────────────────
    # Note: Starlette middleware executes in reverse order of registration.
    # Request flow: RequestId → Counter → Security → RateLimit → CORS → handler

    from issuehub.middleware.rate_limit import RateLimitMiddleware
    from issuehub.middleware.request_counter import RequestCounterMiddleware
    from issuehub.middleware.request_id import RequestIdMiddleware
    from issuehub.middleware.security import SecurityHeadersMiddleware

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,  # bearer tokens, not cookies
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
        max_age=3600,
    )
    app.add_middleware(
        RateLimitMiddleware,
        default_rpm=settings.rate_limit_rpm,
        auth_rpm=settings.rate_limit_auth_rpm,
    )
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestCounterMiddleware)
    app.add_middleware(RequestIdMiddleware)

    app.add_exception_handler(IssueHubError, issuehub_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    app.include_router(api_router)

    return app


# Default app instance (used by uvicorn: issuehub.main:app)
app = create_app()
