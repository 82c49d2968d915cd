"""Request ID middleware — unique ID per request for tracing.

Learn: Every request gets an id, either from the incoming X-Request-ID
header (for distributed tracing) or a fresh UUID. Oversized or
non-printable incoming ids are replaced rather than echoed back.
The id, method and path are bound to structlog's contextvars so they
appear in every log entry for the request, and one "http.request"
line is logged when the response is ready.
"""

import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = structlog.get_logger()

MAX_REQUEST_ID_LENGTH = 128


def _incoming_id(request: Request) -> str:
    value = request.headers.get("X-Request-ID", "")
    if value and len(value) <= MAX_REQUEST_ID_LENGTH and value.isprintable():
        return value
    return str(uuid.uuid4())


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Generate and propagate a unique request ID."""

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = _incoming_id(request)

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        started = time.perf_counter()
        response: Response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        logger.info(
            "http.request",
            status=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
        )
        return response
