"""Per-process request counter for the health/diagnostics endpoints.

Learn: Purely diagnostic. It counts every request this process has
served and gates nothing. The lock makes increments safe even if
the app is ever served from multiple threads.
"""

import threading

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response


class RequestCounter:
    """Thread-safe monotonically increasing counter."""

    def __init__(self) -> None:
        self._value = 0
        self._lock = threading.Lock()

    def increment(self) -> int:
        with self._lock:
            self._value += 1
            return self._value

    @property
    def value(self) -> int:
        with self._lock:
            return self._value


# Process-wide instance, read by api/health.py
request_counter = RequestCounter()


class RequestCounterMiddleware(BaseHTTPMiddleware):
    """Count every inbound request before it is handled."""

    def __init__(self, app, counter: RequestCounter = request_counter):
        super().__init__(app)
        self.counter = counter

    async def dispatch(self, request: Request, call_next) -> Response:
        self.counter.increment()
        return await call_next(request)
