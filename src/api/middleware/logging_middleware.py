"""Request logging and correlation id propagation.

For every HTTP request the middleware:
- Reuses the caller's X-Correlation-ID or generates one
- Binds correlation id, team and user to structlog's context variables,
  so service logs emitted while handling the request carry them too
- Logs ``request_started`` and ``request_completed`` with timing
- Echoes the id back in the response header

Usage:
    app.add_middleware(LoggingMiddleware)
"""

import time
from typing import Awaitable, Callable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from src.bootstrap.correlation import (
    generate_correlation_id,
    set_correlation_id,
)

CORRELATION_HEADER = "X-Correlation-ID"

logger = structlog.get_logger(__name__)


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)


class LoggingMiddleware(BaseHTTPMiddleware):
    """Correlation id and access logging for every request."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """Run the request inside a correlation context.

        Args:
            request: Incoming HTTP request.
            call_next: Next middleware or route handler.

        Returns:
            The handler's response with X-Correlation-ID set.
        """
        correlation_id = request.headers.get(CORRELATION_HEADER) or generate_correlation_id()
        set_correlation_id(correlation_id)

        with structlog.contextvars.bound_contextvars(
            team_id=request.headers.get("X-Team-Id"),
            user_id=request.headers.get("X-User-Id"),
        ):
            log = logger.bind(method=request.method, path=request.url.path)
            log.info("request_started")
            start = time.perf_counter()

            try:
                response = await call_next(request)
            except Exception as exc:
                log.exception(
                    "request_failed",
                    duration_ms=_elapsed_ms(start),
                    error_type=type(exc).__name__,
                )
                raise

            log.info(
                "request_completed",
                status_code=response.status_code,
                duration_ms=_elapsed_ms(start),
            )

        response.headers[CORRELATION_HEADER] = correlation_id
        return response
