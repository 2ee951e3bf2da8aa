"""Logging middleware for correlation ID propagation.

This middleware handles correlation ID management for HTTP requests:
- Extracts correlation ID from incoming X-Correlation-ID header
- Generates new correlation ID if not present
- Sets correlation ID in context so review queue logs carry it
- Includes correlation ID in response headers
- Logs request start/end with timing

Usage:
    from fastapi import FastAPI
    from triage.api.middleware.logging_middleware import LoggingMiddleware

    app = FastAPI()
    app.add_middleware(LoggingMiddleware)
"""

import time
from collections.abc import Awaitable, Callable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from triage.infrastructure.observability.correlation import correlation_scope

# Header name for correlation ID
CORRELATION_HEADER = "X-Correlation-ID"


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for correlation ID propagation and request logging.

    All downstream services and loggers can access the correlation ID
    via get_correlation_id() from the observability module.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        """Process request with correlation ID and logging.

        Args:
            request: Incoming HTTP request.
            call_next: Next middleware or route handler.

        Returns:
            HTTP response with correlation ID header added.
        """
        with correlation_scope(request.headers.get(CORRELATION_HEADER)) as correlation_id:
            response = await self._handle(request, call_next, correlation_id)
        response.headers[CORRELATION_HEADER] = correlation_id
        return response

    async def _handle(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
        correlation_id: str,
    ) -> Response:
        """Call the route and log its start, outcome and timing."""
        log = structlog.get_logger().bind(
            correlation_id=correlation_id,
            method=request.method,
            path=request.url.path,
        )
        log.info("request_started")

        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as exc:
            duration_ms = (time.perf_counter() - start_time) * 1000
            log.exception(
                "request_failed",
                duration_ms=round(duration_ms, 2),
                error_type=type(exc).__name__,
            )
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000
        log.info(
            "request_completed",
            status_code=response.status_code,
            duration_ms=round(duration_ms, 2),
        )
        return response
