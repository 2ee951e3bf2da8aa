"""HTTP middleware for the triage API."""

from triage.api.middleware.logging_middleware import CORRELATION_HEADER, LoggingMiddleware

__all__ = ["CORRELATION_HEADER", "LoggingMiddleware"]
