"""Observability infrastructure for structured logging and correlation.

This module provides cross-cutting observability concerns:
- Structured JSON logging with structlog
- Correlation ID management for request tracing

Usage:
    from triage.infrastructure.observability import (
        configure_structlog,
        correlation_scope,
    )

    configure_structlog(environment="production")
    with correlation_scope(request_correlation_id):
        ...
"""

from triage.infrastructure.observability.correlation import (
    correlation_id_processor,
    correlation_scope,
    generate_correlation_id,
    get_correlation_id,
    reset_correlation_id,
    set_correlation_id,
)
from triage.infrastructure.observability.logging import (
    configure_structlog,
    get_logger_for_service,
)

__all__: list[str] = [
    "configure_structlog",
    "get_logger_for_service",
    "correlation_id_processor",
    "correlation_scope",
    "generate_correlation_id",
    "get_correlation_id",
    "reset_correlation_id",
    "set_correlation_id",
]
