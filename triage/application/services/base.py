"""Base service logging mixin.

Every log line a service emits carries the service class, its component
and, when one is active, the correlation ID of the request or startup run
that triggered it. Services can also expose a small slice of their own
state through _log_context(), which is bound to every operation logger.
For the review queue that is the load state, so entries written while
records are still streaming in can be told apart from steady-state ones.

Usage:
    from triage.application.services.base import LoggingMixin

    class MyService(LoggingMixin):
        def __init__(self, dependency: SomePort) -> None:
            self._dependency = dependency
            self._init_logger(component="review")

        def _log_context(self) -> dict[str, object]:
            return {"phase": self._phase}

        def do_something(self, identifier: str) -> None:
            log = self._log_operation("do_something", identifier=identifier)
            log.info("something_done")
"""

import structlog

from triage.infrastructure.observability.correlation import get_correlation_id

DEFAULT_COMPONENT = "review"


class LoggingMixin:
    """Mixin providing structured logging for services.

    Attributes:
        _log: Logger bound with service and component.
    """

    _log: structlog.BoundLogger

    def _init_logger(self, component: str = DEFAULT_COMPONENT) -> None:
        """Bind the service logger. Call at the end of __init__."""
        self._log = structlog.get_logger().bind(
            service=type(self).__name__,
            component=component,
        )

    def _log_context(self) -> dict[str, object]:
        """State bound to every operation logger; empty unless overridden."""
        return {}

    def _log_operation(self, operation: str, **context: object) -> structlog.BoundLogger:
        """Create an operation-scoped logger.

        Explicit context wins over _log_context(). The correlation ID is
        bound only when one is active.

        Args:
            operation: Name of the command being run.
            **context: Extra fields, typically the record identifier.

        Returns:
            BoundLogger for this operation.
        """
        fields: dict[str, object] = {"operation": operation, **self._log_context(), **context}
        correlation_id = get_correlation_id()
        if correlation_id:
            fields["correlation_id"] = correlation_id
        return self._log.bind(**fields)
