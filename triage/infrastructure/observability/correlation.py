"""Correlation IDs for review commands.

A correlation ID ties together every log line caused by one HTTP request
or one startup run: the request log, the queue command, and the provider
and cursor store calls it makes. The ID lives in a contextvar so it
follows the command across await points and into tasks spawned from it.

correlation_scope() is the normal entry point. It restores the previous
ID on exit, so an ID never outlives the request or startup run it
belongs to.

Usage:
    with correlation_scope(request.headers.get("X-Correlation-ID")) as cid:
        response = await call_next(request)

    # In structlog configuration
    processors = [..., correlation_id_processor, ...]
"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token
from typing import Any
from uuid import uuid4

# Empty string means "no active correlation"
_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


def generate_correlation_id() -> str:
    """Return a new UUID4 string."""
    return str(uuid4())


def get_correlation_id() -> str:
    """Return the active correlation ID, or "" outside any scope."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str) -> Token[str]:
    """Activate a correlation ID in the current context.

    Args:
        correlation_id: ID to activate; "" clears it.

    Returns:
        Token for reset_correlation_id().
    """
    return _correlation_id.set(correlation_id)


def reset_correlation_id(token: Token[str]) -> None:
    """Restore the correlation ID that was active before set_correlation_id()."""
    _correlation_id.reset(token)


@contextmanager
def correlation_scope(correlation_id: str | None = None) -> Iterator[str]:
    """Run a block under one correlation ID.

    Args:
        correlation_id: Incoming ID (e.g. from a request header). Blank or
            None generates a new one.

    Yields:
        The active correlation ID.
    """
    active = correlation_id or generate_correlation_id()
    token = set_correlation_id(active)
    try:
        yield active
    finally:
        reset_correlation_id(token)


def correlation_id_processor(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Structlog processor adding the active correlation ID.

    An ID already bound on the logger (as LoggingMixin does) is kept.
    """
    correlation_id = get_correlation_id()
    if correlation_id:
        event_dict.setdefault("correlation_id", correlation_id)
    return event_dict
