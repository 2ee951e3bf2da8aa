"""Database engine bootstrap (SQLAlchemy).

Provides the engine backing the cursor store. The cursor is one integer
read at startup and written after each cursor command, so a synchronous
engine is used; SQLite works out of the box with the stdlib driver.

Environment Variables:
- TRIAGE_DATABASE_URL: SQLAlchemy URL (read through ReviewConfig)
- SQLALCHEMY_ECHO: Set to 1/true/yes to log emitted SQL

Usage:
    from triage.bootstrap.database import get_engine

    engine = get_engine("sqlite:///triage.db")
    store = SqlCursorStore(engine)
"""

from __future__ import annotations

import os

from sqlalchemy import Engine, create_engine
from sqlalchemy.pool import StaticPool
from structlog import get_logger

logger = get_logger()

_engine: Engine | None = None
_engine_url: str | None = None


def _mask_url(url: str) -> str:
    """Hide the password part of a connection URL for logging."""
    if "@" not in url:
        return url
    before_at, after_at = url.split("@", 1)
    if ":" in before_at.split("//", 1)[-1]:
        user_part = before_at.rsplit(":", 1)[0]
        return f"{user_part}:***@{after_at}"
    return url


def create_database_engine(url: str) -> Engine:
    """Create a new engine for the given URL.

    In-memory SQLite URLs share a single connection so every checkout sees
    the same database.

    Args:
        url: SQLAlchemy database URL.

    Returns:
        A new SQLAlchemy Engine.
    """
    echo = os.environ.get("SQLALCHEMY_ECHO", "").lower() in ("1", "true", "yes")

    if url in ("sqlite://", "sqlite:///:memory:"):
        return create_engine(
            url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    if url.startswith("sqlite"):
        return create_engine(url, echo=echo, connect_args={"check_same_thread": False})
    return create_engine(url, echo=echo, pool_pre_ping=True)


def get_engine(url: str) -> Engine:
    """Get the shared SQLAlchemy engine.

    Creates a singleton engine on first call. Asking for a different URL
    disposes the previous engine and replaces it.

    Args:
        url: SQLAlchemy database URL.

    Returns:
        The shared Engine.
    """
    global _engine, _engine_url

    if _engine is None or _engine_url != url:
        log = logger.bind(component="database_bootstrap")
        if _engine is not None:
            _engine.dispose()

        log.info("creating_database_engine", url=_mask_url(url))
        _engine = create_database_engine(url)
        _engine_url = url

    return _engine


def reset_database_bootstrap() -> None:
    """Dispose and forget the shared engine (for testing and shutdown)."""
    global _engine, _engine_url
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _engine_url = None
