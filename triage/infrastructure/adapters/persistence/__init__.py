"""Persistence adapters."""

from triage.infrastructure.adapters.persistence.sql_cursor_store import (
    SETTINGS_TABLE,
    SqlCursorStore,
)

__all__ = ["SqlCursorStore", "SETTINGS_TABLE"]
