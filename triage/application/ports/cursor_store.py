"""Cursor store port.

This module defines the protocol for persisting the review cursor, a
single integer that survives process restarts. The persisted layout is
exactly one named integer entry; an absent entry reads as 0.

Unlike the record provider, this port is synchronous: the review queue
writes the cursor as the last step of a command, before the command
returns.

Usage:
    store: CursorStoreProtocol = SqlCursorStore(engine)
    store.save_cursor(3)
    assert store.load_cursor() == 3
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

DEFAULT_CURSOR_KEY = "current_record_index"


@runtime_checkable
class CursorStoreProtocol(Protocol):
    """Protocol for durable single-integer cursor storage.

    The stored value is not validated here; the review queue clamps it
    against the loaded records once loading completes.
    """

    def load_cursor(self) -> int:
        """Read the last saved cursor.

        Returns:
            The last value passed to save_cursor(), or 0 if none was saved.
        """
        ...

    def save_cursor(self, value: int) -> None:
        """Durably overwrite the saved cursor.

        Args:
            value: Cursor value to store.
        """
        ...


__all__ = ["CursorStoreProtocol", "DEFAULT_CURSOR_KEY"]
