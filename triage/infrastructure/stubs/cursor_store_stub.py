"""Cursor Store Stub for testing.

In-memory implementation of CursorStoreProtocol. Keeps every saved value
so tests can assert exactly when the review queue persisted its cursor.
"""

from __future__ import annotations

from triage.application.ports.cursor_store import CursorStoreProtocol


class CursorStoreStub(CursorStoreProtocol):
    """In-memory stub implementation of CursorStoreProtocol.

    Example:
        >>> store = CursorStoreStub.with_saved_cursor(7)
        >>> store.load_cursor()
        7
    """

    def __init__(self, initial: int | None = None) -> None:
        """Initialize the stub.

        Args:
            initial: Pre-saved cursor value; None means nothing saved yet.
        """
        self._value: int | None = initial
        self._save_history: list[int] = []
        self._load_count = 0

    def load_cursor(self) -> int:
        """Return the saved value, or 0 when nothing was saved."""
        self._load_count += 1
        return 0 if self._value is None else self._value

    def save_cursor(self, value: int) -> None:
        """Overwrite the saved value."""
        self._value = value
        self._save_history.append(value)

    # Test helper methods

    def get_save_history(self) -> list[int]:
        """Every value saved, in order (test helper)."""
        return list(self._save_history)

    @property
    def save_count(self) -> int:
        """Number of save_cursor() calls."""
        return len(self._save_history)

    @property
    def load_count(self) -> int:
        """Number of load_cursor() calls."""
        return self._load_count

    @property
    def has_saved_value(self) -> bool:
        """True once a value exists in the store."""
        return self._value is not None

    def reset(self) -> None:
        """Forget the saved value and history (test helper)."""
        self._value = None
        self._save_history.clear()
        self._load_count = 0

    @classmethod
    def with_saved_cursor(cls, value: int) -> CursorStoreStub:
        """Factory for a store that already holds a cursor.

        Args:
            value: The previously saved cursor.

        Returns:
            CursorStoreStub returning value from load_cursor().
        """
        return cls(initial=value)
