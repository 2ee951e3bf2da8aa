"""SQL cursor store adapter.

Persists the review cursor as a single row in a key/value settings table:

    review_settings(key TEXT PRIMARY KEY, value INTEGER NOT NULL)

Saving is an upsert on the key, so the table never holds more than one
row per cursor key. The statements run on SQLite and PostgreSQL.
"""

from __future__ import annotations

from sqlalchemy import Engine, text

from triage.application.ports.cursor_store import DEFAULT_CURSOR_KEY, CursorStoreProtocol
from triage.infrastructure.observability.logging import get_logger_for_service

SETTINGS_TABLE = "review_settings"


class SqlCursorStore(CursorStoreProtocol):
    """Cursor store backed by a SQL settings table.

    Attributes:
        _engine: SQLAlchemy engine for the settings database.
        _key: Row key under which the cursor is stored.
    """

    def __init__(self, engine: Engine, key: str = DEFAULT_CURSOR_KEY) -> None:
        """Initialize the store and create the settings table if missing.

        Args:
            engine: SQLAlchemy engine to use.
            key: Row key for the cursor.
        """
        self._engine = engine
        self._key = key
        self._log = get_logger_for_service(
            "SqlCursorStore", component="cursor_store"
        ).bind(key=key)
        self.ensure_schema()

    @property
    def key(self) -> str:
        """Row key under which the cursor is stored."""
        return self._key

    def ensure_schema(self) -> None:
        """Create the settings table if it does not exist."""
        with self._engine.begin() as conn:
            conn.execute(
                text(f"""
                    CREATE TABLE IF NOT EXISTS {SETTINGS_TABLE} (
                        key TEXT PRIMARY KEY,
                        value INTEGER NOT NULL
                    )
                """)
            )

    def load_cursor(self) -> int:
        """Read the saved cursor.

        Returns:
            The saved value, or 0 when no value was saved yet.
        """
        with self._engine.connect() as conn:
            result = conn.execute(
                text(f"SELECT value FROM {SETTINGS_TABLE} WHERE key = :key"),
                {"key": self._key},
            )
            value = result.scalar_one_or_none()

        if value is None:
            self._log.debug("cursor_not_saved")
            return 0
        return int(value)

    def save_cursor(self, value: int) -> None:
        """Overwrite the saved cursor."""
        with self._engine.begin() as conn:
            conn.execute(
                text(f"""
                    INSERT INTO {SETTINGS_TABLE} (key, value)
                    VALUES (:key, :value)
                    ON CONFLICT (key) DO UPDATE SET value = excluded.value
                """),
                {"key": self._key, "value": value},
            )
        self._log.debug("cursor_saved", value=value)
