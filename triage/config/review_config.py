"""Review queue configuration.

Defines where the cursor is persisted, where records are read from, and
how the record stream is batched, with environment variable overrides.

Environment Variables:
- TRIAGE_DATABASE_URL: SQLAlchemy URL of the cursor database (default: sqlite:///triage.db)
- TRIAGE_CURSOR_KEY: Name of the persisted cursor entry (default: current_record_index)
- TRIAGE_RECORDS_PATH: JSON file holding the contacts (default: contacts.json)
- TRIAGE_STREAM_BATCH_SIZE: Records per streamed batch (default: 50, min: 1, max: 1000)
- ENVIRONMENT: "production" for JSON logs, anything else for console logs
  (default: development)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from triage.application.ports.cursor_store import DEFAULT_CURSOR_KEY


def _get_int_env(key: str, default: int) -> int:
    """Get integer environment variable with default.

    Args:
        key: Environment variable name.
        default: Default value if not set or invalid.

    Returns:
        Parsed integer value or default.
    """
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


DEFAULT_DATABASE_URL = "sqlite:///triage.db"
DEFAULT_RECORDS_PATH = "contacts.json"
DEFAULT_ENVIRONMENT = "development"

# Streaming batch size bounds
DEFAULT_STREAM_BATCH_SIZE = 50
MIN_STREAM_BATCH_SIZE = 1
MAX_STREAM_BATCH_SIZE = 1000


@dataclass(frozen=True)
class ReviewConfig:
    """Configuration for the review queue and its adapters.

    Attributes:
        database_url: SQLAlchemy URL of the database holding the cursor.
        cursor_key: Name of the single persisted cursor entry.
        records_path: JSON file read by the file record provider.
        stream_batch_size: Records per streamed batch.
                          Default: 50. Minimum: 1. Maximum: 1000.
        environment: Deployment environment, selects the log renderer.
    """

    database_url: str = DEFAULT_DATABASE_URL
    cursor_key: str = DEFAULT_CURSOR_KEY
    records_path: Path = Path(DEFAULT_RECORDS_PATH)
    stream_batch_size: int = DEFAULT_STREAM_BATCH_SIZE
    environment: str = DEFAULT_ENVIRONMENT

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if not self.database_url:
            raise ValueError("database_url must not be empty")
        if not self.cursor_key:
            raise ValueError("cursor_key must not be empty")
        if not MIN_STREAM_BATCH_SIZE <= self.stream_batch_size <= MAX_STREAM_BATCH_SIZE:
            raise ValueError(
                f"stream_batch_size must be between {MIN_STREAM_BATCH_SIZE} "
                f"and {MAX_STREAM_BATCH_SIZE}, got {self.stream_batch_size}"
            )

    @property
    def is_production(self) -> bool:
        """True when running with production logging."""
        return self.environment == "production"

    @classmethod
    def from_environment(cls) -> ReviewConfig:
        """Create config from environment variables with defaults.

        Out-of-range batch sizes are clamped rather than rejected.

        Returns:
            ReviewConfig with values from environment or defaults.
        """
        batch_size = _get_int_env("TRIAGE_STREAM_BATCH_SIZE", DEFAULT_STREAM_BATCH_SIZE)
        # Clamp to valid range
        batch_size = max(MIN_STREAM_BATCH_SIZE, min(batch_size, MAX_STREAM_BATCH_SIZE))

        return cls(
            database_url=os.environ.get("TRIAGE_DATABASE_URL") or DEFAULT_DATABASE_URL,
            cursor_key=os.environ.get("TRIAGE_CURSOR_KEY") or DEFAULT_CURSOR_KEY,
            records_path=Path(os.environ.get("TRIAGE_RECORDS_PATH") or DEFAULT_RECORDS_PATH),
            stream_batch_size=batch_size,
            environment=os.environ.get("ENVIRONMENT") or DEFAULT_ENVIRONMENT,
        )


# Default config (local SQLite file, contacts.json in the working directory)
DEFAULT_REVIEW_CONFIG = ReviewConfig()

# Testing config: in-memory database, small batches to exercise streaming
TEST_REVIEW_CONFIG = ReviewConfig(
    database_url="sqlite://",
    stream_batch_size=2,
    environment="test",
)
