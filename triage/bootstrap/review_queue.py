"""Bootstrap wiring for review queue dependencies."""

from __future__ import annotations

from structlog import get_logger

from triage.application.ports.cursor_store import CursorStoreProtocol
from triage.application.ports.record_provider import RecordProviderProtocol
from triage.application.services.review_queue_service import ReviewQueueService
from triage.bootstrap.database import get_engine, reset_database_bootstrap
from triage.config.review_config import ReviewConfig
from triage.infrastructure.adapters.persistence.sql_cursor_store import SqlCursorStore
from triage.infrastructure.adapters.provider.json_file_record_provider import (
    JsonFileRecordProvider,
)

logger = get_logger()

_review_config: ReviewConfig | None = None
_cursor_store: CursorStoreProtocol | None = None
_record_provider: RecordProviderProtocol | None = None


def get_review_config() -> ReviewConfig:
    """Get review configuration (read from the environment once)."""
    global _review_config
    if _review_config is None:
        _review_config = ReviewConfig.from_environment()
    return _review_config


def get_cursor_store() -> CursorStoreProtocol:
    """Get the cursor store backed by the configured database."""
    global _cursor_store
    if _cursor_store is None:
        config = get_review_config()
        _cursor_store = SqlCursorStore(
            engine=get_engine(config.database_url),
            key=config.cursor_key,
        )
        logger.info("cursor_store_initialized", store_type="SQL", key=config.cursor_key)
    return _cursor_store


def get_record_provider() -> RecordProviderProtocol:
    """Get the record provider reading the configured contacts file."""
    global _record_provider
    if _record_provider is None:
        config = get_review_config()
        _record_provider = JsonFileRecordProvider(
            path=config.records_path,
            batch_size=config.stream_batch_size,
        )
        logger.info(
            "record_provider_initialized",
            provider_type="JsonFile",
            path=str(config.records_path),
        )
    return _record_provider


def build_review_queue_service() -> ReviewQueueService:
    """Create a review queue service from the wired dependencies.

    The service reads the persisted cursor on construction; call
    initialize() on it to load records.
    """
    return ReviewQueueService(
        provider=get_record_provider(),
        cursor_store=get_cursor_store(),
    )


def set_review_config(config: ReviewConfig) -> None:
    """Set custom review config for testing."""
    global _review_config
    _review_config = config


def set_cursor_store(store: CursorStoreProtocol) -> None:
    """Set custom cursor store for testing."""
    global _cursor_store
    _cursor_store = store


def set_record_provider(provider: RecordProviderProtocol) -> None:
    """Set custom record provider for testing."""
    global _record_provider
    _record_provider = provider


def reset_review_queue_dependencies() -> None:
    """Reset review queue dependency singletons."""
    global _review_config
    global _cursor_store
    global _record_provider

    _review_config = None
    _cursor_store = None
    _record_provider = None
    reset_database_bootstrap()
