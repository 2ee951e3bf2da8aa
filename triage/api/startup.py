"""Startup configuration for the triage API.

This module provides startup hooks that:
1. Load a .env file into the environment
2. Configure structured logging from the review config
3. Wire the review queue service (SQL cursor store, JSON file provider)
4. Run the two-stage initialization (permission, then record stream)

Initialization runs under its own correlation ID so the permission
request, the streamed batches and the cursor read of one startup can be
found together in the logs.

Usage in FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await start_review_queue()
        yield
        stop_review_queue()
"""

from dotenv import load_dotenv
from structlog import get_logger

from triage.api.dependencies.review_queue import (
    reset_review_queue_service,
    set_review_queue_service,
)
from triage.application.services.review_queue_service import ReviewQueueService
from triage.bootstrap.logging import configure_logging
from triage.bootstrap.review_queue import (
    build_review_queue_service,
    reset_review_queue_dependencies,
)
from triage.infrastructure.observability import correlation_scope

logger = get_logger()


def load_environment() -> None:
    """Load variables from a .env file; existing variables win."""
    load_dotenv()


async def start_review_queue() -> ReviewQueueService:
    """Build, register and initialize the review queue service.

    Permission denial or a broken record stream does not fail startup;
    both are visible in the review state and initialization can be
    retried through the API.

    Returns:
        The registered ReviewQueueService.
    """
    load_environment()
    config = configure_logging()

    with correlation_scope() as correlation_id:
        log = logger.bind(component="startup", correlation_id=correlation_id)
        log.info(
            "review_queue_starting",
            records_path=str(config.records_path),
            cursor_key=config.cursor_key,
            stream_batch_size=config.stream_batch_size,
        )

        service = build_review_queue_service()
        set_review_queue_service(service)

        snapshot = await service.initialize()
        log.info(
            "review_queue_started",
            load_state=snapshot.load_state.value,
            queue_length=snapshot.queue_length,
            cursor=snapshot.cursor,
        )
    return service


def stop_review_queue() -> None:
    """Unregister the service and dispose the database engine."""
    reset_review_queue_service()
    reset_review_queue_dependencies()
    logger.bind(component="startup").info("review_queue_stopped")
