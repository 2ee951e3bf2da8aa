"""Review queue dependencies.

FastAPI dependency injection for the review queue service. The service is
a process-wide singleton set during startup (or by tests).
"""

from fastapi import HTTPException

from triage.application.services.review_queue_service import ReviewQueueService

# Singleton instance (initialized at startup)
_review_queue_service: ReviewQueueService | None = None


def get_review_queue_service() -> ReviewQueueService:
    """Get the review queue service singleton.

    This is a FastAPI dependency that provides access to the review queue
    for every review endpoint.

    Returns:
        ReviewQueueService singleton instance.

    Raises:
        HTTPException: 503 if the service was not initialized at startup.
    """
    if _review_queue_service is None:
        raise HTTPException(
            status_code=503,
            detail=(
                "ReviewQueueService not initialized. "
                "Call set_review_queue_service() during startup."
            ),
        )
    return _review_queue_service


def set_review_queue_service(service: ReviewQueueService) -> None:
    """Set the review queue service singleton.

    Called during application startup to inject the service.
    Also used in tests to inject a service built on stubs.

    Args:
        service: The review queue service instance to use.
    """
    global _review_queue_service
    _review_queue_service = service


def is_review_queue_service_set() -> bool:
    """True once a review queue service has been injected."""
    return _review_queue_service is not None


def reset_review_queue_service() -> None:
    """Forget the review queue service singleton (for testing)."""
    global _review_queue_service
    _review_queue_service = None


__all__ = [
    "get_review_queue_service",
    "is_review_queue_service_set",
    "reset_review_queue_service",
    "set_review_queue_service",
]
