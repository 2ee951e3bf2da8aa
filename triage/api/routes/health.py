"""Health check endpoint for the triage API."""

from fastapi import APIRouter

from triage.api.dependencies.review_queue import is_review_queue_service_set
from triage.api.models.health import HealthResponse

router = APIRouter(prefix="/v1", tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Return health status.

    Returns:
        Health status with 200 OK, and whether the review queue is wired.
    """
    return HealthResponse(status="healthy", review_ready=is_review_queue_service_set())
