"""FastAPI dependencies for the triage API."""

from triage.api.dependencies.review_queue import (
    get_review_queue_service,
    set_review_queue_service,
)

__all__ = ["get_review_queue_service", "set_review_queue_service"]
