"""Health check response models."""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Health check response model.

    Attributes:
        status: Health status string (e.g., "healthy").
        review_ready: Whether the review queue service is wired.
    """

    status: str
    review_ready: bool = False
