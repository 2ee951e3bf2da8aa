"""API request/response models."""

from triage.api.models.health import HealthResponse
from triage.api.models.review import (
    LoadStateEnum,
    PurgeAllResponse,
    PurgeOutcomeResponse,
    PurgeStatusEnum,
    RecordResponse,
    ReviewErrorResponse,
    ReviewStateResponse,
    UpdateRecordRequest,
    UpdateRecordResponse,
)

__all__ = [
    "HealthResponse",
    "LoadStateEnum",
    "PurgeAllResponse",
    "PurgeOutcomeResponse",
    "PurgeStatusEnum",
    "RecordResponse",
    "ReviewErrorResponse",
    "ReviewStateResponse",
    "UpdateRecordRequest",
    "UpdateRecordResponse",
]
