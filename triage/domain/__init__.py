"""
Domain layer - Pure business logic for the triage system.

This layer contains:
- Value objects (Record, RecordUpdate, ReviewSnapshot)
- Command outcomes (PurgeOutcome, UpdateOutcome)
- Domain exceptions

CRITICAL: This layer must NOT import from application, infrastructure, or api.
Only stdlib and typing imports are allowed.
"""

from triage.domain.errors import (
    DeleteFailedError,
    FetchFailedError,
    PermissionDeniedError,
    RecordNotFoundError,
    RecordProviderError,
    UpdateFailedError,
)
from triage.domain.exceptions import TriageError
from triage.domain.models import Record, RecordUpdate, ReviewSnapshot

__all__: list[str] = [
    "TriageError",
    "RecordProviderError",
    "PermissionDeniedError",
    "FetchFailedError",
    "DeleteFailedError",
    "UpdateFailedError",
    "RecordNotFoundError",
    "Record",
    "RecordUpdate",
    "ReviewSnapshot",
]
