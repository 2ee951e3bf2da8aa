"""Domain errors for the triage system.

Provides specific exception classes for different failure scenarios.
All exceptions inherit from TriageError.
"""

from triage.domain.errors.provider import (
    DeleteFailedError,
    FetchFailedError,
    PermissionDeniedError,
    RecordProviderError,
    UpdateFailedError,
)
from triage.domain.errors.record import RecordNotFoundError

__all__: list[str] = [
    "RecordProviderError",
    "PermissionDeniedError",
    "FetchFailedError",
    "DeleteFailedError",
    "UpdateFailedError",
    "RecordNotFoundError",
]
