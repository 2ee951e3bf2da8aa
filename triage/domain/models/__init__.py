"""Domain models for the triage system."""

from triage.domain.models.command_outcome import (
    PurgeAllResult,
    PurgeOutcome,
    PurgeStatus,
    UpdateOutcome,
    UpdateStatus,
)
from triage.domain.models.record import Record, RecordUpdate
from triage.domain.models.review_snapshot import LoadState, ReviewSnapshot

__all__: list[str] = [
    "Record",
    "RecordUpdate",
    "ReviewSnapshot",
    "LoadState",
    "PurgeOutcome",
    "PurgeStatus",
    "PurgeAllResult",
    "UpdateOutcome",
    "UpdateStatus",
]
