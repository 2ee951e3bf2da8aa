"""Outcomes of provider-backed review commands.

Purge and update go through the record provider and can fail. Their
failures are reported as values rather than raised, so a bulk purge can
carry on past a bad record and the caller still learns what happened to
each one.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from triage.domain.models.record import Record


class PurgeStatus(Enum):
    """Result of a single purge attempt.

    Values:
        PURGED: provider deleted the record and it left the staging store
        FAILED: provider refused; the record stays staged for a retry
        NOT_STAGED: no staged record has that identifier (no-op)
    """

    PURGED = "PURGED"
    FAILED = "FAILED"
    NOT_STAGED = "NOT_STAGED"


class UpdateStatus(Enum):
    """Result of a record update.

    Values:
        UPDATED: provider accepted the change and the queue entry was replaced
        FAILED: provider refused; the queue entry is unchanged
        NOT_FOUND: no queued record has that identifier (no-op)
    """

    UPDATED = "UPDATED"
    FAILED = "FAILED"
    NOT_FOUND = "NOT_FOUND"


@dataclass(frozen=True)
class PurgeOutcome:
    """Outcome of purging one staged record.

    Attributes:
        identifier: Identifier of the record the purge targeted.
        status: What happened.
        reason: Provider failure reason when status is FAILED.
    """

    identifier: str
    status: PurgeStatus
    reason: str | None = None

    @property
    def succeeded(self) -> bool:
        """True only when the record was actually deleted."""
        return self.status is PurgeStatus.PURGED


@dataclass(frozen=True)
class PurgeAllResult:
    """Aggregated outcomes of a bulk purge, in staging order.

    Attributes:
        outcomes: One outcome per record staged when the purge started.
    """

    outcomes: tuple[PurgeOutcome, ...]

    @property
    def purged(self) -> tuple[str, ...]:
        """Identifiers that were deleted."""
        return tuple(o.identifier for o in self.outcomes if o.status is PurgeStatus.PURGED)

    @property
    def failed(self) -> tuple[PurgeOutcome, ...]:
        """Outcomes of records the provider refused to delete."""
        return tuple(o for o in self.outcomes if o.status is PurgeStatus.FAILED)

    @property
    def all_succeeded(self) -> bool:
        """True when no attempt failed."""
        return not self.failed


@dataclass(frozen=True)
class UpdateOutcome:
    """Outcome of updating one queued record.

    Attributes:
        identifier: Identifier of the record the update targeted.
        status: What happened.
        record: The updated record when status is UPDATED.
        reason: Provider failure reason when status is FAILED.
    """

    identifier: str
    status: UpdateStatus
    record: Record | None = None
    reason: str | None = None

    @property
    def succeeded(self) -> bool:
        """True only when the provider accepted the update."""
        return self.status is UpdateStatus.UPDATED
