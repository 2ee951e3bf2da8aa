"""Review snapshot domain model.

A ReviewSnapshot is an immutable picture of the review queue, staging
store and cursor at the moment a command completed. Listeners subscribed
to the review queue service receive a fresh snapshot after every
mutation instead of reading shared mutable state.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from triage.domain.models.record import Record


class LoadState(Enum):
    """Progress of the two-stage initialization.

    Values:
        NOT_STARTED: initialize() has not been called
        AWAITING_PERMISSION: waiting for the provider's permission answer
        LOADING: permission granted, records are streaming in
        COMPLETE: stream finished and the cursor was revalidated
        PERMISSION_DENIED: provider refused access (terminal for the session)
        FAILED: stream broke part way; delivered records were kept
    """

    NOT_STARTED = "NOT_STARTED"
    AWAITING_PERMISSION = "AWAITING_PERMISSION"
    LOADING = "LOADING"
    COMPLETE = "COMPLETE"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    FAILED = "FAILED"


@dataclass(frozen=True)
class ReviewSnapshot:
    """Immutable view of the review state.

    Attributes:
        records: Active review queue in order.
        staged: Staging store ("trash") in arrival order.
        cursor: Index of the current record; len(records) means none.
        load_state: Progress of initialization.
        has_permission: Whether the provider granted access.
        load_error: Reason the record stream failed, if it did.
    """

    records: tuple[Record, ...]
    staged: tuple[Record, ...]
    cursor: int
    load_state: LoadState = LoadState.NOT_STARTED
    has_permission: bool = False
    load_error: str | None = None

    @property
    def queue_length(self) -> int:
        """Number of records awaiting review."""
        return len(self.records)

    @property
    def staging_length(self) -> int:
        """Number of records in the staging store."""
        return len(self.staged)

    @property
    def has_next(self) -> bool:
        """True while a current record exists."""
        return self.cursor < len(self.records)

    @property
    def current_record(self) -> Record | None:
        """Record under the cursor, or None when review is finished."""
        if self.cursor < len(self.records):
            return self.records[self.cursor]
        return None
