"""Review queue service: the review-queue / staged-deletion state machine.

This service owns the ordered review queue, the cursor marking the record
under review, and the staging store ("trash") that holds discarded
records until they are restored or purged. The cursor is persisted
through a CursorStoreProtocol so review resumes where it stopped.

State rules:
- 0 <= cursor <= len(queue) after every command; len(queue) means "no
  current record".
- An identifier appears at most once in the queue and at most once in
  staging. Records are matched by identifier, never by object identity.
- No mutation reorders untouched records.
- The cursor is written after advance() and trash_current(), and by
  validate_index() when it changes. restore(), purge(), purge_all() and
  update_record() never write it.

Developer Golden Rules:
1. CONFIRM BEFORE COMMIT - Provider calls are awaited before local state
   changes; local state never reflects an unconfirmed external operation.
2. OUTCOMES, NOT FAULTS - Provider failures come back as outcome values or
   state flags; they never escape a queue command.
3. ONE WRITER - Provider-bound commands are serialized by a single lock;
   synchronous commands never yield. A record whose delete is in flight
   cannot be restored, and a confirmed update is applied by identifier
   wherever the record sits when the provider answers.
4. PUBLISH SNAPSHOTS - Every completed mutation publishes an immutable
   ReviewSnapshot to subscribers.

Usage:
    service = ReviewQueueService(provider=provider, cursor_store=store)
    await service.initialize()

    while service.has_next():
        record = service.current_record()
        if keep(record):
            service.advance()
        else:
            service.trash_current()

    result = await service.purge_all()
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterable, Sequence
from typing import TYPE_CHECKING

from triage.application.services.base import LoggingMixin
from triage.domain.errors.provider import PermissionDeniedError, RecordProviderError
from triage.domain.models.command_outcome import (
    PurgeAllResult,
    PurgeOutcome,
    PurgeStatus,
    UpdateOutcome,
    UpdateStatus,
)
from triage.domain.models.review_snapshot import LoadState, ReviewSnapshot

if TYPE_CHECKING:
    from triage.application.ports.cursor_store import CursorStoreProtocol
    from triage.application.ports.record_provider import RecordProviderProtocol
    from triage.domain.models.record import Record, RecordUpdate

SnapshotListener = Callable[[ReviewSnapshot], None]


def _index_of(records: Sequence[Record], identifier: str) -> int | None:
    """Position of the first record with the identifier, or None."""
    for index, record in enumerate(records):
        if record.identifier == identifier:
            return index
    return None


class ReviewQueueService(LoggingMixin):
    """Owns the review queue, cursor and staging store.

    Attributes:
        _provider: External record store.
        _cursor_store: Durable storage for the cursor.
        _records: Active review queue, in load order.
        _staged: Staging store, in trash arrival order.
        _cursor: Index of the current record.
        _provider_lock: Serializes provider-bound commands.
        _purging: Identifiers whose provider delete is in flight.
    """

    def __init__(
        self,
        provider: RecordProviderProtocol,
        cursor_store: CursorStoreProtocol,
    ) -> None:
        """Initialize the service and read the persisted cursor.

        The persisted cursor is taken as-is. It may point past the end of
        a queue that has not loaded yet; validate_index() fixes that once
        loading completes.

        Args:
            provider: External record store.
            cursor_store: Durable storage for the cursor.
        """
        self._provider = provider
        self._cursor_store = cursor_store
        self._records: list[Record] = []
        self._staged: list[Record] = []
        self._cursor: int = cursor_store.load_cursor()
        self._load_state = LoadState.NOT_STARTED
        self._has_permission = False
        self._load_error: str | None = None
        self._listeners: list[SnapshotListener] = []
        self._provider_lock = asyncio.Lock()
        self._purging: set[str] = set()

        self._init_logger()

    # ------------------------------------------------------------------
    # Read-only queries
    # ------------------------------------------------------------------

    @property
    def cursor(self) -> int:
        """Index of the current record; equals queue_length when done."""
        return self._cursor

    @property
    def records(self) -> tuple[Record, ...]:
        """Review queue contents, in order."""
        return tuple(self._records)

    @property
    def staged_records(self) -> tuple[Record, ...]:
        """Staging store contents, in arrival order."""
        return tuple(self._staged)

    @property
    def queue_length(self) -> int:
        """Number of records in the review queue."""
        return len(self._records)

    @property
    def staging_length(self) -> int:
        """Number of records in the staging store."""
        return len(self._staged)

    @property
    def has_permission(self) -> bool:
        """Whether the provider granted access."""
        return self._has_permission

    @property
    def load_state(self) -> LoadState:
        """Progress of initialization."""
        return self._load_state

    @property
    def load_error(self) -> str | None:
        """Reason the record stream failed, if it did."""
        return self._load_error

    def current_record(self) -> Record | None:
        """Record under the cursor, or None when nothing is left to review."""
        if 0 <= self._cursor < len(self._records):
            return self._records[self._cursor]
        return None

    def has_next(self) -> bool:
        """True while a current record exists."""
        return self._cursor < len(self._records)

    def find_record(self, identifier: str) -> Record | None:
        """Look up a queued record by identifier."""
        index = _index_of(self._records, identifier)
        return None if index is None else self._records[index]

    def find_staged(self, identifier: str) -> Record | None:
        """Look up a staged record by identifier."""
        index = _index_of(self._staged, identifier)
        return None if index is None else self._staged[index]

    def snapshot(self) -> ReviewSnapshot:
        """Capture the current state as an immutable snapshot."""
        return ReviewSnapshot(
            records=tuple(self._records),
            staged=tuple(self._staged),
            cursor=self._cursor,
            load_state=self._load_state,
            has_permission=self._has_permission,
            load_error=self._load_error,
        )

    def _log_context(self) -> dict[str, object]:
        return {"load_state": self._load_state.value}

    # ------------------------------------------------------------------
    # Subscription
    # ------------------------------------------------------------------

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """Register a listener for state snapshots.

        The listener is called synchronously with a new ReviewSnapshot
        after every completed mutation.

        Args:
            listener: Callable receiving each snapshot.

        Returns:
            A callable that removes the listener again.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _publish(self) -> None:
        """Send the current snapshot to every listener."""
        if not self._listeners:
            return
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            listener(snapshot)

    # ------------------------------------------------------------------
    # Initialization and loading
    # ------------------------------------------------------------------

    async def initialize(self) -> ReviewSnapshot:
        """Request permission, stream records in, then revalidate the cursor.

        Stage one awaits the provider's permission answer. Stage two
        iterates the record stream, appending each batch as it arrives;
        the stream ending is the completion signal and triggers
        validate_index().

        A denial leaves the queue empty and is terminal until initialize()
        is called again. A broken stream keeps what was delivered and
        records the reason in load_error.

        Returns:
            Snapshot of the state once initialization finished.
        """
        log = self._log_operation("initialize")

        self._load_state = LoadState.AWAITING_PERMISSION
        self._load_error = None
        self._publish()

        try:
            granted = await self._provider.request_permission()
        except PermissionDeniedError as exc:
            granted = False
            self._load_error = exc.reason

        self._has_permission = granted
        if not granted:
            self._load_state = LoadState.PERMISSION_DENIED
            log.warning("permission_denied", reason=self._load_error)
            self._publish()
            return self.snapshot()

        self._load_state = LoadState.LOADING
        self._publish()
        log.info("record_stream_started", persisted_cursor=self._cursor)

        try:
            async for batch in self._provider.stream_records():
                self.load(batch)
        except RecordProviderError as exc:
            self._load_state = LoadState.FAILED
            self._load_error = exc.reason
            log.warning(
                "record_stream_failed",
                reason=exc.reason,
                records_loaded=len(self._records),
            )
        else:
            self._load_state = LoadState.COMPLETE
            log.info("record_stream_completed", records_loaded=len(self._records))

        self.validate_index()
        self._publish()
        return self.snapshot()

    def load(self, records: Iterable[Record]) -> int:
        """Append a batch of records to the review queue, in order.

        Each call appends; streaming delivery calls this once per batch.
        Records whose identifier is already queued or staged are skipped.
        The cursor is not touched, even if it is out of range.

        Args:
            records: Batch of records in provider order.

        Returns:
            Number of records actually appended.
        """
        known = {r.identifier for r in self._records}
        known.update(r.identifier for r in self._staged)

        added = 0
        for record in records:
            if record.identifier in known:
                self._log_operation("load", identifier=record.identifier).warning(
                    "duplicate_record_skipped"
                )
                continue
            self._records.append(record)
            known.add(record.identifier)
            added += 1

        if added:
            self._publish()
        return added

    # ------------------------------------------------------------------
    # Cursor commands
    # ------------------------------------------------------------------

    def advance(self) -> None:
        """Keep the current record and move to the next one.

        Sets cursor to cursor + 1 and persists it. Already at or past the
        end: no-op. A persisted cursor beyond a partially loaded queue is
        left for validate_index() to resolve once loading completes.
        """
        if self._cursor >= len(self._records):
            return

        self._cursor += 1
        self._persist_cursor()
        self._log_operation("advance").debug("cursor_advanced", cursor=self._cursor)
        self._publish()

    def trash_current(self) -> None:
        """Move the current record to the end of the staging store.

        The next record slides into the current position. Only when the
        trashed record was the last one does the cursor step back, to
        max(0, new_length - 1). No-op when there is no current record.
        """
        if not 0 <= self._cursor < len(self._records):
            return

        record = self._records.pop(self._cursor)
        self._staged.append(record)
        self._clamp_cursor(allow_end=False)
        self._persist_cursor()

        self._log_operation("trash_current", identifier=record.identifier).info(
            "record_trashed",
            cursor=self._cursor,
            queue_length=len(self._records),
            staging_length=len(self._staged),
        )
        self._publish()

    def validate_index(self) -> bool:
        """Clamp the cursor back into [0, queue_length].

        A cursor past the end becomes max(0, queue_length - 1). Persists
        only when the value changed. Idempotent; safe to call at any time.

        Returns:
            True if the cursor was changed.
        """
        previous = self._cursor
        if not self._clamp_cursor(allow_end=True):
            return False

        self._persist_cursor()
        self._log_operation("validate_index").info(
            "cursor_clamped",
            previous_cursor=previous,
            cursor=self._cursor,
            queue_length=len(self._records),
        )
        self._publish()
        return True

    def _clamp_cursor(self, *, allow_end: bool) -> bool:
        """Bring the cursor back within bounds.

        Args:
            allow_end: Whether cursor == queue_length ("no current record")
                      is acceptable. When False, a cursor at or past the end
                      moves to the last record.

        Returns:
            True if the cursor was changed.
        """
        length = len(self._records)
        limit = length if allow_end else length - 1
        previous = self._cursor

        if self._cursor > limit:
            self._cursor = max(0, length - 1)
        if self._cursor < 0:
            self._cursor = 0
        return self._cursor != previous

    def _persist_cursor(self) -> None:
        self._cursor_store.save_cursor(self._cursor)

    # ------------------------------------------------------------------
    # Staging commands
    # ------------------------------------------------------------------

    def restore(self, record: Record) -> bool:
        """Move a staged record back to the end of the review queue.

        The first staged entry with the record's identifier is moved.
        The cursor is neither changed nor persisted. Restoring a record
        that is not staged, or whose purge is in flight, is a no-op.

        Args:
            record: Record to restore (matched by identifier).

        Returns:
            True if a record was moved out of staging.
        """
        log = self._log_operation("restore", identifier=record.identifier)

        index = _index_of(self._staged, record.identifier)
        if index is None:
            log.debug("restore_skipped_not_staged")
            return False
        if record.identifier in self._purging:
            log.info("restore_skipped_purge_in_flight")
            return False

        self._records.append(self._staged.pop(index))

        log.info(
            "record_restored",
            queue_length=len(self._records),
            staging_length=len(self._staged),
        )
        self._publish()
        return True

    async def purge(self, record: Record) -> PurgeOutcome:
        """Permanently delete one staged record through the provider.

        The staged entry is removed only after the provider confirms the
        delete. On failure it stays staged and the failure is returned.
        Purging a record that is not staged is a no-op.

        Args:
            record: Record to purge (matched by identifier).

        Returns:
            PurgeOutcome describing what happened.
        """
        async with self._provider_lock:
            return await self._purge_one(record.identifier)

    async def purge_all(self) -> PurgeAllResult:
        """Permanently delete every staged record, continuing past failures.

        The staging store is snapshotted when the call starts; records
        are attempted in staging order. Only records the provider
        confirmed are removed from staging.

        Returns:
            PurgeAllResult with one outcome per snapshotted record.
        """
        async with self._provider_lock:
            pending = [record.identifier for record in self._staged]
            log = self._log_operation("purge_all", staged_count=len(pending))
            log.info("purge_all_started")

            outcomes: list[PurgeOutcome] = []
            for identifier in pending:
                outcomes.append(await self._purge_one(identifier))

            result = PurgeAllResult(outcomes=tuple(outcomes))
            log.info(
                "purge_all_completed",
                purged_count=len(result.purged),
                failed_count=len(result.failed),
            )
            return result

    async def _purge_one(self, identifier: str) -> PurgeOutcome:
        """Delete one staged record; caller holds the provider lock."""
        log = self._log_operation("purge", identifier=identifier)

        staged = self.find_staged(identifier)
        if staged is None:
            log.debug("purge_skipped_not_staged")
            return PurgeOutcome(identifier=identifier, status=PurgeStatus.NOT_STAGED)

        # restore() refuses identifiers in _purging, so the entry stays staged
        self._purging.add(identifier)
        try:
            await self._provider.delete(staged)
        except RecordProviderError as exc:
            log.warning("purge_failed", reason=exc.reason)
            return PurgeOutcome(
                identifier=identifier,
                status=PurgeStatus.FAILED,
                reason=exc.reason,
            )
        finally:
            self._purging.discard(identifier)

        index = _index_of(self._staged, identifier)
        if index is not None:
            del self._staged[index]

        log.info("record_purged", staging_length=len(self._staged))
        self._publish()
        return PurgeOutcome(identifier=identifier, status=PurgeStatus.PURGED)

    # ------------------------------------------------------------------
    # Record editing
    # ------------------------------------------------------------------

    async def update_record(self, record: Record, update: RecordUpdate) -> UpdateOutcome:
        """Apply field changes through the provider and replace the queue entry.

        The queued record keeps its position and the cursor is never
        touched. If the record was trashed or restored while the provider
        call was in flight, the confirmed fields land on the entry wherever
        it now sits. On provider failure nothing changes locally.

        Args:
            record: Queued record to change (matched by identifier).
            update: Fields to change.

        Returns:
            UpdateOutcome describing what happened.
        """
        async with self._provider_lock:
            identifier = record.identifier
            log = self._log_operation("update_record", identifier=identifier)

            current = self.find_record(identifier)
            if current is None:
                log.debug("update_skipped_not_queued")
                return UpdateOutcome(identifier=identifier, status=UpdateStatus.NOT_FOUND)

            try:
                updated = await self._provider.update(current, update)
            except RecordProviderError as exc:
                log.warning("update_failed", reason=exc.reason)
                return UpdateOutcome(
                    identifier=identifier,
                    status=UpdateStatus.FAILED,
                    reason=exc.reason,
                )

            if not updated.same_record(current):
                reason = f"provider returned record {updated.identifier}"
                log.error("update_identifier_mismatch", returned_identifier=updated.identifier)
                return UpdateOutcome(
                    identifier=identifier,
                    status=UpdateStatus.FAILED,
                    reason=reason,
                )

            self._replace_entry(updated)
            self._publish()

            log.info("record_updated", fields=sorted(update.changed_fields()))
            return UpdateOutcome(
                identifier=identifier,
                status=UpdateStatus.UPDATED,
                record=updated,
            )

    def _replace_entry(self, updated: Record) -> None:
        """Swap in the updated record in the queue or the staging store."""
        for entries in (self._records, self._staged):
            index = _index_of(entries, updated.identifier)
            if index is not None:
                entries[index] = updated
                return
