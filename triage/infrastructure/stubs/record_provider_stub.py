"""Record Provider Stub for testing.

This module provides a configurable in-memory implementation of
RecordProviderProtocol for unit and integration tests and for running
the API without a real contact store.

Supports:
- Granting or denying permission
- Streaming records in configurable batches, yielding to the event loop
  between batches
- Breaking the stream after N batches
- Failing deletes/updates for chosen identifiers or for the next call
- Call history for assertions
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Iterable
from dataclasses import dataclass

from triage.application.ports.record_provider import RecordProviderProtocol
from triage.domain.errors.provider import (
    DeleteFailedError,
    FetchFailedError,
    UpdateFailedError,
)
from triage.domain.models.record import Record, RecordUpdate

DEFAULT_STUB_BATCH_SIZE = 2


@dataclass(frozen=True)
class ProviderCall:
    """Record of a delete/update call (for test assertions).

    Attributes:
        operation: "delete" or "update".
        identifier: Identifier of the targeted record.
        succeeded: Whether the stub accepted the call.
        update: Update payload for update calls.
    """

    operation: str
    identifier: str
    succeeded: bool
    update: RecordUpdate | None = None


class RecordProviderStub(RecordProviderProtocol):
    """Stub implementation of RecordProviderProtocol for testing.

    Attributes:
        _records: Records the stub currently holds, in provider order.
        _permission_granted: Answer returned by request_permission().
        _batch_size: Records per streamed batch.
        _fail_stream_after: Batches to deliver before the stream breaks.
        _delete_failures: Identifier -> reason for deletes that must fail.
        _update_failures: Identifier -> reason for updates that must fail.
    """

    def __init__(
        self,
        records: Iterable[Record] = (),
        permission_granted: bool = True,
        batch_size: int = DEFAULT_STUB_BATCH_SIZE,
    ) -> None:
        """Initialize the record provider stub.

        Args:
            records: Records the stub serves, in order.
            permission_granted: Answer for request_permission().
            batch_size: Records per streamed batch (minimum 1).
        """
        self._records: list[Record] = list(records)
        self._permission_granted = permission_granted
        self._batch_size = max(1, batch_size)
        self._fail_stream_after: int | None = None
        self._delete_failures: dict[str, str] = {}
        self._update_failures: dict[str, str] = {}
        self._fail_next_delete: str | None = None
        self._fail_next_update: str | None = None
        self._permission_requests = 0
        self._calls: list[ProviderCall] = []

    async def request_permission(self) -> bool:
        """Answer with the configured permission."""
        self._permission_requests += 1
        await asyncio.sleep(0)
        return self._permission_granted

    async def stream_records(self) -> AsyncIterator[list[Record]]:
        """Stream a copy of the held records in batches.

        Raises:
            FetchFailedError: Instead of completing, once the configured
                number of batches was delivered.
        """
        snapshot = list(self._records)
        batches = [
            snapshot[start : start + self._batch_size]
            for start in range(0, len(snapshot), self._batch_size)
        ]
        for delivered, batch in enumerate(batches):
            if self._fail_stream_after is not None and delivered >= self._fail_stream_after:
                break
            await asyncio.sleep(0)
            yield batch

        if self._fail_stream_after is not None:
            raise FetchFailedError("Simulated record stream failure")

    async def delete(self, record: Record) -> None:
        """Delete a record unless a failure is configured for it.

        Raises:
            DeleteFailedError: If a failure was configured.
        """
        await asyncio.sleep(0)
        reason = self._take_failure(self._delete_failures, record.identifier, "delete")
        if reason is not None:
            self._calls.append(ProviderCall("delete", record.identifier, succeeded=False))
            raise DeleteFailedError(record.identifier, reason)

        self._records = [r for r in self._records if r.identifier != record.identifier]
        self._calls.append(ProviderCall("delete", record.identifier, succeeded=True))

    async def update(self, record: Record, update: RecordUpdate) -> Record:
        """Merge the update into the record unless a failure is configured.

        Raises:
            UpdateFailedError: If a failure was configured.
        """
        await asyncio.sleep(0)
        reason = self._take_failure(self._update_failures, record.identifier, "update")
        if reason is not None:
            self._calls.append(
                ProviderCall("update", record.identifier, succeeded=False, update=update)
            )
            raise UpdateFailedError(record.identifier, reason)

        updated = record.with_update(update)
        self._records = [
            updated if r.identifier == record.identifier else r for r in self._records
        ]
        self._calls.append(
            ProviderCall("update", record.identifier, succeeded=True, update=update)
        )
        return updated

    def _take_failure(
        self, failures: dict[str, str], identifier: str, operation: str
    ) -> str | None:
        """Return the failure reason configured for this call, if any."""
        if operation == "delete" and self._fail_next_delete is not None:
            reason, self._fail_next_delete = self._fail_next_delete, None
            return reason
        if operation == "update" and self._fail_next_update is not None:
            reason, self._fail_next_update = self._fail_next_update, None
            return reason
        return failures.get(identifier)

    # Test helper methods

    def set_permission(self, granted: bool) -> None:
        """Change the answer for request_permission() (test helper)."""
        self._permission_granted = granted

    def add_records(self, *records: Record) -> None:
        """Append records to the provider (test helper)."""
        self._records.extend(records)

    def fail_stream_after(self, batches: int) -> None:
        """Deliver at most this many batches, then fail the stream (test helper)."""
        self._fail_stream_after = batches

    def fail_delete_for(self, identifier: str, reason: str = "Simulated delete failure") -> None:
        """Make every delete of this identifier fail (test helper)."""
        self._delete_failures[identifier] = reason

    def fail_update_for(self, identifier: str, reason: str = "Simulated update failure") -> None:
        """Make every update of this identifier fail (test helper)."""
        self._update_failures[identifier] = reason

    def fail_next_delete(self, reason: str = "Simulated delete failure") -> None:
        """Make the next delete fail, whatever its target (test helper)."""
        self._fail_next_delete = reason

    def fail_next_update(self, reason: str = "Simulated update failure") -> None:
        """Make the next update fail, whatever its target (test helper)."""
        self._fail_next_update = reason

    def clear_failures(self) -> None:
        """Remove every configured failure (test helper)."""
        self._fail_stream_after = None
        self._delete_failures.clear()
        self._update_failures.clear()
        self._fail_next_delete = None
        self._fail_next_update = None

    def get_records(self) -> list[Record]:
        """Records the provider still holds (test helper)."""
        return list(self._records)

    def get_call_history(self) -> list[ProviderCall]:
        """All delete/update calls in order (test helper)."""
        return list(self._calls)

    def get_deleted_identifiers(self) -> list[str]:
        """Identifiers of successful deletes, in order (test helper)."""
        return [c.identifier for c in self._calls if c.operation == "delete" and c.succeeded]

    @property
    def permission_requests(self) -> int:
        """Number of request_permission() calls."""
        return self._permission_requests

    def reset(self) -> None:
        """Reset all state (test helper)."""
        self._records.clear()
        self._calls.clear()
        self._permission_requests = 0
        self._permission_granted = True
        self.clear_failures()

    @classmethod
    def with_records(
        cls,
        *records: Record,
        batch_size: int = DEFAULT_STUB_BATCH_SIZE,
    ) -> RecordProviderStub:
        """Factory for a stub serving the given records.

        Args:
            records: Records to serve, in order.
            batch_size: Records per streamed batch.

        Returns:
            RecordProviderStub granting permission.
        """
        return cls(records=records, batch_size=batch_size)

    @classmethod
    def denying(cls) -> RecordProviderStub:
        """Factory for a stub that refuses permission.

        Returns:
            RecordProviderStub whose request_permission() returns False.
        """
        return cls(permission_granted=False)
