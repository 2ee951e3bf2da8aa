"""Unit tests for ReviewQueueService provider-backed commands.

purge(), purge_all() and update_record() call the record provider and
only change local state once the provider confirmed the operation.
Failures come back as outcome values.
"""

from __future__ import annotations

import asyncio
from typing import Any

import pytest

from triage.application.services.review_queue_service import ReviewQueueService
from triage.domain.models.command_outcome import PurgeStatus, UpdateStatus
from triage.domain.models.record import Record, RecordUpdate
from triage.infrastructure.stubs import CursorStoreStub, RecordProviderStub
from tests.helpers import identifiers, make_records


class RenamingProviderStub(RecordProviderStub):
    """Provider that answers updates with a different record."""

    async def update(self, record: Record, update: RecordUpdate) -> Record:
        return Record(identifier=f"{record.identifier}-copy")


class GatedProviderStub(RecordProviderStub):
    """Provider whose delete/update calls wait until the test releases them."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.entered = asyncio.Event()
        self.release = asyncio.Event()

    async def _hold(self) -> None:
        self.entered.set()
        await self.release.wait()

    async def delete(self, record: Record) -> None:
        await self._hold()
        await super().delete(record)

    async def update(self, record: Record, update: RecordUpdate) -> Record:
        await self._hold()
        return await super().update(record, update)


async def gated_service(*ids: str) -> tuple[ReviewQueueService, GatedProviderStub]:
    """Initialized service over a gated provider holding `ids`."""
    provider = GatedProviderStub(records=make_records(*ids))
    service = ReviewQueueService(provider=provider, cursor_store=CursorStoreStub())
    await service.initialize()
    return service, provider


async def staged_service(
    *trash: str,
    keep: tuple[str, ...] = (),
) -> tuple[ReviewQueueService, RecordProviderStub, CursorStoreStub]:
    """Initialized service with the `trash` records staged, in order."""
    provider = RecordProviderStub.with_records(*make_records(*trash, *keep))
    store = CursorStoreStub()
    service = ReviewQueueService(provider=provider, cursor_store=store)
    await service.initialize()
    for _ in trash:
        service.trash_current()
    return service, provider, store


class TestPurge:
    """Tests for purging one staged record."""

    @pytest.mark.asyncio
    async def test_purge_success_removes_from_staging(self) -> None:
        """A confirmed delete removes the staged entry."""
        service, provider, _ = await staged_service("A", "B", keep=("C",))

        outcome = await service.purge(Record(identifier="A"))

        assert outcome.status is PurgeStatus.PURGED
        assert outcome.succeeded
        assert identifiers(service.staged_records) == ["B"]
        assert provider.get_deleted_identifiers() == ["A"]
        assert identifiers(provider.get_records()) == ["B", "C"]

    @pytest.mark.asyncio
    async def test_purge_failure_keeps_staged_entry(self) -> None:
        """A refused delete leaves staging untouched and reports why."""
        service, provider, _ = await staged_service("A", "B")
        provider.fail_delete_for("A", "Contact is read-only")

        outcome = await service.purge(Record(identifier="A"))

        assert outcome.status is PurgeStatus.FAILED
        assert outcome.reason == "Failed to delete record A: Contact is read-only"
        assert identifiers(service.staged_records) == ["A", "B"]

    @pytest.mark.asyncio
    async def test_purge_not_staged_is_noop(self) -> None:
        """Purging an unknown record never reaches the provider."""
        service, provider, _ = await staged_service("A", keep=("B",))

        outcome = await service.purge(Record(identifier="B"))

        assert outcome.status is PurgeStatus.NOT_STAGED
        assert provider.get_call_history() == []
        assert identifiers(service.records) == ["B"]

    @pytest.mark.asyncio
    async def test_repeated_purge_is_noop(self) -> None:
        """The second purge of the same record finds nothing to do."""
        service, provider, _ = await staged_service("A")

        await service.purge(Record(identifier="A"))
        outcome = await service.purge(Record(identifier="A"))

        assert outcome.status is PurgeStatus.NOT_STAGED
        assert provider.get_deleted_identifiers() == ["A"]

    @pytest.mark.asyncio
    async def test_purge_never_writes_cursor(self) -> None:
        """Purging does not touch the persisted cursor."""
        service, _, store = await staged_service("A", keep=("B",))
        saves = store.save_count
        cursor = service.cursor

        await service.purge(Record(identifier="A"))

        assert store.save_count == saves
        assert service.cursor == cursor

    @pytest.mark.asyncio
    async def test_retry_after_failure(self) -> None:
        """A failed purge can be retried once the provider recovers."""
        service, provider, _ = await staged_service("A")
        provider.fail_next_delete("Temporarily unavailable")

        first = await service.purge(Record(identifier="A"))
        second = await service.purge(Record(identifier="A"))

        assert first.status is PurgeStatus.FAILED
        assert second.status is PurgeStatus.PURGED
        assert service.staged_records == ()


class TestPurgeAll:
    """Tests for purging the whole staging store."""

    @pytest.mark.asyncio
    async def test_partial_failure_continues(self) -> None:
        """A failure in the middle does not stop later deletes."""
        service, provider, _ = await staged_service("A", "B", "C")
        provider.fail_delete_for("B", "Locked")

        result = await service.purge_all()

        assert [o.identifier for o in result.outcomes] == ["A", "B", "C"]
        assert [o.status for o in result.outcomes] == [
            PurgeStatus.PURGED,
            PurgeStatus.FAILED,
            PurgeStatus.PURGED,
        ]
        assert result.purged == ("A", "C")
        assert not result.all_succeeded
        assert identifiers(service.staged_records) == ["B"]
        assert provider.get_deleted_identifiers() == ["A", "C"]

    @pytest.mark.asyncio
    async def test_all_succeed(self) -> None:
        """Every staged record is deleted, in staging order."""
        service, provider, _ = await staged_service("A", "B", keep=("C",))

        result = await service.purge_all()

        assert result.all_succeeded
        assert service.staged_records == ()
        assert provider.get_deleted_identifiers() == ["A", "B"]
        assert identifiers(service.records) == ["C"]

    @pytest.mark.asyncio
    async def test_empty_staging(self) -> None:
        """Nothing staged, nothing attempted."""
        service, provider, _ = await staged_service(keep=("A",))

        result = await service.purge_all()

        assert result.outcomes == ()
        assert provider.get_call_history() == []

    @pytest.mark.asyncio
    async def test_purge_all_never_writes_cursor(self) -> None:
        """Bulk purge leaves the persisted cursor alone."""
        service, _, store = await staged_service("A", "B")
        saves = store.save_count

        await service.purge_all()

        assert store.save_count == saves

    @pytest.mark.asyncio
    async def test_concurrent_purges_are_serialized(self) -> None:
        """A single purge racing a bulk purge deletes each record once."""
        service, provider, _ = await staged_service("A", "B")

        result, single = await asyncio.gather(
            service.purge_all(),
            service.purge(Record(identifier="B")),
        )

        assert result.purged == ("A", "B")
        assert single.status is PurgeStatus.NOT_STAGED
        assert provider.get_deleted_identifiers() == ["A", "B"]


class TestUpdateRecord:
    """Tests for updating a queued record through the provider."""

    @pytest.mark.asyncio
    async def test_update_replaces_entry_in_place(self) -> None:
        """The updated record keeps its queue position."""
        service, provider, store = await staged_service(keep=("A", "B", "C"))
        service.advance()
        saves = store.save_count

        outcome = await service.update_record(
            Record(identifier="B"),
            RecordUpdate(given_name="Bea", phone_numbers=("555-0100",)),
        )

        assert outcome.status is UpdateStatus.UPDATED
        assert outcome.record is not None
        assert outcome.record.given_name == "Bea"
        assert identifiers(service.records) == ["A", "B", "C"]
        assert service.records[1].given_name == "Bea"
        assert service.records[1].phone_numbers == ("555-0100",)
        assert service.cursor == 1
        assert store.save_count == saves
        assert provider.get_records()[1].given_name == "Bea"

    @pytest.mark.asyncio
    async def test_update_merges_into_current_entry(self) -> None:
        """The provider receives the queued record, not the caller's copy."""
        service, _, _ = await staged_service(keep=("A",))

        outcome = await service.update_record(
            Record(identifier="A", given_name="Stale"),
            RecordUpdate(family_name="Lovelace"),
        )

        assert outcome.record == Record(
            identifier="A", given_name="Name A", family_name="Lovelace"
        )

    @pytest.mark.asyncio
    async def test_update_failure_leaves_queue_unchanged(self) -> None:
        """A refused update is reported and nothing changes locally."""
        service, provider, _ = await staged_service(keep=("A", "B"))
        provider.fail_update_for("A", "Field not writable")
        before = service.records

        outcome = await service.update_record(
            Record(identifier="A"), RecordUpdate(given_name="New")
        )

        assert outcome.status is UpdateStatus.FAILED
        assert outcome.reason == "Failed to update record A: Field not writable"
        assert outcome.record is None
        assert service.records == before

    @pytest.mark.asyncio
    async def test_update_unknown_record(self) -> None:
        """A record that is not queued is reported as not found."""
        service, provider, _ = await staged_service(keep=("A",))

        outcome = await service.update_record(
            Record(identifier="Z"), RecordUpdate(given_name="New")
        )

        assert outcome.status is UpdateStatus.NOT_FOUND
        assert provider.get_call_history() == []

    @pytest.mark.asyncio
    async def test_update_never_touches_staging(self) -> None:
        """Staged records cannot be edited."""
        service, provider, _ = await staged_service("A", keep=("B",))

        outcome = await service.update_record(
            Record(identifier="A"), RecordUpdate(given_name="New")
        )

        assert outcome.status is UpdateStatus.NOT_FOUND
        assert service.staged_records[0].given_name == "Name A"
        assert provider.get_call_history() == []

    @pytest.mark.asyncio
    async def test_provider_returning_other_record_is_failure(self) -> None:
        """An answer for a different identifier is not applied."""
        provider = RenamingProviderStub(records=make_records("A"))
        service = ReviewQueueService(provider=provider, cursor_store=CursorStoreStub())
        await service.initialize()

        outcome = await service.update_record(
            Record(identifier="A"), RecordUpdate(given_name="New")
        )

        assert outcome.status is UpdateStatus.FAILED
        assert outcome.reason == "provider returned record A-copy"
        assert identifiers(service.records) == ["A"]
        assert service.records[0].given_name == "Name A"


class TestCommandsDuringProviderCalls:
    """Synchronous commands issued while a provider call is awaited."""

    @pytest.mark.asyncio
    async def test_restore_refused_while_delete_in_flight(self) -> None:
        """A record being purged cannot come back into the queue."""
        service, provider = await gated_service("A", "B")
        service.trash_current()

        task = asyncio.create_task(service.purge(Record(identifier="A")))
        await provider.entered.wait()
        restored = service.restore(Record(identifier="A"))
        provider.release.set()
        outcome = await task

        assert restored is False
        assert outcome.status is PurgeStatus.PURGED
        assert identifiers(service.records) == ["B"]
        assert service.staged_records == ()
        assert identifiers(provider.get_records()) == ["B"]

    @pytest.mark.asyncio
    async def test_restore_allowed_after_failed_delete(self) -> None:
        """Once a refused delete returns, the record is restorable again."""
        service, provider = await gated_service("A", "B")
        service.trash_current()
        provider.fail_delete_for("A", "Locked")

        task = asyncio.create_task(service.purge(Record(identifier="A")))
        await provider.entered.wait()
        provider.release.set()
        outcome = await task

        assert outcome.status is PurgeStatus.FAILED
        assert service.restore(Record(identifier="A")) is True
        assert identifiers(service.records) == ["B", "A"]

    @pytest.mark.asyncio
    async def test_update_lands_on_record_trashed_in_flight(self) -> None:
        """A confirmed update reaches the staged copy of a trashed record."""
        service, provider = await gated_service("A", "B")

        task = asyncio.create_task(
            service.update_record(Record(identifier="A"), RecordUpdate(given_name="New"))
        )
        await provider.entered.wait()
        service.trash_current()
        provider.release.set()
        outcome = await task

        assert outcome.status is UpdateStatus.UPDATED
        assert identifiers(service.records) == ["B"]
        assert service.staged_records[0].given_name == "New"

        service.restore(Record(identifier="A"))
        assert service.records[-1].given_name == "New"
