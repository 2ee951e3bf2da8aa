"""Unit tests for ReviewQueueService cursor and staging commands.

Covers load, advance, trash_current, restore, validate_index and the
snapshot subscription, including the three documented review sessions:
- keep/trash walk over [A..F]
- trashing the only record
- restoring into an empty queue
"""

from __future__ import annotations

import pytest

from triage.application.services.review_queue_service import ReviewQueueService
from triage.domain.models.record import Record
from triage.domain.models.review_snapshot import ReviewSnapshot
from triage.infrastructure.stubs import CursorStoreStub, RecordProviderStub
from tests.helpers import identifiers, make_records


def build_service(
    *ids: str, cursor: int | None = None
) -> tuple[ReviewQueueService, CursorStoreStub]:
    """Service with the given records loaded directly and a saved cursor."""
    store = CursorStoreStub(initial=cursor)
    service = ReviewQueueService(provider=RecordProviderStub(), cursor_store=store)
    service.load(make_records(*ids))
    return service, store


class TestLoad:
    """Tests for appending record batches."""

    def test_batches_append_in_order(self) -> None:
        """Each batch is appended after the previous one."""
        service, _ = build_service()

        assert service.load(make_records("A", "B")) == 2
        assert service.load(make_records("C")) == 1

        assert identifiers(service.records) == ["A", "B", "C"]

    def test_duplicate_identifiers_skipped(self) -> None:
        """A record already queued is not added twice."""
        service, _ = build_service("A", "B")

        added = service.load([Record(identifier="B", given_name="Other"), *make_records("C")])

        assert added == 1
        assert identifiers(service.records) == ["A", "B", "C"]
        assert service.records[1].given_name == "Name B"

    def test_staged_identifiers_skipped(self) -> None:
        """A record waiting in staging is not loaded back into the queue."""
        service, _ = build_service("A", "B")
        service.trash_current()

        service.load(make_records("A"))

        assert identifiers(service.records) == ["B"]
        assert identifiers(service.staged_records) == ["A"]

    def test_load_does_not_fix_cursor(self) -> None:
        """An out-of-range persisted cursor survives load()."""
        service, store = build_service("A", "B", cursor=9)

        assert service.cursor == 9
        assert store.save_count == 0


class TestQueries:
    """Tests for read-only queries."""

    def test_empty_queue(self) -> None:
        """A fresh service has nothing to review."""
        service, _ = build_service()

        assert service.current_record() is None
        assert service.has_next() is False
        assert service.queue_length == 0
        assert service.staging_length == 0

    def test_current_record_at_cursor(self) -> None:
        """current_record() returns the record at the cursor."""
        service, _ = build_service("A", "B", "C", cursor=1)

        current = service.current_record()
        assert current is not None
        assert current.identifier == "B"
        assert service.has_next() is True

    def test_current_record_none_when_cursor_out_of_range(self) -> None:
        """A cursor past the end yields no current record."""
        service, _ = build_service("A", cursor=5)

        assert service.current_record() is None
        assert service.has_next() is False

    def test_find_by_identifier(self) -> None:
        """find_record and find_staged look up by identifier."""
        service, _ = build_service("A", "B")
        service.trash_current()

        assert service.find_record("B") is not None
        assert service.find_record("A") is None
        assert service.find_staged("A") is not None
        assert service.find_staged("B") is None


class TestAdvance:
    """Tests for keeping the current record."""

    def test_advance_moves_and_persists(self) -> None:
        """advance() moves the cursor by one and saves it."""
        service, store = build_service("A", "B", "C")

        service.advance()

        assert service.cursor == 1
        assert store.get_save_history() == [1]

    def test_advance_to_end(self) -> None:
        """Advancing past the last record lands on queue_length."""
        service, store = build_service("A", "B", cursor=1)

        service.advance()

        assert service.cursor == 2
        assert service.has_next() is False
        assert store.get_save_history() == [2]

    def test_advance_at_end_is_noop(self) -> None:
        """advance() at the end neither moves nor persists."""
        service, store = build_service("A", "B", cursor=2)

        service.advance()

        assert service.cursor == 2
        assert store.save_count == 0

    def test_advance_on_empty_queue_is_noop(self) -> None:
        """advance() with no records does nothing."""
        service, store = build_service()

        service.advance()

        assert service.cursor == 0
        assert store.save_count == 0

    def test_advance_with_cursor_beyond_loaded_records_is_noop(self) -> None:
        """A saved cursor ahead of a partial queue is kept for validate_index()."""
        service, store = build_service("A", "B", "C", cursor=10)

        service.advance()

        assert service.cursor == 10
        assert store.save_count == 0

    def test_advance_never_changes_records(self) -> None:
        """Keeping records does not reorder or remove them."""
        service, _ = build_service("A", "B", "C")

        for _ in range(5):
            service.advance()

        assert identifiers(service.records) == ["A", "B", "C"]
        assert service.staged_records == ()


class TestTrashCurrent:
    """Tests for moving the current record to staging."""

    def test_trash_in_middle_keeps_cursor(self) -> None:
        """The next record slides into the current position."""
        service, store = build_service("A", "B", "C", cursor=1)

        service.trash_current()

        assert identifiers(service.records) == ["A", "C"]
        assert identifiers(service.staged_records) == ["B"]
        assert service.cursor == 1
        assert store.get_save_history() == [1]

    def test_trash_last_steps_back(self) -> None:
        """Trashing the last record moves the cursor to the new last one."""
        service, store = build_service("A", "B", "C", cursor=2)

        service.trash_current()

        assert identifiers(service.records) == ["A", "B"]
        assert service.cursor == 1
        assert store.get_save_history() == [1]

    def test_trash_appends_to_staging_in_arrival_order(self) -> None:
        """Staging keeps trash order."""
        service, _ = build_service("A", "B", "C")

        service.advance()
        service.trash_current()  # B
        service.trash_current()  # C
        service.trash_current()  # A (cursor stepped back to 0)

        assert identifiers(service.staged_records) == ["B", "C", "A"]
        assert service.records == ()

    def test_trash_at_end_is_noop(self) -> None:
        """No current record: nothing moves and nothing is saved."""
        service, store = build_service("A", "B", cursor=2)

        service.trash_current()

        assert identifiers(service.records) == ["A", "B"]
        assert service.staged_records == ()
        assert store.save_count == 0

    def test_trash_with_negative_cursor_is_noop(self) -> None:
        """A negative saved cursor never pops from the end of the queue."""
        service, store = build_service("A", "B", "C", cursor=-1)

        service.trash_current()

        assert identifiers(service.records) == ["A", "B", "C"]
        assert service.staged_records == ()
        assert store.save_count == 0


class TestRestore:
    """Tests for moving staged records back into the queue."""

    def test_restore_appends_to_queue_end(self) -> None:
        """A restored record goes to the end of the queue."""
        service, store = build_service("A", "B", "C")
        service.trash_current()  # A
        saves_before = store.save_count

        assert service.restore(Record(identifier="A")) is True

        assert identifiers(service.records) == ["B", "C", "A"]
        assert service.staged_records == ()
        assert service.cursor == 0
        assert store.save_count == saves_before

    def test_restore_keeps_original_record_data(self) -> None:
        """The staged entry is restored, not the argument."""
        service, _ = build_service("A", "B")
        service.trash_current()

        service.restore(Record(identifier="A", given_name="Stale copy"))

        assert service.records[-1].given_name == "Name A"

    def test_restore_unknown_is_noop(self) -> None:
        """Restoring a record that is not staged changes nothing."""
        service, _ = build_service("A", "B")

        assert service.restore(Record(identifier="Z")) is False
        assert identifiers(service.records) == ["A", "B"]

    def test_restore_is_idempotent(self) -> None:
        """A second restore of the same record is a no-op."""
        service, _ = build_service("A", "B")
        service.trash_current()

        assert service.restore(Record(identifier="A")) is True
        assert service.restore(Record(identifier="A")) is False
        assert identifiers(service.records) == ["B", "A"]

    def test_restore_after_review_finished_gives_new_current_record(self) -> None:
        """With the cursor at the end, a restore makes has_next() true again."""
        service, _ = build_service("A", "B", cursor=1)
        service.trash_current()  # B, cursor steps back to A
        service.advance()

        assert service.cursor == 1
        assert not service.has_next()

        service.restore(Record(identifier="B"))

        current = service.current_record()
        assert current is not None
        assert current.identifier == "B"


class TestValidateIndex:
    """Tests for cursor clamping."""

    def test_cursor_past_end_clamped_to_last(self) -> None:
        """A cursor beyond the queue moves to the last record and is saved."""
        service, store = build_service("A", "B", "C", cursor=7)

        assert service.validate_index() is True

        assert service.cursor == 2
        assert store.get_save_history() == [2]

    def test_cursor_at_end_is_valid(self) -> None:
        """cursor == queue_length is in range; nothing is saved."""
        service, store = build_service("A", "B", cursor=2)

        assert service.validate_index() is False

        assert service.cursor == 2
        assert store.save_count == 0

    def test_empty_queue_clamps_to_zero(self) -> None:
        """With no records any positive cursor becomes 0."""
        service, store = build_service(cursor=4)

        service.validate_index()

        assert service.cursor == 0
        assert store.get_save_history() == [0]

    def test_negative_cursor_clamped_to_zero(self) -> None:
        """A corrupt negative cursor becomes 0."""
        service, store = build_service("A", cursor=-3)

        assert service.validate_index() is True
        assert service.cursor == 0
        assert store.get_save_history() == [0]

    def test_validate_is_idempotent(self) -> None:
        """A second call changes and saves nothing."""
        service, store = build_service("A", "B", cursor=9)

        service.validate_index()
        service.validate_index()

        assert store.get_save_history() == [1]


class TestReviewSessions:
    """End-to-end review sessions against in-memory stubs."""

    def test_keep_and_trash_walk(self) -> None:
        """advance, trash, advance, advance, trash, advance over [A..F]."""
        service, _ = build_service("A", "B", "C", "D", "E", "F")

        service.advance()
        service.trash_current()
        service.advance()
        service.advance()
        service.trash_current()
        service.advance()

        assert identifiers(service.records) == ["A", "C", "D", "F"]
        assert identifiers(service.staged_records) == ["B", "E"]
        assert service.cursor == 4
        assert service.has_next() is False

    def test_trash_only_record(self) -> None:
        """Trashing the single record empties the queue; further commands are no-ops."""
        service, store = build_service("X")

        service.trash_current()

        assert service.records == ()
        assert identifiers(service.staged_records) == ["X"]
        assert service.cursor == 0

        saves = store.save_count
        service.trash_current()
        service.advance()

        assert service.records == ()
        assert identifiers(service.staged_records) == ["X"]
        assert service.cursor == 0
        assert store.save_count == saves

    def test_restore_into_empty_queue(self) -> None:
        """Restoring P with the queue empty makes P current."""
        service, _ = build_service("P", "Q", "R")
        service.trash_current()
        service.trash_current()
        service.trash_current()

        assert service.records == ()
        assert identifiers(service.staged_records) == ["P", "Q", "R"]
        assert service.cursor == 0

        service.restore(Record(identifier="P"))

        assert identifiers(service.records) == ["P"]
        assert identifiers(service.staged_records) == ["Q", "R"]
        assert service.cursor == 0
        current = service.current_record()
        assert current is not None
        assert current.identifier == "P"


class TestSubscribe:
    """Tests for snapshot publication."""

    def test_listener_receives_snapshot_after_mutation(self) -> None:
        """Every completed command publishes the new state."""
        service, _ = build_service("A", "B")
        received: list[ReviewSnapshot] = []
        service.subscribe(received.append)

        service.advance()

        assert len(received) == 1
        assert received[0].cursor == 1
        assert identifiers(received[0].records) == ["A", "B"]

    def test_snapshot_is_detached_from_later_changes(self) -> None:
        """A published snapshot does not change when the queue does."""
        service, _ = build_service("A", "B")
        received: list[ReviewSnapshot] = []
        service.subscribe(received.append)

        service.trash_current()
        first = received[-1]
        service.restore(Record(identifier="A"))

        assert identifiers(first.records) == ["B"]
        assert identifiers(first.staged) == ["A"]
        assert identifiers(received[-1].records) == ["B", "A"]

    def test_noop_commands_publish_nothing(self) -> None:
        """No state change, no snapshot."""
        service, _ = build_service("A", cursor=1)
        received: list[ReviewSnapshot] = []
        service.subscribe(received.append)

        service.advance()
        service.trash_current()
        service.restore(Record(identifier="Z"))

        assert received == []

    def test_unsubscribe_stops_delivery(self) -> None:
        """The returned callable removes the listener."""
        service, _ = build_service("A", "B", "C")
        received: list[ReviewSnapshot] = []
        unsubscribe = service.subscribe(received.append)

        service.advance()
        unsubscribe()
        service.advance()

        assert len(received) == 1

    def test_unsubscribe_twice_is_harmless(self) -> None:
        """Calling the unsubscribe callable again does nothing."""
        service, _ = build_service("A")
        unsubscribe = service.subscribe(lambda snapshot: None)

        unsubscribe()
        unsubscribe()

    def test_listener_errors_propagate(self) -> None:
        """A failing listener is not silenced."""
        service, _ = build_service("A", "B")

        def broken(snapshot: ReviewSnapshot) -> None:
            raise RuntimeError("listener bug")

        service.subscribe(broken)

        with pytest.raises(RuntimeError, match="listener bug"):
            service.advance()
