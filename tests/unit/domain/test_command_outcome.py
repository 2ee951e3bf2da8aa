"""Unit tests for purge and update outcome models."""

from __future__ import annotations

from triage.domain.models.command_outcome import (
    PurgeAllResult,
    PurgeOutcome,
    PurgeStatus,
    UpdateOutcome,
    UpdateStatus,
)
from triage.domain.models.record import Record


class TestPurgeOutcome:
    """Tests for single purge outcomes."""

    def test_only_purged_counts_as_success(self) -> None:
        """FAILED and NOT_STAGED are not successes."""
        assert PurgeOutcome("A", PurgeStatus.PURGED).succeeded
        assert not PurgeOutcome("A", PurgeStatus.FAILED, reason="nope").succeeded
        assert not PurgeOutcome("A", PurgeStatus.NOT_STAGED).succeeded


class TestPurgeAllResult:
    """Tests for aggregated bulk purge results."""

    def test_partitions_outcomes(self) -> None:
        """purged lists ids, failed lists the failing outcomes."""
        failed = PurgeOutcome("B", PurgeStatus.FAILED, reason="locked")
        result = PurgeAllResult(
            outcomes=(
                PurgeOutcome("A", PurgeStatus.PURGED),
                failed,
                PurgeOutcome("C", PurgeStatus.PURGED),
            )
        )

        assert result.purged == ("A", "C")
        assert result.failed == (failed,)
        assert not result.all_succeeded

    def test_empty_result_succeeds(self) -> None:
        """Purging an empty staging store is a success."""
        result = PurgeAllResult(outcomes=())
        assert result.all_succeeded
        assert result.purged == ()


class TestUpdateOutcome:
    """Tests for update outcomes."""

    def test_updated_carries_record(self) -> None:
        """A successful outcome carries the stored record."""
        record = Record(identifier="A", given_name="New")
        outcome = UpdateOutcome("A", UpdateStatus.UPDATED, record=record)

        assert outcome.succeeded
        assert outcome.record == record

    def test_failures_are_not_successes(self) -> None:
        """FAILED and NOT_FOUND are not successes."""
        assert not UpdateOutcome("A", UpdateStatus.FAILED, reason="x").succeeded
        assert not UpdateOutcome("A", UpdateStatus.NOT_FOUND).succeeded
