"""Record provider domain errors.

Provider adapters raise these when the external record store refuses or
fails an operation. The review queue service catches them at its boundary
and turns them into outcomes or state flags, so they never escape a
queue command.

Taxonomy:
- PermissionDeniedError: access to the record store was refused
- FetchFailedError: the record stream broke before completion
- DeleteFailedError: a permanent delete was rejected
- UpdateFailedError: a field update was rejected
"""

from __future__ import annotations

from triage.domain.exceptions import TriageError


class RecordProviderError(TriageError):
    """Base exception for record provider failures.

    Attributes:
        reason: Provider-supplied description of the failure.
    """

    def __init__(self, reason: str = "") -> None:
        """Initialize with the provider's failure reason.

        Args:
            reason: Provider-supplied description of the failure.
        """
        super().__init__(reason)
        self.reason = reason


class PermissionDeniedError(RecordProviderError):
    """Raised when the provider refuses access to its records.

    Terminal for the session: the review queue stays empty and no
    automatic retry happens.
    """

    def __init__(self, reason: str = "Access to records was denied") -> None:
        """Initialize with a default denial message."""
        super().__init__(reason)


class FetchFailedError(RecordProviderError):
    """Raised when the record stream fails part way through.

    Records delivered before the failure stay in the review queue.
    """

    pass


class DeleteFailedError(RecordProviderError):
    """Raised when the provider could not permanently delete a record.

    Attributes:
        identifier: Identifier of the record that could not be deleted.
    """

    def __init__(self, identifier: str, reason: str = "") -> None:
        """Initialize with the record identifier and failure reason.

        Args:
            identifier: Identifier of the record that could not be deleted.
            reason: Provider-supplied description of the failure.
        """
        message = f"Failed to delete record {identifier}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.identifier = identifier


class UpdateFailedError(RecordProviderError):
    """Raised when the provider could not apply a record update.

    Attributes:
        identifier: Identifier of the record that could not be updated.
    """

    def __init__(self, identifier: str, reason: str = "") -> None:
        """Initialize with the record identifier and failure reason.

        Args:
            identifier: Identifier of the record that could not be updated.
            reason: Provider-supplied description of the failure.
        """
        message = f"Failed to update record {identifier}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.identifier = identifier
