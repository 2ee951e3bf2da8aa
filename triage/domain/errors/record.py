"""Record lookup errors."""

from __future__ import annotations

from triage.domain.exceptions import TriageError


class RecordNotFoundError(TriageError):
    """Raised when no record with the given identifier exists.

    Attributes:
        identifier: The identifier that was looked up.
    """

    def __init__(self, identifier: str) -> None:
        """Initialize with the missing identifier.

        Args:
            identifier: The identifier that was looked up.
        """
        super().__init__(f"Record not found: {identifier}")
        self.identifier = identifier
