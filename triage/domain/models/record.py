"""Record domain model.

A Record is the unit under review: a contact with a stable, externally
assigned identifier. Every other field is display data that the review
queue never inspects. Records are compared by identifier only, never by
object identity or by their display fields.

Usage:
    record = Record(identifier="A1", given_name="Ada", family_name="Lovelace")

    update = RecordUpdate(email_addresses=("ada@example.com",))
    updated = record.with_update(update)
    assert updated.same_record(record)
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any


@dataclass(frozen=True)
class Record:
    """A contact record under review.

    This is a pure domain value object with no I/O dependencies.
    The model is immutable (frozen dataclass); updates produce a new
    instance carrying the same identifier.

    Attributes:
        identifier: Stable unique identifier assigned by the record provider.
        given_name: Given (first) name, may be empty.
        family_name: Family (last) name, may be empty.
        phone_numbers: Phone numbers in provider order.
        email_addresses: Email addresses in provider order.
    """

    identifier: str
    given_name: str = ""
    family_name: str = ""
    phone_numbers: tuple[str, ...] = field(default_factory=tuple)
    email_addresses: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        """Validate the identifier."""
        if not self.identifier:
            raise ValueError("Record identifier must be a non-empty string")

    @property
    def display_name(self) -> str:
        """Given and family name joined, or empty if both are blank."""
        return " ".join(part for part in (self.given_name, self.family_name) if part)

    def same_record(self, other: Record) -> bool:
        """Check whether two records refer to the same provider entry.

        Args:
            other: Record to compare against.

        Returns:
            True if both records carry the same identifier.
        """
        return self.identifier == other.identifier

    def with_update(self, update: RecordUpdate) -> Record:
        """Return a copy with the update's fields merged in.

        Fields left as None in the update keep their current value.
        The identifier never changes.

        Args:
            update: Fields to change.

        Returns:
            New Record with merged fields.
        """
        return replace(self, **update.changed_fields())

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-compatible dictionary."""
        return {
            "identifier": self.identifier,
            "given_name": self.given_name,
            "family_name": self.family_name,
            "phone_numbers": list(self.phone_numbers),
            "email_addresses": list(self.email_addresses),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Record:
        """Create from a dictionary (for loading from storage).

        Args:
            data: Dictionary with at least an "identifier" key.

        Returns:
            Record built from the dictionary.

        Raises:
            ValueError: If the identifier is missing or empty.
        """
        identifier = data.get("identifier")
        if not isinstance(identifier, str):
            raise ValueError(f"Record identifier must be a string, got {identifier!r}")
        return cls(
            identifier=identifier,
            given_name=data.get("given_name") or "",
            family_name=data.get("family_name") or "",
            phone_numbers=tuple(data.get("phone_numbers") or ()),
            email_addresses=tuple(data.get("email_addresses") or ()),
        )


@dataclass(frozen=True)
class RecordUpdate:
    """Fields to change on a record; None means "leave as is".

    Attributes:
        given_name: New given name.
        family_name: New family name.
        phone_numbers: Replacement phone number list.
        email_addresses: Replacement email address list.
    """

    given_name: str | None = None
    family_name: str | None = None
    phone_numbers: tuple[str, ...] | None = None
    email_addresses: tuple[str, ...] | None = None

    def changed_fields(self) -> dict[str, Any]:
        """Return only the fields that carry a new value."""
        candidates = {
            "given_name": self.given_name,
            "family_name": self.family_name,
            "phone_numbers": self.phone_numbers,
            "email_addresses": self.email_addresses,
        }
        return {name: value for name, value in candidates.items() if value is not None}

    def is_empty(self) -> bool:
        """True when the update would change nothing."""
        return not self.changed_fields()
