"""Record provider port.

This module defines the protocol for the external source of truth that
supplies records and performs durable delete/update operations on them.
The review queue never talks to a contact store directly; it goes through
this port.

Initialization is two-stage:
    1. ``await provider.request_permission()`` answers once.
    2. If granted, ``async for batch in provider.stream_records()`` delivers
       records in batches. Exhausting the iterator is the completion signal.

Failure contract:
- request_permission() returns False on denial (it does not raise).
- stream_records() raises FetchFailedError if the stream breaks; batches
  already yielded remain valid.
- delete() raises DeleteFailedError, update() raises UpdateFailedError.

Usage:
    class AddressBookProvider(RecordProviderProtocol):
        async def request_permission(self) -> bool:
            ...

    provider: RecordProviderProtocol = AddressBookProvider()
    if await provider.request_permission():
        async for batch in provider.stream_records():
            ...
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from triage.domain.models.record import Record, RecordUpdate


@runtime_checkable
class RecordProviderProtocol(Protocol):
    """Protocol for the external record store.

    Implementations may wrap an OS address book, a file export, a remote
    API, or an in-memory stub. Each call either completes or raises a
    RecordProviderError subclass; nothing is retried by the caller.
    """

    async def request_permission(self) -> bool:
        """Ask for access to the records.

        Returns:
            True if access was granted, False if it was denied.
        """
        ...

    def stream_records(self) -> AsyncIterator[list["Record"]]:
        """Stream every record in provider order.

        Only meaningful after permission was granted. Implemented as an
        async generator; iteration ending is the completion signal.

        Yields:
            Batches of records, in provider order.

        Raises:
            FetchFailedError: If the stream fails before completion.
        """
        ...

    async def delete(self, record: "Record") -> None:
        """Permanently delete a record from the store.

        Args:
            record: Record to delete (matched by identifier).

        Raises:
            DeleteFailedError: If the store rejected the delete.
        """
        ...

    async def update(self, record: "Record", update: "RecordUpdate") -> "Record":
        """Apply field changes to a record in the store.

        Args:
            record: Record to change (matched by identifier).
            update: Fields to change; None fields are left as they are.

        Returns:
            The record as stored after the update.

        Raises:
            UpdateFailedError: If the store rejected the update.
        """
        ...


__all__ = ["RecordProviderProtocol"]
