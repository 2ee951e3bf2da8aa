"""Application ports - Abstract interfaces for infrastructure adapters.

This module defines the contracts that infrastructure adapters must implement.
Ports enable dependency inversion and make the application layer testable.

Available ports:
- RecordProviderProtocol: external record store (permission, stream, delete, update)
- CursorStoreProtocol: durable single-integer review cursor
"""

from triage.application.ports.cursor_store import DEFAULT_CURSOR_KEY, CursorStoreProtocol
from triage.application.ports.record_provider import RecordProviderProtocol

__all__: list[str] = ["RecordProviderProtocol", "CursorStoreProtocol", "DEFAULT_CURSOR_KEY"]
