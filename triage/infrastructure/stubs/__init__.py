"""Infrastructure stubs for development and testing.

This module provides stub implementations of infrastructure ports
for use in development and testing environments.

Available stubs:
- RecordProviderStub: In-memory records with permission, stream-break and
  delete/update failure injection
- CursorStoreStub: In-memory cursor with save history

WARNING: These stubs are NOT for production use.
Production implementations are in triage/infrastructure/adapters/.
"""

from triage.infrastructure.stubs.cursor_store_stub import CursorStoreStub
from triage.infrastructure.stubs.record_provider_stub import (
    ProviderCall,
    RecordProviderStub,
)

__all__: list[str] = ["CursorStoreStub", "RecordProviderStub", "ProviderCall"]
