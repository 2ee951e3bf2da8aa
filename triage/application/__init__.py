"""
Application layer - Use cases and orchestration for the triage system.

This layer contains:
- Application services (review queue state machine)
- Port definitions (abstract interfaces for infrastructure)

IMPORT RULES:
- CAN import from: domain
- CAN import from: infrastructure.observability (cross-cutting logging)
- CANNOT import from: api
"""

from triage.application.ports import CursorStoreProtocol, RecordProviderProtocol

__all__: list[str] = ["RecordProviderProtocol", "CursorStoreProtocol"]
