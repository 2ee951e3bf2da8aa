"""
Pytest configuration and shared fixtures for triage tests.

Testing Standards:
- All async tests use pytest.mark.asyncio (auto mode enabled in pyproject.toml)
- Services are built on the in-memory stubs from triage.infrastructure.stubs
- Unit tests go in tests/unit/
- Integration tests go in tests/integration/
"""

from __future__ import annotations

import pytest

from triage.application.services.review_queue_service import ReviewQueueService
from triage.infrastructure.stubs import CursorStoreStub, RecordProviderStub
from tests.helpers import make_records


@pytest.fixture
def anyio_backend() -> str:
    """Use asyncio as the async backend."""
    return "asyncio"


@pytest.fixture
def project_version() -> str:
    """Provide the current project version for tests."""
    from triage import __version__

    return __version__


@pytest.fixture
def cursor_store() -> CursorStoreStub:
    """Empty in-memory cursor store."""
    return CursorStoreStub()


@pytest.fixture
def provider() -> RecordProviderStub:
    """Provider stub serving records A..F in batches of two."""
    return RecordProviderStub.with_records(*make_records("A", "B", "C", "D", "E", "F"))


@pytest.fixture
def service(provider: RecordProviderStub, cursor_store: CursorStoreStub) -> ReviewQueueService:
    """Review queue service wired to the stubs, not yet initialized."""
    return ReviewQueueService(provider=provider, cursor_store=cursor_store)


@pytest.fixture
async def loaded_service(service: ReviewQueueService) -> ReviewQueueService:
    """Review queue service with records A..F loaded."""
    await service.initialize()
    return service
