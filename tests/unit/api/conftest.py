"""Fixtures for review API tests.

The client is created without entering the app's lifespan, so startup
wiring never runs; each test injects a service built on stubs instead.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from triage.api.dependencies.review_queue import (
    reset_review_queue_service,
    set_review_queue_service,
)
from triage.api.main import app
from triage.application.services.review_queue_service import ReviewQueueService
from triage.infrastructure.stubs import CursorStoreStub, RecordProviderStub
from tests.helpers import make_records


@pytest.fixture
def api_provider() -> RecordProviderStub:
    """Provider stub holding records A, B and C."""
    return RecordProviderStub.with_records(*make_records("A", "B", "C"))


@pytest.fixture
def api_cursor_store() -> CursorStoreStub:
    """Fresh cursor store stub."""
    return CursorStoreStub()


@pytest.fixture
def api_service(
    api_provider: RecordProviderStub, api_cursor_store: CursorStoreStub
) -> ReviewQueueService:
    """Review queue service that finished initialization."""
    service = ReviewQueueService(provider=api_provider, cursor_store=api_cursor_store)
    asyncio.run(service.initialize())
    return service


@pytest.fixture
def client(api_service: ReviewQueueService) -> Iterator[TestClient]:
    """Test client with the stub-backed service injected."""
    set_review_queue_service(api_service)
    yield TestClient(app)
    reset_review_queue_service()


@pytest.fixture
def bare_client() -> Iterator[TestClient]:
    """Test client with no service injected."""
    reset_review_queue_service()
    yield TestClient(app)
    reset_review_queue_service()
