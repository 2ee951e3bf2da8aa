"""Application services for the triage system.

Available services:
- ReviewQueueService: review queue, cursor and staging store state machine
"""

from triage.application.services.review_queue_service import (
    ReviewQueueService,
    SnapshotListener,
)

__all__: list[str] = ["ReviewQueueService", "SnapshotListener"]
