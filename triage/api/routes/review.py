"""Review queue API routes.

FastAPI router exposing the review queue commands:
- Snapshot of queue, staging store and cursor
- Keep (advance) and trash the current record
- Restore, purge and bulk purge staged records
- Update fields of a queued record
- Re-run permission request and record loading

Developer Golden Rules:
1. NO-OPS ARE NOT ERRORS - Restoring or purging an identifier that is not
   staged answers 200 with unchanged state, so retries are safe; only
   record edits 404 on an unknown identifier
2. PROVIDER FAILURES ARE 502 - A refused delete/update is reported with
   the provider's reason; local state is unchanged
3. FAIL LOUD - Return meaningful RFC 7807 error responses
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from triage.api.dependencies.review_queue import get_review_queue_service
from triage.api.models.review import (
    LoadStateEnum,
    PurgeAllResponse,
    PurgeOutcomeResponse,
    PurgeStatusEnum,
    RecordResponse,
    ReviewErrorResponse,
    ReviewStateResponse,
    UpdateRecordRequest,
    UpdateRecordResponse,
)
from triage.application.services.review_queue_service import ReviewQueueService
from triage.domain.models.command_outcome import PurgeOutcome, PurgeStatus, UpdateStatus
from triage.domain.models.record import Record, RecordUpdate
from triage.domain.models.review_snapshot import ReviewSnapshot

router = APIRouter(prefix="/v1/review", tags=["review"])

ERROR_TYPE_BASE = "https://triage.example.com/errors"


# =============================================================================
# Type Mapping
# =============================================================================


def _record_to_api(record: Record) -> RecordResponse:
    """Convert domain Record to API response model."""
    return RecordResponse(
        identifier=record.identifier,
        given_name=record.given_name,
        family_name=record.family_name,
        display_name=record.display_name,
        phone_numbers=list(record.phone_numbers),
        email_addresses=list(record.email_addresses),
    )


def _snapshot_to_api(snapshot: ReviewSnapshot) -> ReviewStateResponse:
    """Convert domain ReviewSnapshot to API response model."""
    current = snapshot.current_record
    return ReviewStateResponse(
        records=[_record_to_api(r) for r in snapshot.records],
        staged=[_record_to_api(r) for r in snapshot.staged],
        cursor=snapshot.cursor,
        current_record=_record_to_api(current) if current is not None else None,
        has_next=snapshot.has_next,
        queue_length=snapshot.queue_length,
        staging_length=snapshot.staging_length,
        has_permission=snapshot.has_permission,
        load_state=LoadStateEnum(snapshot.load_state.value),
        load_error=snapshot.load_error,
    )


def _purge_outcome_to_api(outcome: PurgeOutcome) -> PurgeOutcomeResponse:
    """Convert domain PurgeOutcome to API response model."""
    return PurgeOutcomeResponse(
        identifier=outcome.identifier,
        status=PurgeStatusEnum(outcome.status.value),
        reason=outcome.reason,
    )


def _update_request_to_domain(request: UpdateRecordRequest) -> RecordUpdate:
    """Convert API update request to domain RecordUpdate."""
    return RecordUpdate(
        given_name=request.given_name,
        family_name=request.family_name,
        phone_numbers=tuple(request.phone_numbers) if request.phone_numbers is not None else None,
        email_addresses=(
            tuple(request.email_addresses) if request.email_addresses is not None else None
        ),
    )


def _error(status: int, slug: str, title: str, detail: str, instance: str) -> JSONResponse:
    """Build an RFC 7807 error response."""
    body = ReviewErrorResponse(
        type=f"{ERROR_TYPE_BASE}/{slug}",
        title=title,
        status=status,
        detail=detail,
        instance=instance,
    )
    return JSONResponse(status_code=status, content=body.model_dump())


_ERROR_RESPONSES: dict[int | str, dict[str, object]] = {
    503: {
        "model": ReviewErrorResponse,
        "description": "Service Unavailable - Review queue not initialized",
    },
}


# =============================================================================
# Review State
# =============================================================================


@router.get("", response_model=ReviewStateResponse, responses=_ERROR_RESPONSES)
async def get_review_state(
    service: ReviewQueueService = Depends(get_review_queue_service),
) -> ReviewStateResponse:
    """Get the current review state.

    Returns:
        ReviewStateResponse with queue, staging store, cursor and load progress.
    """
    return _snapshot_to_api(service.snapshot())


@router.post("/initialize", response_model=ReviewStateResponse, responses=_ERROR_RESPONSES)
async def initialize_review(
    service: ReviewQueueService = Depends(get_review_queue_service),
) -> ReviewStateResponse:
    """Request access to the records again and load them.

    Used after access was denied and later granted. Records already in the
    queue or staging store are not loaded twice.

    Returns:
        ReviewStateResponse once initialization finished.
    """
    snapshot = await service.initialize()
    return _snapshot_to_api(snapshot)


# =============================================================================
# Cursor Commands
# =============================================================================


@router.post("/advance", response_model=ReviewStateResponse, responses=_ERROR_RESPONSES)
async def advance(
    service: ReviewQueueService = Depends(get_review_queue_service),
) -> ReviewStateResponse:
    """Keep the current record and move to the next one.

    A no-op when review is already finished.
    """
    service.advance()
    return _snapshot_to_api(service.snapshot())


@router.post("/trash", response_model=ReviewStateResponse, responses=_ERROR_RESPONSES)
async def trash_current(
    service: ReviewQueueService = Depends(get_review_queue_service),
) -> ReviewStateResponse:
    """Move the current record to the staging store.

    A no-op when there is no current record.
    """
    service.trash_current()
    return _snapshot_to_api(service.snapshot())


# =============================================================================
# Staging Commands
# =============================================================================


@router.post(
    "/staging/{identifier}/restore",
    response_model=ReviewStateResponse,
    responses=_ERROR_RESPONSES,
)
async def restore_record(
    identifier: str,
    service: ReviewQueueService = Depends(get_review_queue_service),
) -> ReviewStateResponse:
    """Move a staged record back to the end of the review queue.

    Restoring an identifier that is not staged, or whose purge is in
    flight, changes nothing and returns the current state.

    Args:
        identifier: Identifier of the staged record.

    Returns:
        ReviewStateResponse after the restore.
    """
    service.restore(Record(identifier=identifier))
    return _snapshot_to_api(service.snapshot())


@router.delete(
    "/staging/{identifier}",
    response_model=PurgeOutcomeResponse,
    responses={
        502: {"model": ReviewErrorResponse, "description": "Record provider refused the delete"},
        **_ERROR_RESPONSES,
    },
)
async def purge_record(
    identifier: str,
    request: Request,
    service: ReviewQueueService = Depends(get_review_queue_service),
) -> PurgeOutcomeResponse | JSONResponse:
    """Permanently delete one staged record.

    Purging an identifier that is not staged (for example a retry after a
    successful purge) is a no-op reported with status NOT_STAGED.

    Args:
        identifier: Identifier of the staged record.

    Returns:
        PurgeOutcomeResponse with status PURGED or NOT_STAGED.

    Raises:
        502: The record provider refused the delete; the record stays staged.
    """
    outcome = await service.purge(Record(identifier=identifier))
    if outcome.status is PurgeStatus.FAILED:
        return _error(
            502,
            "delete-failed",
            "Delete Failed",
            outcome.reason or f"Failed to delete record {identifier}",
            request.url.path,
        )

    return _purge_outcome_to_api(outcome)


@router.delete("/staging", response_model=PurgeAllResponse, responses=_ERROR_RESPONSES)
async def purge_all(
    service: ReviewQueueService = Depends(get_review_queue_service),
) -> PurgeAllResponse:
    """Permanently delete every staged record.

    Failures do not stop the bulk purge; each record's outcome is reported
    and refused records stay staged.

    Returns:
        PurgeAllResponse with one outcome per record that was staged.
    """
    result = await service.purge_all()
    return PurgeAllResponse(
        outcomes=[_purge_outcome_to_api(o) for o in result.outcomes],
        purged_count=len(result.purged),
        failed_count=len(result.failed),
        staging_length=service.staging_length,
    )


# =============================================================================
# Record Editing
# =============================================================================


@router.patch(
    "/records/{identifier}",
    response_model=UpdateRecordResponse,
    responses={
        400: {"model": ReviewErrorResponse, "description": "Update changes no field"},
        404: {"model": ReviewErrorResponse, "description": "Record is not in the queue"},
        502: {"model": ReviewErrorResponse, "description": "Record provider refused the update"},
        **_ERROR_RESPONSES,
    },
)
async def update_record(
    identifier: str,
    body: UpdateRecordRequest,
    request: Request,
    service: ReviewQueueService = Depends(get_review_queue_service),
) -> UpdateRecordResponse | JSONResponse:
    """Change fields of a record in the review queue.

    Args:
        identifier: Identifier of the queued record.
        body: Fields to change; omitted fields stay as they are.

    Returns:
        UpdateRecordResponse with the stored record.

    Raises:
        400: The request changes no field.
        404: No queued record has this identifier.
        502: The record provider refused the update; the queue is unchanged.
    """
    update = _update_request_to_domain(body)
    if update.is_empty():
        return _error(
            400,
            "invalid-request",
            "Invalid Request",
            "Update must change at least one field",
            request.url.path,
        )

    record = service.find_record(identifier)
    if record is None:
        return _error(
            404,
            "record-not-found",
            "Record Not Found",
            f"No queued record with identifier {identifier}",
            request.url.path,
        )

    outcome = await service.update_record(record, update)
    if outcome.status is UpdateStatus.NOT_FOUND:
        return _error(
            404,
            "record-not-found",
            "Record Not Found",
            f"No queued record with identifier {identifier}",
            request.url.path,
        )
    if outcome.status is UpdateStatus.FAILED or outcome.record is None:
        return _error(
            502,
            "update-failed",
            "Update Failed",
            outcome.reason or f"Failed to update record {identifier}",
            request.url.path,
        )

    return UpdateRecordResponse(
        record=_record_to_api(outcome.record),
        updated_fields=sorted(update.changed_fields()),
    )
