"""API models for the review queue endpoints.

Pydantic models for request/response payloads of the review API:
- Review state snapshots (queue, staging, cursor, load progress)
- Purge outcomes, single and bulk
- Record field updates
- RFC 7807 error bodies
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class LoadStateEnum(str, Enum):
    """Progress of review queue initialization.

    Values:
        NOT_STARTED: initialization has not run
        AWAITING_PERMISSION: waiting for the record provider's answer
        LOADING: records are streaming in
        COMPLETE: all records loaded
        PERMISSION_DENIED: access to the records was refused
        FAILED: the record stream broke; delivered records were kept
    """

    NOT_STARTED = "NOT_STARTED"
    AWAITING_PERMISSION = "AWAITING_PERMISSION"
    LOADING = "LOADING"
    COMPLETE = "COMPLETE"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    FAILED = "FAILED"


class PurgeStatusEnum(str, Enum):
    """Result of a single purge attempt."""

    PURGED = "PURGED"
    FAILED = "FAILED"
    NOT_STAGED = "NOT_STAGED"


class RecordResponse(BaseModel):
    """A contact record.

    Attributes:
        identifier: Stable identifier assigned by the record provider
        given_name: Given name (may be empty)
        family_name: Family name (may be empty)
        display_name: Given and family name joined
        phone_numbers: Phone numbers in provider order
        email_addresses: Email addresses in provider order
    """

    identifier: str = Field(..., description="Stable identifier assigned by the record provider")
    given_name: str = Field("", description="Given name")
    family_name: str = Field("", description="Family name")
    display_name: str = Field("", description="Given and family name joined")
    phone_numbers: list[str] = Field(default_factory=list)
    email_addresses: list[str] = Field(default_factory=list)


class ReviewStateResponse(BaseModel):
    """Snapshot of the review queue, staging store and cursor.

    Attributes:
        records: Records awaiting review, in order
        staged: Records in the staging store, in trash order
        cursor: Index of the current record; equals queue_length when done
        current_record: Record under the cursor, if any
        has_next: Whether a current record exists
        queue_length: Number of records awaiting review
        staging_length: Number of staged records
        has_permission: Whether the record provider granted access
        load_state: Progress of initialization
        load_error: Reason the record stream failed, if it did
    """

    records: list[RecordResponse]
    staged: list[RecordResponse]
    cursor: int = Field(..., ge=0)
    current_record: RecordResponse | None = None
    has_next: bool
    queue_length: int = Field(..., ge=0)
    staging_length: int = Field(..., ge=0)
    has_permission: bool
    load_state: LoadStateEnum
    load_error: str | None = None


class PurgeOutcomeResponse(BaseModel):
    """Outcome of purging one staged record.

    Attributes:
        identifier: Identifier of the targeted record
        status: What happened
        reason: Provider failure reason when status is FAILED
    """

    identifier: str
    status: PurgeStatusEnum
    reason: str | None = None


class PurgeAllResponse(BaseModel):
    """Outcomes of a bulk purge, in staging order.

    Attributes:
        outcomes: One outcome per record staged when the purge started
        purged_count: Number of records deleted
        failed_count: Number of records the provider refused to delete
        staging_length: Records left in staging afterwards
    """

    outcomes: list[PurgeOutcomeResponse]
    purged_count: int = Field(..., ge=0)
    failed_count: int = Field(..., ge=0)
    staging_length: int = Field(..., ge=0)


class UpdateRecordRequest(BaseModel):
    """Fields to change on a queued record; omitted fields stay as they are.

    Attributes:
        given_name: New given name
        family_name: New family name
        phone_numbers: Replacement phone number list
        email_addresses: Replacement email address list
    """

    given_name: str | None = None
    family_name: str | None = None
    phone_numbers: list[str] | None = None
    email_addresses: list[str] | None = None


class UpdateRecordResponse(BaseModel):
    """Result of a successful record update.

    Attributes:
        record: The record as stored after the update
        updated_fields: Names of the fields that changed
    """

    record: RecordResponse
    updated_fields: list[str]


class ReviewErrorResponse(BaseModel):
    """RFC 7807 error response for review endpoints.

    Attributes:
        type: URI identifying the error type
        title: Short summary of the error
        status: HTTP status code
        detail: Human-readable explanation
        instance: Request path that produced the error
    """

    type: str
    title: str
    status: int
    detail: str
    instance: str
