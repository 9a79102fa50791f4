"""Organization side of self-reported hours validation.

Approving stamps the record with a verification hash and makes it permanent.
Rejecting requires a reason and leaves the record editable so the volunteer
can resubmit.
"""

from __future__ import annotations

import hashlib
import logging
import math
from datetime import date, datetime

from gpc.config import get_settings
from gpc.db.models import SelfReportedHours, ValidationRequest
from gpc.exceptions import (
    ContributionError,
    InvalidTransition,
    NotFound,
    StoreError,
    ValidationError,
)
from gpc.store import RecordStore, StoreSession
from gpc.time_utils import as_utc, utc_now, utc_today
from gpc.volunteer.rules import validate_transition, window_closes_on
from gpc.volunteer.schemas import (
    BatchValidationInput,
    BatchValidationResult,
    RequestStatus,
    SelfReportedHoursResponse,
    ValidationQueueItem,
    ValidationResponseInput,
    ValidationStatus,
)

logger = logging.getLogger(__name__)


def generate_verification_hash(record: SelfReportedHours, request_id: str, validated_at: datetime) -> str:
    """Deterministic 0x-prefixed SHA-256 over the record's identifying fields and the approval."""
    payload = ":".join([
        record.id,
        record.volunteer_id,
        record.activity_date.isoformat(),
        f"{float(record.hours):.1f}",
        request_id,
        as_utc(validated_at).isoformat(),
    ])
    return "0x" + hashlib.sha256(payload.encode()).hexdigest()


async def _get_request(tx: StoreSession, request_id: str) -> ValidationRequest:
    request = await tx.get_row(ValidationRequest, ValidationRequest.id == request_id)
    if request is None:
        raise NotFound("Validation request not found")
    return request


async def respond_to_validation(
    store: RecordStore,
    request_id: str,
    response: ValidationResponseInput,
    now: datetime | None = None,
) -> SelfReportedHours:
    """Approve or reject a pending request and move the record accordingly."""
    if not response.approved and response.rejection_reason is None:
        raise ValidationError("rejection_reason", "Rejection reason is required when rejecting")

    now = now or utc_now()
    target = ValidationStatus.VALIDATED if response.approved else ValidationStatus.REJECTED

    async with store.transaction() as tx:
        request = await _get_request(tx, request_id)
        if request.status != RequestStatus.PENDING.value:
            raise InvalidTransition(f"Validation request is already {request.status}")

        record = await tx.get_row(SelfReportedHours, SelfReportedHours.id == request.self_reported_hours_id)
        if record is None:
            raise NotFound("Self-reported hours record not found")
        validate_transition(record.validation_status, target)

        reason = response.rejection_reason.value if response.rejection_reason else None
        claimed = await tx.update_row(
            ValidationRequest,
            ValidationRequest.id == request_id,
            ValidationRequest.status == RequestStatus.PENDING.value,
            values={
                "status": (RequestStatus.APPROVED if response.approved else RequestStatus.REJECTED).value,
                "responded_at": now,
                "responded_by": response.responded_by,
                "rejection_reason": None if response.approved else reason,
                "rejection_notes": None if response.approved else response.rejection_notes,
            },
        )
        if not claimed:
            raise InvalidTransition("Validation request was answered concurrently")

        if response.approved:
            record_values = {
                "validation_status": ValidationStatus.VALIDATED.value,
                "validated_at": now,
                "validated_by": response.responded_by,
                "verification_hash": generate_verification_hash(record, request_id, now),
                "rejection_reason": None,
                "rejection_notes": None,
            }
        else:
            record_values = {
                "validation_status": ValidationStatus.REJECTED.value,
                "rejection_reason": reason,
                "rejection_notes": response.rejection_notes,
            }
        moved = await tx.update_row(
            SelfReportedHours,
            SelfReportedHours.id == record.id,
            SelfReportedHours.validation_status == ValidationStatus.PENDING.value,
            values=record_values,
        )
        if not moved:
            raise InvalidTransition("Record is no longer pending validation")
        updated = await tx.get_row(SelfReportedHours, SelfReportedHours.id == record.id)

    logger.info(
        "Validation %s: request=%s record=%s", "approved" if response.approved else "rejected",
        request_id, record.id,
    )
    return updated


async def cancel_validation_request(store: RecordStore, request_id: str, volunteer_id: str) -> None:
    """Withdraw a pending request; the record returns to unvalidated."""
    async with store.transaction() as tx:
        request = await tx.get_row(
            ValidationRequest,
            ValidationRequest.id == request_id,
            ValidationRequest.volunteer_id == volunteer_id,
        )
        if request is None:
            raise NotFound("Validation request not found")
        if request.status != RequestStatus.PENDING.value:
            raise InvalidTransition(f"Cannot cancel a request that is {request.status}")

        validate_transition(ValidationStatus.PENDING, ValidationStatus.UNVALIDATED)
        claimed = await tx.update_row(
            ValidationRequest,
            ValidationRequest.id == request_id,
            ValidationRequest.status == RequestStatus.PENDING.value,
            values={"status": RequestStatus.CANCELLED.value},
        )
        if not claimed:
            raise InvalidTransition("Validation request was answered before it could be cancelled")
        reverted = await tx.update_row(
            SelfReportedHours,
            SelfReportedHours.id == request.self_reported_hours_id,
            SelfReportedHours.validation_status == ValidationStatus.PENDING.value,
            values={
                "validation_status": ValidationStatus.UNVALIDATED.value,
                "validation_request_id": None,
            },
        )
        if not reverted:
            raise InvalidTransition("Record is no longer pending validation")

    logger.info("Validation request cancelled: request=%s volunteer=%s", request_id, volunteer_id)


async def batch_respond(
    store: RecordStore,
    batch: BatchValidationInput,
    now: datetime | None = None,
) -> BatchValidationResult:
    """Apply one decision to many requests. Each request succeeds or fails on its own."""
    response = ValidationResponseInput(
        approved=batch.approved,
        rejection_reason=batch.rejection_reason,
        rejection_notes=batch.rejection_notes,
        responded_by=batch.responded_by,
    )
    result = BatchValidationResult(success=[], failed=[])
    for request_id in batch.request_ids:
        try:
            await respond_to_validation(store, request_id, response, now)
        except ContributionError as exc:
            logger.warning("Batch validation failed for %s: %s", request_id, exc.message)
            result.failed.append(request_id)
        else:
            result.success.append(request_id)
    return result


async def get_validation_history(store: RecordStore, record_id: str) -> list[ValidationRequest]:
    """All requests ever opened for a record, newest first."""
    return await store.query_rows(
        ValidationRequest,
        ValidationRequest.self_reported_hours_id == record_id,
        order_by=(ValidationRequest.created_at.desc(),),
    )


async def get_organization_validation_queue(
    store: RecordStore,
    organization_id: str,
    now: datetime | None = None,
) -> list[ValidationQueueItem]:
    """Pending requests for an organization, oldest first."""
    now = now or utc_now()
    requests = await store.query_rows(
        ValidationRequest,
        ValidationRequest.organization_id == organization_id,
        ValidationRequest.status == RequestStatus.PENDING.value,
        order_by=(ValidationRequest.created_at.asc(),),
    )
    if not requests:
        return []

    records = await store.query_rows(
        SelfReportedHours,
        SelfReportedHours.id.in_([r.self_reported_hours_id for r in requests]),
    )
    by_id = {record.id: record for record in records}

    items: list[ValidationQueueItem] = []
    for request in requests:
        record = by_id.get(request.self_reported_hours_id)
        if record is None:
            continue
        seconds_left = (as_utc(request.expires_at) - now).total_seconds()
        items.append(ValidationQueueItem(
            request_id=request.id,
            self_reported_hours=SelfReportedHoursResponse.model_validate(record),
            volunteer_id=request.volunteer_id,
            days_until_expiration=max(0, math.ceil(seconds_left / 86400)),
            is_resubmission=request.is_resubmission,
        ))
    return items


async def get_validation_queue_count(store: RecordStore, organization_id: str) -> int:
    """Number of pending requests for an organization; 0 if the store is unavailable."""
    try:
        requests = await store.query_rows(
            ValidationRequest,
            ValidationRequest.organization_id == organization_id,
            ValidationRequest.status == RequestStatus.PENDING.value,
        )
    except StoreError as exc:
        logger.warning("Validation queue count unavailable for %s: %s", organization_id, exc.message)
        return 0
    return len(requests)


async def expire_stale_records(store: RecordStore, today: date | None = None) -> int:
    """Move records whose validation window has closed to expired.

    Open requests on those records are expired too. Returns the number of
    records changed.
    """
    today = today or utc_today()
    window_days = get_settings().validation_window_days
    open_statuses = [
        ValidationStatus.UNVALIDATED.value,
        ValidationStatus.PENDING.value,
        ValidationStatus.REJECTED.value,
    ]

    expired = 0
    async with store.transaction() as tx:
        candidates = await tx.query_rows(
            SelfReportedHours, SelfReportedHours.validation_status.in_(open_statuses),
        )
        for record in candidates:
            if today <= window_closes_on(record.activity_date, window_days):
                continue
            validate_transition(record.validation_status, ValidationStatus.EXPIRED)
            changed = await tx.update_row(
                SelfReportedHours,
                SelfReportedHours.id == record.id,
                SelfReportedHours.validation_status == record.validation_status,
                values={"validation_status": ValidationStatus.EXPIRED.value},
            )
            if not changed:
                continue
            expired += 1
            await tx.update_row(
                ValidationRequest,
                ValidationRequest.self_reported_hours_id == record.id,
                ValidationRequest.status == RequestStatus.PENDING.value,
                values={"status": RequestStatus.EXPIRED.value},
            )

    if expired:
        logger.info("Expired %d self-reported hours records", expired)
    return expired
