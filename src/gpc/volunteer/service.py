"""Self-reported hours business logic.

Rules:
- hours between 0.5 and 24, description 50-500 chars, activity date not in the future
- exactly one of a verified organization id or a free-text organization name
- validated records are permanent: no edits, no deletes
- only unvalidated / rejected / expired records can be edited
- at most one open validation request per record; opening one is a
  compare-and-set on the status that was read, so concurrent requests
  cannot both succeed
"""

from __future__ import annotations

import logging
import uuid
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any

from gpc.amounts import ZERO, to_decimal
from gpc.config import get_settings
from gpc.db.models import Organization, SelfReportedHours, ValidationRequest
from gpc.exceptions import (
    AlreadyPending,
    AlreadyValidated,
    Forbidden,
    NotFound,
    ValidationError,
    WindowExpired,
)
from gpc.store import RecordStore, StoreSession
from gpc.time_utils import utc_today
from gpc.volunteer.rules import (
    HOURS_DECIMAL_PLACES,
    MAX_DESCRIPTION_LENGTH,
    MAX_HOURS_PER_RECORD,
    MIN_DESCRIPTION_LENGTH,
    MIN_HOURS_PER_RECORD,
    can_delete_record,
    can_edit_record,
    can_request_validation,
    days_until_expiration,
    is_validation_expired,
    request_expires_at,
    validate_transition,
)
from gpc.volunteer.schemas import (
    SelfReportedHoursDisplay,
    SelfReportedHoursFilters,
    SelfReportedHoursInput,
    SelfReportedHoursPatch,
    SelfReportedHoursResponse,
    ValidationStatus,
    VolunteerHoursStats,
)

logger = logging.getLogger(__name__)

UNKNOWN_ORGANIZATION = "Unknown Organization"


def _window_days() -> int:
    return get_settings().validation_window_days


# ---------------------------------------------------------------------------
# Field validation
# ---------------------------------------------------------------------------


def validate_record_fields(values: dict[str, Any], today: date | None = None) -> None:
    """Check a full set of record fields. Raises ValidationError on the first violation."""
    today = today or utc_today()

    activity_date = values.get("activity_date")
    if activity_date is None:
        raise ValidationError("activity_date", "Activity date is required")
    if activity_date > today:
        raise ValidationError("activity_date", "Activity date cannot be in the future")

    hours = values.get("hours")
    if hours is None or not MIN_HOURS_PER_RECORD <= float(hours) <= MAX_HOURS_PER_RECORD:
        raise ValidationError(
            "hours", f"Hours must be between {MIN_HOURS_PER_RECORD:g} and {MAX_HOURS_PER_RECORD:g}",
        )
    if Decimal(str(hours)).normalize().as_tuple().exponent < -HOURS_DECIMAL_PLACES:
        raise ValidationError("hours", "Hours can have at most one decimal place")

    description = values.get("description") or ""
    if len(description) < MIN_DESCRIPTION_LENGTH:
        raise ValidationError(
            "description", f"Description must be at least {MIN_DESCRIPTION_LENGTH} characters",
        )
    if len(description) > MAX_DESCRIPTION_LENGTH:
        raise ValidationError(
            "description", f"Description cannot exceed {MAX_DESCRIPTION_LENGTH} characters",
        )

    has_org_id = bool(values.get("organization_id"))
    has_org_name = bool((values.get("organization_name") or "").strip())
    if not has_org_id and not has_org_name:
        raise ValidationError("organization", "Either organization ID or organization name is required")
    if has_org_id and has_org_name:
        raise ValidationError("organization", "Cannot specify both organization ID and organization name")


async def _ensure_verified_organization(tx: StoreSession, organization_id: str) -> None:
    org = await tx.get_row(Organization, Organization.id == organization_id)
    if org is None or not org.is_verified:
        raise ValidationError("organization_id", "Organization not found or not verified")


async def _get_owned_record(tx: StoreSession, record_id: str, volunteer_id: str) -> SelfReportedHours:
    record = await tx.get_row(
        SelfReportedHours,
        SelfReportedHours.id == record_id,
        SelfReportedHours.volunteer_id == volunteer_id,
    )
    if record is None:
        raise NotFound("Self-reported hours record not found")
    return record


def _column_values(values: dict[str, Any]) -> dict[str, Any]:
    """Convert patch values to their column representation."""
    converted = {k: (v.value if isinstance(v, Enum) else v) for k, v in values.items()}
    if converted.get("hours") is not None:
        converted["hours"] = Decimal(str(converted["hours"]))
    return converted


# ---------------------------------------------------------------------------
# Display
# ---------------------------------------------------------------------------


def organization_display_name(record: SelfReportedHours) -> str:
    if record.organization_name:
        return record.organization_name
    if record.organization is not None:
        return record.organization.name
    return UNKNOWN_ORGANIZATION


def to_display(record: SelfReportedHours, today: date | None = None) -> SelfReportedHoursDisplay:
    """Build the dashboard view of a record with its computed permissions."""
    window_days = _window_days()
    is_verified = bool(record.organization_id)
    base = SelfReportedHoursResponse.model_validate(record).model_dump()
    return SelfReportedHoursDisplay(
        **base,
        organization_display_name=organization_display_name(record),
        is_verified_organization=is_verified,
        days_until_expiration=days_until_expiration(record.activity_date, today, window_days),
        can_edit=can_edit_record(record.validation_status),
        can_delete=can_delete_record(record.validation_status),
        can_request_validation=can_request_validation(
            record.validation_status, record.activity_date, is_verified, today, window_days,
        ),
    )


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------


async def get_self_reported_hours(
    store: RecordStore, record_id: str, volunteer_id: str,
) -> SelfReportedHours:
    """Get one of the volunteer's records. Raises NotFound."""
    async with store.transaction() as tx:
        return await _get_owned_record(tx, record_id, volunteer_id)


async def list_self_reported_hours(
    store: RecordStore,
    volunteer_id: str,
    filters: SelfReportedHoursFilters | None = None,
) -> list[SelfReportedHours]:
    """List a volunteer's records, newest activity first."""
    filters = filters or SelfReportedHoursFilters()
    criteria = [SelfReportedHours.volunteer_id == volunteer_id]
    if filters.status is not None:
        criteria.append(SelfReportedHours.validation_status == filters.status.value)
    if filters.organization_id:
        criteria.append(SelfReportedHours.organization_id == filters.organization_id)
    if filters.activity_type is not None:
        criteria.append(SelfReportedHours.activity_type == filters.activity_type.value)
    if filters.date_from:
        criteria.append(SelfReportedHours.activity_date >= filters.date_from)
    if filters.date_to:
        criteria.append(SelfReportedHours.activity_date <= filters.date_to)

    return await store.query_rows(
        SelfReportedHours,
        *criteria,
        order_by=(SelfReportedHours.activity_date.desc(), SelfReportedHours.created_at.desc()),
    )


async def get_volunteer_hours_stats(store: RecordStore, volunteer_id: str) -> VolunteerHoursStats:
    """Per-status hour totals and record counts for one volunteer."""
    records = await store.query_rows(
        SelfReportedHours, SelfReportedHours.volunteer_id == volunteer_id,
    )
    stats = VolunteerHoursStats(record_count=len(records))
    fields = {
        ValidationStatus.VALIDATED: "total_validated_hours",
        ValidationStatus.PENDING: "total_pending_hours",
        ValidationStatus.REJECTED: "total_rejected_hours",
        ValidationStatus.EXPIRED: "total_expired_hours",
        ValidationStatus.UNVALIDATED: "total_unvalidated_hours",
    }
    sums = dict.fromkeys(fields, ZERO)
    for record in records:
        status = ValidationStatus(record.validation_status)
        stats.records_by_status[status] += 1
        sums[status] += to_decimal(record.hours)
    for status, field in fields.items():
        setattr(stats, field, float(sums[status]))
    return stats


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------


async def create_self_reported_hours(
    store: RecordStore,
    volunteer_id: str,
    data: SelfReportedHoursInput,
    today: date | None = None,
) -> SelfReportedHours:
    """Create a record in the unvalidated state. Raises ValidationError before any write."""
    values = data.model_dump()
    if values.get("organization_name"):
        values["organization_name"] = values["organization_name"].strip()
    validate_record_fields(values, today)

    async with store.transaction() as tx:
        if data.organization_id:
            await _ensure_verified_organization(tx, data.organization_id)

        record = SelfReportedHours(
            id=str(uuid.uuid4()),
            volunteer_id=volunteer_id,
            activity_date=data.activity_date,
            hours=Decimal(str(data.hours)),
            activity_type=data.activity_type.value,
            description=data.description,
            location=data.location or None,
            organization_id=data.organization_id or None,
            organization_name=values.get("organization_name") or None,
            organization_contact_email=data.organization_contact_email or None,
            validation_status=ValidationStatus.UNVALIDATED.value,
        )
        await tx.insert_row(record)
        created = await _get_owned_record(tx, record.id, volunteer_id)

    logger.info("Self-reported hours created: id=%s volunteer=%s hours=%s", created.id, volunteer_id, data.hours)
    return created


async def update_self_reported_hours(
    store: RecordStore,
    record_id: str,
    volunteer_id: str,
    patch: SelfReportedHoursPatch,
    today: date | None = None,
) -> SelfReportedHours:
    """Apply a partial update to an editable record.

    The merged record is validated as a whole before anything is written.
    Setting one organization field clears the other.
    """
    changes = patch.model_dump(exclude_unset=True)
    if "activity_type" in changes and changes["activity_type"] is None:
        raise ValidationError("activity_type", "Activity type is required")
    if "organization_name" in changes and changes["organization_name"]:
        changes["organization_name"] = changes["organization_name"].strip()
    if changes.get("organization_id") and "organization_name" not in changes:
        changes["organization_name"] = None
    if changes.get("organization_name") and "organization_id" not in changes:
        changes["organization_id"] = None

    async with store.transaction() as tx:
        record = await _get_owned_record(tx, record_id, volunteer_id)
        if not can_edit_record(record.validation_status):
            raise Forbidden(f"Cannot edit a record with status '{record.validation_status}'")

        merged = {
            field: changes.get(field, getattr(record, field))
            for field in ("activity_date", "hours", "description", "organization_id", "organization_name")
        }
        validate_record_fields(merged, today)
        if changes.get("organization_id"):
            await _ensure_verified_organization(tx, changes["organization_id"])

        if changes:
            updated = await tx.update_row(
                SelfReportedHours,
                SelfReportedHours.id == record_id,
                SelfReportedHours.validation_status == record.validation_status,
                values=_column_values(changes),
            )
            if not updated:
                raise Forbidden("Record changed state while being edited")
        result = await _get_owned_record(tx, record_id, volunteer_id)

    logger.info("Self-reported hours updated: id=%s fields=%s", record_id, sorted(changes))
    return result


async def delete_self_reported_hours(store: RecordStore, record_id: str, volunteer_id: str) -> None:
    """Delete a record and its validation history. Validated records are permanent."""
    async with store.transaction() as tx:
        record = await _get_owned_record(tx, record_id, volunteer_id)
        if not can_delete_record(record.validation_status):
            raise Forbidden("Cannot delete validated records")

        await tx.delete_row(ValidationRequest, ValidationRequest.self_reported_hours_id == record_id)
        deleted = await tx.delete_row(
            SelfReportedHours,
            SelfReportedHours.id == record_id,
            SelfReportedHours.validation_status != ValidationStatus.VALIDATED.value,
        )
        if not deleted:
            raise Forbidden("Cannot delete validated records")

    logger.info("Self-reported hours deleted: id=%s volunteer=%s", record_id, volunteer_id)


async def request_validation(
    store: RecordStore,
    record_id: str,
    volunteer_id: str,
    today: date | None = None,
) -> ValidationRequest:
    """Open a validation request with the record's verified organization.

    A rejected record may be resubmitted; the new request links back to the
    rejected one.
    """
    today = today or utc_today()
    window_days = _window_days()

    async with store.transaction() as tx:
        record = await _get_owned_record(tx, record_id, volunteer_id)
        status = ValidationStatus(record.validation_status)

        if status == ValidationStatus.VALIDATED:
            raise AlreadyValidated("Record is already validated")
        if status == ValidationStatus.PENDING:
            raise AlreadyPending("Validation request already pending")
        if not record.organization_id:
            raise ValidationError(
                "organization_id",
                "Only hours logged with a verified organization can be validated",
            )
        if record.organization is not None and not record.organization.is_verified:
            raise ValidationError("organization_id", "Organization is not verified")
        if status == ValidationStatus.EXPIRED or is_validation_expired(record.activity_date, today, window_days):
            raise WindowExpired("Validation window has expired for this activity")

        validate_transition(status, ValidationStatus.PENDING)
        is_resubmission = status == ValidationStatus.REJECTED

        request = ValidationRequest(
            id=str(uuid.uuid4()),
            self_reported_hours_id=record.id,
            organization_id=record.organization_id,
            volunteer_id=volunteer_id,
            status="pending",
            expires_at=request_expires_at(record.activity_date, window_days),
            is_resubmission=is_resubmission,
            original_request_id=record.validation_request_id if is_resubmission else None,
        )

        claimed = await tx.update_row(
            SelfReportedHours,
            SelfReportedHours.id == record.id,
            SelfReportedHours.validation_status == status.value,
            values={
                "validation_status": ValidationStatus.PENDING.value,
                "validation_request_id": request.id,
                "rejection_reason": None,
                "rejection_notes": None,
            },
        )
        if not claimed:
            raise AlreadyPending("Validation request already pending")
        await tx.insert_row(request)

    logger.info(
        "Validation requested: record=%s request=%s org=%s resubmission=%s",
        record_id, request.id, request.organization_id, is_resubmission,
    )
    return request
