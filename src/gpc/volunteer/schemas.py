"""Schemas for self-reported volunteer hours and validation requests."""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ActivityType(str, Enum):
    DIRECT_SERVICE = "direct_service"
    ADMINISTRATIVE_SUPPORT = "administrative_support"
    PROFESSIONAL_TECHNICAL = "professional_technical"
    EVENT_SUPPORT = "event_support"
    MENTORING_TEACHING = "mentoring_teaching"
    LEADERSHIP_COORDINATION = "leadership_coordination"
    GOVERNANCE = "governance"
    ADVOCACY_AWARENESS = "advocacy_awareness"
    FUNDRAISING = "fundraising"
    TRANSPORTATION_DELIVERY = "transportation_delivery"
    DIGITAL_VIRTUAL = "digital_virtual"
    PHYSICAL_LABOR = "physical_labor"
    ENVIRONMENTAL_STEWARDSHIP = "environmental_stewardship"
    OTHER = "other"


class ValidationStatus(str, Enum):
    UNVALIDATED = "unvalidated"
    PENDING = "pending"
    VALIDATED = "validated"
    REJECTED = "rejected"
    EXPIRED = "expired"


class RequestStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"
    EXPIRED = "expired"


class RejectionReason(str, Enum):
    HOURS_INACCURATE = "hours_inaccurate"
    DATE_INCORRECT = "date_incorrect"
    ACTIVITY_NOT_RECOGNIZED = "activity_not_recognized"
    VOLUNTEER_NOT_RECOGNIZED = "volunteer_not_recognized"
    DESCRIPTION_INSUFFICIENT = "description_insufficient"
    OTHER = "other"


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class SelfReportedHoursInput(BaseModel):
    """New self-reported hours record.

    Range and length rules are enforced by the service so that callers get a
    domain ValidationError naming the field, not a schema error.
    """

    activity_date: date
    hours: float
    activity_type: ActivityType
    description: str
    location: str | None = Field(None, max_length=255)
    organization_id: str | None = None
    organization_name: str | None = Field(None, max_length=255)
    organization_contact_email: str | None = Field(None, max_length=255)


class SelfReportedHoursPatch(BaseModel):
    """Partial update. Only fields explicitly set are applied."""

    activity_date: date | None = None
    hours: float | None = None
    activity_type: ActivityType | None = None
    description: str | None = None
    location: str | None = Field(None, max_length=255)
    organization_id: str | None = None
    organization_name: str | None = Field(None, max_length=255)
    organization_contact_email: str | None = Field(None, max_length=255)


class SelfReportedHoursFilters(BaseModel):
    status: ValidationStatus | None = None
    organization_id: str | None = None
    activity_type: ActivityType | None = None
    date_from: date | None = None
    date_to: date | None = None


class ValidationResponseInput(BaseModel):
    """Organization's answer to a validation request."""

    approved: bool
    rejection_reason: RejectionReason | None = None
    rejection_notes: str | None = None
    responded_by: str | None = None


class BatchValidationInput(BaseModel):
    request_ids: list[str] = Field(..., min_length=1)
    approved: bool
    rejection_reason: RejectionReason | None = None
    rejection_notes: str | None = None
    responded_by: str | None = None


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class SelfReportedHoursResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    volunteer_id: str
    activity_date: date
    hours: float
    activity_type: ActivityType
    description: str
    location: str | None = None
    organization_id: str | None = None
    organization_name: str | None = None
    organization_contact_email: str | None = None
    validation_status: ValidationStatus
    validation_request_id: str | None = None
    validated_at: datetime | None = None
    validated_by: str | None = None
    rejection_reason: RejectionReason | None = None
    rejection_notes: str | None = None
    verification_hash: str | None = None
    created_at: datetime
    updated_at: datetime


class SelfReportedHoursDisplay(SelfReportedHoursResponse):
    """Record plus the computed fields the volunteer dashboard renders."""

    organization_display_name: str
    is_verified_organization: bool
    days_until_expiration: int | None
    can_edit: bool
    can_delete: bool
    can_request_validation: bool


class ValidationRequestResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    self_reported_hours_id: str
    organization_id: str
    volunteer_id: str
    status: RequestStatus
    expires_at: datetime
    responded_at: datetime | None = None
    responded_by: str | None = None
    rejection_reason: RejectionReason | None = None
    rejection_notes: str | None = None
    is_resubmission: bool
    original_request_id: str | None = None
    created_at: datetime
    updated_at: datetime


class ValidationQueueItem(BaseModel):
    request_id: str
    self_reported_hours: SelfReportedHoursResponse
    volunteer_id: str
    days_until_expiration: int
    is_resubmission: bool


class BatchValidationResult(BaseModel):
    success: list[str]
    failed: list[str]


class VolunteerHoursStats(BaseModel):
    total_validated_hours: float = 0
    total_pending_hours: float = 0
    total_unvalidated_hours: float = 0
    total_rejected_hours: float = 0
    total_expired_hours: float = 0
    record_count: int = 0
    records_by_status: dict[ValidationStatus, int] = Field(
        default_factory=lambda: {status: 0 for status in ValidationStatus},
    )
