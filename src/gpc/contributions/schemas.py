"""Pydantic schemas for the unified contribution feed, stats and leaderboards."""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, Field

from gpc.volunteer.schemas import ActivityType, ValidationStatus


class ContributionType(str, Enum):
    DONATION = "donation"
    FORMAL_VOLUNTEER = "formal_volunteer"
    SELF_REPORTED = "self_reported"


class ContributionStatus(str, Enum):
    COMPLETED = "completed"
    PENDING = "pending"
    VALIDATED = "validated"
    UNVALIDATED = "unvalidated"


# --- Unified feed ---


class UnifiedContribution(BaseModel):
    id: str
    type: ContributionType
    date: datetime
    user_id: str
    organization_id: str | None = None
    organization_name: str
    amount: float | None = None
    hours: float | None = None
    activity_type: ActivityType | None = None
    description: str | None = None
    validation_status: ValidationStatus | None = None
    status: ContributionStatus
    created_at: datetime | None = None


class ContributionFilters(BaseModel):
    sources: list[ContributionType] | None = None  # None = all three
    user_id: str | None = None
    organization_id: str | None = None
    date_from: date | None = None
    date_to: date | None = None
    validation_statuses: list[ValidationStatus] | None = None  # self-reported only


# --- Stats ---


class SelfReportedBreakdown(BaseModel):
    validated: float = 0
    pending: float = 0
    unvalidated: float = 0
    total: float = 0


class UserContributionStats(BaseModel):
    total_donated: float = 0
    donation_count: int = 0
    formal_volunteer_hours: float = 0
    self_reported_hours: SelfReportedBreakdown = Field(default_factory=SelfReportedBreakdown)
    total_volunteer_hours: float = 0
    skills_endorsed: int = 0
    organizations_helped: int = 0


class GlobalContributionStats(UserContributionStats):
    total_donors: int = 0
    total_volunteers: int = 0


# --- Leaderboards ---


class VolunteerLeaderboardEntry(BaseModel):
    user_id: str
    rank: int
    total_hours: float
    formal_hours: float
    self_reported_hours: float


class DonorLeaderboardEntry(BaseModel):
    user_id: str
    rank: int
    total_donated: float
    donation_count: int
    organizations_supported: int
