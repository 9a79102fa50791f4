"""Merge donations, formal hours and self-reported hours into one feed.

Each source row type has one converter, dispatched by ContributionType.
Formal hours that were rejected never appear in the feed.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import date

from gpc.amounts import to_float
from gpc.contributions.schemas import (
    ContributionFilters,
    ContributionStatus,
    ContributionType,
    UnifiedContribution,
)
from gpc.db.models import Donation, FormalVolunteerHours, SelfReportedHours
from gpc.time_utils import to_utc_datetime
from gpc.volunteer.schemas import ValidationStatus

UNKNOWN_CHARITY = "Unknown Charity"
UNKNOWN_ORGANIZATION = "Unknown Organization"

FORMAL_STATUS_MAP: dict[str, ContributionStatus] = {
    "approved": ContributionStatus.COMPLETED,
    "pending": ContributionStatus.PENDING,
}

SELF_REPORTED_STATUS_MAP: dict[str, ContributionStatus] = {
    ValidationStatus.VALIDATED.value: ContributionStatus.VALIDATED,
    ValidationStatus.PENDING.value: ContributionStatus.PENDING,
}


def normalize_donation(row: Donation) -> UnifiedContribution:
    return UnifiedContribution(
        id=row.id,
        type=ContributionType.DONATION,
        date=to_utc_datetime(row.created_at),
        user_id=row.donor_id,
        organization_id=row.charity_id,
        organization_name=row.charity.name if row.charity is not None else UNKNOWN_CHARITY,
        amount=to_float(row.amount),
        status=ContributionStatus.COMPLETED,
        created_at=to_utc_datetime(row.created_at),
    )


def normalize_formal_hours(row: FormalVolunteerHours) -> UnifiedContribution | None:
    status = FORMAL_STATUS_MAP.get(row.status)
    if status is None:
        return None
    return UnifiedContribution(
        id=row.id,
        type=ContributionType.FORMAL_VOLUNTEER,
        date=to_utc_datetime(row.date_performed),
        user_id=row.volunteer_id,
        organization_id=row.charity_id,
        organization_name=row.charity.name if row.charity is not None else UNKNOWN_CHARITY,
        hours=to_float(row.hours),
        description=row.description,
        status=status,
        created_at=to_utc_datetime(row.created_at) if row.created_at else None,
    )


def normalize_self_reported(row: SelfReportedHours) -> UnifiedContribution:
    if row.organization_name:
        org_name = row.organization_name
    elif row.organization is not None:
        org_name = row.organization.name
    else:
        org_name = UNKNOWN_ORGANIZATION
    return UnifiedContribution(
        id=row.id,
        type=ContributionType.SELF_REPORTED,
        date=to_utc_datetime(row.activity_date),
        user_id=row.volunteer_id,
        organization_id=row.organization_id,
        organization_name=org_name,
        hours=to_float(row.hours),
        activity_type=row.activity_type,
        description=row.description,
        validation_status=row.validation_status,
        status=SELF_REPORTED_STATUS_MAP.get(row.validation_status, ContributionStatus.UNVALIDATED),
        created_at=to_utc_datetime(row.created_at) if row.created_at else None,
    )


NORMALIZERS: dict[ContributionType, Callable[..., UnifiedContribution | None]] = {
    ContributionType.DONATION: normalize_donation,
    ContributionType.FORMAL_VOLUNTEER: normalize_formal_hours,
    ContributionType.SELF_REPORTED: normalize_self_reported,
}


def _in_date_range(value: date, filters: ContributionFilters) -> bool:
    if filters.date_from and value < filters.date_from:
        return False
    if filters.date_to and value > filters.date_to:
        return False
    return True


def _matches(item: UnifiedContribution, filters: ContributionFilters) -> bool:
    if filters.user_id and item.user_id != filters.user_id:
        return False
    if filters.organization_id and item.organization_id != filters.organization_id:
        return False
    if not _in_date_range(item.date.date(), filters):
        return False
    if (
        filters.validation_statuses
        and item.type == ContributionType.SELF_REPORTED
        and item.validation_status not in filters.validation_statuses
    ):
        return False
    return True


def normalize_contributions(
    donations: Sequence[Donation] = (),
    formal_hours: Sequence[FormalVolunteerHours] = (),
    self_reported: Sequence[SelfReportedHours] = (),
    filters: ContributionFilters | None = None,
) -> list[UnifiedContribution]:
    """Build the unified feed, newest first.

    Ties on date keep input order: donations, then formal hours, then
    self-reported hours.
    """
    filters = filters or ContributionFilters()
    sources = set(filters.sources) if filters.sources else set(ContributionType)

    batches: list[tuple[ContributionType, Sequence]] = [
        (ContributionType.DONATION, donations),
        (ContributionType.FORMAL_VOLUNTEER, formal_hours),
        (ContributionType.SELF_REPORTED, self_reported),
    ]

    unified: list[UnifiedContribution] = []
    for kind, rows in batches:
        if kind not in sources:
            continue
        convert = NORMALIZERS[kind]
        for row in rows:
            item = convert(row)
            if item is not None and _matches(item, filters):
                unified.append(item)

    unified.sort(key=lambda c: c.date, reverse=True)
    return unified
