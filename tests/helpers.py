"""Row builders shared by the store-backed tests."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

from gpc.db.models import (
    Charity,
    Donation,
    FormalVolunteerHours,
    Organization,
    SelfReportedHours,
    SkillEndorsement,
)
from gpc.store import RecordStore

DESCRIPTION = "Sorted and packed food donations for weekend distribution to local families."
TODAY = date(2026, 6, 15)


async def add_organization(store: RecordStore, name: str = "Harbor Food Bank", verified: bool = True) -> Organization:
    return await store.insert_row(Organization(name=name, is_verified=verified))


async def add_charity(store: RecordStore, name: str = "Clean Water Fund") -> Charity:
    return await store.insert_row(Charity(name=name))


async def add_donation(
    store: RecordStore, donor_id: str, amount: float, charity_id: str | None = None, days_ago: int = 0,
) -> Donation:
    created = datetime(2026, 6, 1, 12, tzinfo=timezone.utc) - timedelta(days=days_ago)
    return await store.insert_row(Donation(
        donor_id=donor_id,
        charity_id=charity_id,
        amount=Decimal(str(amount)),
        created_at=created,
    ))


async def add_formal_hours(
    store: RecordStore,
    volunteer_id: str,
    hours: float,
    charity_id: str | None = None,
    status: str = "approved",
    performed: date = date(2026, 5, 20),
) -> FormalVolunteerHours:
    return await store.insert_row(FormalVolunteerHours(
        volunteer_id=volunteer_id,
        charity_id=charity_id,
        hours=Decimal(str(hours)),
        date_performed=performed,
        status=status,
    ))


async def add_self_reported(
    store: RecordStore,
    volunteer_id: str,
    hours: float,
    status: str = "unvalidated",
    organization_id: str | None = None,
    organization_name: str | None = "Neighborhood Garden",
    activity_date: date = date(2026, 5, 10),
) -> SelfReportedHours:
    row = await store.insert_row(SelfReportedHours(
        volunteer_id=volunteer_id,
        activity_date=activity_date,
        hours=Decimal(str(hours)),
        activity_type="direct_service",
        description=DESCRIPTION,
        organization_id=organization_id,
        organization_name=None if organization_id else organization_name,
        validation_status=status,
    ))
    return await store.get_row(SelfReportedHours, SelfReportedHours.id == row.id)


async def add_endorsement(store: RecordStore, recipient_id: str, skill: str = "logistics") -> SkillEndorsement:
    return await store.insert_row(SkillEndorsement(recipient_id=recipient_id, skill=skill))
