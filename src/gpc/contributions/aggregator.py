"""Contribution statistics over in-memory snapshots.

Pure functions: the service layer fetches the rows, these only add them up.
Formal hours are summed as given; any approval gate is applied by the fetch.
"""

from __future__ import annotations

from collections.abc import Sequence

from gpc.amounts import ZERO, to_decimal
from gpc.contributions.schemas import (
    GlobalContributionStats,
    SelfReportedBreakdown,
    UserContributionStats,
)
from gpc.db.models import Donation, FormalVolunteerHours, SelfReportedHours, SkillEndorsement
from gpc.volunteer.schemas import ValidationStatus


def self_reported_breakdown(rows: Sequence[SelfReportedHours]) -> SelfReportedBreakdown:
    """Split self-reported hours into validated / pending / everything else."""
    validated = pending = unvalidated = ZERO
    for row in rows:
        hours = to_decimal(row.hours)
        if row.validation_status == ValidationStatus.VALIDATED.value:
            validated += hours
        elif row.validation_status == ValidationStatus.PENDING.value:
            pending += hours
        else:
            unvalidated += hours
    return SelfReportedBreakdown(
        validated=float(validated),
        pending=float(pending),
        unvalidated=float(unvalidated),
        total=float(validated + pending + unvalidated),
    )


def organizations_helped(
    formal_hours: Sequence[FormalVolunteerHours],
    self_reported: Sequence[SelfReportedHours],
) -> int:
    """Distinct organizations across formal and self-reported hours.

    Free-text names are kept in their own namespace and never matched
    against organization ids.
    """
    keys: set[str] = set()
    for row in formal_hours:
        if row.charity_id:
            keys.add(f"id:{row.charity_id}")
    for row in self_reported:
        if row.organization_id:
            keys.add(f"id:{row.organization_id}")
        elif row.organization_name:
            keys.add(f"name:{row.organization_name}")
    return len(keys)


def compute_user_stats(
    donations: Sequence[Donation] = (),
    formal_hours: Sequence[FormalVolunteerHours] = (),
    self_reported: Sequence[SelfReportedHours] = (),
    endorsements: Sequence[SkillEndorsement] = (),
) -> UserContributionStats:
    breakdown = self_reported_breakdown(self_reported)
    formal_total = sum((to_decimal(row.hours) for row in formal_hours), ZERO)
    validated = sum(
        (to_decimal(row.hours) for row in self_reported
         if row.validation_status == ValidationStatus.VALIDATED.value),
        ZERO,
    )
    return UserContributionStats(
        total_donated=float(sum((to_decimal(row.amount) for row in donations), ZERO)),
        donation_count=len(donations),
        formal_volunteer_hours=float(formal_total),
        self_reported_hours=breakdown,
        total_volunteer_hours=float(formal_total + validated),
        skills_endorsed=len(endorsements),
        organizations_helped=organizations_helped(formal_hours, self_reported),
    )


def compute_global_stats(
    donations: Sequence[Donation] = (),
    formal_hours: Sequence[FormalVolunteerHours] = (),
    self_reported: Sequence[SelfReportedHours] = (),
    endorsements: Sequence[SkillEndorsement] = (),
) -> GlobalContributionStats:
    per_user = compute_user_stats(donations, formal_hours, self_reported, endorsements)
    volunteers = {row.volunteer_id for row in formal_hours} | {row.volunteer_id for row in self_reported}
    return GlobalContributionStats(
        **per_user.model_dump(),
        total_donors=len({row.donor_id for row in donations}),
        total_volunteers=len(volunteers),
    )
