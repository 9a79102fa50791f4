"""Deterministic leaderboard ranking.

Rows are grouped per user, sorted by the board's metric descending and
ranked 1..N. Python's sort is stable, so users with equal totals keep the
order in which they were first seen.
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal

from gpc.amounts import ZERO, to_decimal
from gpc.contributions.schemas import DonorLeaderboardEntry, VolunteerLeaderboardEntry
from gpc.db.models import Donation, FormalVolunteerHours, SelfReportedHours
from gpc.volunteer.schemas import ValidationStatus

UNVALIDATED_BUCKET = frozenset({
    ValidationStatus.UNVALIDATED.value,
    ValidationStatus.REJECTED.value,
    ValidationStatus.EXPIRED.value,
})


def rank_volunteers(
    formal_hours: Sequence[FormalVolunteerHours] = (),
    self_reported: Sequence[SelfReportedHours] = (),
    limit: int = 10,
    include_unvalidated: bool = False,
) -> list[VolunteerLeaderboardEntry]:
    """Rank volunteers by formal hours plus counted self-reported hours.

    Validated self-reported hours always count. With ``include_unvalidated``
    the unvalidated, rejected and expired hours count too; pending never does.
    """
    formal: dict[str, Decimal] = {}
    self_rep: dict[str, Decimal] = {}
    order: dict[str, None] = {}

    for row in formal_hours:
        formal[row.volunteer_id] = formal.get(row.volunteer_id, ZERO) + to_decimal(row.hours)
        order.setdefault(row.volunteer_id, None)

    for row in self_reported:
        counted = row.validation_status == ValidationStatus.VALIDATED.value or (
            include_unvalidated and row.validation_status in UNVALIDATED_BUCKET
        )
        if not counted:
            continue
        self_rep[row.volunteer_id] = self_rep.get(row.volunteer_id, ZERO) + to_decimal(row.hours)
        order.setdefault(row.volunteer_id, None)

    totals = [
        (user_id, formal.get(user_id, ZERO), self_rep.get(user_id, ZERO))
        for user_id in order
    ]
    totals.sort(key=lambda t: t[1] + t[2], reverse=True)

    return [
        VolunteerLeaderboardEntry(
            user_id=user_id,
            rank=idx + 1,
            total_hours=float(formal_h + self_h),
            formal_hours=float(formal_h),
            self_reported_hours=float(self_h),
        )
        for idx, (user_id, formal_h, self_h) in enumerate(totals[:limit])
    ]


def rank_donors(donations: Sequence[Donation] = (), limit: int = 10) -> list[DonorLeaderboardEntry]:
    """Rank donors by total donated."""
    totals: dict[str, Decimal] = {}
    counts: dict[str, int] = {}
    charities: dict[str, set[str]] = {}

    for row in donations:
        totals[row.donor_id] = totals.get(row.donor_id, ZERO) + to_decimal(row.amount)
        counts[row.donor_id] = counts.get(row.donor_id, 0) + 1
        supported = charities.setdefault(row.donor_id, set())
        if row.charity_id:
            supported.add(row.charity_id)

    ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)

    return [
        DonorLeaderboardEntry(
            user_id=donor_id,
            rank=idx + 1,
            total_donated=float(total),
            donation_count=counts[donor_id],
            organizations_supported=len(charities[donor_id]),
        )
        for idx, (donor_id, total) in enumerate(ranked[:limit])
    ]
