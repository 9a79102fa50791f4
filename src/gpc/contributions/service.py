"""Contribution feed, stats and leaderboard service.

Sources are fetched concurrently, one session each. A source whose fetch
fails is logged and treated as empty so the remaining sources still count.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from gpc.config import get_settings
from gpc.contributions.aggregator import compute_global_stats, compute_user_stats
from gpc.contributions.normalizer import normalize_contributions
from gpc.contributions.ranking import rank_donors, rank_volunteers
from gpc.contributions.schemas import (
    ContributionFilters,
    ContributionType,
    DonorLeaderboardEntry,
    GlobalContributionStats,
    UnifiedContribution,
    UserContributionStats,
    VolunteerLeaderboardEntry,
)
from gpc.db.models import Donation, FormalVolunteerHours, SelfReportedHours, SkillEndorsement
from gpc.exceptions import StoreError
from gpc.store import RecordStore

logger = logging.getLogger(__name__)


async def _safe_fetch(store: RecordStore, source: str, model: type, *criteria: Any, order_by=()) -> list:
    try:
        return await store.query_rows(model, *criteria, order_by=order_by)
    except StoreError as exc:
        logger.warning("Failed to fetch %s, counting as empty: %s", source, exc.message)
        return []


def _formal_criteria(*criteria: Any) -> list[Any]:
    criteria = list(criteria)
    if get_settings().formal_hours_approved_only:
        criteria.append(FormalVolunteerHours.status == "approved")
    return criteria


def _clamp_limit(limit: int | None) -> int:
    settings = get_settings()
    if limit is None:
        return settings.leaderboard_default_limit
    return max(1, min(limit, settings.leaderboard_max_limit))


async def fetch_donations(store: RecordStore, *criteria: Any) -> list[Donation]:
    return await _safe_fetch(store, "donations", Donation, *criteria, order_by=(Donation.id,))


async def fetch_formal_hours(store: RecordStore, *criteria: Any) -> list[FormalVolunteerHours]:
    return await _safe_fetch(
        store, "formal volunteer hours", FormalVolunteerHours, *criteria, order_by=(FormalVolunteerHours.id,),
    )


async def fetch_self_reported(store: RecordStore, *criteria: Any) -> list[SelfReportedHours]:
    return await _safe_fetch(
        store, "self-reported hours", SelfReportedHours, *criteria, order_by=(SelfReportedHours.id,),
    )


async def fetch_endorsements(store: RecordStore, *criteria: Any) -> list[SkillEndorsement]:
    return await _safe_fetch(store, "skill endorsements", SkillEndorsement, *criteria)


async def get_unified_contributions(
    store: RecordStore,
    filters: ContributionFilters | None = None,
) -> list[UnifiedContribution]:
    """Unified feed across all sources, newest first.

    The feed shows formal hours in every non-rejected status; the approval
    gate only applies to totals.
    """
    filters = filters or ContributionFilters()
    sources = set(filters.sources) if filters.sources else set(ContributionType)
    user_id = filters.user_id

    async def _empty() -> list:
        return []

    donations, formal, self_reported = await asyncio.gather(
        fetch_donations(store, *([Donation.donor_id == user_id] if user_id else []))
        if ContributionType.DONATION in sources else _empty(),
        fetch_formal_hours(store, *([FormalVolunteerHours.volunteer_id == user_id] if user_id else []))
        if ContributionType.FORMAL_VOLUNTEER in sources else _empty(),
        fetch_self_reported(store, *([SelfReportedHours.volunteer_id == user_id] if user_id else []))
        if ContributionType.SELF_REPORTED in sources else _empty(),
    )
    return normalize_contributions(donations, formal, self_reported, filters)


async def get_user_contribution_stats(store: RecordStore, user_id: str) -> UserContributionStats:
    donations, formal, self_reported, endorsements = await asyncio.gather(
        fetch_donations(store, Donation.donor_id == user_id),
        fetch_formal_hours(store, *_formal_criteria(FormalVolunteerHours.volunteer_id == user_id)),
        fetch_self_reported(store, SelfReportedHours.volunteer_id == user_id),
        fetch_endorsements(store, SkillEndorsement.recipient_id == user_id),
    )
    return compute_user_stats(donations, formal, self_reported, endorsements)


async def get_global_contribution_stats(store: RecordStore) -> GlobalContributionStats:
    donations, formal, self_reported, endorsements = await asyncio.gather(
        fetch_donations(store),
        fetch_formal_hours(store, *_formal_criteria()),
        fetch_self_reported(store),
        fetch_endorsements(store),
    )
    return compute_global_stats(donations, formal, self_reported, endorsements)


async def get_volunteer_leaderboard(
    store: RecordStore,
    limit: int | None = None,
    include_unvalidated: bool = False,
) -> list[VolunteerLeaderboardEntry]:
    formal, self_reported = await asyncio.gather(
        fetch_formal_hours(store, *_formal_criteria()),
        fetch_self_reported(store),
    )
    return rank_volunteers(formal, self_reported, _clamp_limit(limit), include_unvalidated)


async def get_donor_leaderboard(store: RecordStore, limit: int | None = None) -> list[DonorLeaderboardEntry]:
    donations = await fetch_donations(store)
    return rank_donors(donations, _clamp_limit(limit))
