"""Unified contribution feed, stats and leaderboard endpoints."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse

from gpc.contributions import service
from gpc.contributions.export import leaderboard_to_csv
from gpc.contributions.schemas import (
    ContributionFilters,
    ContributionType,
    DonorLeaderboardEntry,
    GlobalContributionStats,
    UnifiedContribution,
    UserContributionStats,
    VolunteerLeaderboardEntry,
)
from gpc.dependencies import get_store
from gpc.store import RecordStore
from gpc.volunteer.schemas import ValidationStatus

router = APIRouter(prefix="/api/v1/contributions", tags=["Contributions"])


@router.get("", response_model=list[UnifiedContribution])
async def contribution_feed(
    sources: list[ContributionType] | None = Query(None),
    user_id: str | None = Query(None),
    organization_id: str | None = Query(None),
    date_from: date | None = Query(None),
    date_to: date | None = Query(None),
    validation_statuses: list[ValidationStatus] | None = Query(None),
    store: RecordStore = Depends(get_store),  # noqa: B008
) -> list[UnifiedContribution]:
    filters = ContributionFilters(
        sources=sources,
        user_id=user_id,
        organization_id=organization_id,
        date_from=date_from,
        date_to=date_to,
        validation_statuses=validation_statuses,
    )
    return await service.get_unified_contributions(store, filters)


@router.get("/stats", response_model=GlobalContributionStats)
async def global_stats(
    store: RecordStore = Depends(get_store),  # noqa: B008
) -> GlobalContributionStats:
    return await service.get_global_contribution_stats(store)


@router.get("/stats/{user_id}", response_model=UserContributionStats)
async def user_stats(
    user_id: str,
    store: RecordStore = Depends(get_store),  # noqa: B008
) -> UserContributionStats:
    return await service.get_user_contribution_stats(store, user_id)


@router.get("/leaderboard/volunteers", response_model=list[VolunteerLeaderboardEntry])
async def volunteer_leaderboard(
    limit: int | None = Query(None, ge=1),
    include_unvalidated: bool = Query(False),
    store: RecordStore = Depends(get_store),  # noqa: B008
) -> list[VolunteerLeaderboardEntry]:
    return await service.get_volunteer_leaderboard(store, limit, include_unvalidated)


@router.get("/leaderboard/donors", response_model=list[DonorLeaderboardEntry])
async def donor_leaderboard(
    limit: int | None = Query(None, ge=1),
    store: RecordStore = Depends(get_store),  # noqa: B008
) -> list[DonorLeaderboardEntry]:
    return await service.get_donor_leaderboard(store, limit)


@router.get("/leaderboard/volunteers.csv", response_class=PlainTextResponse)
async def volunteer_leaderboard_csv(
    limit: int | None = Query(None, ge=1),
    include_unvalidated: bool = Query(False),
    store: RecordStore = Depends(get_store),  # noqa: B008
) -> PlainTextResponse:
    entries = await service.get_volunteer_leaderboard(store, limit, include_unvalidated)
    return PlainTextResponse(
        leaderboard_to_csv(entries),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="volunteer-leaderboard.csv"'},
    )


@router.get("/leaderboard/donors.csv", response_class=PlainTextResponse)
async def donor_leaderboard_csv(
    limit: int | None = Query(None, ge=1),
    store: RecordStore = Depends(get_store),  # noqa: B008
) -> PlainTextResponse:
    entries = await service.get_donor_leaderboard(store, limit)
    return PlainTextResponse(
        leaderboard_to_csv(entries),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="donor-leaderboard.csv"'},
    )
