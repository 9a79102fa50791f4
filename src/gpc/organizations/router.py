"""Organization lookup endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from gpc.dependencies import get_store
from gpc.exceptions import NotFound
from gpc.organizations import service
from gpc.organizations.schemas import OrganizationPage, OrganizationSummary
from gpc.store import RecordStore

router = APIRouter(prefix="/api/v1/organizations", tags=["Organizations"])


@router.get("", response_model=OrganizationPage)
async def list_organizations(
    limit: int = Query(service.DEFAULT_PAGE_SIZE, ge=1, le=200),
    offset: int = Query(0, ge=0),
    store: RecordStore = Depends(get_store),  # noqa: B008
) -> OrganizationPage:
    return await service.get_all_organizations(store, limit, offset)


@router.get("/search", response_model=list[OrganizationSummary])
async def search(
    q: str = Query(""),
    limit: int = Query(service.DEFAULT_SEARCH_LIMIT, ge=1, le=50),
    store: RecordStore = Depends(get_store),  # noqa: B008
) -> list[OrganizationSummary]:
    return await service.search_organizations(store, q, limit)


@router.get("/{organization_id}", response_model=OrganizationSummary)
async def get_organization(
    organization_id: str,
    store: RecordStore = Depends(get_store),  # noqa: B008
) -> OrganizationSummary:
    org = await service.get_organization_by_id(store, organization_id)
    if org is None:
        raise NotFound("Organization not found")
    return org


@router.get("/{organization_id}/verified")
async def organization_verified(
    organization_id: str,
    store: RecordStore = Depends(get_store),  # noqa: B008
) -> dict[str, bool]:
    verified = await service.is_verified_organization(store, organization_id)
    return {"verified": verified}
