"""Lookup of verified organizations for the self-reported hours form.

Search and listing degrade to empty results when the store is unavailable
so the form still renders; single lookups propagate store errors.
"""

from __future__ import annotations

import logging

from gpc.db.models import Organization
from gpc.exceptions import StoreError
from gpc.organizations.schemas import OrganizationPage, OrganizationSummary
from gpc.store import RecordStore

logger = logging.getLogger(__name__)

MIN_QUERY_LENGTH = 2
DEFAULT_SEARCH_LIMIT = 10
DEFAULT_PAGE_SIZE = 50
UNKNOWN_NAME = "Unknown Organization"


def _summary(org: Organization) -> OrganizationSummary:
    return OrganizationSummary(id=org.id, name=org.name or UNKNOWN_NAME, is_verified=bool(org.is_verified))


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


async def search_organizations(
    store: RecordStore,
    query: str,
    limit: int = DEFAULT_SEARCH_LIMIT,
) -> list[OrganizationSummary]:
    """Verified organizations whose name contains ``query``, case-insensitive."""
    term = query.strip()
    if len(term) < MIN_QUERY_LENGTH:
        return []

    try:
        rows = await store.query_rows(
            Organization,
            Organization.is_verified.is_(True),
            Organization.name.ilike(f"%{_escape_like(term)}%", escape="\\"),
            order_by=(Organization.name.asc(),),
            limit=limit,
        )
    except StoreError as exc:
        logger.warning("Organization search failed for %r: %s", term, exc.message)
        return []
    return [_summary(org) for org in rows]


async def get_organization_by_id(store: RecordStore, organization_id: str) -> OrganizationSummary | None:
    org = await store.get_row(Organization, Organization.id == organization_id)
    return _summary(org) if org is not None else None


async def get_all_organizations(
    store: RecordStore,
    limit: int = DEFAULT_PAGE_SIZE,
    offset: int = 0,
) -> OrganizationPage:
    """One page of verified organizations ordered by name, with the overall count."""
    verified = Organization.is_verified.is_(True)
    try:
        rows = await store.query_rows(
            Organization, verified, order_by=(Organization.name.asc(),), limit=limit, offset=offset,
        )
        total = await store.count_rows(Organization, verified)
    except StoreError as exc:
        logger.warning("Organization listing unavailable: %s", exc.message)
        return OrganizationPage(organizations=[], total=0)
    return OrganizationPage(organizations=[_summary(org) for org in rows], total=total)


async def is_verified_organization(store: RecordStore, organization_id: str) -> bool:
    try:
        org = await store.get_row(Organization, Organization.id == organization_id)
    except StoreError as exc:
        logger.warning("Organization verification check failed for %s: %s", organization_id, exc.message)
        return False
    return org is not None and bool(org.is_verified)
