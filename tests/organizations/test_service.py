"""Organization lookup service tests."""

from __future__ import annotations

import pytest

from gpc.exceptions import StoreError
from gpc.organizations import service
from gpc.store import StoreSession
from tests.helpers import add_organization

pytestmark = pytest.mark.asyncio


async def _failing_query(self, model, *criteria, **kwargs):
    raise StoreError("database offline")


class TestSearch:
    async def test_short_query_returns_nothing(self, store):
        """Queries under two characters after trimming do not hit the store."""
        await add_organization(store, "Harbor Food Bank")
        assert await service.search_organizations(store, "  h ") == []
        assert await service.search_organizations(store, "") == []

    async def test_case_insensitive_substring(self, store):
        """Matches anywhere in the name regardless of case, ordered by name."""
        await add_organization(store, "Harbor Food Bank")
        await add_organization(store, "City Food Pantry")
        await add_organization(store, "River Cleanup")

        results = await service.search_organizations(store, "  FOOD ")
        assert [r.name for r in results] == ["City Food Pantry", "Harbor Food Bank"]
        assert all(r.is_verified for r in results)

    async def test_only_verified(self, store):
        """Unverified organizations never appear in search results."""
        await add_organization(store, "Harbor Food Bank", verified=False)
        assert await service.search_organizations(store, "harbor") == []

    async def test_limit(self, store):
        """At most ``limit`` results are returned."""
        for index in range(4):
            await add_organization(store, f"Food Shelf {index}")
        results = await service.search_organizations(store, "food", limit=2)
        assert [r.name for r in results] == ["Food Shelf 0", "Food Shelf 1"]

    async def test_wildcards_are_literal(self, store):
        """A percent sign in the query matches only a literal percent sign."""
        await add_organization(store, "Station 10 Relief")
        await add_organization(store, "100% Giving")
        results = await service.search_organizations(store, "0%")
        assert [r.name for r in results] == ["100% Giving"]

    async def test_store_failure_returns_empty(self, store, monkeypatch):
        """A store outage yields an empty result instead of an error."""
        monkeypatch.setattr(StoreSession, "query_rows", _failing_query)
        assert await service.search_organizations(store, "food") == []


class TestLookup:
    async def test_get_by_id(self, store):
        """Known ids resolve to a summary, unknown ids to None."""
        org = await add_organization(store, "Harbor Food Bank", verified=False)
        found = await service.get_organization_by_id(store, org.id)
        assert found.name == "Harbor Food Bank"
        assert found.is_verified is False
        assert await service.get_organization_by_id(store, "missing") is None

    async def test_is_verified(self, store):
        """Only existing verified organizations count as verified."""
        verified = await add_organization(store, "Harbor Food Bank")
        unverified = await add_organization(store, "Pending Org", verified=False)
        assert await service.is_verified_organization(store, verified.id) is True
        assert await service.is_verified_organization(store, unverified.id) is False
        assert await service.is_verified_organization(store, "missing") is False

    async def test_is_verified_store_failure(self, store, monkeypatch):
        """A store outage reports the organization as not verified."""
        org = await add_organization(store)
        monkeypatch.setattr(StoreSession, "query_rows", _failing_query)
        assert await service.is_verified_organization(store, org.id) is False


class TestListing:
    async def test_pages_ordered_by_name(self, store):
        """Pages follow name order and the total counts every verified organization."""
        for name in ["Delta Aid", "Alpha Aid", "Charlie Aid", "Bravo Aid"]:
            await add_organization(store, name)
        await add_organization(store, "Echo Aid", verified=False)

        first = await service.get_all_organizations(store, limit=2)
        assert [o.name for o in first.organizations] == ["Alpha Aid", "Bravo Aid"]
        assert first.total == 4

        second = await service.get_all_organizations(store, limit=2, offset=2)
        assert [o.name for o in second.organizations] == ["Charlie Aid", "Delta Aid"]
        assert second.total == 4

    async def test_store_failure_returns_empty_page(self, store, monkeypatch):
        """A store outage yields an empty page with a zero total."""
        monkeypatch.setattr(StoreSession, "query_rows", _failing_query)
        page = await service.get_all_organizations(store)
        assert page.organizations == []
        assert page.total == 0
