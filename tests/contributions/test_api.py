"""Contribution feed, stats and leaderboard API tests."""

from __future__ import annotations

import pytest

from tests.helpers import add_charity, add_donation, add_formal_hours, add_self_reported

pytestmark = pytest.mark.asyncio

BASE = "/api/v1/contributions"


class TestContributionsApi:
    async def test_feed(self, client, store):
        """The feed merges sources and honours the source filter."""
        charity = await add_charity(store)
        await add_donation(store, "user-1", 40, charity_id=charity.id)
        await add_self_reported(store, "user-1", 2, status="validated")

        response = await client.get(BASE, params={"user_id": "user-1"})
        assert response.status_code == 200
        feed = response.json()
        assert [c["type"] for c in feed] == ["donation", "self_reported"]
        assert feed[0]["amount"] == 40
        assert feed[1]["status"] == "validated"

        only_donations = await client.get(BASE, params={"sources": ["donation"]})
        assert [c["type"] for c in only_donations.json()] == ["donation"]

    async def test_stats(self, client, store):
        """Per-user and global stats are served."""
        await add_donation(store, "user-1", 40)
        await add_formal_hours(store, "user-1", 3)

        user = await client.get(f"{BASE}/stats/user-1")
        assert user.json()["total_donated"] == 40
        assert user.json()["total_volunteer_hours"] == 3

        overall = await client.get(f"{BASE}/stats")
        assert overall.json()["total_donors"] == 1
        assert overall.json()["total_volunteers"] == 1

    async def test_leaderboards(self, client, store):
        """Both leaderboards are ranked and honour the limit."""
        await add_formal_hours(store, "user-1", 3)
        await add_formal_hours(store, "user-2", 9)
        await add_donation(store, "donor-1", 5)

        volunteers = await client.get(f"{BASE}/leaderboard/volunteers", params={"limit": 1})
        assert volunteers.json() == [{
            "user_id": "user-2", "rank": 1, "total_hours": 9, "formal_hours": 9, "self_reported_hours": 0,
        }]

        donors = await client.get(f"{BASE}/leaderboard/donors")
        assert donors.json()[0]["user_id"] == "donor-1"

    async def test_leaderboard_csv(self, client, store):
        """The CSV export has a plain header and quoted values."""
        await add_donation(store, "donor-1", 5)
        response = await client.get(f"{BASE}/leaderboard/donors.csv")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        lines = response.text.splitlines()
        assert lines[0] == "user_id,rank,total_donated,donation_count,organizations_supported"
        assert lines[1] == '"donor-1","1","5.0","1","0"'

    async def test_invalid_limit(self, client):
        """A zero limit is a request validation error."""
        response = await client.get(f"{BASE}/leaderboard/donors", params={"limit": 0})
        assert response.status_code == 422
