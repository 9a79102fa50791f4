"""Tests for contribution statistics."""

from datetime import date
from decimal import Decimal

from gpc.contributions.aggregator import compute_global_stats, compute_user_stats, organizations_helped
from gpc.db.models import Donation, FormalVolunteerHours, SelfReportedHours, SkillEndorsement


def _donation(amount, donor="user-1", charity_id="ch-1"):
    return Donation(donor_id=donor, charity_id=charity_id, amount=Decimal(str(amount)) if amount is not None else None)


def _formal(hours, volunteer="user-1", charity_id="ch-1"):
    return FormalVolunteerHours(
        volunteer_id=volunteer, charity_id=charity_id, date_performed=date(2026, 5, 1),
        hours=Decimal(str(hours)) if hours is not None else None, status="approved",
    )


def _self_reported(hours, status, volunteer="user-1", org_id=None, org_name=None):
    return SelfReportedHours(
        volunteer_id=volunteer, activity_date=date(2026, 5, 1), hours=Decimal(str(hours)),
        activity_type="other", description="d" * 50, validation_status=status,
        organization_id=org_id, organization_name=org_name,
    )


class TestUserStats:
    def test_fractional_amounts_sum_exactly(self):
        """Cents and tenths add up without binary float drift."""
        stats = compute_user_stats(
            donations=[_donation("0.1"), _donation("0.2")],
            formal_hours=[_formal("0.1"), _formal("0.2")],
            self_reported=[_self_reported("0.1", "validated"), _self_reported("0.2", "validated")],
        )
        assert stats.total_donated == 0.3
        assert stats.formal_volunteer_hours == 0.3
        assert stats.self_reported_hours.validated == 0.3
        assert stats.total_volunteer_hours == 0.6

    def test_reference_example(self):
        """Totals, breakdown and counts for a mixed contributor."""
        stats = compute_user_stats(
            donations=[_donation(100), _donation(250), _donation(50)],
            formal_hours=[_formal(5), _formal(3)],
            self_reported=[
                _self_reported(4, "validated"),
                _self_reported(2, "pending"),
                _self_reported(1, "unvalidated"),
            ],
            endorsements=[SkillEndorsement(recipient_id="user-1", skill=s) for s in ("a", "b", "c")],
        )
        assert stats.total_donated == 400
        assert stats.donation_count == 3
        assert stats.formal_volunteer_hours == 8
        assert stats.self_reported_hours.validated == 4
        assert stats.self_reported_hours.pending == 2
        assert stats.self_reported_hours.unvalidated == 1
        assert stats.self_reported_hours.total == 7
        assert stats.total_volunteer_hours == 12
        assert stats.skills_endorsed == 3

    def test_rejected_and_expired_count_as_unvalidated(self):
        """Rejected and expired hours land in the unvalidated bucket."""
        stats = compute_user_stats(self_reported=[
            _self_reported(1.5, "rejected"), _self_reported(2, "expired"),
        ])
        assert stats.self_reported_hours.unvalidated == 3.5
        assert stats.total_volunteer_hours == 0

    def test_null_values_count_as_zero(self):
        """NULL amounts and hours add nothing but still count as rows."""
        stats = compute_user_stats(donations=[_donation(None)], formal_hours=[_formal(None)])
        assert stats.total_donated == 0
        assert stats.donation_count == 1
        assert stats.formal_volunteer_hours == 0

    def test_empty(self):
        """No rows give zeroed stats."""
        stats = compute_user_stats()
        assert stats.total_donated == 0
        assert stats.organizations_helped == 0


class TestOrganizationsHelped:
    def test_distinct_ids_across_sources(self):
        """The same id across sources counts once."""
        count = organizations_helped(
            [_formal(1, charity_id="ch-1"), _formal(1, charity_id="ch-1"), _formal(1, charity_id=None)],
            [_self_reported(1, "validated", org_id="ch-1"), _self_reported(1, "validated", org_id="org-2")],
        )
        assert count == 2

    def test_free_text_names_are_separate(self):
        """Free-text names never collide with ids."""
        count = organizations_helped(
            [_formal(1, charity_id="ch-1")],
            [
                _self_reported(1, "unvalidated", org_name="Garden Club"),
                _self_reported(1, "unvalidated", org_name="Garden Club"),
                _self_reported(1, "unvalidated", org_name="ch-1"),
            ],
        )
        assert count == 3


class TestGlobalStats:
    def test_distinct_donors_and_volunteers(self):
        """Donors and volunteers are counted once each."""
        stats = compute_global_stats(
            donations=[_donation(10, "a"), _donation(20, "a"), _donation(5, "b")],
            formal_hours=[_formal(2, "v1"), _formal(3, "v2")],
            self_reported=[_self_reported(1, "validated", "v2"), _self_reported(1, "pending", "v3")],
        )
        assert stats.total_donated == 35
        assert stats.total_donors == 2
        assert stats.total_volunteers == 3
        assert stats.total_volunteer_hours == 6

    def test_idempotent(self):
        """The same rows always give the same stats."""
        rows = dict(donations=[_donation(10)], formal_hours=[_formal(2)])
        assert compute_global_stats(**rows) == compute_global_stats(**rows)
