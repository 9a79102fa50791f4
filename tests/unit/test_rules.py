"""Tests for the validation window and the status state machine."""

from datetime import date, datetime, timezone

import pytest

from gpc.exceptions import InvalidTransition
from gpc.volunteer.rules import (
    VALID_TRANSITIONS,
    can_delete_record,
    can_edit_record,
    can_request_validation,
    days_until_expiration,
    is_validation_expired,
    request_expires_at,
    validate_transition,
    window_closes_on,
)
from gpc.volunteer.schemas import ValidationStatus

TODAY = date(2026, 6, 15)


class TestValidationWindow:
    def test_window_closes_ninety_days_after_activity(self):
        """The window closes ninety days after the activity date."""
        assert window_closes_on(date(2026, 1, 1)) == date(2026, 4, 1)

    def test_days_remaining_counts_down(self):
        """Days remaining count down to the window close."""
        assert days_until_expiration(date(2026, 6, 5), TODAY) == 80

    def test_last_day_is_zero_not_expired(self):
        """The last day of the window reports zero days left and is not expired."""
        activity = date(2026, 3, 17)  # exactly 90 days before TODAY
        assert days_until_expiration(activity, TODAY) == 0
        assert is_validation_expired(activity, TODAY) is False

    def test_ninety_one_days_is_expired(self):
        """Day ninety-one is past the window."""
        activity = date(2026, 3, 16)
        assert days_until_expiration(activity, TODAY) is None
        assert is_validation_expired(activity, TODAY) is True

    def test_custom_window(self):
        """A shorter window from settings is honoured."""
        assert days_until_expiration(date(2026, 6, 10), TODAY, window_days=10) == 5

    def test_request_expires_at_end_of_last_day(self):
        """Requests expire at the last second of the window's final day."""
        expires = request_expires_at(date(2026, 1, 1))
        assert expires == datetime(2026, 4, 1, 23, 59, 59, tzinfo=timezone.utc)


class TestTransitions:
    def test_valid_edges(self):
        """Every permitted status edge is accepted."""
        validate_transition("unvalidated", "pending")
        validate_transition("pending", "validated")
        validate_transition("pending", "rejected")
        validate_transition("rejected", "pending")
        validate_transition("pending", "unvalidated")

    def test_terminal_states_have_no_exits(self):
        """Validated and expired are terminal."""
        assert VALID_TRANSITIONS[ValidationStatus.VALIDATED] == []
        assert VALID_TRANSITIONS[ValidationStatus.EXPIRED] == []

    def test_validated_cannot_move(self):
        """Leaving validated raises with both states in the message."""
        with pytest.raises(InvalidTransition, match="validated -> pending"):
            validate_transition(ValidationStatus.VALIDATED, ValidationStatus.PENDING)

    def test_unvalidated_cannot_skip_to_validated(self):
        """Validation must go through pending."""
        with pytest.raises(InvalidTransition):
            validate_transition("unvalidated", "validated")

    def test_unknown_status_rejected(self):
        """Status strings outside the enum are refused."""
        with pytest.raises(ValueError):
            validate_transition("approved", "pending")


class TestPermissions:
    @pytest.mark.parametrize("status", ["unvalidated", "rejected", "expired"])
    def test_editable_statuses(self, status):
        """Unvalidated, rejected and expired records stay editable."""
        assert can_edit_record(status) is True

    @pytest.mark.parametrize("status", ["pending", "validated"])
    def test_locked_statuses(self, status):
        """Pending and validated records are locked."""
        assert can_edit_record(status) is False

    def test_only_validated_cannot_be_deleted(self):
        """Only validated records are protected from deletion."""
        assert can_delete_record("validated") is False
        assert can_delete_record("pending") is True
        assert can_delete_record("expired") is True

    def test_request_validation_needs_verified_org(self):
        """Validation needs a verified organization."""
        assert can_request_validation("unvalidated", date(2026, 6, 1), False, TODAY) is False
        assert can_request_validation("unvalidated", date(2026, 6, 1), True, TODAY) is True

    def test_rejected_record_can_be_resubmitted(self):
        """A rejected record may be submitted again."""
        assert can_request_validation("rejected", date(2026, 6, 1), True, TODAY) is True

    def test_pending_record_cannot_request_again(self):
        """A pending record cannot open a second request."""
        assert can_request_validation("pending", date(2026, 6, 1), True, TODAY) is False

    def test_old_record_cannot_request(self):
        """Records past the window cannot request validation."""
        assert can_request_validation("unvalidated", date(2026, 3, 16), True, TODAY) is False
