"""Self-reported hours rules: validation window, state machine and field limits.

State progression:
    unvalidated -> pending -> validated | rejected
    rejected -> pending (resubmission)
    pending -> unvalidated (volunteer cancels the open request)
    unvalidated | pending | rejected -> expired (window elapsed)

validated and expired are terminal.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone

from gpc.exceptions import InvalidTransition
from gpc.time_utils import utc_today
from gpc.volunteer.schemas import ValidationStatus

VALIDATION_WINDOW_DAYS = 90

MIN_HOURS_PER_RECORD = 0.5
MAX_HOURS_PER_RECORD = 24.0
HOURS_DECIMAL_PLACES = 1

MIN_DESCRIPTION_LENGTH = 50
MAX_DESCRIPTION_LENGTH = 500

VALID_TRANSITIONS: dict[ValidationStatus, list[ValidationStatus]] = {
    ValidationStatus.UNVALIDATED: [ValidationStatus.PENDING, ValidationStatus.EXPIRED],
    ValidationStatus.PENDING: [
        ValidationStatus.VALIDATED,
        ValidationStatus.REJECTED,
        ValidationStatus.UNVALIDATED,
        ValidationStatus.EXPIRED,
    ],
    ValidationStatus.REJECTED: [ValidationStatus.PENDING, ValidationStatus.EXPIRED],
    ValidationStatus.VALIDATED: [],
    ValidationStatus.EXPIRED: [],
}

EDITABLE_STATUSES = frozenset({
    ValidationStatus.UNVALIDATED,
    ValidationStatus.REJECTED,
    ValidationStatus.EXPIRED,
})


def validate_transition(current: ValidationStatus | str, target: ValidationStatus | str) -> None:
    """Validate a status change. Raises InvalidTransition if it is not an edge."""
    current_status = ValidationStatus(current)
    target_status = ValidationStatus(target)
    valid = VALID_TRANSITIONS[current_status]
    if target_status not in valid:
        raise InvalidTransition(
            f"Invalid transition: {current_status.value} -> {target_status.value}. "
            f"Valid transitions: {[s.value for s in valid]}"
        )


def window_closes_on(activity_date: date, window_days: int = VALIDATION_WINDOW_DAYS) -> date:
    """Last calendar day on which validation may still be requested."""
    return activity_date + timedelta(days=window_days)


def request_expires_at(activity_date: date, window_days: int = VALIDATION_WINDOW_DAYS) -> datetime:
    """Expiry timestamp stored on a validation request: end of the window's last day (UTC)."""
    return datetime.combine(
        window_closes_on(activity_date, window_days), time(23, 59, 59), tzinfo=timezone.utc,
    )


def days_until_expiration(
    activity_date: date,
    today: date | None = None,
    window_days: int = VALIDATION_WINDOW_DAYS,
) -> int | None:
    """Whole days left in the validation window, or None once it has closed.

    Returns 0 on the window's last day.
    """
    today = today or utc_today()
    remaining = (window_closes_on(activity_date, window_days) - today).days
    return remaining if remaining >= 0 else None


def is_validation_expired(
    activity_date: date,
    today: date | None = None,
    window_days: int = VALIDATION_WINDOW_DAYS,
) -> bool:
    return days_until_expiration(activity_date, today, window_days) is None


def can_edit_record(status: ValidationStatus | str) -> bool:
    return ValidationStatus(status) in EDITABLE_STATUSES


def can_delete_record(status: ValidationStatus | str) -> bool:
    return ValidationStatus(status) != ValidationStatus.VALIDATED


def can_request_validation(
    status: ValidationStatus | str,
    activity_date: date,
    has_verified_org: bool,
    today: date | None = None,
    window_days: int = VALIDATION_WINDOW_DAYS,
) -> bool:
    """Whether a new validation request could be opened right now."""
    if not has_verified_org:
        return False
    if ValidationStatus(status) not in (ValidationStatus.UNVALIDATED, ValidationStatus.REJECTED):
        return False
    return not is_validation_expired(activity_date, today, window_days)
