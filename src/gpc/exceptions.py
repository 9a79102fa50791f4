"""Domain error taxonomy.

Every error carries the HTTP status the API layer answers with. Validator
operations raise these; aggregation code only ever sees StoreError and
swallows it per source.
"""

from __future__ import annotations


class ContributionError(Exception):
    """Base class for all domain errors."""

    status_code: int = 400
    code: str = "contribution_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(ContributionError):
    """Input fails a domain constraint (date, hours, description, organization)."""

    status_code = 422
    code = "validation_error"

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field


class Forbidden(ContributionError):
    """Mutation attempted on a record whose status does not allow it."""

    status_code = 403
    code = "forbidden"


class NotFound(ContributionError):
    status_code = 404
    code = "not_found"


class AlreadyPending(ContributionError):
    status_code = 409
    code = "already_pending"


class AlreadyValidated(ContributionError):
    status_code = 409
    code = "already_validated"


class WindowExpired(ContributionError):
    status_code = 409
    code = "window_expired"


class InvalidTransition(ContributionError):
    """Requested status change is not an edge of the validation state machine."""

    status_code = 409
    code = "invalid_transition"


class StoreError(ContributionError):
    """Underlying record store read or write failed."""

    status_code = 503
    code = "store_error"
