"""Self-reported hours and validation request endpoints.

Caller identity (volunteer or organization) is passed explicitly; this
service sits behind the platform gateway which authenticates it.
"""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query, Response, status

from gpc.dependencies import get_store
from gpc.store import RecordStore
from gpc.volunteer import service, validation_service
from gpc.volunteer.schemas import (
    ActivityType,
    BatchValidationInput,
    BatchValidationResult,
    SelfReportedHoursDisplay,
    SelfReportedHoursFilters,
    SelfReportedHoursInput,
    SelfReportedHoursPatch,
    ValidationQueueItem,
    ValidationRequestResponse,
    ValidationResponseInput,
    ValidationStatus,
    VolunteerHoursStats,
)

router = APIRouter(prefix="/api/v1/self-reported-hours", tags=["Self-Reported Hours"])
validation_router = APIRouter(prefix="/api/v1", tags=["Validation Requests"])


# ---------------------------------------------------------------------------
# Volunteer records
# ---------------------------------------------------------------------------


@router.post("", response_model=SelfReportedHoursDisplay, status_code=status.HTTP_201_CREATED)
async def create_record(
    body: SelfReportedHoursInput,
    volunteer_id: str = Query(...),
    store: RecordStore = Depends(get_store),  # noqa: B008
) -> SelfReportedHoursDisplay:
    record = await service.create_self_reported_hours(store, volunteer_id, body)
    return service.to_display(record)


@router.get("", response_model=list[SelfReportedHoursDisplay])
async def list_records(
    volunteer_id: str = Query(...),
    status_filter: ValidationStatus | None = Query(None, alias="status"),
    organization_id: str | None = Query(None),
    activity_type: ActivityType | None = Query(None),
    date_from: date | None = Query(None),
    date_to: date | None = Query(None),
    store: RecordStore = Depends(get_store),  # noqa: B008
) -> list[SelfReportedHoursDisplay]:
    filters = SelfReportedHoursFilters(
        status=status_filter,
        organization_id=organization_id,
        activity_type=activity_type,
        date_from=date_from,
        date_to=date_to,
    )
    records = await service.list_self_reported_hours(store, volunteer_id, filters)
    return [service.to_display(r) for r in records]


@router.get("/stats", response_model=VolunteerHoursStats)
async def record_stats(
    volunteer_id: str = Query(...),
    store: RecordStore = Depends(get_store),  # noqa: B008
) -> VolunteerHoursStats:
    return await service.get_volunteer_hours_stats(store, volunteer_id)


@router.get("/{record_id}", response_model=SelfReportedHoursDisplay)
async def get_record(
    record_id: str,
    volunteer_id: str = Query(...),
    store: RecordStore = Depends(get_store),  # noqa: B008
) -> SelfReportedHoursDisplay:
    record = await service.get_self_reported_hours(store, record_id, volunteer_id)
    return service.to_display(record)


@router.patch("/{record_id}", response_model=SelfReportedHoursDisplay)
async def update_record(
    record_id: str,
    body: SelfReportedHoursPatch,
    volunteer_id: str = Query(...),
    store: RecordStore = Depends(get_store),  # noqa: B008
) -> SelfReportedHoursDisplay:
    record = await service.update_self_reported_hours(store, record_id, volunteer_id, body)
    return service.to_display(record)


@router.delete("/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_record(
    record_id: str,
    volunteer_id: str = Query(...),
    store: RecordStore = Depends(get_store),  # noqa: B008
) -> Response:
    await service.delete_self_reported_hours(store, record_id, volunteer_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{record_id}/request-validation",
    response_model=ValidationRequestResponse,
    status_code=status.HTTP_201_CREATED,
)
async def request_record_validation(
    record_id: str,
    volunteer_id: str = Query(...),
    store: RecordStore = Depends(get_store),  # noqa: B008
) -> ValidationRequestResponse:
    request = await service.request_validation(store, record_id, volunteer_id)
    return ValidationRequestResponse.model_validate(request)


@router.get("/{record_id}/history", response_model=list[ValidationRequestResponse])
async def record_validation_history(
    record_id: str,
    volunteer_id: str = Query(...),
    store: RecordStore = Depends(get_store),  # noqa: B008
) -> list[ValidationRequestResponse]:
    await service.get_self_reported_hours(store, record_id, volunteer_id)
    history = await validation_service.get_validation_history(store, record_id)
    return [ValidationRequestResponse.model_validate(r) for r in history]


# ---------------------------------------------------------------------------
# Organization side
# ---------------------------------------------------------------------------


@validation_router.post("/validation-requests/batch", response_model=BatchValidationResult)
async def batch_respond(
    body: BatchValidationInput,
    store: RecordStore = Depends(get_store),  # noqa: B008
) -> BatchValidationResult:
    return await validation_service.batch_respond(store, body)


@validation_router.post("/validation-requests/expire")
async def expire_stale(
    store: RecordStore = Depends(get_store),  # noqa: B008
) -> dict[str, int]:
    """Maintenance hook: move records past their validation window to expired."""
    expired = await validation_service.expire_stale_records(store)
    return {"expired": expired}


@validation_router.post("/validation-requests/{request_id}/respond", response_model=SelfReportedHoursDisplay)
async def respond(
    request_id: str,
    body: ValidationResponseInput,
    store: RecordStore = Depends(get_store),  # noqa: B008
) -> SelfReportedHoursDisplay:
    record = await validation_service.respond_to_validation(store, request_id, body)
    return service.to_display(record)


@validation_router.post("/validation-requests/{request_id}/cancel", status_code=status.HTTP_204_NO_CONTENT)
async def cancel(
    request_id: str,
    volunteer_id: str = Query(...),
    store: RecordStore = Depends(get_store),  # noqa: B008
) -> Response:
    await validation_service.cancel_validation_request(store, request_id, volunteer_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@validation_router.get(
    "/organizations/{organization_id}/validation-queue",
    response_model=list[ValidationQueueItem],
)
async def organization_queue(
    organization_id: str,
    store: RecordStore = Depends(get_store),  # noqa: B008
) -> list[ValidationQueueItem]:
    return await validation_service.get_organization_validation_queue(store, organization_id)


@validation_router.get("/organizations/{organization_id}/validation-queue/count")
async def organization_queue_count(
    organization_id: str,
    store: RecordStore = Depends(get_store),  # noqa: B008
) -> dict[str, int]:
    count = await validation_service.get_validation_queue_count(store, organization_id)
    return {"count": count}
