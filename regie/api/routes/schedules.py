"""Daily schedule API Routes."""

from uuid import UUID

from fastapi import APIRouter, Query, status

from regie.api.deps import CurrentActor, ScheduleServiceDep
from regie.application.dtos import (
    ConflictCheckRequest,
    CreateScheduleRequest,
    DuplicateScheduleRequest,
    ReorderSchedulesRequest,
    ScheduleDayResponse,
    ScheduleResponse,
    ScheduleWriteResponse,
    UpdateScheduleRequest,
)
from regie.domain.staffing.value_objects.enums import TargetAudience

router = APIRouter(tags=["schedules"])

_WRITE_RESPONSES = {
    409: {"description": "Overlapping schedules must be acknowledged, or event is terminal"},
    422: {"description": "Invalid time range or date outside the event window"},
}


@router.post(
    "/events/{event_id}/schedules",
    summary="Create schedule",
    response_model=ScheduleWriteResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_WRITE_RESPONSES,
)
def create_schedule(
    event_id: UUID,
    request: CreateScheduleRequest,
    actor: CurrentActor,
    service: ScheduleServiceDep,
) -> ScheduleWriteResponse:
    return service.create_schedule(
        actor, event_id, request.fields(), request.acknowledge_conflicts
    )


@router.get(
    "/events/{event_id}/schedules",
    summary="List schedules grouped by date",
    response_model=list[ScheduleDayResponse],
)
def list_schedules(
    event_id: UUID,
    actor: CurrentActor,
    service: ScheduleServiceDep,
    audience: TargetAudience | None = Query(None),
) -> list[ScheduleDayResponse]:
    return service.list_schedules(actor, event_id, audience)


@router.post(
    "/events/{event_id}/schedules/conflicts",
    summary="Preview conflicts of a schedule block",
    response_model=list[ScheduleResponse],
)
def list_conflicts(
    event_id: UUID,
    request: ConflictCheckRequest,
    actor: CurrentActor,
    service: ScheduleServiceDep,
) -> list[ScheduleResponse]:
    return service.list_conflicts(actor, event_id, request.fields(), request.schedule_id)


@router.post(
    "/events/{event_id}/schedules/reorder",
    summary="Reorder the schedules of a date",
    response_model=list[ScheduleResponse],
)
def reorder_schedules(
    event_id: UUID,
    request: ReorderSchedulesRequest,
    actor: CurrentActor,
    service: ScheduleServiceDep,
) -> list[ScheduleResponse]:
    return service.reorder_schedules(
        actor, event_id, request.schedule_date, request.ordered_ids
    )


@router.get("/schedules/{schedule_id}", response_model=ScheduleResponse)
def get_schedule(
    schedule_id: UUID, actor: CurrentActor, service: ScheduleServiceDep
) -> ScheduleResponse:
    return service.get_schedule(actor, schedule_id)


@router.patch(
    "/schedules/{schedule_id}",
    summary="Edit schedule",
    response_model=ScheduleWriteResponse,
    responses=_WRITE_RESPONSES,
)
def edit_schedule(
    schedule_id: UUID,
    request: UpdateScheduleRequest,
    actor: CurrentActor,
    service: ScheduleServiceDep,
) -> ScheduleWriteResponse:
    return service.edit_schedule(
        actor, schedule_id, request.changes(), request.acknowledge_conflicts
    )


@router.post(
    "/schedules/{schedule_id}/duplicate",
    summary="Duplicate schedule",
    response_model=ScheduleWriteResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_WRITE_RESPONSES,
)
def duplicate_schedule(
    schedule_id: UUID,
    request: DuplicateScheduleRequest,
    actor: CurrentActor,
    service: ScheduleServiceDep,
) -> ScheduleWriteResponse:
    return service.duplicate_schedule(
        actor, schedule_id, request.target_date, request.acknowledge_conflicts
    )


@router.delete(
    "/schedules/{schedule_id}",
    summary="Delete schedule",
    status_code=status.HTTP_204_NO_CONTENT,
)
def delete_schedule(
    schedule_id: UUID, actor: CurrentActor, service: ScheduleServiceDep
) -> None:
    service.delete_schedule(actor, schedule_id)
