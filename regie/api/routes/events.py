"""
Event API Routes.

Event lifecycle endpoints: CRUD, status transitions, audit history and the
team summary.
"""

from uuid import UUID

from fastapi import APIRouter, Query, status

from regie.api.deps import AssignmentServiceDep, CurrentActor, EventServiceDep
from regie.application.dtos import (
    CreateEventRequest,
    EventResponse,
    HistoryEntryResponse,
    TeamSummaryResponse,
    TransitionEventRequest,
    UpdateEventRequest,
)
from regie.domain.staffing.value_objects.enums import EventStatus

router = APIRouter(prefix="/events", tags=["events"])


@router.post(
    "/",
    summary="Create event",
    response_model=EventResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        403: {"description": "Actor is not a scheduling authority"},
        422: {"description": "Invalid time window"},
    },
)
def create_event(
    request: CreateEventRequest, actor: CurrentActor, service: EventServiceDep
) -> EventResponse:
    return service.create_event(
        actor,
        title=request.title,
        start_at=request.start_at,
        end_at=request.end_at,
        target_audience=request.target_audience,
        description=request.description,
        location=request.location,
    )


@router.get("/", summary="List events", response_model=list[EventResponse])
def list_events(
    actor: CurrentActor,
    service: EventServiceDep,
    status_filter: EventStatus | None = Query(None, alias="status"),
) -> list[EventResponse]:
    return service.list_events(actor, status_filter)


@router.get("/{event_id}", summary="Get event", response_model=EventResponse)
def get_event(
    event_id: UUID, actor: CurrentActor, service: EventServiceDep
) -> EventResponse:
    return service.get_event(actor, event_id)


@router.patch(
    "/{event_id}",
    summary="Edit event details",
    response_model=EventResponse,
    responses={409: {"description": "Event is terminal"}},
)
def update_event(
    event_id: UUID,
    request: UpdateEventRequest,
    actor: CurrentActor,
    service: EventServiceDep,
) -> EventResponse:
    return service.update_event(actor, event_id, **request.changes())


@router.post(
    "/{event_id}/transition",
    summary="Change event status",
    description="Publish, unpublish, cancel or complete an event.",
    response_model=EventResponse,
    responses={409: {"description": "Transition not allowed"}},
)
def transition_event(
    event_id: UUID,
    request: TransitionEventRequest,
    actor: CurrentActor,
    service: EventServiceDep,
) -> EventResponse:
    return service.transition_event(actor, event_id, request.target_status)


@router.delete(
    "/{event_id}",
    summary="Delete draft event",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={409: {"description": "Event is not a draft"}},
)
def delete_event(event_id: UUID, actor: CurrentActor, service: EventServiceDep) -> None:
    service.delete_event(actor, event_id)


@router.get(
    "/{event_id}/history",
    summary="Event audit history",
    response_model=list[HistoryEntryResponse],
)
def get_history(
    event_id: UUID, actor: CurrentActor, service: EventServiceDep
) -> list[HistoryEntryResponse]:
    return service.get_history(actor, event_id)


@router.get(
    "/{event_id}/team",
    summary="Team summary",
    response_model=TeamSummaryResponse,
)
def team_summary(
    event_id: UUID, actor: CurrentActor, service: AssignmentServiceDep
) -> TeamSummaryResponse:
    return service.team_summary(actor, event_id)
