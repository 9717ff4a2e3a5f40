"""Assignment and team finalization API Routes."""

from uuid import UUID

from fastapi import APIRouter, Query, status

from regie.api.deps import AssignmentServiceDep, CurrentActor
from regie.application.dtos import (
    AssignmentResponse,
    CreateAssignmentRequest,
    FinalizationResponse,
    FinalizeTeamRequest,
    RespondAssignmentRequest,
)
from regie.domain.staffing.value_objects.enums import AssignmentStatus

router = APIRouter(tags=["assignments"])


@router.post(
    "/events/{event_id}/assignments",
    summary="Propose or invite a worker",
    response_model=AssignmentResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"description": "Worker already assigned, or event is terminal"}},
)
def create_assignment(
    event_id: UUID,
    request: CreateAssignmentRequest,
    actor: CurrentActor,
    service: AssignmentServiceDep,
) -> AssignmentResponse:
    return service.create_assignment(
        actor,
        event_id,
        request.worker_id,
        role_label=request.role_label,
        status=AssignmentStatus(request.status),
        notes=request.notes,
    )


@router.get(
    "/events/{event_id}/assignments",
    summary="List assignments",
    response_model=list[AssignmentResponse],
)
def list_assignments(
    event_id: UUID,
    actor: CurrentActor,
    service: AssignmentServiceDep,
    status_filter: AssignmentStatus | None = Query(None, alias="status"),
) -> list[AssignmentResponse]:
    return service.list_assignments(actor, event_id, status_filter)


@router.post(
    "/events/{event_id}/team",
    summary="Finalize team",
    description="Validate the selected assignments; the other candidates are not retained.",
    response_model=FinalizationResponse,
    responses={422: {"description": "Empty selection or ineligible candidates"}},
)
def finalize_team(
    event_id: UUID,
    request: FinalizeTeamRequest,
    actor: CurrentActor,
    service: AssignmentServiceDep,
) -> FinalizationResponse:
    return service.finalize_team(actor, event_id, request.selected_ids)


@router.get(
    "/assignments/mine",
    summary="Assignments of the acting worker",
    response_model=list[AssignmentResponse],
)
def list_my_assignments(
    actor: CurrentActor, service: AssignmentServiceDep
) -> list[AssignmentResponse]:
    return service.list_worker_assignments(actor)


@router.get("/assignments/{assignment_id}", response_model=AssignmentResponse)
def get_assignment(
    assignment_id: UUID, actor: CurrentActor, service: AssignmentServiceDep
) -> AssignmentResponse:
    return service.get_assignment(actor, assignment_id)


@router.post(
    "/assignments/{assignment_id}/respond",
    summary="Answer an assignment",
    response_model=AssignmentResponse,
)
def respond_to_assignment(
    assignment_id: UUID,
    request: RespondAssignmentRequest,
    actor: CurrentActor,
    service: AssignmentServiceDep,
) -> AssignmentResponse:
    return service.respond_to_assignment(actor, assignment_id, request.response)


@router.post(
    "/assignments/{assignment_id}/decline",
    summary="Withdraw from an event",
    response_model=AssignmentResponse,
)
def decline_assignment(
    assignment_id: UUID, actor: CurrentActor, service: AssignmentServiceDep
) -> AssignmentResponse:
    return service.decline_assignment(actor, assignment_id)


@router.post(
    "/assignments/{assignment_id}/revoke",
    summary="Re-open an assignment",
    response_model=AssignmentResponse,
)
def revoke_assignment(
    assignment_id: UUID, actor: CurrentActor, service: AssignmentServiceDep
) -> AssignmentResponse:
    return service.revoke_assignment(actor, assignment_id)
