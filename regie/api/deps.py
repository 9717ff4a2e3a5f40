"""
API Dependencies

Identity and role arrive as claims verified upstream (gateway or auth
service) in the ``X-Actor-Id`` and ``X-Actor-Role`` headers. Services are
built per request from the unit-of-work manager stored on the app.
"""

from typing import Annotated
from uuid import UUID

from fastapi import Depends, Header, HTTPException, Request, status

from regie.application.services import AssignmentService, EventService, ScheduleService
from regie.core.observability import get_logger, set_actor_id
from regie.core.rbac import Actor, Role
from regie.infrastructure.database.unit_of_work import UnitOfWorkManager

logger = get_logger(__name__)


def get_actor(
    x_actor_id: Annotated[str | None, Header()] = None,
    x_actor_role: Annotated[str | None, Header()] = None,
) -> Actor:
    """Build the acting user from the verified identity headers."""
    if not x_actor_id or not x_actor_role:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing actor identity headers",
        )
    try:
        actor = Actor(user_id=UUID(x_actor_id), role=Role(x_actor_role.lower()))
    except ValueError:
        logger.warning("invalid_actor_headers", actor_id=x_actor_id, role=x_actor_role)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid actor identity headers",
        ) from None
    set_actor_id(str(actor.user_id))
    return actor


def get_uow_manager(request: Request) -> UnitOfWorkManager:
    return request.app.state.uow_manager


CurrentActor = Annotated[Actor, Depends(get_actor)]
UowManagerDep = Annotated[UnitOfWorkManager, Depends(get_uow_manager)]


def get_event_service(manager: UowManagerDep) -> EventService:
    return EventService(manager.create_unit_of_work)


def get_schedule_service(manager: UowManagerDep) -> ScheduleService:
    return ScheduleService(manager.create_unit_of_work)


def get_assignment_service(manager: UowManagerDep) -> AssignmentService:
    return AssignmentService(manager.create_unit_of_work)


EventServiceDep = Annotated[EventService, Depends(get_event_service)]
ScheduleServiceDep = Annotated[ScheduleService, Depends(get_schedule_service)]
AssignmentServiceDep = Annotated[AssignmentService, Depends(get_assignment_service)]
