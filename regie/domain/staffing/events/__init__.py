"""Domain events raised by the staffing aggregates."""

from datetime import date
from uuid import UUID

from ...shared.base import DomainEvent
from ..value_objects.enums import AssignmentStatus, EventStatus


class EventStatusChanged(DomainEvent):
    """Raised when an event moves through its lifecycle."""

    old_status: EventStatus
    new_status: EventStatus
    actor_id: UUID


class ScheduleConflictOverridden(DomainEvent):
    """Raised when a schedule is written over acknowledged conflicts."""

    schedule_id: UUID
    schedule_date: date
    conflicting_ids: list[UUID]
    actor_id: UUID


class AssignmentStatusChanged(DomainEvent):
    """Raised when a worker's assignment changes status."""

    assignment_id: UUID
    worker_id: UUID
    old_status: AssignmentStatus
    new_status: AssignmentStatus
    actor_id: UUID


class TeamFinalized(DomainEvent):
    """Raised when the team of an event is (re)partitioned."""

    validated_ids: list[UUID]
    not_retained_ids: list[UUID]
    actor_id: UUID


__all__ = [
    "AssignmentStatusChanged",
    "EventStatusChanged",
    "ScheduleConflictOverridden",
    "TeamFinalized",
]
