"""
Event application service.

Coordinates the event lifecycle: creation, detail edits, status transitions
with their side effects, draft deletion, and the audit history.
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from regie.core.rbac import Actor, Permission, require_permission
from regie.domain.shared.exceptions import OutOfRangeError
from regie.domain.staffing.entities.event import Event
from regie.domain.staffing.services.schedule_conflicts import schedules_outside
from regie.domain.staffing.value_objects.enums import (
    AssignmentStatus,
    EventStatus,
    HistoryAction,
    TargetAudience,
)

from ..dtos.event_dtos import EventResponse, HistoryEntryResponse
from .base_service import ApplicationServiceBase


class EventService(ApplicationServiceBase):
    """Application service for event lifecycle operations."""

    def create_event(
        self,
        actor: Actor,
        title: str,
        start_at: datetime,
        end_at: datetime,
        target_audience: TargetAudience = TargetAudience.BOTH,
        description: str | None = None,
        location: str | None = None,
    ) -> EventResponse:
        """
        Create a draft event.

        Raises:
            PermissionDeniedError: If the actor is not a scheduling authority
            InvalidRangeError: If end_at is not after start_at
        """
        with self.validating():
            event = Event.create(
                actor,
                title=title,
                start_at=start_at,
                end_at=end_at,
                target_audience=target_audience,
                description=description,
                location=location,
                now=self.now(),
            )
        with self._uow_factory() as uow:
            uow.events.add(event)

        self._logger.info(
            "event_created",
            event_id=str(event.id),
            title=event.title,
            created_by=str(actor.user_id),
        )
        return EventResponse.from_entity(event)

    def get_event(self, actor: Actor, event_id: UUID) -> EventResponse:
        require_permission(actor, Permission.EVENT_READ, "view events")
        with self._uow_factory() as uow:
            event = self.load_visible_event(uow, actor, event_id)
        return EventResponse.from_entity(event)

    def list_events(
        self, actor: Actor, status: EventStatus | None = None
    ) -> list[EventResponse]:
        """List events by start time; workers never see drafts."""
        require_permission(actor, Permission.EVENT_READ, "view events")
        with self._uow_factory() as uow:
            events = uow.events.list_all(status)
        if not actor.is_scheduling_authority:
            events = [e for e in events if e.status.is_visible_to_workers]
        return [EventResponse.from_entity(e) for e in events]

    def update_event(self, actor: Actor, event_id: UUID, **changes: Any) -> EventResponse:
        """
        Edit an event's details or window.

        Raises:
            PermissionDeniedError: If the actor is not a scheduling authority
            EntityNotFoundError: If the event does not exist
            InvalidStateError: If the event is terminal
            InvalidRangeError: If the new window is malformed
            OutOfRangeError: If an existing schedule would fall outside the window
        """
        require_permission(actor, Permission.EVENT_MANAGE, "edit events")
        with self._uow_factory() as uow:
            event = uow.events.get_required(event_id)
            with self.validating():
                applied = event.update_details(actor, changes, now=self.now())
            if not applied:
                return EventResponse.from_entity(event)

            if "start_at" in applied or "end_at" in applied:
                stranded = schedules_outside(
                    uow.schedules.list_for_event(event.id),
                    event.first_day,
                    event.last_day,
                )
                if stranded:
                    raise OutOfRangeError(
                        stranded[0].schedule_date, event.first_day, event.last_day
                    )
            uow.events.save(event)

        self._logger.info(
            "event_updated", event_id=str(event.id), fields=sorted(applied)
        )
        return EventResponse.from_entity(event)

    def transition_event(
        self, actor: Actor, event_id: UUID, target_status: EventStatus
    ) -> EventResponse:
        """
        Move an event to another lifecycle status.

        Completing an event also completes every validated assignment in the
        same transaction.

        Raises:
            PermissionDeniedError: If the actor is not a scheduling authority
            EntityNotFoundError: If the event does not exist
            InvalidTransitionError: If the edge is not allowed, or the event is
                completed before its end
        """
        require_permission(actor, Permission.EVENT_MANAGE, "change event status")
        now = self.now()
        completed_count = 0
        with self._uow_factory() as uow:
            event = uow.events.get_required(event_id)
            old_status = event.transition_to(target_status, actor, now)

            if target_status == EventStatus.COMPLETED:
                for assignment in uow.assignments.list_for_event(
                    event.id, AssignmentStatus.VALIDATED
                ):
                    assignment.mark_completed(actor.user_id, now)
                    uow.assignments.save(assignment)
                    completed_count += 1
            uow.events.save(event)

        self._logger.info(
            "event_transitioned",
            event_id=str(event.id),
            from_status=old_status.value,
            to_status=target_status.value,
            completed_assignments=completed_count,
        )
        return EventResponse.from_entity(event)

    def publish_event(self, actor: Actor, event_id: UUID) -> EventResponse:
        return self.transition_event(actor, event_id, EventStatus.PUBLISHED)

    def unpublish_event(self, actor: Actor, event_id: UUID) -> EventResponse:
        return self.transition_event(actor, event_id, EventStatus.DRAFT)

    def cancel_event(self, actor: Actor, event_id: UUID) -> EventResponse:
        return self.transition_event(actor, event_id, EventStatus.CANCELLED)

    def complete_event(self, actor: Actor, event_id: UUID) -> EventResponse:
        return self.transition_event(actor, event_id, EventStatus.COMPLETED)

    def delete_event(self, actor: Actor, event_id: UUID) -> None:
        """
        Delete a draft event with its schedules and assignments.

        The history of the event is kept and gains a delete entry.

        Raises:
            PermissionDeniedError: If the actor is not a scheduling authority
            EntityNotFoundError: If the event does not exist
            InvalidStateError: Unless the event is a draft
        """
        require_permission(actor, Permission.EVENT_MANAGE, "delete events")
        with self._uow_factory() as uow:
            event = uow.events.get_required(event_id)
            event.ensure_deletable()

            schedules = uow.schedules.delete_for_event(event.id)
            assignments = uow.assignments.delete_for_event(event.id)
            event.record_history(
                HistoryAction.DELETE,
                actor,
                self.now(),
                {
                    "title": event.title,
                    "schedules_deleted": schedules,
                    "assignments_deleted": assignments,
                },
            )
            uow.events.delete(event)

        self._logger.info(
            "event_deleted",
            event_id=str(event_id),
            schedules_deleted=schedules,
            assignments_deleted=assignments,
        )

    def get_history(self, actor: Actor, event_id: UUID) -> list[HistoryEntryResponse]:
        """
        Audit trail of an event, oldest first. Still readable after deletion.
        """
        require_permission(actor, Permission.EVENT_MANAGE, "view event history")
        with self._uow_factory() as uow:
            entries = uow.history.list_for_event(event_id)
        return [HistoryEntryResponse.from_entity(e) for e in entries]
