"""
Schedule application service.

Every write re-reads the schedules of the target date inside its own
transaction before checking conflicts, and saves the parent event so that
two writers on the same event cannot both commit.
"""

from datetime import date
from typing import Any
from uuid import UUID

from regie.core.rbac import Actor, Permission, require_permission
from regie.domain.shared.exceptions import ValidationError
from regie.domain.staffing.entities.daily_schedule import DailySchedule
from regie.domain.staffing.entities.event import Event
from regie.domain.staffing.events import ScheduleConflictOverridden
from regie.domain.staffing.services.schedule_conflicts import (
    filter_by_audience,
    find_all_conflicts,
    find_conflicts,
    group_by_date,
    validate_schedule_write,
)
from regie.domain.staffing.value_objects.enums import HistoryAction, TargetAudience
from regie.infrastructure.database.unit_of_work import UnitOfWorkInterface

from ..dtos.schedule_dtos import (
    ScheduleDayResponse,
    ScheduleResponse,
    ScheduleWriteResponse,
)
from .base_service import ApplicationServiceBase


def _next_position(same_day: list[DailySchedule]) -> int:
    return max((s.position for s in same_day), default=-1) + 1


class ScheduleService(ApplicationServiceBase):
    """Application service for daily schedule operations."""

    def create_schedule(
        self,
        actor: Actor,
        event_id: UUID,
        data: dict[str, Any],
        acknowledge_conflicts: bool = False,
    ) -> ScheduleWriteResponse:
        """
        Add a schedule block to an event.

        Args:
            actor: Acting user
            event_id: Parent event
            data: Schedule fields (schedule_date, start_time, end_time, title, ...)
            acknowledge_conflicts: Write even if the block overlaps others

        Raises:
            PermissionDeniedError: If the actor is not a scheduling authority
            EntityNotFoundError: If the event does not exist
            InvalidStateError: If the event is terminal
            InvalidRangeError: If end_time is not after start_time
            OutOfRangeError: If the date is outside the event window
            ConflictsPendingError: If overlaps exist and were not acknowledged
        """
        require_permission(actor, Permission.SCHEDULE_MANAGE, "create schedules")
        now = self.now()
        with self._uow_factory() as uow:
            event = uow.events.get_required(event_id)
            event.ensure_writable("create schedule")

            candidate = self.build(
                DailySchedule,
                {
                    **data,
                    "event_id": event.id,
                    "created_by": actor.user_id,
                    "created_at": now,
                },
            )
            same_day = uow.schedules.list_for_date(event.id, candidate.schedule_date)
            conflicts = validate_schedule_write(
                candidate, event, same_day, acknowledge_conflicts
            )
            candidate.position = _next_position(same_day)
            uow.schedules.add(candidate)

            self._record_write(
                uow, event, actor, HistoryAction.SCHEDULE_CREATE, candidate, conflicts
            )

        self._log_write("schedule_created", candidate, conflicts)
        return self._write_response(candidate, conflicts)

    def edit_schedule(
        self,
        actor: Actor,
        schedule_id: UUID,
        changes: dict[str, Any],
        acknowledge_conflicts: bool = False,
    ) -> ScheduleWriteResponse:
        """
        Edit a schedule block; the edited block is checked like a new one.

        Raises:
            PermissionDeniedError: If the actor is not a scheduling authority
            EntityNotFoundError: If the schedule does not exist
            InvalidStateError: If the event is terminal
            ValidationError: If a field cannot be edited
            InvalidRangeError: If end_time is not after start_time
            OutOfRangeError: If the date is outside the event window
            ConflictsPendingError: If overlaps exist and were not acknowledged
        """
        require_permission(actor, Permission.SCHEDULE_MANAGE, "edit schedules")
        now = self.now()
        with self._uow_factory() as uow:
            current = uow.schedules.get_required(schedule_id)
            event = uow.events.get_required(current.event_id)
            event.ensure_writable("edit schedule")

            with self.validating():
                candidate = current.with_changes(changes, now)
            same_day = uow.schedules.list_for_date(event.id, candidate.schedule_date)
            conflicts = validate_schedule_write(
                candidate, event, same_day, acknowledge_conflicts
            )
            if candidate.schedule_date != current.schedule_date:
                candidate.position = _next_position(same_day)
            uow.schedules.save(candidate)

            self._record_write(
                uow,
                event,
                actor,
                HistoryAction.SCHEDULE_UPDATE,
                candidate,
                conflicts,
                fields=sorted(changes),
            )

        self._log_write("schedule_updated", candidate, conflicts)
        return self._write_response(candidate, conflicts)

    def duplicate_schedule(
        self,
        actor: Actor,
        schedule_id: UUID,
        target_date: date | None = None,
        acknowledge_conflicts: bool = False,
    ) -> ScheduleWriteResponse:
        """
        Copy a schedule block, on its own date or another one.

        The copy goes through the same checks as a new block. A copy on the
        same date always overlaps its source, so it needs acknowledgement.
        """
        require_permission(actor, Permission.SCHEDULE_MANAGE, "duplicate schedules")
        now = self.now()
        with self._uow_factory() as uow:
            source = uow.schedules.get_required(schedule_id)
            event = uow.events.get_required(source.event_id)
            event.ensure_writable("duplicate schedule")

            with self.validating():
                copy = source.duplicate(actor.user_id, target_date, now=now)
            same_day = uow.schedules.list_for_date(event.id, copy.schedule_date)
            conflicts = validate_schedule_write(
                copy, event, same_day, acknowledge_conflicts
            )
            copy.position = _next_position(same_day)
            uow.schedules.add(copy)

            self._record_write(
                uow,
                event,
                actor,
                HistoryAction.SCHEDULE_CREATE,
                copy,
                conflicts,
                duplicated_from=str(source.id),
            )

        self._log_write("schedule_duplicated", copy, conflicts)
        return self._write_response(copy, conflicts)

    def delete_schedule(self, actor: Actor, schedule_id: UUID) -> None:
        """
        Raises:
            PermissionDeniedError: If the actor is not a scheduling authority
            EntityNotFoundError: If the schedule does not exist
            InvalidStateError: If the event is terminal
        """
        require_permission(actor, Permission.SCHEDULE_MANAGE, "delete schedules")
        with self._uow_factory() as uow:
            schedule = uow.schedules.get_required(schedule_id)
            event = uow.events.get_required(schedule.event_id)
            event.ensure_writable("delete schedule")

            uow.schedules.delete(schedule)
            event.record_history(
                HistoryAction.SCHEDULE_DELETE,
                actor,
                self.now(),
                {
                    "schedule_id": str(schedule.id),
                    "title": schedule.title,
                    "schedule_date": schedule.schedule_date.isoformat(),
                },
            )
            uow.events.save(event)

        self._logger.info(
            "schedule_deleted",
            schedule_id=str(schedule_id),
            event_id=str(schedule.event_id),
        )

    def reorder_schedules(
        self,
        actor: Actor,
        event_id: UUID,
        schedule_date: date,
        ordered_ids: list[UUID],
    ) -> list[ScheduleResponse]:
        """
        Rewrite the display order of one date's schedules in one transaction.

        Raises:
            ValidationError: Unless ordered_ids is exactly that date's schedule ids
        """
        require_permission(actor, Permission.SCHEDULE_MANAGE, "reorder schedules")
        with self._uow_factory() as uow:
            event = uow.events.get_required(event_id)
            event.ensure_writable("reorder schedules")

            same_day = {s.id: s for s in uow.schedules.list_for_date(event.id, schedule_date)}
            if len(set(ordered_ids)) != len(ordered_ids) or set(ordered_ids) != set(same_day):
                raise ValidationError(
                    "ordered_ids",
                    [str(i) for i in ordered_ids],
                    "must list each schedule of the date exactly once",
                    {"expected": sorted(str(i) for i in same_day)},
                )

            now = self.now()
            for position, schedule_id in enumerate(ordered_ids):
                schedule = same_day[schedule_id]
                if schedule.position != position:
                    schedule.position = position
                    schedule.mark_updated(now)
                    uow.schedules.save(schedule)

            event.record_history(
                HistoryAction.SCHEDULE_REORDER,
                actor,
                now,
                {
                    "schedule_date": schedule_date.isoformat(),
                    "ordered_ids": [str(i) for i in ordered_ids],
                },
            )
            uow.events.save(event)
            ordered = [same_day[i] for i in ordered_ids]

        self._logger.info(
            "schedules_reordered",
            event_id=str(event_id),
            schedule_date=schedule_date.isoformat(),
            count=len(ordered),
        )
        return [ScheduleResponse.from_entity(s) for s in ordered]

    def list_conflicts(
        self,
        actor: Actor,
        event_id: UUID,
        candidate_data: dict[str, Any],
        schedule_id: UUID | None = None,
    ) -> list[ScheduleResponse]:
        """
        Preview the conflicts a block would have, without writing anything.

        Args:
            candidate_data: Fields of the block; for an edit, the changed fields
            schedule_id: Schedule being edited, excluded from its own conflicts

        Raises:
            InvalidRangeError: If end_time is not after start_time
        """
        require_permission(actor, Permission.SCHEDULE_READ, "check schedule conflicts")
        with self._uow_factory() as uow:
            event = self.load_visible_event(uow, actor, event_id)
            if schedule_id is not None:
                current = uow.schedules.get_required(schedule_id)
                with self.validating():
                    candidate = current.with_changes(candidate_data)
            else:
                candidate = self.build(
                    DailySchedule,
                    {**candidate_data, "event_id": event.id, "created_by": actor.user_id},
                )
            same_day = uow.schedules.list_for_date(event.id, candidate.schedule_date)
        return [ScheduleResponse.from_entity(s) for s in find_conflicts(candidate, same_day)]

    def get_schedule(self, actor: Actor, schedule_id: UUID) -> ScheduleResponse:
        require_permission(actor, Permission.SCHEDULE_READ, "view schedules")
        with self._uow_factory() as uow:
            schedule = uow.schedules.get_required(schedule_id)
            self.load_visible_event(uow, actor, schedule.event_id)
        return ScheduleResponse.from_entity(schedule)

    def list_schedules(
        self,
        actor: Actor,
        event_id: UUID,
        audience: TargetAudience | None = None,
    ) -> list[ScheduleDayResponse]:
        """
        Schedules of an event grouped by date, optionally for one audience.

        Each day also lists the blocks that collide with another block of
        that day, so acknowledged overlaps stay visible.
        """
        require_permission(actor, Permission.SCHEDULE_READ, "view schedules")
        with self._uow_factory() as uow:
            self.load_visible_event(uow, actor, event_id)
            schedules = uow.schedules.list_for_event(event_id)

        days = []
        for day, blocks in group_by_date(filter_by_audience(schedules, audience)):
            conflicting = {s.id for pair in find_all_conflicts(blocks) for s in pair}
            days.append(
                ScheduleDayResponse(
                    schedule_date=day,
                    schedules=[ScheduleResponse.from_entity(s) for s in blocks],
                    conflicting_ids=[s.id for s in blocks if s.id in conflicting],
                )
            )
        return days

    def _record_write(
        self,
        uow: UnitOfWorkInterface,
        event: Event,
        actor: Actor,
        action: HistoryAction,
        schedule: DailySchedule,
        conflicts: list[DailySchedule],
        **extra: Any,
    ) -> None:
        now = self.now()
        details: dict[str, Any] = {
            "schedule_id": str(schedule.id),
            "title": schedule.title,
            "schedule_date": schedule.schedule_date.isoformat(),
            **extra,
        }
        if conflicts:
            details["overridden_conflicts"] = [str(c.id) for c in conflicts]
            event.add_domain_event(
                ScheduleConflictOverridden(
                    aggregate_id=event.id,
                    schedule_id=schedule.id,
                    schedule_date=schedule.schedule_date,
                    conflicting_ids=[c.id for c in conflicts],
                    actor_id=actor.user_id,
                    occurred_at=now,
                )
            )
        event.record_history(action, actor, now, details)
        uow.events.save(event)

    def _log_write(
        self, log_event: str, schedule: DailySchedule, conflicts: list[DailySchedule]
    ) -> None:
        self._logger.info(
            log_event,
            schedule_id=str(schedule.id),
            event_id=str(schedule.event_id),
            schedule_date=schedule.schedule_date.isoformat(),
            overridden_conflicts=len(conflicts),
        )

    @staticmethod
    def _write_response(
        schedule: DailySchedule, conflicts: list[DailySchedule]
    ) -> ScheduleWriteResponse:
        return ScheduleWriteResponse(
            schedule=ScheduleResponse.from_entity(schedule),
            overridden_conflicts=[ScheduleResponse.from_entity(c) for c in conflicts],
        )
