"""
Daily schedule repository implementation.

``list_for_date`` is the query conflict detection runs on; it is served by
the (event_id, schedule_date) indexes.
"""

from datetime import date
from uuid import UUID

from sqlmodel import select

from regie.domain.staffing.entities.daily_schedule import DailySchedule
from regie.domain.staffing.repositories.schedule_repository import (
    ScheduleRepository as ScheduleRepositoryInterface,
)

from ..mappers import DailyScheduleMapper
from ..models import DailySchedule as SQLDailySchedule
from .base import BaseRepository


class ScheduleRepository(BaseRepository[SQLDailySchedule], ScheduleRepositoryInterface):
    model = SQLDailySchedule
    entity_type = "schedule"

    def add(self, schedule: DailySchedule) -> DailySchedule:
        self._insert(DailyScheduleMapper.domain_to_sql(schedule))
        return schedule

    def get(self, schedule_id: UUID) -> DailySchedule | None:
        row = self._get_row(schedule_id)
        return DailyScheduleMapper.sql_to_domain(row) if row else None

    def list_for_event(self, event_id: UUID) -> list[DailySchedule]:
        statement = (
            select(SQLDailySchedule)
            .where(SQLDailySchedule.event_id == event_id)
            .order_by(
                SQLDailySchedule.schedule_date,
                SQLDailySchedule.start_time,
                SQLDailySchedule.position,
            )
        )
        return self._to_domain(self._exec_all(statement))

    def list_for_date(self, event_id: UUID, schedule_date: date) -> list[DailySchedule]:
        statement = (
            select(SQLDailySchedule)
            .where(
                SQLDailySchedule.event_id == event_id,
                SQLDailySchedule.schedule_date == schedule_date,
            )
            .order_by(SQLDailySchedule.start_time, SQLDailySchedule.position)
        )
        return self._to_domain(self._exec_all(statement))

    def save(self, schedule: DailySchedule) -> DailySchedule:
        self._versioned_update(schedule, DailyScheduleMapper.columns(schedule))
        return schedule

    def delete(self, schedule: DailySchedule) -> None:
        self._versioned_delete(schedule)

    def delete_for_event(self, event_id: UUID) -> int:
        return self._delete_where(SQLDailySchedule.event_id == event_id)

    @staticmethod
    def _to_domain(rows: list[SQLDailySchedule]) -> list[DailySchedule]:
        return [DailyScheduleMapper.sql_to_domain(row) for row in rows]
