"""
Schedule Repository Interface

Defines the contract for daily schedule data access operations.
"""

from abc import ABC, abstractmethod
from datetime import date
from uuid import UUID

from ...shared.exceptions import EntityNotFoundError
from ..entities.daily_schedule import DailySchedule


class ScheduleRepository(ABC):
    """Abstract repository interface for DailySchedule entities."""

    @abstractmethod
    def add(self, schedule: DailySchedule) -> DailySchedule:
        pass

    @abstractmethod
    def get(self, schedule_id: UUID) -> DailySchedule | None:
        pass

    def get_required(self, schedule_id: UUID) -> DailySchedule:
        """
        Raises:
            EntityNotFoundError: If the schedule does not exist
        """
        schedule = self.get(schedule_id)
        if schedule is None:
            raise EntityNotFoundError("schedule", schedule_id)
        return schedule

    @abstractmethod
    def list_for_event(self, event_id: UUID) -> list[DailySchedule]:
        """
        List every schedule of an event in display order.
        """

    @abstractmethod
    def list_for_date(self, event_id: UUID, schedule_date: date) -> list[DailySchedule]:
        """
        List the schedules of one event on one date.

        This is the only input conflict detection needs, so it must be served
        by an indexed query rather than by filtering the whole event.
        """

    @abstractmethod
    def save(self, schedule: DailySchedule) -> DailySchedule:
        """
        Persist changes to an existing schedule.

        Raises:
            ConcurrentModificationError: If the stored version moved on
        """

    @abstractmethod
    def delete(self, schedule: DailySchedule) -> None:
        """
        Raises:
            ConcurrentModificationError: If the stored version moved on
        """

    @abstractmethod
    def delete_for_event(self, event_id: UUID) -> int:
        """Remove every schedule of an event and return how many were removed."""
