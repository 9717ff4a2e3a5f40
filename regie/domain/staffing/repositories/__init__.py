"""Repository interfaces for the staffing domain."""

from .assignment_repository import AssignmentRepository
from .event_repository import EventRepository
from .history_repository import HistoryRepository
from .schedule_repository import ScheduleRepository

__all__ = [
    "AssignmentRepository",
    "EventRepository",
    "HistoryRepository",
    "ScheduleRepository",
]
