"""SQLModel repository implementations."""

from .assignment_repository import AssignmentRepository
from .base import BaseRepository, DatabaseError, RepositoryError
from .event_repository import EventRepository
from .history_repository import HistoryRepository
from .schedule_repository import ScheduleRepository

__all__ = [
    "AssignmentRepository",
    "BaseRepository",
    "DatabaseError",
    "EventRepository",
    "HistoryRepository",
    "RepositoryError",
    "ScheduleRepository",
]
