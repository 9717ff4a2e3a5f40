"""Staffing domain entities."""

from .assignment import Assignment
from .daily_schedule import DailySchedule
from .event import Event, HistoryEntry

__all__ = ["Assignment", "DailySchedule", "Event", "HistoryEntry"]
