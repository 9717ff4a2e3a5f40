"""Staffing value objects."""

from .enums import (
    WORKER_RESPONSES,
    AssignmentStatus,
    EventStatus,
    HistoryAction,
    TargetAudience,
)
from .time_range import TimeRange, audiences_intersect, overlaps, parse_clock

__all__ = [
    "AssignmentStatus",
    "EventStatus",
    "HistoryAction",
    "TargetAudience",
    "WORKER_RESPONSES",
    "TimeRange",
    "audiences_intersect",
    "overlaps",
    "parse_clock",
]
