"""
Time Range Value Object

Represents a half-open period [start, end) between two absolute points in
time. Used for event windows and for the blocks of a daily schedule.
"""

import re
from collections.abc import Iterable
from datetime import date, datetime, time

from ...shared.exceptions import InvalidRangeError, ValidationError
from .enums import TargetAudience

_CLOCK_PATTERN = re.compile(r"^(?P<hour>[01]?\d|2[0-3]):(?P<minute>[0-5]\d)(:[0-5]\d)?$")


def parse_clock(value: str | time, field_name: str = "time") -> time:
    """
    Parse a wall-clock "HH:MM" (or "HH:MM:SS") string.

    Args:
        value: Clock string or an already parsed time
        field_name: Field reported in the validation error

    Returns:
        Parsed time, seconds dropped

    Raises:
        ValidationError: If the string is not a valid 24-hour clock time
    """
    if isinstance(value, time):
        return value.replace(second=0, microsecond=0)

    match = _CLOCK_PATTERN.match(value.strip()) if isinstance(value, str) else None
    if not match:
        raise ValidationError(field_name, value, "expected a HH:MM clock time")
    return time(int(match.group("hour")), int(match.group("minute")))


class TimeRange:
    """
    A half-open time range value object.

    Two ranges overlap iff ``a.start < b.end and b.start < a.end``, so blocks
    that merely touch (one ends when the next starts) do not overlap.
    """

    __slots__ = ("_start", "_end")

    def __init__(self, start: datetime, end: datetime) -> None:
        """
        Initialize a TimeRange.

        Raises:
            InvalidRangeError: If end is not strictly after start
        """
        if end <= start:
            raise InvalidRangeError(start, end)
        self._start = start
        self._end = end

    @classmethod
    def on_date(cls, day: date, start: str | time, end: str | time) -> "TimeRange":
        """
        Create a TimeRange from a calendar date and two clock times.

        Args:
            day: Calendar date of the block
            start: Start clock time ("HH:MM" or time)
            end: End clock time ("HH:MM" or time)
        """
        start_clock = parse_clock(start, "start_time")
        end_clock = parse_clock(end, "end_time")
        return cls(datetime.combine(day, start_clock), datetime.combine(day, end_clock))

    @property
    def start(self) -> datetime:
        return self._start

    @property
    def end(self) -> datetime:
        return self._end

    def duration_minutes(self) -> int:
        """Get duration of the range in minutes."""
        return int((self._end - self._start).total_seconds() // 60)

    def contains(self, moment: datetime) -> bool:
        """Check if a point in time falls inside the range."""
        return self._start <= moment < self._end

    def overlaps_with(self, other: "TimeRange") -> bool:
        """Check if this range overlaps with another range."""
        return self._start < other._end and other._start < self._end

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TimeRange):
            return False
        return self._start == other._start and self._end == other._end

    def __hash__(self) -> int:
        return hash((self._start, self._end))

    def __str__(self) -> str:
        return f"{self._start:%Y-%m-%d %H:%M} to {self._end:%Y-%m-%d %H:%M}"

    def __repr__(self) -> str:
        return f"TimeRange(start={self._start!r}, end={self._end!r})"


def overlaps(a: TimeRange, b: TimeRange) -> bool:
    """Half-open overlap test between two ranges."""
    return a.overlaps_with(b)


def audiences_intersect(
    a: Iterable[TargetAudience], b: Iterable[TargetAudience]
) -> bool:
    """
    Check whether two audience sets concern at least one common worker category.

    The ``both`` wildcard on either side intersects with any non-empty audience.
    """
    left = set(a)
    right = set(b)
    if not left or not right:
        return False
    if TargetAudience.BOTH in left or TargetAudience.BOTH in right:
        return True
    return bool(left & right)
