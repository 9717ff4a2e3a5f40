"""
Schedule Conflict Detection

Pure functions deciding whether daily schedule blocks collide. Storage is
never touched here: callers feed in the schedules of a single date, read
inside their own transaction.
"""

from collections.abc import Iterable, Sequence
from datetime import date
from itertools import groupby

from ...shared.exceptions import ConflictsPendingError, OutOfRangeError
from ..entities.daily_schedule import DailySchedule
from ..entities.event import Event
from ..value_objects.enums import TargetAudience
from ..value_objects.time_range import audiences_intersect


def conflicts_with(candidate: DailySchedule, other: DailySchedule) -> bool:
    """Check if two schedules share a date, overlap in time and concern a common audience."""
    if candidate.id == other.id or candidate.schedule_date != other.schedule_date:
        return False
    return candidate.time_range.overlaps_with(other.time_range) and audiences_intersect(
        candidate.target_audience, other.target_audience
    )


def find_conflicts(
    candidate: DailySchedule, existing: Iterable[DailySchedule]
) -> list[DailySchedule]:
    """
    Find every existing schedule the candidate collides with.

    The candidate itself (same id) is skipped, which lets an edit be checked
    against the unfiltered list of its date.

    Returns:
        Conflicting schedules in display order
    """
    return sorted(
        (other for other in existing if conflicts_with(candidate, other)),
        key=DailySchedule.sort_key,
    )


def find_all_conflicts(
    schedules: Sequence[DailySchedule],
) -> list[tuple[DailySchedule, DailySchedule]]:
    """All colliding pairs among a set of schedules, each pair reported once."""
    ordered = sorted(schedules, key=DailySchedule.sort_key)
    pairs = []
    for i, first in enumerate(ordered):
        for second in ordered[i + 1 :]:
            if second.schedule_date != first.schedule_date:
                break
            if conflicts_with(first, second):
                pairs.append((first, second))
    return pairs


def validate_schedule_write(
    candidate: DailySchedule,
    event: Event,
    same_day: Iterable[DailySchedule],
    acknowledge_conflicts: bool = False,
) -> list[DailySchedule]:
    """
    Run the checks every schedule write goes through, in order.

    1. the block's end is after its start
    2. the date lies within the event's inclusive date range
    3. no unacknowledged overlap with the schedules of that date

    Returns:
        The conflicts that were acknowledged (empty when there were none)

    Raises:
        InvalidRangeError: If end_time is not after start_time
        OutOfRangeError: If the date is outside the event window
        ConflictsPendingError: If conflicts exist and were not acknowledged
    """
    block = candidate.time_range
    if not event.covers_date(block.start.date()):
        raise OutOfRangeError(candidate.schedule_date, event.first_day, event.last_day)

    conflicts = find_conflicts(candidate, same_day)
    if conflicts and not acknowledge_conflicts:
        raise ConflictsPendingError(conflicts)
    return conflicts


def schedules_outside(
    schedules: Iterable[DailySchedule], first_day: date, last_day: date
) -> list[DailySchedule]:
    """Schedules whose date falls outside an inclusive date range."""
    return [s for s in schedules if not first_day <= s.schedule_date <= last_day]


def filter_by_audience(
    schedules: Iterable[DailySchedule], audience: TargetAudience | None
) -> list[DailySchedule]:
    """
    Keep the schedules relevant to a worker category.

    ``None`` keeps everything; ``both`` as a filter also keeps everything
    because it intersects any audience.
    """
    if audience is None:
        return list(schedules)
    return [s for s in schedules if audiences_intersect([audience], s.target_audience)]


def sort_for_display(schedules: Iterable[DailySchedule]) -> list[DailySchedule]:
    return sorted(schedules, key=DailySchedule.sort_key)


def group_by_date(
    schedules: Iterable[DailySchedule],
) -> list[tuple[date, list[DailySchedule]]]:
    """Group schedules by date, chronologically, each day in display order."""
    return [
        (day, list(blocks))
        for day, blocks in groupby(
            sort_for_display(schedules), key=lambda s: s.schedule_date
        )
    ]
