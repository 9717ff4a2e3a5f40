"""Staffing domain services."""

from .schedule_conflicts import (
    conflicts_with,
    filter_by_audience,
    find_all_conflicts,
    find_conflicts,
    group_by_date,
    schedules_outside,
    sort_for_display,
    validate_schedule_write,
)
from .team_finalization import (
    SELECTABLE_STATUSES,
    FinalizationPlan,
    apply_finalization,
    plan_finalization,
)

__all__ = [
    "SELECTABLE_STATUSES",
    "FinalizationPlan",
    "apply_finalization",
    "conflicts_with",
    "filter_by_audience",
    "find_all_conflicts",
    "find_conflicts",
    "group_by_date",
    "plan_finalization",
    "schedules_outside",
    "sort_for_display",
    "validate_schedule_write",
]
