"""
DailySchedule Domain Entity

A block of activity inside an event's date range, scoped to one calendar
date and to the worker categories it concerns.
"""

from datetime import date, datetime, time
from typing import Any
from uuid import UUID

from pydantic import Field, field_validator

from ...shared.base import Entity, utcnow
from ...shared.exceptions import ValidationError
from ..value_objects.enums import TargetAudience
from ..value_objects.time_range import TimeRange, parse_clock

EDITABLE_FIELDS = frozenset(
    {
        "schedule_date",
        "start_time",
        "end_time",
        "title",
        "description",
        "location",
        "target_audience",
        "is_mandatory",
        "max_participants",
        "required_skills",
        "responsible_person",
    }
)

COPY_PREFIX = "Copie de "


class DailySchedule(Entity):
    """
    DailySchedule entity.

    The clock range is validated lazily through ``time_range`` so that the
    write path can report InvalidRange before any other failure.
    """

    event_id: UUID
    schedule_date: date
    start_time: time
    end_time: time
    title: str = Field(min_length=1, max_length=200)
    description: str | None = None
    location: str | None = Field(None, max_length=200)
    target_audience: list[TargetAudience] = Field(
        default_factory=lambda: [TargetAudience.BOTH]
    )
    is_mandatory: bool = False
    max_participants: int | None = Field(None, ge=1)
    required_skills: list[str] = Field(default_factory=list)
    responsible_person: str | None = Field(None, max_length=200)
    position: int = Field(default=0, ge=0)
    created_by: UUID

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def parse_clock_strings(cls, v: Any) -> Any:
        if isinstance(v, str):
            return parse_clock(v)
        return v

    @field_validator("target_audience")
    @classmethod
    def dedupe_audience(cls, v: list[TargetAudience]) -> list[TargetAudience]:
        # "both" is exclusive, and no selection means everyone
        if not v or TargetAudience.BOTH in v:
            return [TargetAudience.BOTH]
        return sorted(set(v), key=lambda a: a.value)

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title cannot be blank")
        return v

    def is_valid(self) -> bool:
        return self.end_time > self.start_time and bool(self.title)

    @property
    def time_range(self) -> TimeRange:
        """
        Range of the block on its date.

        Raises:
            InvalidRangeError: If end_time is not after start_time
        """
        return TimeRange(
            datetime.combine(self.schedule_date, self.start_time),
            datetime.combine(self.schedule_date, self.end_time),
        )

    def sort_key(self) -> tuple[date, time, int]:
        return self.schedule_date, self.start_time, self.position

    def with_changes(self, changes: dict[str, Any], now: datetime | None = None) -> "DailySchedule":
        """
        Build the candidate state of an edit without mutating this schedule.

        Raises:
            ValidationError: If a field is not editable
        """
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise ValidationError(
                ", ".join(sorted(unknown)), None, "field cannot be edited"
            )
        data = self.model_dump()
        data.update(changes)
        data["updated_at"] = now or utcnow()
        return DailySchedule.model_validate(data)

    def duplicate(
        self,
        created_by: UUID,
        target_date: date | None = None,
        position: int = 0,
        now: datetime | None = None,
    ) -> "DailySchedule":
        """Copy of this block, optionally moved to another date."""
        data = self.model_dump(
            exclude={"id", "created_at", "updated_at", "version", "position", "created_by"}
        )
        data["title"] = f"{COPY_PREFIX}{self.title}"[:200]
        if target_date is not None:
            data["schedule_date"] = target_date
        now = now or utcnow()
        return DailySchedule(
            **data,
            position=position,
            created_by=created_by,
            created_at=now,
            updated_at=now,
        )

    def __str__(self) -> str:
        return (
            f"DailySchedule({self.title}, {self.schedule_date} "
            f"{self.start_time:%H:%M}-{self.end_time:%H:%M})"
        )
