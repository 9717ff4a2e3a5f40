"""Daily schedule Data Transfer Objects."""

from datetime import date, time
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field

from regie.domain.staffing.entities.daily_schedule import DailySchedule
from regie.domain.staffing.value_objects.enums import TargetAudience


class ScheduleFields(BaseModel):
    """Descriptive fields shared by create requests and conflict previews."""

    schedule_date: date
    start_time: str = Field(..., description="Wall-clock start, HH:MM")
    end_time: str = Field(..., description="Wall-clock end, HH:MM")
    title: str = Field(..., min_length=1, max_length=200)
    description: str | None = Field(None, max_length=5000)
    location: str | None = Field(None, max_length=200)
    target_audience: list[TargetAudience] = Field(
        default_factory=lambda: [TargetAudience.BOTH]
    )
    is_mandatory: bool = False
    max_participants: int | None = Field(None, ge=1)
    required_skills: list[str] = Field(default_factory=list)
    responsible_person: str | None = Field(None, max_length=200)

    def fields(self) -> dict[str, Any]:
        return self.model_dump(exclude={"acknowledge_conflicts"})


class CreateScheduleRequest(ScheduleFields):
    acknowledge_conflicts: bool = False


class UpdateScheduleRequest(BaseModel):
    """DTO for editing a schedule; only the fields sent are changed."""

    schedule_date: date | None = None
    start_time: str | None = None
    end_time: str | None = None
    title: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = Field(None, max_length=5000)
    location: str | None = Field(None, max_length=200)
    target_audience: list[TargetAudience] | None = None
    is_mandatory: bool | None = None
    max_participants: int | None = Field(None, ge=1)
    required_skills: list[str] | None = None
    responsible_person: str | None = Field(None, max_length=200)
    acknowledge_conflicts: bool = False

    def changes(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True, exclude={"acknowledge_conflicts"})


class ConflictCheckRequest(ScheduleFields):
    """Candidate block to check; ``schedule_id`` marks an edit of that schedule."""

    schedule_id: UUID | None = None

    def fields(self) -> dict[str, Any]:
        return self.model_dump(exclude={"schedule_id"})


class DuplicateScheduleRequest(BaseModel):
    target_date: date | None = None
    acknowledge_conflicts: bool = False


class ReorderSchedulesRequest(BaseModel):
    schedule_date: date
    ordered_ids: list[UUID]


class ScheduleResponse(BaseModel):
    id: UUID
    event_id: UUID
    schedule_date: date
    start_time: time
    end_time: time
    title: str
    description: str | None
    location: str | None
    target_audience: list[TargetAudience]
    is_mandatory: bool
    max_participants: int | None
    required_skills: list[str]
    responsible_person: str | None
    position: int
    version: int

    @classmethod
    def from_entity(cls, schedule: DailySchedule) -> "ScheduleResponse":
        return cls(
            id=schedule.id,
            event_id=schedule.event_id,
            schedule_date=schedule.schedule_date,
            start_time=schedule.start_time,
            end_time=schedule.end_time,
            title=schedule.title,
            description=schedule.description,
            location=schedule.location,
            target_audience=list(schedule.target_audience),
            is_mandatory=schedule.is_mandatory,
            max_participants=schedule.max_participants,
            required_skills=list(schedule.required_skills),
            responsible_person=schedule.responsible_person,
            position=schedule.position,
            version=schedule.version,
        )


class ScheduleWriteResponse(BaseModel):
    """A written schedule plus the conflicts that were acknowledged to write it."""

    schedule: ScheduleResponse
    overridden_conflicts: list[ScheduleResponse] = Field(default_factory=list)


class ScheduleDayResponse(BaseModel):
    schedule_date: date
    schedules: list[ScheduleResponse]
    # Ids of blocks overlapping another listed block of the same day
    conflicting_ids: list[UUID] = Field(default_factory=list)
