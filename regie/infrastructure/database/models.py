"""
SQLModel table definitions for the staffing domain.

Every mutable table carries a ``version`` column used for optimistic
concurrency. The history table has no foreign key to ``events`` because its
rows outlive the deletion of a draft event. Timestamps are naive UTC, the
representation the domain works with.
"""

from datetime import date, time
from typing import Any
from uuid import UUID, uuid4

from pydantic import NaiveDatetime
from sqlalchemy import JSON, Column, DateTime, UniqueConstraint
from sqlmodel import Field, SQLModel

from regie.domain.shared.base import utcnow
from regie.domain.staffing.value_objects.enums import (
    AssignmentStatus,
    EventStatus,
    HistoryAction,
    TargetAudience,
)


# Base classes for shared fields
class TimestampedModel(SQLModel):
    """Base model with timestamp fields."""

    created_at: NaiveDatetime = Field(default_factory=utcnow, sa_type=DateTime)
    updated_at: NaiveDatetime | None = Field(None, sa_type=DateTime)


class VersionedModel(TimestampedModel):
    """Base model with UUID primary key, timestamps and a version counter."""

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    version: int = Field(default=0, ge=0)


# Event tables
class EventBase(SQLModel):
    title: str = Field(min_length=1, max_length=200)
    description: str | None = None
    location: str | None = Field(None, max_length=200)
    start_at: NaiveDatetime = Field(sa_type=DateTime)
    end_at: NaiveDatetime = Field(sa_type=DateTime)
    target_audience: TargetAudience = Field(default=TargetAudience.BOTH)
    status: EventStatus = Field(default=EventStatus.DRAFT, index=True)
    published_at: NaiveDatetime | None = Field(None, sa_type=DateTime)
    created_by: UUID


class Event(EventBase, VersionedModel, table=True):
    """Event table definition."""

    __tablename__ = "events"


# Daily schedule tables
class DailyScheduleBase(SQLModel):
    event_id: UUID = Field(foreign_key="events.id", index=True)
    schedule_date: date = Field(index=True)
    start_time: time
    end_time: time
    title: str = Field(min_length=1, max_length=200)
    description: str | None = None
    location: str | None = Field(None, max_length=200)
    target_audience: list[str] = Field(default_factory=list, sa_column=Column(JSON))
    is_mandatory: bool = Field(default=False)
    max_participants: int | None = Field(None, ge=1)
    required_skills: list[str] = Field(default_factory=list, sa_column=Column(JSON))
    responsible_person: str | None = Field(None, max_length=200)
    position: int = Field(default=0, ge=0)
    created_by: UUID


class DailySchedule(DailyScheduleBase, VersionedModel, table=True):
    """Daily schedule table definition."""

    __tablename__ = "daily_schedules"


# Assignment tables
class AssignmentBase(SQLModel):
    event_id: UUID = Field(foreign_key="events.id", index=True)
    worker_id: UUID = Field(index=True)
    status: AssignmentStatus = Field(default=AssignmentStatus.PROPOSED)
    pending_status: AssignmentStatus = Field(default=AssignmentStatus.PROPOSED)
    responded_at: NaiveDatetime | None = Field(None, sa_type=DateTime)
    role_label: str | None = Field(None, max_length=100)
    notes: str | None = None


class Assignment(AssignmentBase, VersionedModel, table=True):
    """Assignment table definition."""

    __tablename__ = "assignments"
    __table_args__ = (
        UniqueConstraint("event_id", "worker_id", name="uq_assignment_event_worker"),
    )


# Audit history
class EventHistory(SQLModel, table=True):
    """Append-only event history table."""

    __tablename__ = "event_history"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    event_id: UUID = Field(index=True)
    action: HistoryAction
    actor_id: UUID
    actor_role: str = Field(max_length=50)
    timestamp: NaiveDatetime = Field(
        default_factory=utcnow, sa_type=DateTime, index=True
    )
    details: dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))
