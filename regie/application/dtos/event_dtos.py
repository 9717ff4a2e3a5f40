"""
Event-related Data Transfer Objects.

These DTOs give the transport a stable shape independent of the domain model.
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from regie.domain.staffing.entities.event import Event, HistoryEntry
from regie.domain.staffing.value_objects.enums import EventStatus, TargetAudience


class CreateEventRequest(BaseModel):
    """DTO for creating a new event."""

    title: str = Field(..., min_length=1, max_length=200)
    start_at: datetime
    end_at: datetime
    target_audience: TargetAudience = TargetAudience.BOTH
    description: str | None = Field(None, max_length=5000)
    location: str | None = Field(None, max_length=200)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Festival d'été",
                "start_at": "2025-06-01T08:00:00Z",
                "end_at": "2025-06-03T23:00:00Z",
                "target_audience": "both",
                "location": "Grande salle",
            }
        }
    )


class UpdateEventRequest(BaseModel):
    """DTO for editing an event; only the fields sent are changed."""

    title: str | None = Field(None, min_length=1, max_length=200)
    start_at: datetime | None = None
    end_at: datetime | None = None
    target_audience: TargetAudience | None = None
    description: str | None = Field(None, max_length=5000)
    location: str | None = Field(None, max_length=200)

    def changes(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class TransitionEventRequest(BaseModel):
    target_status: EventStatus


class EventResponse(BaseModel):
    """DTO for event response with full details."""

    id: UUID
    title: str
    description: str | None
    location: str | None
    start_at: datetime
    end_at: datetime
    target_audience: TargetAudience
    status: EventStatus
    published_at: datetime | None
    created_by: UUID
    created_at: datetime
    updated_at: datetime | None
    version: int

    @classmethod
    def from_entity(cls, event: Event) -> "EventResponse":
        return cls(
            id=event.id,
            title=event.title,
            description=event.description,
            location=event.location,
            start_at=event.start_at,
            end_at=event.end_at,
            target_audience=event.target_audience,
            status=event.status,
            published_at=event.published_at,
            created_by=event.created_by,
            created_at=event.created_at,
            updated_at=event.updated_at,
            version=event.version,
        )


class HistoryEntryResponse(BaseModel):
    id: UUID
    event_id: UUID
    action: str
    actor_id: UUID
    actor_role: str
    timestamp: datetime
    details: dict[str, Any]

    @classmethod
    def from_entity(cls, entry: HistoryEntry) -> "HistoryEntryResponse":
        return cls(
            id=entry.id,
            event_id=entry.event_id,
            action=entry.action.value,
            actor_id=entry.actor_id,
            actor_role=entry.actor_role,
            timestamp=entry.timestamp,
            details=entry.details,
        )
