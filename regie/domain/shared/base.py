"""Base classes for domain entities and value objects."""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr


def utcnow() -> datetime:
    """Naive UTC timestamp, the representation stored by the persistence layer."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def as_naive_utc(value: datetime) -> datetime:
    """Normalize an aware datetime to naive UTC; naive values are kept as-is."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class Entity(BaseModel, ABC):
    """Base class for entities (have identity, can change over time)."""

    model_config = ConfigDict(arbitrary_types_allowed=True, validate_assignment=True)

    id: UUID = Field(default_factory=uuid4)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime | None = None
    # Optimistic concurrency token, bumped by the repository on every save
    version: int = Field(default=0, ge=0)

    def __eq__(self, other: Any) -> bool:
        """Entities are equal if they have the same ID and type."""
        if not isinstance(other, self.__class__):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def mark_updated(self, now: datetime | None = None) -> None:
        """Mark the entity as updated."""
        self.updated_at = now or utcnow()

    @abstractmethod
    def is_valid(self) -> bool:
        """Validate business rules for this entity."""


class DomainEvent(BaseModel):
    """Base class for domain events."""

    model_config = ConfigDict(frozen=True)

    event_id: UUID = Field(default_factory=uuid4)
    occurred_at: datetime = Field(default_factory=utcnow)
    aggregate_id: UUID


class AggregateRoot(Entity, ABC):
    """Base class for aggregate roots (entities that control consistency boundaries)."""

    _domain_events: list[DomainEvent] = PrivateAttr(default_factory=list)

    def add_domain_event(self, event: DomainEvent) -> None:
        """Add a domain event to be published."""
        self._domain_events.append(event)

    def clear_domain_events(self) -> None:
        """Clear all domain events (typically after publishing)."""
        self._domain_events.clear()

    def get_domain_events(self) -> list[DomainEvent]:
        """Get all pending domain events."""
        return self._domain_events.copy()
