"""Event aggregate root and its append-only audit history."""

from datetime import date, datetime
from typing import Any
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator

from regie.core.rbac import Actor, Permission, require_permission

from ...shared.base import AggregateRoot, as_naive_utc, utcnow
from ...shared.exceptions import (
    InvalidRangeError,
    InvalidStateError,
    InvalidTransitionError,
    ValidationError,
)
from ..events import EventStatusChanged
from ..value_objects.enums import EventStatus, HistoryAction, TargetAudience
from ..value_objects.time_range import TimeRange


class HistoryEntry(BaseModel):
    """One immutable line of an event's audit trail."""

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    event_id: UUID
    action: HistoryAction
    actor_id: UUID
    actor_role: str
    timestamp: datetime
    details: dict[str, Any] = Field(default_factory=dict)


class Event(AggregateRoot):
    """
    Event aggregate root representing a production that needs staffing.

    The event owns its lifecycle status and gates every write made to its
    schedules and assignments. Saving the event bumps its version, which is
    how writers on the same event are serialized.
    """

    title: str = Field(min_length=1, max_length=200)
    description: str | None = None
    location: str | None = Field(None, max_length=200)
    start_at: datetime
    end_at: datetime
    target_audience: TargetAudience = TargetAudience.BOTH
    status: EventStatus = EventStatus.DRAFT
    published_at: datetime | None = None
    created_by: UUID

    _pending_history: list[HistoryEntry] = PrivateAttr(default_factory=list)

    @field_validator("start_at", "end_at")
    @classmethod
    def normalize_timestamps(cls, v: datetime) -> datetime:
        return as_naive_utc(v)

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title cannot be blank")
        return v

    @classmethod
    def create(
        cls,
        actor: Actor,
        title: str,
        start_at: datetime,
        end_at: datetime,
        target_audience: TargetAudience = TargetAudience.BOTH,
        description: str | None = None,
        location: str | None = None,
        now: datetime | None = None,
    ) -> "Event":
        """
        Create a draft event.

        Raises:
            PermissionDeniedError: If the actor is not a scheduling authority
            InvalidRangeError: If end_at is not after start_at
        """
        require_permission(actor, Permission.EVENT_MANAGE, "create events")
        start_at, end_at = as_naive_utc(start_at), as_naive_utc(end_at)
        if end_at <= start_at:
            raise InvalidRangeError(start_at, end_at, "event_window")
        if not title or not title.strip():
            raise ValidationError("title", title, "title cannot be blank")

        now = now or utcnow()
        event = cls(
            title=title,
            description=description,
            location=location,
            start_at=start_at,
            end_at=end_at,
            target_audience=target_audience,
            created_by=actor.user_id,
            created_at=now,
        )
        event.record_history(HistoryAction.CREATE, actor, now, {"title": event.title})
        return event

    def is_valid(self) -> bool:
        return bool(self.title) and self.end_at > self.start_at

    @property
    def window(self) -> TimeRange:
        return TimeRange(self.start_at, self.end_at)

    @property
    def first_day(self) -> date:
        return self.start_at.date()

    @property
    def last_day(self) -> date:
        return self.end_at.date()

    def covers_date(self, day: date) -> bool:
        """Check if a calendar date falls within the event's inclusive date range."""
        return self.first_day <= day <= self.last_day

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    def ensure_writable(self, operation: str) -> None:
        """
        Reject child writes once the event is cancelled or completed.

        Raises:
            InvalidStateError: If the event is terminal
        """
        if self.is_terminal:
            raise InvalidStateError("event", self.id, self.status.value, operation)

    def transition_to(
        self, target: EventStatus, actor: Actor, now: datetime | None = None
    ) -> EventStatus:
        """
        Move the event to another lifecycle status.

        Returns:
            The previous status

        Raises:
            PermissionDeniedError: If the actor is not a scheduling authority
            InvalidTransitionError: If the edge is not allowed, or completion is
                requested before the event ends
        """
        require_permission(actor, Permission.EVENT_MANAGE, "change event status")

        old_status = self.status
        if old_status.is_terminal:
            raise InvalidTransitionError(
                "event", self.id, old_status.value, target.value, "status is terminal"
            )
        if not old_status.can_transition_to(target):
            raise InvalidTransitionError("event", self.id, old_status.value, target.value)

        now = now or utcnow()
        if target == EventStatus.COMPLETED and now < self.end_at:
            raise InvalidTransitionError(
                "event", self.id, old_status.value, target.value, "event has not ended"
            )
        self.status = target
        if target == EventStatus.PUBLISHED and self.published_at is None:
            # Re-publishing after an unpublish keeps the original timestamp
            self.published_at = now
        self.mark_updated(now)

        self.record_history(
            HistoryAction.for_status(old_status, target),
            actor,
            now,
            {"from": old_status.value, "to": target.value},
        )
        self.add_domain_event(
            EventStatusChanged(
                aggregate_id=self.id,
                old_status=old_status,
                new_status=target,
                actor_id=actor.user_id,
            )
        )
        return old_status

    def update_details(
        self, actor: Actor, changes: dict[str, Any], now: datetime | None = None
    ) -> dict[str, Any]:
        """
        Edit descriptive fields and the time window.

        Returns:
            Mapping of the fields that actually changed

        Raises:
            PermissionDeniedError: If the actor is not a scheduling authority
            InvalidStateError: If the event is terminal
            InvalidRangeError: If the resulting window is malformed
        """
        require_permission(actor, Permission.EVENT_MANAGE, "edit events")
        self.ensure_writable("edit")

        editable = {
            "title",
            "description",
            "location",
            "start_at",
            "end_at",
            "target_audience",
        }
        unknown = set(changes) - editable
        if unknown:
            raise ValidationError(
                ", ".join(sorted(unknown)), None, "field cannot be edited"
            )

        changes = dict(changes)
        for name in ("start_at", "end_at"):
            if name in changes:
                changes[name] = as_naive_utc(changes[name])
        start_at = changes.get("start_at", self.start_at)
        end_at = changes.get("end_at", self.end_at)
        if end_at <= start_at:
            raise InvalidRangeError(start_at, end_at, "event_window")

        applied = {
            name: value
            for name, value in changes.items()
            if getattr(self, name) != value
        }
        if not applied:
            return {}

        now = now or utcnow()
        for name, value in applied.items():
            setattr(self, name, value)
        self.mark_updated(now)
        self.record_history(
            HistoryAction.UPDATE,
            actor,
            now,
            {"fields": sorted(applied)},
        )
        return applied

    def ensure_deletable(self) -> None:
        """
        Raises:
            InvalidStateError: Unless the event is still a draft
        """
        if self.status != EventStatus.DRAFT:
            raise InvalidStateError("event", self.id, self.status.value, "delete")

    def record_history(
        self,
        action: HistoryAction,
        actor: Actor,
        now: datetime,
        details: dict[str, Any] | None = None,
    ) -> HistoryEntry:
        """Queue an audit entry; the repository appends it on save."""
        entry = HistoryEntry(
            event_id=self.id,
            action=action,
            actor_id=actor.user_id,
            actor_role=actor.role.value,
            timestamp=now,
            details=details or {},
        )
        self._pending_history.append(entry)
        return entry

    def pop_pending_history(self) -> list[HistoryEntry]:
        entries = self._pending_history.copy()
        self._pending_history.clear()
        return entries

    def __str__(self) -> str:
        return f"Event({self.title}, {self.status.value}, {self.window})"
