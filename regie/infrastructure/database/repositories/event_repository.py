"""
Event repository implementation.

Implements the EventRepository interface with SQLModel. Saving an event also
appends the history entries queued on the aggregate, inside the same
transaction.
"""

from uuid import UUID

from sqlmodel import select

from regie.domain.staffing.entities.event import Event
from regie.domain.staffing.repositories.event_repository import (
    EventRepository as EventRepositoryInterface,
)
from regie.domain.staffing.value_objects.enums import EventStatus

from ..mappers import EventMapper, HistoryMapper
from ..models import Event as SQLEvent
from .base import BaseRepository


class EventRepository(BaseRepository[SQLEvent], EventRepositoryInterface):
    model = SQLEvent
    entity_type = "event"

    def add(self, event: Event) -> Event:
        self._insert(EventMapper.domain_to_sql(event))
        self._flush_history(event)
        self._track(event)
        return event

    def get(self, event_id: UUID) -> Event | None:
        row = self._get_row(event_id)
        return EventMapper.sql_to_domain(row) if row else None

    def list_all(self, status: EventStatus | None = None) -> list[Event]:
        statement = select(SQLEvent)
        if status is not None:
            statement = statement.where(SQLEvent.status == status)
        statement = statement.order_by(SQLEvent.start_at, SQLEvent.id)
        return [EventMapper.sql_to_domain(row) for row in self._exec_all(statement)]

    def save(self, event: Event) -> Event:
        self._versioned_update(event, EventMapper.columns(event))
        self._flush_history(event)
        self._track(event)
        return event

    def delete(self, event: Event) -> None:
        # History rows are kept, including the entry recording the deletion
        self._flush_history(event)
        self._versioned_delete(event)
        self._track(event)

    def _flush_history(self, event: Event) -> None:
        for entry in event.pop_pending_history():
            self.session.add(HistoryMapper.domain_to_sql(entry))
