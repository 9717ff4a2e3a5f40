"""History repository implementation (append-only)."""

from uuid import UUID

from sqlmodel import select

from regie.domain.staffing.entities.event import HistoryEntry
from regie.domain.staffing.repositories.history_repository import (
    HistoryRepository as HistoryRepositoryInterface,
)

from ..mappers import HistoryMapper
from ..models import EventHistory
from .base import BaseRepository


class HistoryRepository(BaseRepository[EventHistory], HistoryRepositoryInterface):
    model = EventHistory
    entity_type = "history"

    def append(self, entry: HistoryEntry) -> HistoryEntry:
        self._insert(HistoryMapper.domain_to_sql(entry))
        return entry

    def list_for_event(self, event_id: UUID) -> list[HistoryEntry]:
        statement = (
            select(EventHistory)
            .where(EventHistory.event_id == event_id)
            .order_by(EventHistory.timestamp, EventHistory.id)
        )
        return [HistoryMapper.sql_to_domain(row) for row in self._exec_all(statement)]
