"""
History Repository Interface

The audit trail is append-only and offers no update or delete.
"""

from abc import ABC, abstractmethod
from uuid import UUID

from ..entities.event import HistoryEntry


class HistoryRepository(ABC):
    @abstractmethod
    def append(self, entry: HistoryEntry) -> HistoryEntry:
        pass

    @abstractmethod
    def list_for_event(self, event_id: UUID) -> list[HistoryEntry]:
        """List the entries of an event, oldest first."""
