"""
Event Repository Interface

Defines the contract for event data access operations.
"""

from abc import ABC, abstractmethod
from uuid import UUID

from ...shared.exceptions import EntityNotFoundError
from ..entities.event import Event
from ..value_objects.enums import EventStatus


class EventRepository(ABC):
    """
    Abstract repository interface for Event aggregates.

    ``save`` is the serialization point for everything scoped to an event:
    it bumps the version with a compare-and-set and appends the history
    entries queued on the aggregate.
    """

    @abstractmethod
    def add(self, event: Event) -> Event:
        """
        Insert a new event.

        Args:
            event: Event aggregate to insert

        Returns:
            The inserted event
        """

    @abstractmethod
    def get(self, event_id: UUID) -> Event | None:
        """
        Retrieve an event by its ID.

        Returns:
            Event aggregate or None if not found
        """

    def get_required(self, event_id: UUID) -> Event:
        """
        Retrieve an event by its ID.

        Raises:
            EntityNotFoundError: If the event does not exist
        """
        event = self.get(event_id)
        if event is None:
            raise EntityNotFoundError("event", event_id)
        return event

    @abstractmethod
    def list_all(self, status: EventStatus | None = None) -> list[Event]:
        """
        List events ordered by start time, optionally filtered by status.
        """

    @abstractmethod
    def save(self, event: Event) -> Event:
        """
        Persist changes to an existing event.

        Args:
            event: Event aggregate carrying the version it was read at

        Returns:
            The event with its version bumped

        Raises:
            ConcurrentModificationError: If the stored version moved on
        """

    @abstractmethod
    def delete(self, event: Event) -> None:
        """
        Remove an event row, checking its version first.

        Raises:
            ConcurrentModificationError: If the stored version moved on
        """
