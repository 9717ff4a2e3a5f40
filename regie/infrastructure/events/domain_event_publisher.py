"""
Domain event publisher implementation.

Publishes the events collected from aggregates once the transaction that
produced them has committed.
"""

from collections.abc import Iterable

from regie.core.observability import get_logger
from regie.domain.shared.base import AggregateRoot, DomainEvent

from .event_bus import EventBusInterface, get_event_bus

logger = get_logger(__name__)


class DomainEventPublisher:
    """Publishes domain events to an event bus."""

    def __init__(self, event_bus: EventBusInterface | None = None):
        self._event_bus = event_bus or get_event_bus()

    @property
    def event_bus(self) -> EventBusInterface:
        return self._event_bus

    def publish_events(self, aggregate: AggregateRoot) -> None:
        """Publish and clear the pending events of an aggregate."""
        events = aggregate.get_domain_events()
        aggregate.clear_domain_events()
        self.publish_multiple_events(events)

    def publish_multiple_events(self, events: Iterable[DomainEvent]) -> None:
        events = list(events)
        if not events:
            return

        logger.info("publishing_domain_events", count=len(events))
        for event in events:
            self._event_bus.publish(event)
            logger.debug(
                "domain_event_published",
                event_type=type(event).__name__,
                aggregate_id=str(event.aggregate_id),
            )
