"""Domain event infrastructure."""

from .domain_event_publisher import DomainEventPublisher
from .event_bus import EventBusInterface, InMemoryEventBus, get_event_bus

__all__ = [
    "DomainEventPublisher",
    "EventBusInterface",
    "InMemoryEventBus",
    "get_event_bus",
]
