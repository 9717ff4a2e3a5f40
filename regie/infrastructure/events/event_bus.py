"""
Event bus implementation for domain event publishing and subscription.

The event bus routes committed domain events to in-process handlers. It is
the seam notification delivery plugs into.
"""

from abc import ABC, abstractmethod
from collections import defaultdict
from collections.abc import Callable

from regie.core.observability import get_logger
from regie.domain.shared.base import DomainEvent

logger = get_logger(__name__)

Handler = Callable[[DomainEvent], None]


class EventBusInterface(ABC):
    """
    Abstract interface for event bus implementations.

    Defines the contract for publishing events and subscribing to event types.
    """

    @abstractmethod
    def publish(self, event: DomainEvent) -> None:
        """
        Publish a domain event to all registered handlers.

        Args:
            event: Domain event to publish
        """

    @abstractmethod
    def subscribe(self, event_type: type[DomainEvent], handler: Handler) -> None:
        """
        Subscribe a handler to a specific event type.

        Args:
            event_type: Type of event to subscribe to
            handler: Handler function to call when event is published
        """

    @abstractmethod
    def unsubscribe(self, event_type: type[DomainEvent], handler: Handler) -> None:
        pass

    @abstractmethod
    def clear_handlers(self, event_type: type[DomainEvent] | None = None) -> None:
        pass


class InMemoryEventBus(EventBusInterface):
    """
    In-memory implementation of event bus.

    Handlers run synchronously in subscription order. A failing handler is
    logged and does not stop the others, because the change it reacts to is
    already committed.
    """

    def __init__(self, max_history_size: int = 1000):
        self._handlers: dict[type[DomainEvent], list[Handler]] = defaultdict(list)
        self._event_history: list[DomainEvent] = []
        self._max_history_size = max_history_size

    def publish(self, event: DomainEvent) -> None:
        self._add_to_history(event)

        event_type = type(event)
        handlers = self._handlers.get(event_type, [])
        if not handlers:
            logger.debug("no_event_handlers", event_type=event_type.__name__)
            return

        for handler in handlers:
            try:
                handler(event)
            except Exception:
                logger.exception(
                    "event_handler_failed",
                    event_type=event_type.__name__,
                    handler=getattr(handler, "__name__", repr(handler)),
                )

    def subscribe(self, event_type: type[DomainEvent], handler: Handler) -> None:
        if handler in self._handlers[event_type]:
            logger.warning(
                "event_handler_already_subscribed", event_type=event_type.__name__
            )
            return
        self._handlers[event_type].append(handler)
        logger.debug("event_handler_subscribed", event_type=event_type.__name__)

    def unsubscribe(self, event_type: type[DomainEvent], handler: Handler) -> None:
        if handler in self._handlers.get(event_type, []):
            self._handlers[event_type].remove(handler)

    def clear_handlers(self, event_type: type[DomainEvent] | None = None) -> None:
        if event_type is None:
            self._handlers.clear()
        else:
            self._handlers.pop(event_type, None)

    def get_event_history(
        self, event_type: type[DomainEvent] | None = None
    ) -> list[DomainEvent]:
        """
        Get published events, most recent last.

        Args:
            event_type: Optional event type to filter by
        """
        if event_type is None:
            return self._event_history.copy()
        return [e for e in self._event_history if isinstance(e, event_type)]

    def _add_to_history(self, event: DomainEvent) -> None:
        self._event_history.append(event)
        if len(self._event_history) > self._max_history_size:
            self._event_history = self._event_history[-self._max_history_size :]


_default_bus: InMemoryEventBus | None = None


def get_event_bus() -> InMemoryEventBus:
    """Return the process-wide event bus."""
    global _default_bus
    if _default_bus is None:
        _default_bus = InMemoryEventBus()
    return _default_bus
