"""Event bus for synchronous change notification.

The navigation engine publishes state-change events here and presentation
code (status display, flight timer, window) subscribes to them. Dispatch is
synchronous and happens in priority order, so subscribers always observe the
state the event describes.

Typical usage example:
    from vortrainer.core.event_bus import EventBus, EventPriority
    from vortrainer.engine.events import ReceiverUpdatedEvent

    bus = EventBus()
    bus.subscribe(ReceiverUpdatedEvent, on_receiver, EventPriority.HIGH)
"""

import time
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any


class EventPriority(Enum):
    """Priority levels for event handlers, executed CRITICAL first."""

    CRITICAL = auto()
    HIGH = auto()
    NORMAL = auto()
    LOW = auto()


@dataclass
class Event:
    """Base class for all events.

    Attributes:
        timestamp: Unix timestamp when the event was created.
    """

    timestamp: float = field(default_factory=time.time)


class EventBus:
    """Central bus dispatching events to subscribers synchronously.

    Examples:
        >>> bus = EventBus()
        >>> bus.subscribe(ReceiverUpdatedEvent, lambda e: print(e.status.name))
        >>> engine = NavigationEngine(catalog, event_bus=bus)
        >>> engine.tune_frequency("109.00")
        NO_SIGNAL
    """

    def __init__(self) -> None:
        self._handlers: dict[type[Event], list[tuple[Callable[[Any], None], EventPriority]]] = {}

    def subscribe(
        self,
        event_type: type[Event],
        handler: Callable[[Any], None],
        priority: EventPriority = EventPriority.NORMAL,
    ) -> None:
        """Subscribe a handler to an event type.

        Args:
            event_type: The class of event to subscribe to.
            handler: Callable that accepts the event as its only parameter.
            priority: Priority level for this handler. Defaults to NORMAL.
        """
        handlers = self._handlers.setdefault(event_type, [])
        handlers.append((handler, priority))
        # Stable sort keeps subscription order within a priority level.
        handlers.sort(key=lambda item: item[1].value)

    def unsubscribe(self, event_type: type[Event], handler: Callable[[Any], None]) -> None:
        """Remove a handler. Unknown handlers are ignored."""
        if event_type not in self._handlers:
            return

        self._handlers[event_type] = [
            (h, p) for h, p in self._handlers[event_type] if h != handler
        ]
        if not self._handlers[event_type]:
            del self._handlers[event_type]

    def publish(self, event: Event) -> None:
        """Publish an event to all subscribers of its exact type.

        Handler exceptions propagate to the publisher.
        """
        # Copy so handlers may unsubscribe while being dispatched.
        for handler, _ in list(self._handlers.get(type(event), [])):
            handler(event)

    def get_subscriber_count(self, event_type: type[Event]) -> int:
        return len(self._handlers.get(event_type, []))
