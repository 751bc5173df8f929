"""Event bus for pub/sub communication."""

import logging
from collections import defaultdict
from typing import Callable, TypeVar

from lightduel.events.types import GameEvent

T = TypeVar("T", bound=GameEvent)
EventHandler = Callable[[GameEvent], None]

logger = logging.getLogger(__name__)


class EventBus:
    """
    Simple pub/sub event bus for decoupling the engine from its observers.

    Rendering, scoring and logging collaborators subscribe to event types
    and are notified when the engine emits them. The engine never knows
    who is listening.

    Example:
        bus = EventBus()

        def on_round_end(event: RoundEndedEvent):
            print(f"Round over: {event.outcome.value}")

        bus.subscribe(RoundEndedEvent, on_round_end)
    """

    def __init__(self) -> None:
        """Initialize the event bus."""
        self._handlers: dict[type[GameEvent], list[EventHandler]] = defaultdict(list)
        self._global_handlers: list[EventHandler] = []

    def subscribe(
        self,
        event_type: type[T],
        handler: Callable[[T], None],
    ) -> None:
        """
        Register a handler for a specific event type.

        Args:
            event_type: The type of event to handle
            handler: Callback function that receives the event
        """
        self._handlers[event_type].append(handler)

    def subscribe_all(self, handler: EventHandler) -> None:
        """Register a handler for all events."""
        self._global_handlers.append(handler)

    def unsubscribe(
        self,
        event_type: type[T],
        handler: Callable[[T], None],
    ) -> None:
        """Remove a handler for a specific event type."""
        if handler in self._handlers[event_type]:
            self._handlers[event_type].remove(handler)

    def unsubscribe_all(self, handler: EventHandler) -> None:
        """Remove a global handler."""
        if handler in self._global_handlers:
            self._global_handlers.remove(handler)

    def emit(self, event: GameEvent) -> None:
        """
        Emit an event to all registered handlers.

        Handlers for the specific event type are called first,
        then global handlers that receive all events. A failing handler
        is logged and skipped so observers can never break a tick.

        Args:
            event: The event to emit
        """
        handlers = list(self._handlers[type(event)]) + list(self._global_handlers)
        for handler in handlers:
            try:
                handler(event)
            except Exception:
                logger.exception(f"Event handler failed for {type(event).__name__}")

    def clear(self) -> None:
        """Remove all handlers."""
        self._handlers.clear()
        self._global_handlers.clear()

    def handler_count(self, event_type: type[GameEvent] | None = None) -> int:
        """
        Get the number of registered handlers.

        Args:
            event_type: If provided, count handlers for this type only.
                       If None, count all handlers including global.
        """
        if event_type is None:
            total = sum(len(handlers) for handlers in self._handlers.values())
            return total + len(self._global_handlers)
        return len(self._handlers[event_type])
