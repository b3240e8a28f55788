"""Event bus for collection change events."""

import logging
from collections.abc import Callable

from instance_catalog.events.schemas import CollectionEvent

logger = logging.getLogger(__name__)

EventHandler = Callable[[CollectionEvent], None]


class EventBus:
    """Simple event bus for publishing and subscribing to collection events.

    Subscribers are called synchronously, in subscription order. Errors in
    handlers are isolated and logged to prevent one failing handler from
    breaking others.
    """

    def __init__(self) -> None:
        self._subscribers: list[EventHandler] = []

    def subscribe(self, handler: EventHandler) -> None:
        """Subscribe a handler to receive all collection events.

        Args:
            handler: Callable that takes a CollectionEvent
        """
        self._subscribers.append(handler)

    def unsubscribe(self, handler: EventHandler) -> bool:
        """Remove the first subscription of handler.

        Returns:
            True if the handler was subscribed, False otherwise
        """
        try:
            self._subscribers.remove(handler)
        except ValueError:
            return False
        return True

    def publish(self, event: CollectionEvent) -> None:
        """Publish an event to all subscribers.

        Errors in handlers are caught and logged to prevent cascading failures.

        Args:
            event: CollectionEvent to publish
        """
        for handler in list(self._subscribers):
            try:
                handler(event)
            except Exception:
                logger.exception(f"Error in event handler {getattr(handler, '__name__', repr(handler))}")
