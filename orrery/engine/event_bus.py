"""
Event bus for the Orrery simulation core.

The bus is how state changes leave the core. Renderers, panels and the
CLI subscribe to it; the store and the selection controller publish to
it. Delivery is synchronous, on the caller's thread, in subscription
order, so a subscriber always sees a write before the next write is
made.

The bus does not interpret events. It does not queue or batch them.
"""

from collections.abc import Callable
from typing import Any

Event = dict[str, Any]
Subscriber = Callable[[Event], None]

STATE_CHANGED = "state.changed"
CAMERA_TRANSITION = "camera.transition"
COUNTDOWN_REFRESHED = "countdown.refreshed"


class EventBus:
    """
    Simple publish-subscribe event bus.

    Subscribers are called synchronously, in the order they were
    registered. If a subscriber raises an exception, propagation stops
    and the error is surfaced to the caller.
    """

    def __init__(self) -> None:
        self._subscribers: list[Subscriber] = []
        self._closed: bool = False

    @property
    def closed(self) -> bool:
        return self._closed

    def subscribe(self, handler: Subscriber) -> Callable[[], None]:
        """
        Register a new event handler.

        Returns a callable that removes the handler again.
        """
        if self._closed:
            raise RuntimeError("Cannot subscribe to a closed event bus")

        self._subscribers.append(handler)

        def unsubscribe() -> None:
            self.unsubscribe(handler)

        return unsubscribe

    def unsubscribe(self, handler: Subscriber) -> None:
        """
        Remove a handler. Removing one that is not registered is a no-op.
        """
        if handler in self._subscribers:
            self._subscribers.remove(handler)

    def publish(self, event: Event) -> None:
        """
        Publish an event to all subscribers.
        """
        if self._closed:
            raise RuntimeError("Cannot publish to a closed event bus")

        # Snapshot so a handler may unsubscribe itself mid-delivery
        for handler in list(self._subscribers):
            handler(event)

    def close(self) -> None:
        """
        Close the event bus.

        After closing, no further subscriptions or publications are
        permitted. Leaving a view closes its bus.
        """
        self._closed = True
        self._subscribers.clear()
