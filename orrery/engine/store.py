"""
Reactive state store for the Orrery simulation core.

One Store holds the whole state surface that the renderer reads every
frame: simulated time, playback controls, selection and focus, and the
visibility flags. Components receive the store they operate on rather
than reaching for a module-level instance, so each view (and each test)
gets an isolated one.

Every set() is a single atomic update: all changed keys are applied
before any subscriber is notified, and subscribers get exactly one
notification per update.
"""

from collections.abc import Callable
from typing import Any

from orrery.engine.event_bus import STATE_CHANGED, Event, EventBus

State = dict[str, Any]

STATE_KEYS = (
    "simulation_time",
    "is_playing",
    "speed_index",
    "time_direction",
    "selected_body",
    "focus_target",
    "camera_transitioning",
    "show_orbits",
    "show_labels",
    "show_moons",
    "show_asteroids",
    "show_grid",
    "close_approaches",
    "feed_warning",
)


def initial_state(simulation_time: float, speed_index: int) -> State:
    """
    Build the state a freshly entered view starts from.
    """
    return {
        "simulation_time": simulation_time,
        "is_playing": True,
        "speed_index": speed_index,
        "time_direction": 1,
        "selected_body": None,
        "focus_target": None,
        "camera_transitioning": False,
        "show_orbits": True,
        "show_labels": True,
        "show_moons": True,
        "show_asteroids": True,
        "show_grid": False,
        "close_approaches": [],
        "feed_warning": None,
    }


class Store:
    """
    State container with get/set/subscribe.

    Notifications go out through an EventBus as ``state.changed`` events
    carrying the changed keys and a snapshot of the full state.
    """

    def __init__(self, state: State, event_bus: EventBus | None = None) -> None:
        unknown = set(state) - set(STATE_KEYS)
        if unknown:
            raise KeyError(f"Unknown state keys: {sorted(unknown)}")

        self._state: State = dict(state)
        self.event_bus = event_bus or EventBus()

    def get(self, key: str | None = None) -> Any:
        """
        Return one value, or a snapshot of the whole state if no key is given.
        """
        if key is None:
            return dict(self._state)
        return self._state[key]

    def set(self, **changes: Any) -> None:
        """
        Apply an atomic update and notify subscribers once.
        """
        unknown = set(changes) - set(STATE_KEYS)
        if unknown:
            raise KeyError(f"Unknown state keys: {sorted(unknown)}")

        self._state.update(changes)
        self.event_bus.publish(
            {
                "type": STATE_CHANGED,
                "changes": dict(changes),
                "state": dict(self._state),
            }
        )

    def subscribe(self, handler: Callable[[Event], None]) -> Callable[[], None]:
        """
        Register a handler for state changes. Returns an unsubscribe callable.
        """

        def on_event(event: Event) -> None:
            if event.get("type") == STATE_CHANGED:
                handler(event)

        return self.event_bus.subscribe(on_event)
