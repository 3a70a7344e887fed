"""Test configuration and fixtures."""

import sys
from pathlib import Path

import pytest

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from orrery.engine.event_bus import EventBus  # noqa: E402
from orrery.engine.store import Store, initial_state  # noqa: E402
from orrery.engine.time_engine import (  # noqa: E402
    julian_date_to_unix_millis,
    unix_millis_to_julian_date,
)

# 2024-01-01 00:00 UTC
FIXED_JD = 2460310.5


class FakeNow:
    """Controllable stand-in for the real wall clock."""

    def __init__(self, jd: float = FIXED_JD) -> None:
        # Kept in milliseconds so whole-second steps stay exact
        self._millis = julian_date_to_unix_millis(jd)

    @property
    def jd(self) -> float:
        return unix_millis_to_julian_date(self._millis)

    @jd.setter
    def jd(self, value: float) -> None:
        self._millis = julian_date_to_unix_millis(value)

    def julian(self) -> float:
        return self.jd

    def millis(self) -> float:
        return self._millis

    def advance_seconds(self, seconds: float) -> None:
        self._millis += seconds * 1000


class ManualHandle:
    def __init__(self, scheduler: "ManualScheduler", callback) -> None:
        self.scheduler = scheduler
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Interval scheduler that only fires when the test says so."""

    def __init__(self) -> None:
        self.handles: list[ManualHandle] = []
        self.intervals: list[float] = []

    def call_every(self, interval, callback) -> ManualHandle:
        handle = ManualHandle(self, callback)
        self.handles.append(handle)
        self.intervals.append(interval)
        return handle

    def fire(self) -> None:
        for handle in list(self.handles):
            if not handle.cancelled:
                handle.callback()

    @property
    def active(self) -> list[ManualHandle]:
        return [h for h in self.handles if not h.cancelled]


@pytest.fixture
def fake_now() -> FakeNow:
    """Wall clock pinned to 2024-01-01 00:00 UTC."""
    return FakeNow()


@pytest.fixture
def manual_scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def event_bus() -> EventBus:
    return EventBus()


@pytest.fixture
def store(event_bus) -> Store:
    """Store in its initial state at FIXED_JD, speed index 3 ("1d")."""
    return Store(initial_state(FIXED_JD, 3), event_bus)


@pytest.fixture
def neows_payload() -> dict:
    """Trimmed NeoWs feed response with two Earth approaches and one Mars approach."""
    return {
        "element_count": 2,
        "near_earth_objects": {
            "2024-01-03": [
                {
                    "id": "54321",
                    "name": "(2024 AB1)",
                    "estimated_diameter": {
                        "meters": {
                            "estimated_diameter_min": 20.0,
                            "estimated_diameter_max": 40.0,
                        }
                    },
                    "is_potentially_hazardous_asteroid": True,
                    "close_approach_data": [
                        {
                            "close_approach_date_full": "2024-Jan-03 12:00",
                            "epoch_date_close_approach": 1704283200000,
                            "miss_distance": {"kilometers": "1234567.89"},
                            "orbiting_body": "Earth",
                        }
                    ],
                }
            ],
            "2024-01-02": [
                {
                    "id": "12345",
                    "name": "433 Eros (A898 PA)",
                    "estimated_diameter": {
                        "meters": {
                            "estimated_diameter_min": 100.0,
                            "estimated_diameter_max": 150.0,
                        }
                    },
                    "is_potentially_hazardous_asteroid": False,
                    "close_approach_data": [
                        {
                            "epoch_date_close_approach": 1704196800000,
                            "miss_distance": {"kilometers": "7500000"},
                            "orbiting_body": "Earth",
                        },
                        {
                            "epoch_date_close_approach": 1704200000000,
                            "miss_distance": {"kilometers": "9000000"},
                            "orbiting_body": "Mars",
                        },
                    ],
                }
            ],
        },
    }
