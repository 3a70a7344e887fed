"""
Live detection: is the simulated clock showing the real present?

This drives the "NOW" indicator only. Nothing else may gate on it.
"""

from collections.abc import Callable

from orrery.engine.time_engine import current_julian_date

# About 86 seconds
LIVE_EPSILON_DAYS = 0.001


class LiveDetector:
    def __init__(
        self,
        epsilon_days: float = LIVE_EPSILON_DAYS,
        julian_now: Callable[[], float] = current_julian_date,
    ) -> None:
        if epsilon_days <= 0:
            raise ValueError("Live epsilon must be positive")

        self.epsilon_days = epsilon_days
        self._julian_now = julian_now

    def is_live(self, simulation_time: float) -> bool:
        return abs(simulation_time - self._julian_now()) < self.epsilon_days
