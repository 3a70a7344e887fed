"""
Scrubber mapping between a bounded slider and absolute simulated time.

The slider covers a ten-year window centred on the real present. The
window is recomputed on every call, so it drifts forward with real time
instead of being fixed when the control was created.
"""

from collections.abc import Callable

from orrery.engine.clock import SimulationClock
from orrery.engine.time_engine import current_julian_date

SCRUBBER_RESOLUTION = 1000
SCRUBBER_HALF_WINDOW_DAYS = 5 * 365.25


class ScrubberMapper:
    """
    Maps slider positions in [0, resolution] onto Julian Dates and back.
    """

    def __init__(
        self,
        julian_now: Callable[[], float] = current_julian_date,
        resolution: int = SCRUBBER_RESOLUTION,
        half_window_days: float = SCRUBBER_HALF_WINDOW_DAYS,
    ) -> None:
        if resolution <= 0:
            raise ValueError("Scrubber resolution must be positive")
        if half_window_days <= 0:
            raise ValueError("Scrubber window must be positive")

        self.resolution = resolution
        self.half_window_days = half_window_days
        self._julian_now = julian_now

    def window(self) -> tuple[float, float]:
        """
        Return the (min, max) Julian Dates the slider currently spans.
        """
        now = self._julian_now()
        return now - self.half_window_days, now + self.half_window_days

    def position_to_julian_date(self, position: float) -> float:
        low, high = self.window()
        return low + (position / self.resolution) * (high - low)

    def julian_date_to_position(self, jd: float) -> float:
        """
        Place the slider thumb for a simulated time.

        Times outside the window pin the thumb to the nearest end; the
        simulated time itself is never touched.
        """
        low, high = self.window()
        position = ((jd - low) / (high - low)) * self.resolution
        return max(0.0, min(position, float(self.resolution)))

    def scrub_to(self, clock: SimulationClock, position: float) -> float:
        """
        Move the clock to the time under a slider position.
        """
        jd = self.position_to_julian_date(position)
        clock.jump_to_date(jd)
        return jd
