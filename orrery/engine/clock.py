"""
Simulation clock for the Orrery simulation core.

The clock owns simulated time, expressed as a Julian Date, together with
play/pause, the speed index and the direction of travel. All of it lives
in the shared Store so the renderer sees every change on its next read.

The clock does not sleep. It does not run a timer. A host render loop
calls tick() once per frame with the real time that has elapsed, and the
clock advances simulated time by that amount scaled by the current speed
step and direction.

Speed table units: simulated seconds per real second. A step with factor
86400 ("1d") advances one simulated day per real second:

    jd += delta_seconds * factor * direction / 86400
"""

import logging
import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from orrery.engine.store import Store
from orrery.engine.time_engine import SECONDS_PER_DAY, current_julian_date, format_julian_date

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SpeedStep:
    """One entry of the speed table."""

    label: str
    factor: float  # simulated seconds per real second


SpeedTable = Sequence[SpeedStep]

DEFAULT_SPEED_TABLE: tuple[SpeedStep, ...] = (
    SpeedStep("1s", 1),
    SpeedStep("1m", 60),
    SpeedStep("1h", 3_600),
    SpeedStep("1d", 86_400),
    SpeedStep("10d", 864_000),
    SpeedStep("30d", 2_592_000),
    SpeedStep("1y", 31_536_000),
)

DEFAULT_SPEED_INDEX = 3


def clamp_speed_index(index: float, table_length: int) -> int:
    if math.isnan(index):
        return 0
    if math.isinf(index):
        return table_length - 1 if index > 0 else 0
    return max(0, min(int(index), table_length - 1))


class SimulationClock:
    """
    Playback controls over the store's ``simulation_time``.

    Every operation writes straight through to the store; nothing is
    queued, and the last write wins.
    """

    def __init__(
        self,
        store: Store,
        speed_table: SpeedTable = DEFAULT_SPEED_TABLE,
        julian_now: Callable[[], float] = current_julian_date,
    ) -> None:
        if not speed_table:
            raise ValueError("Speed table must contain at least one step")

        self.store = store
        self.speed_table: tuple[SpeedStep, ...] = tuple(speed_table)
        self._julian_now = julian_now

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def now(self) -> float:
        """
        Return the current simulated time as a Julian Date.
        """
        return self.store.get("simulation_time")

    @property
    def is_playing(self) -> bool:
        return self.store.get("is_playing")

    @property
    def speed_index(self) -> int:
        return self.store.get("speed_index")

    @property
    def direction(self) -> int:
        return self.store.get("time_direction")

    @property
    def speed_step(self) -> SpeedStep:
        return self.speed_table[self.speed_index]

    @property
    def speed_label(self) -> str:
        return self.speed_step.label

    @property
    def date_label(self) -> str:
        return format_julian_date(self.now())

    @property
    def can_go_faster(self) -> bool:
        return self.speed_index < len(self.speed_table) - 1

    @property
    def can_go_slower(self) -> bool:
        return self.speed_index > 0

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def tick(self, delta_seconds: float) -> None:
        """
        Advance simulated time by one frame's worth of real time.

        A paused clock ignores the tick entirely. Guarding against a
        negative delta is the caller's job.
        """
        if not self.is_playing:
            return

        jd_delta = delta_seconds * self.speed_step.factor * self.direction / SECONDS_PER_DAY
        self.store.set(simulation_time=self.now() + jd_delta)

    def toggle_play(self) -> None:
        self.store.set(is_playing=not self.is_playing)

    def set_speed_index(self, index: int) -> None:
        """
        Select a speed step. Out-of-range requests are clamped, never rejected.
        """
        clamped = clamp_speed_index(index, len(self.speed_table))
        if clamped != index:
            logger.debug("Speed index %s clamped to %s", index, clamped)
        self.store.set(speed_index=clamped)

    def faster(self) -> None:
        self.set_speed_index(self.speed_index + 1)

    def slower(self) -> None:
        self.set_speed_index(self.speed_index - 1)

    def reverse_time(self) -> None:
        """
        Flip the direction of travel. Play state is left alone.
        """
        self.store.set(time_direction=-self.direction)

    def jump_to_now(self) -> None:
        """
        Jump to the real present and resume playback.
        """
        self.store.set(simulation_time=self._julian_now(), is_playing=True)

    def jump_to_date(self, jd: float) -> None:
        """
        Jump to an absolute Julian Date. Play state and direction are kept.
        """
        self.store.set(simulation_time=jd)
