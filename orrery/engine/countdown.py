"""
Close-approach countdowns.

Each displayed approach gets its own ApproachCountdown, which measures
the time left until the approach against the real wall clock, never
against simulated time. It refreshes on a fixed real-time interval
owned by an IntervalScheduler. Whoever creates a countdown must cancel
it when the approach is no longer displayed, otherwise the interval
keeps firing.

Once the approach time has been reached the countdown reports PASSED
on every later refresh. A target that is missing or not a finite number
reports UNKNOWN.
"""

from __future__ import annotations

import asyncio
import logging
import math
from collections.abc import Callable
from dataclasses import dataclass
from numbers import Real
from typing import Any, NamedTuple, Protocol

from orrery.engine.time_engine import current_unix_millis

logger = logging.getLogger(__name__)

MILLIS_PER_DAY = 86_400_000
MILLIS_PER_HOUR = 3_600_000
MILLIS_PER_MINUTE = 60_000
MILLIS_PER_SECOND = 1_000

COUNTDOWN_INTERVAL_SECONDS = 1.0

COUNTING = "COUNTING"
PASSED = "PASSED"
UNKNOWN = "UNKNOWN"

UNKNOWN_PLACEHOLDER = "--"


class Countdown(NamedTuple):
    days: int
    hours: int
    minutes: int
    seconds: int

    def total_seconds(self) -> int:
        return ((self.days * 24 + self.hours) * 60 + self.minutes) * 60 + self.seconds

    def __str__(self) -> str:
        return f"{self.days}d {self.hours:02d}h {self.minutes:02d}m {self.seconds:02d}s"


@dataclass(frozen=True)
class CountdownState:
    status: str
    remaining: Countdown | None = None

    def display(self) -> str:
        if self.status == PASSED:
            return PASSED
        if self.status == UNKNOWN or self.remaining is None:
            return UNKNOWN_PLACEHOLDER
        return str(self.remaining)


def breakdown(diff_millis: float) -> Countdown:
    """
    Split a positive millisecond difference into days/hours/minutes/seconds.
    """
    diff = int(diff_millis)
    return Countdown(
        days=diff // MILLIS_PER_DAY,
        hours=(diff % MILLIS_PER_DAY) // MILLIS_PER_HOUR,
        minutes=(diff % MILLIS_PER_HOUR) // MILLIS_PER_MINUTE,
        seconds=(diff % MILLIS_PER_MINUTE) // MILLIS_PER_SECOND,
    )


def is_valid_target(target_millis: Any) -> bool:
    return (
        isinstance(target_millis, Real)
        and not isinstance(target_millis, bool)
        and math.isfinite(target_millis)
    )


# ----------------------------------------------------------------------
# Schedulers
# ----------------------------------------------------------------------


class IntervalHandle(Protocol):
    def cancel(self) -> None: ...


class IntervalScheduler(Protocol):
    def call_every(self, interval: float, callback: Callable[[], None]) -> IntervalHandle: ...


class _RepeatingCall:
    """Re-arms loop.call_later until cancelled."""

    def __init__(
        self,
        loop: asyncio.AbstractEventLoop,
        interval: float,
        callback: Callable[[], None],
    ) -> None:
        self._loop = loop
        self._interval = interval
        self._callback = callback
        self._cancelled = False
        self._timer: asyncio.TimerHandle = loop.call_later(interval, self._fire)

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def _fire(self) -> None:
        if self._cancelled:
            return
        self._callback()
        if not self._cancelled:
            self._timer = self._loop.call_later(self._interval, self._fire)

    def cancel(self) -> None:
        self._cancelled = True
        self._timer.cancel()


class AsyncioIntervalScheduler:
    """
    Runs repeating callbacks on an asyncio event loop.

    Callbacks run on the loop's own thread, interleaved with everything
    else the loop does, so countdowns need no locking.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def call_every(self, interval: float, callback: Callable[[], None]) -> _RepeatingCall:
        loop = self._loop or asyncio.get_running_loop()
        return _RepeatingCall(loop, interval, callback)


# ----------------------------------------------------------------------
# Countdown
# ----------------------------------------------------------------------

CountdownListener = Callable[["ApproachCountdown", CountdownState], None]


class ApproachCountdown:
    """
    Live time-remaining display for one approach.
    """

    def __init__(
        self,
        target_millis: Any,
        now_millis: Callable[[], float] = current_unix_millis,
        scheduler: IntervalScheduler | None = None,
        interval_seconds: float = COUNTDOWN_INTERVAL_SECONDS,
        label: str | None = None,
    ) -> None:
        self.target_millis = target_millis
        self.label = label
        self.interval_seconds = interval_seconds
        self._now_millis = now_millis
        self._scheduler = scheduler or AsyncioIntervalScheduler()
        self._handle: IntervalHandle | None = None
        self._listeners: list[CountdownListener] = []
        self._warned_invalid = False
        self.state = CountdownState(UNKNOWN)

    @property
    def running(self) -> bool:
        return self._handle is not None

    @property
    def passed(self) -> bool:
        return self.state.status == PASSED

    def subscribe(self, listener: CountdownListener) -> None:
        self._listeners.append(listener)

    def compute(self) -> CountdownState:
        """
        Work out the current state without notifying anyone.
        """
        if self.passed:
            return self.state

        if not is_valid_target(self.target_millis):
            if not self._warned_invalid:
                logger.warning(
                    "Countdown %s has an invalid target %r", self.label, self.target_millis
                )
                self._warned_invalid = True
            return CountdownState(UNKNOWN)

        diff = self.target_millis - self._now_millis()
        if diff <= 0:
            return CountdownState(PASSED)
        return CountdownState(COUNTING, breakdown(diff))

    def refresh(self) -> CountdownState:
        """
        Recompute the state and notify listeners.
        """
        previous = self.state
        self.state = self.compute()

        if self.state.status == PASSED and previous.status != PASSED:
            logger.info("Approach %s has passed", self.label)

        for listener in list(self._listeners):
            listener(self, self.state)
        return self.state

    def start(self) -> None:
        """
        Refresh immediately, then once per interval. Calling it again is a no-op.
        """
        if self._handle is not None:
            return
        self.refresh()
        self._handle = self._scheduler.call_every(self.interval_seconds, self.refresh)

    def cancel(self) -> None:
        if self._handle is None:
            return
        self._handle.cancel()
        self._handle = None

    def display(self) -> str:
        return self.state.display()
