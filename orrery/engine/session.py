"""
View session for the Orrery simulation core.

A Session wires one Store to the components that operate on it and
manages their lifetime. Entering a view builds everything fresh; leaving
it cancels every countdown interval and closes the bus. Nothing carries
over from one view to the next.

The session also provides a headless host loop, run_frames(), which
ticks the clock the way a render loop would.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol

from orrery.config import OrreryConfig
from orrery.engine.clock import SimulationClock
from orrery.engine.countdown import (
    ApproachCountdown,
    CountdownState,
    IntervalScheduler,
)
from orrery.engine.event_bus import COUNTDOWN_REFRESHED, EventBus
from orrery.engine.live import LiveDetector
from orrery.engine.scrubber import ScrubberMapper
from orrery.engine.selection import SelectionFocusController
from orrery.engine.store import Store, initial_state
from orrery.engine.time_engine import (
    current_julian_date,
    current_unix_millis,
    unix_millis_to_datetime,
)
from orrery.engine.visibility import VisibilityToggles
from orrery.feeds.neo.carousel import ApproachCarousel
from orrery.feeds.neo.models import CloseApproach, FeedResult
from orrery.feeds.neo.neows_feed import next_approaches

logger = logging.getLogger(__name__)

# The watch widget shows the next five approaches
DISPLAYED_APPROACHES = 5


def soonest_per_asteroid(approaches: list[CloseApproach]) -> list[CloseApproach]:
    """
    Keep the first record for each asteroid id, preserving order.

    One asteroid can pass Earth more than once inside a feed window, and
    distinct designations can slug to the same id. Countdowns are keyed by
    id, so only one record per id may be displayed.
    """
    seen: set[str] = set()
    kept = []
    for approach in approaches:
        if approach.asteroid_id in seen:
            continue
        seen.add(approach.asteroid_id)
        kept.append(approach)
    return kept


class ApproachSource(Protocol):
    def load(self) -> FeedResult: ...


@dataclass
class View:
    """Everything that lives exactly as long as one view."""

    store: Store
    clock: SimulationClock
    scrubber: ScrubberMapper
    live: LiveDetector
    selection: SelectionFocusController
    visibility: VisibilityToggles
    countdowns: dict[str, ApproachCountdown] = field(default_factory=dict)
    carousel: ApproachCarousel = field(default_factory=lambda: ApproachCarousel([]))


class Session:
    """
    Composition root for one interactive view.
    """

    def __init__(
        self,
        config: OrreryConfig | None = None,
        julian_now: Callable[[], float] = current_julian_date,
        now_millis: Callable[[], float] = current_unix_millis,
        scheduler: IntervalScheduler | None = None,
    ) -> None:
        self.config = config or OrreryConfig()
        self.config.validate()
        self._julian_now = julian_now
        self._now_millis = now_millis
        self._scheduler = scheduler
        self._view: View | None = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def active(self) -> bool:
        return self._view is not None

    def enter_view(self) -> None:
        """
        Build a fresh store and components. Re-entering discards the old view.
        """
        if self._view is not None:
            self.exit_view()

        store = Store(
            initial_state(self._julian_now(), self.config.default_speed_index),
            EventBus(),
        )
        self._view = View(
            store=store,
            clock=SimulationClock(store, self.config.speed_table, self._julian_now),
            scrubber=ScrubberMapper(
                self._julian_now,
                self.config.scrubber_resolution,
                self.config.scrubber_half_window_days,
            ),
            live=LiveDetector(self.config.live_epsilon_days, self._julian_now),
            selection=SelectionFocusController(store),
            visibility=VisibilityToggles(store),
        )
        logger.debug("View entered")

    def exit_view(self) -> None:
        """
        Cancel all countdowns and close the bus.
        """
        if self._view is None:
            return

        self._cancel_countdowns()
        self._view.store.event_bus.close()
        self._view = None
        logger.debug("View exited")

    def _require_view(self) -> View:
        if self._view is None:
            raise RuntimeError("No active view; call enter_view() first")
        return self._view

    @property
    def store(self) -> Store:
        return self._require_view().store

    @property
    def clock(self) -> SimulationClock:
        return self._require_view().clock

    @property
    def scrubber(self) -> ScrubberMapper:
        return self._require_view().scrubber

    @property
    def selection(self) -> SelectionFocusController:
        return self._require_view().selection

    @property
    def visibility(self) -> VisibilityToggles:
        return self._require_view().visibility

    @property
    def countdowns(self) -> dict[str, ApproachCountdown]:
        return dict(self._require_view().countdowns)

    @property
    def carousel(self) -> ApproachCarousel:
        return self._require_view().carousel

    # ------------------------------------------------------------------
    # Read-side views
    # ------------------------------------------------------------------

    def is_live(self) -> bool:
        view = self._require_view()
        return view.live.is_live(view.clock.now())

    def scrubber_position(self) -> float:
        view = self._require_view()
        return view.scrubber.julian_date_to_position(view.clock.now())

    # ------------------------------------------------------------------
    # Host loop
    # ------------------------------------------------------------------

    def run_frames(self, frames: int, delta_seconds: float) -> float:
        """
        Tick the clock ``frames`` times with a fixed frame delta.

        Returns the simulated time after the last frame.
        """
        if delta_seconds < 0:
            raise ValueError(f"Frame delta must not be negative, got {delta_seconds}")
        if frames < 0:
            raise ValueError(f"Frame count must not be negative, got {frames}")

        clock = self.clock
        for _ in range(frames):
            clock.tick(delta_seconds)
        return clock.now()

    # ------------------------------------------------------------------
    # Close approaches
    # ------------------------------------------------------------------

    def load_approaches(
        self,
        feed: ApproachSource,
        limit: int = DISPLAYED_APPROACHES,
        start_countdowns: bool = True,
    ) -> FeedResult:
        """
        Load approaches from a feed and create a countdown for each one shown.

        Only approaches still ahead of the wall clock are shown, soonest
        first, one per asteroid, at most ``limit`` of them.

        Feed failures arrive here as a fallback result with a warning; the
        warning is stored for the UI and nothing is raised.
        """
        view = self._require_view()
        result = feed.load()

        now = unix_millis_to_datetime(self._now_millis())
        upcoming = next_approaches(result.approaches, now=now, limit=len(result.approaches))
        approaches = soonest_per_asteroid(upcoming)[:limit]
        if result.approaches and not approaches:
            logger.info("No upcoming close approaches among %d records", len(result.approaches))

        if result.warning:
            logger.warning(result.warning)

        self._cancel_countdowns()
        view.carousel = ApproachCarousel(approaches)
        view.store.set(close_approaches=list(approaches), feed_warning=result.warning)

        for approach in approaches:
            countdown = self._make_countdown(approach)
            view.countdowns[approach.asteroid_id] = countdown
            if start_countdowns:
                countdown.start()
            else:
                countdown.refresh()

        return result

    def dismiss_approach(self, asteroid_id: str) -> None:
        """
        Stop showing one approach and cancel its countdown.
        """
        view = self._require_view()
        countdown = view.countdowns.pop(asteroid_id, None)
        if countdown is not None:
            countdown.cancel()

        remaining = [
            a for a in view.store.get("close_approaches") if a.asteroid_id != asteroid_id
        ]
        index = view.carousel.index
        view.carousel = ApproachCarousel(remaining)
        view.carousel.go_to(index)
        view.store.set(close_approaches=remaining)

    def _make_countdown(self, approach: CloseApproach) -> ApproachCountdown:
        view = self._require_view()
        countdown = ApproachCountdown(
            approach.target_millis,
            now_millis=self._now_millis,
            scheduler=self._scheduler,
            interval_seconds=self.config.countdown_interval_seconds,
            label=approach.asteroid_name,
        )

        def publish(source: ApproachCountdown, state: CountdownState) -> None:
            view.store.event_bus.publish(
                {
                    "type": COUNTDOWN_REFRESHED,
                    "asteroid_id": approach.asteroid_id,
                    "status": state.status,
                    "display": state.display(),
                }
            )

        countdown.subscribe(publish)
        return countdown

    def _cancel_countdowns(self) -> None:
        view = self._require_view()
        for countdown in view.countdowns.values():
            countdown.cancel()
        view.countdowns.clear()
