"""
Orrery solar-system simulation core.

This package contains the simulation-time engine and the interactive
selection/camera-focus state machine that renderers read from.
The engine provides:
- SimulationClock, ScrubberMapper, LiveDetector
- SelectionFocusController, VisibilityToggles
- ApproachCountdown
- Store / EventBus, and Session to wire them together per view

Close-approach data comes from orrery.feeds.neo.
"""

from orrery.engine.clock import SimulationClock, SpeedStep
from orrery.engine.countdown import ApproachCountdown
from orrery.engine.event_bus import EventBus
from orrery.engine.live import LiveDetector
from orrery.engine.scrubber import ScrubberMapper
from orrery.engine.selection import SelectionFocusController
from orrery.engine.session import Session
from orrery.engine.store import Store
from orrery.engine.visibility import VisibilityToggles
