"""
Configuration for the Orrery simulation core.

Defaults live here. A YAML file can override any subset of them:

    speed_table:
      - {label: "1s", factor: 1}
      - {label: "1d", factor: 86400}
    default_speed_index: 1
    live_epsilon_days: 0.001
    neo_api_key: "..."

Speed factors are simulated seconds per real second.
"""

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

from orrery.engine.clock import DEFAULT_SPEED_INDEX, DEFAULT_SPEED_TABLE, SpeedStep
from orrery.engine.countdown import COUNTDOWN_INTERVAL_SECONDS
from orrery.engine.live import LIVE_EPSILON_DAYS
from orrery.engine.scrubber import SCRUBBER_HALF_WINDOW_DAYS, SCRUBBER_RESOLUTION
from orrery.feeds.neo.neows_feed import NEOWS_FEED_URL, REQUEST_TIMEOUT_SECONDS


@dataclass
class OrreryConfig:
    speed_table: tuple[SpeedStep, ...] = DEFAULT_SPEED_TABLE
    default_speed_index: int = DEFAULT_SPEED_INDEX
    live_epsilon_days: float = LIVE_EPSILON_DAYS
    scrubber_resolution: int = SCRUBBER_RESOLUTION
    scrubber_half_window_days: float = SCRUBBER_HALF_WINDOW_DAYS
    countdown_interval_seconds: float = COUNTDOWN_INTERVAL_SECONDS
    neo_feed_url: str = NEOWS_FEED_URL
    neo_api_key: str | None = None
    request_timeout_seconds: float = REQUEST_TIMEOUT_SECONDS
    extra: dict[str, Any] = field(default_factory=dict)

    def validate(self) -> None:
        """
        Reject configurations the engine can't run with.
        """
        if not self.speed_table:
            raise ValueError("'speed_table' must contain at least one step")
        if not 0 <= self.default_speed_index < len(self.speed_table):
            raise ValueError(
                f"'default_speed_index' {self.default_speed_index} is outside "
                f"the speed table (0..{len(self.speed_table) - 1})"
            )
        if self.live_epsilon_days <= 0:
            raise ValueError("'live_epsilon_days' must be positive")
        if self.scrubber_resolution <= 0:
            raise ValueError("'scrubber_resolution' must be positive")
        if self.scrubber_half_window_days <= 0:
            raise ValueError("'scrubber_half_window_days' must be positive")
        if self.countdown_interval_seconds <= 0:
            raise ValueError("'countdown_interval_seconds' must be positive")


def _parse_speed_table(raw: Any) -> tuple[SpeedStep, ...]:
    if not isinstance(raw, list):
        raise ValueError("'speed_table' must be a list of {label, factor} entries")

    steps = []
    for entry in raw:
        if not isinstance(entry, dict) or "label" not in entry or "factor" not in entry:
            raise ValueError(f"Invalid speed table entry: {entry!r}")
        steps.append(SpeedStep(str(entry["label"]), float(entry["factor"])))
    return tuple(steps)


def load_config(path: Path | None = None) -> OrreryConfig:
    """
    Load configuration, applying YAML overrides on top of the defaults.

    Unknown keys are kept in ``extra`` for collaborators that want them.
    """
    config = OrreryConfig()

    if path is None:
        config.validate()
        return config

    with path.open("r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh)

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ValueError("Config file must be a YAML mapping (dict)")

    known = {f.name for f in fields(OrreryConfig)} - {"extra"}
    for key, value in raw.items():
        if key == "speed_table":
            config.speed_table = _parse_speed_table(value)
        elif key in known:
            setattr(config, key, value)
        else:
            config.extra[key] = value

    config.validate()
    return config
