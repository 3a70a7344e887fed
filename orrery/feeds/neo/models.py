"""
Close-approach records shared by the live feed and the bundled sample set.
"""

import re
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

_UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


@dataclass(frozen=True)
class CloseApproach:
    """
    One close approach of an asteroid to Earth.

    ``asteroid_id`` doubles as a body-catalog identifier, so a record can
    be handed straight to SelectionFocusController.select_body().
    """

    asteroid_id: str
    asteroid_name: str
    approach_time: datetime
    distance_km: float
    estimated_size_m: float
    is_hazardous: bool = False
    target_millis: float = field(init=False)

    def __post_init__(self) -> None:
        approach_time = self.approach_time
        if approach_time.tzinfo is None:
            approach_time = approach_time.replace(tzinfo=UTC)
            object.__setattr__(self, "approach_time", approach_time)
        millis = (approach_time - _UNIX_EPOCH) / timedelta(milliseconds=1)
        object.__setattr__(self, "target_millis", millis)


@dataclass
class FeedResult:
    """
    What a feed load produced. ``warning`` is set when the fallback was used.
    """

    approaches: list[CloseApproach]
    warning: str | None = None

    @property
    def is_fallback(self) -> bool:
        return self.warning is not None


def clean_designation(name: str) -> str:
    """
    Drop the parentheses NeoWs wraps provisional designations in.
    """
    name = name.strip()
    if name.startswith("(") and name.endswith(")"):
        return name[1:-1].strip()
    return name


def asteroid_id_from_name(name: str) -> str:
    """
    Derive a catalog id from a designation, e.g. "(2026 BX4)" -> "asteroid-2026-bx4".
    """
    cleaned = clean_designation(name).lower()
    slug = re.sub(r"[^a-z0-9]+", "-", cleaned).strip("-")
    return f"asteroid-{slug}"
