"""
NASA NeoWs close-approach feed.

Fetches upcoming near-Earth-object approaches from the NeoWs ``feed``
endpoint and converts them into CloseApproach records.

A failed fetch is never fatal. load() falls back to the bundled sample
set and returns a warning string that the caller should put in front of
the user. There is no retry.
"""

import logging
import os
from datetime import UTC, date, datetime, timedelta
from typing import Any

import requests

from orrery.feeds.neo.models import (
    CloseApproach,
    FeedResult,
    asteroid_id_from_name,
    clean_designation,
)
from orrery.feeds.neo.sample_data import SAMPLE_APPROACHES

logger = logging.getLogger(__name__)

NEOWS_FEED_URL = "https://api.nasa.gov/neo/rest/v1/feed"
DEFAULT_API_KEY = "DEMO_KEY"
REQUEST_TIMEOUT_SECONDS = 10.0

# NeoWs rejects feed windows longer than this
MAX_RANGE_DAYS = 7

FALLBACK_WARNING = "Live close-approach data is unavailable; showing sample data."


class FeedError(Exception):
    """Raised when the feed response can't be turned into records."""


class CloseApproachFeed:
    """
    Client for the NeoWs feed endpoint.
    """

    def __init__(
        self,
        url: str = NEOWS_FEED_URL,
        api_key: str | None = None,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
    ):
        """
        Args:
            url: Feed endpoint
            api_key: NASA API key; falls back to $NASA_API_KEY, then DEMO_KEY
            timeout: Request timeout in seconds
            session: Optional requests session to reuse connections
        """
        self.url = url
        self.api_key = api_key or os.getenv("NASA_API_KEY", DEFAULT_API_KEY)
        self.timeout = timeout
        self.session = session or requests.Session()

    def fetch(self, start: date, end: date | None = None) -> list[CloseApproach]:
        """
        Fetch and parse approaches between two dates (inclusive).

        Raises:
            requests.RequestException: on network or HTTP failure
            FeedError: if the payload is malformed
        """
        end = end or start + timedelta(days=MAX_RANGE_DAYS)
        if end < start:
            raise ValueError(f"Feed window ends ({end}) before it starts ({start})")
        if (end - start).days > MAX_RANGE_DAYS:
            end = start + timedelta(days=MAX_RANGE_DAYS)

        params = {
            "start_date": start.isoformat(),
            "end_date": end.isoformat(),
            "api_key": self.api_key,
        }
        response = self.session.get(self.url, params=params, timeout=self.timeout)
        response.raise_for_status()

        try:
            payload = response.json()
        except ValueError as exc:
            raise FeedError("Feed response is not valid JSON") from exc

        return parse_feed(payload)

    def load(self, start: date | None = None, end: date | None = None) -> FeedResult:
        """
        Fetch approaches, substituting the sample set on any failure.
        """
        start = start or datetime.now(UTC).date()
        try:
            approaches = self.fetch(start, end)
        except (requests.RequestException, FeedError) as exc:
            logger.warning("Close-approach fetch failed, using sample data: %s", exc)
            return FeedResult(list(SAMPLE_APPROACHES), FALLBACK_WARNING)

        logger.info("Loaded %d close approaches from %s", len(approaches), self.url)
        return FeedResult(approaches)


class OfflineFeed:
    """
    Feed that always serves the bundled sample set, without a warning.
    """

    def load(self, start: date | None = None, end: date | None = None) -> FeedResult:
        return FeedResult(list(SAMPLE_APPROACHES))


def parse_feed(payload: dict[str, Any]) -> list[CloseApproach]:
    """
    Convert a NeoWs feed payload into records sorted by approach time.

    Only approaches to Earth are kept.
    """
    try:
        by_date = payload["near_earth_objects"]
    except (KeyError, TypeError) as exc:
        raise FeedError("Feed payload has no 'near_earth_objects'") from exc

    approaches: list[CloseApproach] = []
    try:
        for objects in by_date.values():
            for neo in objects:
                approaches.extend(_parse_object(neo))
    except (KeyError, TypeError, ValueError, AttributeError, OverflowError, OSError) as exc:
        raise FeedError(f"Malformed near-Earth object in feed: {exc}") from exc

    return sorted(approaches, key=lambda a: a.approach_time)


def _parse_object(neo: dict[str, Any]) -> list[CloseApproach]:
    name = clean_designation(neo["name"])
    meters = neo["estimated_diameter"]["meters"]
    size_m = round(
        (float(meters["estimated_diameter_min"]) + float(meters["estimated_diameter_max"])) / 2, 1
    )

    records = []
    for approach in neo.get("close_approach_data", []):
        if approach.get("orbiting_body", "Earth") != "Earth":
            continue
        epoch_millis = approach["epoch_date_close_approach"]
        records.append(
            CloseApproach(
                asteroid_id=asteroid_id_from_name(name),
                asteroid_name=name,
                approach_time=datetime.fromtimestamp(epoch_millis / 1000, tz=UTC),
                distance_km=float(approach["miss_distance"]["kilometers"]),
                estimated_size_m=size_m,
                is_hazardous=bool(neo.get("is_potentially_hazardous_asteroid", False)),
            )
        )
    return records


def next_approaches(
    approaches: list[CloseApproach],
    now: datetime | None = None,
    limit: int = 5,
) -> list[CloseApproach]:
    """
    Return up to ``limit`` approaches that have not happened yet, soonest first.
    """
    now = now or datetime.now(UTC)
    upcoming = sorted(
        (a for a in approaches if a.approach_time > now),
        key=lambda a: a.approach_time,
    )
    return upcoming[:limit]
