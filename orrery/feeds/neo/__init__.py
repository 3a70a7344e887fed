"""
Near-Earth-object close-approach feed.

Provides:
- CloseApproachFeed: live NASA NeoWs client with sample-data fallback
- OfflineFeed: always serves the bundled sample set
- ApproachCarousel: wrap-around navigation over displayed approaches
"""

from orrery.feeds.neo.carousel import ApproachCarousel
from orrery.feeds.neo.models import CloseApproach, FeedResult
from orrery.feeds.neo.neows_feed import CloseApproachFeed, OfflineFeed, next_approaches
from orrery.feeds.neo.sample_data import SAMPLE_APPROACHES

__all__ = [
    "ApproachCarousel",
    "CloseApproach",
    "CloseApproachFeed",
    "FeedResult",
    "OfflineFeed",
    "SAMPLE_APPROACHES",
    "next_approaches",
]
