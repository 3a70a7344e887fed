# orrery/feeds/neo/sample_data.py
"""
Bundled close-approach sample set.

Used whenever the live feed cannot be reached or returns something that
can't be parsed. Approach times are UTC.
"""

from datetime import UTC, datetime

from orrery.feeds.neo.models import CloseApproach

SAMPLE_APPROACHES: tuple[CloseApproach, ...] = (
    CloseApproach(
        asteroid_id="asteroid-2026-bx4",
        asteroid_name="2026 BX4",
        approach_time=datetime(2026, 2, 16, 21, 6, 26, tzinfo=UTC),
        distance_km=2_941_523,
        estimated_size_m=223.1,
    ),
    CloseApproach(
        asteroid_id="asteroid-2026-aj17",
        asteroid_name="2026 AJ17",
        approach_time=datetime(2026, 2, 18, 2, 58, 26, tzinfo=UTC),
        distance_km=6_659_369,
        estimated_size_m=33.1,
    ),
    CloseApproach(
        asteroid_id="asteroid-2026-cu",
        asteroid_name="2026 CU",
        approach_time=datetime(2026, 2, 18, 22, 6, 10, tzinfo=UTC),
        distance_km=2_075_021,
        estimated_size_m=25.8,
    ),
    CloseApproach(
        asteroid_id="asteroid-2026-be7",
        asteroid_name="2026 BE7",
        approach_time=datetime(2026, 2, 20, 4, 22, 0, tzinfo=UTC),
        distance_km=1_200_000,
        estimated_size_m=50.0,
    ),
    CloseApproach(
        asteroid_id="asteroid-2026-bq8",
        asteroid_name="2026 BQ8",
        approach_time=datetime(2026, 2, 25, 11, 30, 45, tzinfo=UTC),
        distance_km=5_800_000,
        estimated_size_m=60.0,
    ),
)
