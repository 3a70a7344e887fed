"""
Unit tests for orrery/engine/scrubber.py
"""

import pytest

from orrery.engine.clock import SimulationClock
from orrery.engine.scrubber import SCRUBBER_HALF_WINDOW_DAYS, ScrubberMapper


@pytest.fixture
def scrubber(fake_now) -> ScrubberMapper:
    return ScrubberMapper(julian_now=fake_now.julian)


class TestScrubberMapper:
    def test_window_is_centred_on_now(self, scrubber, fake_now):
        low, high = scrubber.window()
        assert low == pytest.approx(fake_now.jd - 5 * 365.25)
        assert high == pytest.approx(fake_now.jd + 5 * 365.25)

    def test_window_drifts_with_real_time(self, scrubber, fake_now):
        low_before, _ = scrubber.window()
        fake_now.advance_seconds(86400)
        low_after, _ = scrubber.window()
        assert low_after - low_before == pytest.approx(1.0)

    @pytest.mark.parametrize("position, offset_days", [
        (0, -SCRUBBER_HALF_WINDOW_DAYS),
        (500, 0.0),
        (1000, SCRUBBER_HALF_WINDOW_DAYS),
    ])
    def test_forward_mapping(self, scrubber, fake_now, position, offset_days):
        assert scrubber.position_to_julian_date(position) == pytest.approx(fake_now.jd + offset_days)

    @pytest.mark.parametrize("position", [0, 1, 250, 333, 500, 999, 1000])
    def test_round_trip(self, scrubber, position):
        jd = scrubber.position_to_julian_date(position)
        assert scrubber.julian_date_to_position(jd) == pytest.approx(position, abs=1e-6)

    def test_inverse_clamps_outside_window(self, scrubber, fake_now):
        assert scrubber.julian_date_to_position(fake_now.jd - 20 * 365.25) == 0.0
        assert scrubber.julian_date_to_position(fake_now.jd + 20 * 365.25) == 1000.0

    def test_clamping_leaves_simulation_time_alone(self, scrubber, store, fake_now):
        far_future = fake_now.jd + 50 * 365.25
        store.set(simulation_time=far_future)

        assert scrubber.julian_date_to_position(store.get("simulation_time")) == 1000.0
        assert store.get("simulation_time") == far_future

    def test_scrub_to_jumps_clock(self, scrubber, store, fake_now):
        clock = SimulationClock(store, julian_now=fake_now.julian)
        clock.toggle_play()

        jd = scrubber.scrub_to(clock, 750)

        assert clock.now() == jd
        assert jd == pytest.approx(fake_now.jd + SCRUBBER_HALF_WINDOW_DAYS / 2)
        assert clock.is_playing is False

    def test_custom_resolution(self, fake_now):
        scrubber = ScrubberMapper(julian_now=fake_now.julian, resolution=100, half_window_days=10)
        assert scrubber.position_to_julian_date(100) == pytest.approx(fake_now.jd + 10)

    @pytest.mark.parametrize("kwargs", [{"resolution": 0}, {"half_window_days": -1}])
    def test_rejects_degenerate_window(self, fake_now, kwargs):
        with pytest.raises(ValueError):
            ScrubberMapper(julian_now=fake_now.julian, **kwargs)
