"""Unit tests for the close-approach carousel."""
import pytest

from orrery.feeds.neo.carousel import ApproachCarousel
from orrery.feeds.neo.sample_data import SAMPLE_APPROACHES


@pytest.fixture
def carousel() -> ApproachCarousel:
    return ApproachCarousel(list(SAMPLE_APPROACHES))


def test_starts_at_first(carousel):
    assert carousel.current is SAMPLE_APPROACHES[0]
    assert len(carousel) == 5


def test_next_wraps(carousel):
    for _ in range(5):
        carousel.next()
    assert carousel.index == 0


def test_prev_wraps(carousel):
    assert carousel.prev() is SAMPLE_APPROACHES[-1]


def test_go_to(carousel):
    assert carousel.go_to(2) is SAMPLE_APPROACHES[2]
    assert carousel.go_to(7) is SAMPLE_APPROACHES[2]


def test_empty_carousel():
    empty = ApproachCarousel([])
    assert empty.current is None
    assert empty.next() is None
    assert empty.prev() is None
    assert empty.go_to(3) is None
