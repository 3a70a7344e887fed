"""
Carousel over the displayed close approaches.

The watch widget shows one approach at a time with previous/next arrows
and dot navigation; both wrap around.
"""

from orrery.feeds.neo.models import CloseApproach


class ApproachCarousel:
    def __init__(self, approaches: list[CloseApproach]) -> None:
        self.approaches = list(approaches)
        self.index = 0

    def __len__(self) -> int:
        return len(self.approaches)

    @property
    def current(self) -> CloseApproach | None:
        if not self.approaches:
            return None
        return self.approaches[self.index]

    def next(self) -> CloseApproach | None:
        if self.approaches:
            self.index = (self.index + 1) % len(self.approaches)
        return self.current

    def prev(self) -> CloseApproach | None:
        if self.approaches:
            self.index = (self.index - 1) % len(self.approaches)
        return self.current

    def go_to(self, index: int) -> CloseApproach | None:
        if self.approaches:
            self.index = index % len(self.approaches)
        return self.current
