"""
Display toggles read by the renderer.
"""

from orrery.engine.store import Store

VISIBILITY_FLAGS = ("show_orbits", "show_labels", "show_moons", "show_asteroids", "show_grid")


class VisibilityToggles:
    def __init__(self, store: Store) -> None:
        self.store = store

    def _toggle(self, flag: str) -> None:
        self.store.set(**{flag: not self.store.get(flag)})

    def toggle_orbits(self) -> None:
        self._toggle("show_orbits")

    def toggle_labels(self) -> None:
        self._toggle("show_labels")

    def toggle_moons(self) -> None:
        self._toggle("show_moons")

    def toggle_asteroids(self) -> None:
        self._toggle("show_asteroids")

    def toggle_grid(self) -> None:
        self._toggle("show_grid")

    def flags(self) -> dict[str, bool]:
        return {flag: self.store.get(flag) for flag in VISIBILITY_FLAGS}
