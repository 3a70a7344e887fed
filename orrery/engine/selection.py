"""
Selection and camera focus for the Orrery simulation core.

Selection (what the detail panel shows) and focus (what the camera
frames) are separate pieces of state. Selecting a body also focuses it;
focusing a body never selects it; clearing the selection leaves the
camera where it is.

Each focus change raises ``camera_transitioning`` and publishes one
``camera.transition`` event. The flag is a one-shot signal: the renderer
clears it with set_camera_transitioning(False) when its animation is
done. Nothing here resets it automatically.

Body identifiers are taken as given. Resolving them against the body
catalog is the rendering layer's job.
"""

import logging

from orrery.engine.event_bus import CAMERA_TRANSITION
from orrery.engine.store import Store

logger = logging.getLogger(__name__)


class SelectionFocusController:
    def __init__(self, store: Store) -> None:
        self.store = store

    @property
    def selected_body(self) -> str | None:
        return self.store.get("selected_body")

    @property
    def focus_target(self) -> str | None:
        return self.store.get("focus_target")

    @property
    def camera_transitioning(self) -> bool:
        return self.store.get("camera_transitioning")

    def select_body(self, body_id: str | None) -> None:
        """
        Select a body, or clear the selection with None.

        A non-null selection moves the focus in the same store update.
        """
        if body_id is None:
            self.store.set(selected_body=None)
            return

        self.store.set(
            selected_body=body_id,
            focus_target=body_id,
            camera_transitioning=True,
        )
        self._announce_transition(body_id)

    def focus_body(self, body_id: str | None) -> None:
        """
        Retarget the camera without touching the selection.
        """
        self.store.set(focus_target=body_id, camera_transitioning=True)
        self._announce_transition(body_id)

    def set_camera_transitioning(self, value: bool) -> None:
        self.store.set(camera_transitioning=value)

    def _announce_transition(self, body_id: str | None) -> None:
        logger.debug("Camera transition to %s", body_id)
        self.store.event_bus.publish({"type": CAMERA_TRANSITION, "focus_target": body_id})
