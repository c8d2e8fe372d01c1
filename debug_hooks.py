"""
Test-control interface (direct state injection for end-to-end tests).

Kept apart from the production contract: nothing in controller.py imports
this module, and server.py only routes debug commands when enabled() is true
(SHOTGEO_DEBUG=1). Mirrors the browser build's DEBUG hooks.
"""

import logging
import os

from table import CUE

logger = logging.getLogger(__name__)

ENV_FLAG = "SHOTGEO_DEBUG"


def enabled() -> bool:
    return os.environ.get(ENV_FLAG, "").strip().lower() in ("1", "true", "yes", "on")


class DebugHooks:
    """Thin facade over a ShotController for tests and tooling."""

    def __init__(self, controller):
        self.ctrl = controller
        logger.info("debug hooks attached")

    def balls(self) -> dict:
        """{"cue": {"x", "y"}, "1": {...}, ...} of every ball on the table."""
        return self.ctrl.table.snapshot()

    def cue(self) -> dict | None:
        return self.balls().get(CUE)

    def place_ball(self, ball_id, x: float, y: float) -> dict:
        self.ctrl.place_ball(ball_id, x, y)
        return self.balls()

    def remove_ball(self, ball_id) -> dict:
        self.ctrl.remove_ball(ball_id)
        return self.balls()

    def shot(self) -> dict | None:
        result = self.ctrl.get_shot_result()
        return None if result is None else result.to_dict()

    def reset(self, empty: bool = True, seed: int | None = None) -> None:
        """Empty table (the ?empty=1 start) or a fresh rack."""
        self.ctrl.clear()
        if not empty:
            self.ctrl.rack(seed=seed)
