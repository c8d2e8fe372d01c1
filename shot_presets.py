"""
Shot Preset System
Reproducible table setups (straight-in, angled cut, blocked kick, break)
that build a controller, select the shot and return the computed result.
"""

from controller import ShotController


class ShotPreset:
    """Each preset: place balls → select object ball / pocket → result dict."""

    @staticmethod
    def straight_in() -> dict:
        """Cue, object ball and side pocket on one vertical line."""
        ctrl = ShotController()
        ctrl.place_ball("cue", 50.0, 20.0)
        ctrl.place_ball(1, 50.0, 35.0)
        ctrl.select_object_ball(1)
        ctrl.select_pocket("MR")
        return {"controller": ctrl, "result": ctrl.get_shot_result()}

    @staticmethod
    def angled_cut() -> dict:
        """Cut into the top-right corner from the lower left."""
        ctrl = ShotController()
        ctrl.place_ball("cue", 20.0, 40.0)
        ctrl.place_ball(5, 60.0, 28.0)
        ctrl.select_object_ball(5)
        ctrl.select_pocket("TR")
        return {"controller": ctrl, "result": ctrl.get_shot_result()}

    @staticmethod
    def blocked_kick(english: float = 0.0) -> dict:
        """
        A blocker sits on the cue → ghost line; the 9 is reachable off the
        bottom rail.

        Args:
            english: side english applied to the kick (−1 … +1).
        """
        ctrl = ShotController()
        ctrl.place_ball("cue", 30.0, 40.0)
        ctrl.place_ball(9, 50.0, 20.0)
        ctrl.place_ball(3, 40.0, 30.0)
        ctrl.select_object_ball(9)
        ctrl.select_pocket("TR")
        if english:
            ctrl.set_english(english, 0.0)
        return {"controller": ctrl, "result": ctrl.get_shot_result()}

    @staticmethod
    def break_shot(seed: int | None = 0) -> dict:
        """8-ball rack; no pocket is called so the result is None."""
        ctrl = ShotController()
        ctrl.rack(seed=seed)
        return {"controller": ctrl, "result": ctrl.get_shot_result(),
                "aim": ctrl.aim_ghost()}
