"""
Ghost-ball and cut-angle tests.

The ghost ball always sits 2r from the object ball on the pocket→object
line; collinear shots cut at 0°; mirroring the table keeps the angle.
"""

import sys
import os
import numpy as np
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from aiming import CutAngle, contact_point, cut_angle, ghost_ball, require_makeable
from errors import DegenerateGeometry, UnmakeableAngle
from geometry import distance
from table import BALL_RADIUS, POCKETS, TABLE_WIDTH

R = BALL_RADIUS


# ── Helpers ──────────────────────────────────────────────

def mirror(p):
    """Mirror a point about the table's long axis."""
    return (p[0], TABLE_WIDTH - p[1])


def cut_for(cue, obj, pocket) -> CutAngle:
    g = ghost_ball(obj, pocket, R)
    return cut_angle(cue, g, obj, pocket)


OBJECT_POSITIONS = [(60.0, 25.0), (10.0, 10.0), (90.0, 45.0), (50.0, 2.0), (33.3, 41.7)]


class TestGhostBall:

    @pytest.mark.parametrize("obj", OBJECT_POSITIONS)
    @pytest.mark.parametrize("pocket_id", sorted(POCKETS))
    def test_ghost_is_two_radii_from_object(self, obj, pocket_id):
        g = ghost_ball(obj, POCKETS[pocket_id].position, R)
        assert distance(g, obj) == pytest.approx(2 * R, abs=1e-6)

    def test_ghost_lies_behind_object_on_pocket_line(self):
        g = ghost_ball((50.0, 35.0), (50.0, 50.0), R)
        np.testing.assert_allclose(g, [50.0, 35.0 - 2 * R], atol=1e-9)

    def test_contact_point_is_midway(self):
        obj, pocket = (60.0, 28.0), (100.0, 0.0)
        cp = contact_point(obj, pocket, R)
        g = ghost_ball(obj, pocket, R)
        np.testing.assert_allclose(cp, (np.array(obj) + g) / 2.0, atol=1e-9)

    def test_object_on_pocket_point_raises(self):
        with pytest.raises(DegenerateGeometry):
            ghost_ball((100.0, 0.0), (100.0, 0.0), R)

    def test_no_nan_near_degenerate(self):
        g = ghost_ball((100.0 - 1e-3, 0.0), (100.0, 0.0), R)
        assert not np.isnan(g).any()


class TestCutAngle:

    def test_straight_in_is_zero(self):
        cut = cut_for((50.0, 20.0), (50.0, 35.0), (50.0, 50.0))
        assert cut.degrees == pytest.approx(0.0, abs=1e-6)
        assert cut.makeable

    @pytest.mark.parametrize("k", [0.5, 3.0, 20.0])
    def test_any_collinear_cue_is_zero(self, k):
        obj = np.array([40.0, 20.0])
        pocket = np.array([100.0, 0.0])
        cue = obj + (obj - pocket) / np.linalg.norm(obj - pocket) * (2 * R + k)
        assert cut_for(cue, obj, pocket).degrees == pytest.approx(0.0, abs=1e-6)

    def test_angled_cut_range(self):
        cut = cut_for((20.0, 40.0), (60.0, 28.0), (100.0, 0.0))
        assert 15.0 < cut.degrees < 60.0

    @pytest.mark.parametrize("cue,obj,pocket", [
        ((20.0, 40.0), (60.0, 28.0), (100.0, 0.0)),
        ((30.0, 35.0), (60.0, 25.0), (50.0, 0.0)),
        ((80.0, 10.0), (40.0, 30.0), (0.0, 50.0)),
    ])
    def test_mirror_symmetry(self, cue, obj, pocket):
        a = cut_for(cue, obj, pocket)
        b = cut_for(mirror(cue), mirror(obj), mirror(pocket))
        assert a.raw_degrees == pytest.approx(b.raw_degrees, abs=1e-9)

    def test_eighty_degrees_still_makeable(self):
        cut = cut_for((60.0, 20.99), (50.0, 25.0), (50.0, 50.0))
        assert cut.degrees == pytest.approx(80.0, abs=0.1)
        assert cut.makeable

    def test_beyond_limit_flagged(self):
        cut = cut_for((60.0, 23.25), (50.0, 25.0), (50.0, 50.0))
        assert cut.raw_degrees > 85.0
        assert not cut.makeable
        with pytest.raises(UnmakeableAngle):
            require_makeable(cut)

    def test_backwards_shot_clamped_to_ninety(self):
        cut = cut_for((50.0, 40.0), (50.0, 25.0), (50.0, 50.0))
        assert cut.raw_degrees == pytest.approx(180.0)
        assert cut.degrees == 90.0
        assert not cut.makeable

    def test_cue_on_ghost_raises(self):
        g = ghost_ball((50.0, 25.0), (50.0, 50.0), R)
        with pytest.raises(DegenerateGeometry):
            cut_angle(g, g, (50.0, 25.0), (50.0, 50.0))

    def test_limit_is_read_at_call_time(self, monkeypatch):
        import aiming
        monkeypatch.setattr(aiming, "UNMAKEABLE_CUT_ANGLE", 70.0)
        cut = cut_for((60.0, 20.99), (50.0, 25.0), (50.0, 50.0))
        assert not cut.makeable
