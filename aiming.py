"""
Ghost-ball solver and cut-angle calculator.

    G = O + normalize(O - P) * 2r

The cut angle is measured between the cue ball's approach (G - C) and the
object ball's intended travel (P - O).
"""

from dataclasses import dataclass

import numpy as np

from errors import DegenerateGeometry, UnmakeableAngle
from geometry import EPSILON, angle_between, normalize, points_equal, vec

# Beyond this the cue ball must pass through the object ball to reach G.
# Read by name on every call so it can be tuned at runtime.
UNMAKEABLE_CUT_ANGLE: float = 85.0


@dataclass(frozen=True)
class CutAngle:
    """
    degrees:     reported angle, always within [0, 90]
    raw_degrees: angle between the two lines before clamping, [0, 180]
    makeable:    False once raw_degrees passes UNMAKEABLE_CUT_ANGLE
    """
    degrees: float
    raw_degrees: float
    makeable: bool


def _object_direction(obj, pocket) -> np.ndarray:
    o, p = vec(obj), vec(pocket)
    if points_equal(o, p):
        raise DegenerateGeometry(
            f"object ball {o.tolist()} coincides with the pocket point")
    return normalize(o - p)


def ghost_ball(obj, pocket, radius: float) -> np.ndarray:
    """Cue-ball centre at the moment of contact that sends obj toward pocket."""
    return vec(obj) + _object_direction(obj, pocket) * (2.0 * radius)


def contact_point(obj, pocket, radius: float) -> np.ndarray:
    """Point on the object ball's surface where the cue ball strikes it."""
    return vec(obj) + _object_direction(obj, pocket) * radius


def cut_angle(cue, ghost, obj, pocket) -> CutAngle:
    c, g, o, p = vec(cue), vec(ghost), vec(obj), vec(pocket)
    approach = g - c
    travel = p - o
    if float(np.linalg.norm(approach)) < EPSILON:
        raise DegenerateGeometry("cue ball already sits on the ghost-ball position")
    if float(np.linalg.norm(travel)) < EPSILON:
        raise DegenerateGeometry("object ball coincides with the pocket point")
    raw = angle_between(approach, travel)
    return CutAngle(
        degrees=min(raw, 90.0),
        raw_degrees=raw,
        makeable=raw <= UNMAKEABLE_CUT_ANGLE,
    )


def require_makeable(cut: CutAngle) -> CutAngle:
    if not cut.makeable:
        raise UnmakeableAngle(
            f"cut angle {cut.raw_degrees:.1f}° exceeds the {UNMAKEABLE_CUT_ANGLE:.0f}° limit",
            cut.raw_degrees,
        )
    return cut
