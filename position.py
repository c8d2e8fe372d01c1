"""
Spin and power state, plus a kinematic estimate of where the balls stop.

Not a simulation: energy at contact is split by the cut angle
(object ball cos²θ, cue ball sin²θ), follow/draw bends the cue ball's
tangent line, and rail bounces are folded back by mirror reflection.
"""

import math
from dataclasses import dataclass

import numpy as np

from geometry import EPSILON, fold_into_range, normalize, vec, distance
from table import BALL_RADIUS, TABLE_LENGTH, TABLE_WIDTH

# ── Runtime-editable constants ───────────────────────────────────────────────
MAX_TRAVEL: float = 3.0 * TABLE_LENGTH   # rolling distance at 100 % power
SPIN_TRANSFER: float = 0.6               # share of approach speed kept by full follow/draw
DEFAULT_POWER: float = 50.0


@dataclass(frozen=True)
class English:
    """Cue-tip offset as a fraction of the radius. x: right +, y: top (follow) +."""
    x: float = 0.0
    y: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, "x", max(-1.0, min(1.0, float(self.x))))
        object.__setattr__(self, "y", max(-1.0, min(1.0, float(self.y))))

    @property
    def is_center(self) -> bool:
        return abs(self.x) < 1e-9 and abs(self.y) < 1e-9


def validate_power(percent: float) -> float:
    p = float(percent)
    if not math.isfinite(p) or p < 0.0 or p > 100.0:
        raise ValueError(f"power must be within 0-100 %, got {percent!r}")
    return p


def spin_label(english: English) -> str:
    if english.is_center:
        return "Center"
    vertical = ""
    if english.y > 1e-9:
        vertical = "Top"
    elif english.y < -1e-9:
        vertical = "Bottom"
    side = ""
    if english.x > 1e-9:
        side = "right"
    elif english.x < -1e-9:
        side = "left"

    if vertical and side:
        return f"{vertical} {side}"
    if vertical == "Top":
        return "Top (follow)"
    if vertical == "Bottom":
        return "Bottom (draw)"
    return f"{side.capitalize()} english"


def english_instruction(english: English) -> str:
    parts = []
    if english.y > 1e-9:
        parts.append("follow: the cue ball rolls on through the contact point")
    elif english.y < -1e-9:
        parts.append("draw: the cue ball pulls back after contact")
    else:
        parts.append("stun: the cue ball leaves along the tangent line")
    if english.x > 1e-9:
        parts.append("right english widens the angle off a rail")
    elif english.x < -1e-9:
        parts.append("left english shortens the angle off a rail")
    text = "; ".join(parts)
    return text[0].upper() + text[1:] + "."


def recommended_power(d_cue_ghost: float, d_object_pocket: float) -> int:
    """Percent power that rolls the object ball to the pocket with some margin."""
    total = d_cue_ghost + d_object_pocket
    span = TABLE_LENGTH + TABLE_WIDTH
    return int(round(max(10.0, min(100.0, 20.0 + 80.0 * total / span))))


@dataclass
class RestEstimate:
    cue: np.ndarray
    object: np.ndarray
    cue_travel: float
    object_pocketed: bool

    def to_dict(self) -> dict:
        return {
            "cue": [round(float(v), 4) for v in self.cue],
            "object": [round(float(v), 4) for v in self.object],
            "cue_travel": round(self.cue_travel, 4),
            "object_pocketed": self.object_pocketed,
        }


def _fold(p, radius: float) -> np.ndarray:
    return np.array([
        fold_into_range(float(p[0]), radius, TABLE_LENGTH - radius),
        fold_into_range(float(p[1]), radius, TABLE_WIDTH - radius),
    ])


def estimate_rest_positions(cue, ghost, obj, pocket, english: English,
                            power: float, radius: float = BALL_RADIUS,
                            makeable: bool = True) -> RestEstimate:
    c, g, o, p = vec(cue), vec(ghost), vec(obj), vec(pocket)
    approach = normalize(g - c)
    line = normalize(p - o)
    cos_t = float(np.clip(np.dot(approach, line), -1.0, 1.0))

    travel = (validate_power(power) / 100.0) ** 2 * MAX_TRAVEL
    remaining = max(0.0, travel - distance(c, g))

    # stun: cue ball keeps only the component of its velocity off the object line
    tangent = approach - cos_t * line
    direction = tangent + line * (english.y * SPIN_TRANSFER * cos_t)
    speed_sq = float(np.dot(direction, direction))
    if speed_sq < EPSILON:
        cue_rest = g.copy()
        cue_travel = 0.0
    else:
        cue_travel = remaining * min(1.0, speed_sq)
        cue_rest = _fold(g + normalize(direction) * cue_travel, radius)

    object_pocketed = makeable and remaining * cos_t ** 2 >= distance(o, p)
    if object_pocketed:
        obj_rest = p.copy()
    else:
        obj_rest = _fold(o + line * remaining * max(0.0, cos_t) ** 2, radius)

    return RestEstimate(cue=cue_rest, object=obj_rest, cue_travel=cue_travel,
                        object_pocketed=object_pocketed)
