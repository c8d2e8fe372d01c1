"""
Shot classifier: verdict bucket + make-probability estimate.

The probability is monotonic by construction: flat up to ANGLE_FREE_ZONE,
then proportional to cos(cut); flat up to DISTANCE_THRESHOLD for each leg,
then inversely proportional to the extra distance.
"""

import enum
import math
from dataclasses import dataclass

from aiming import CutAngle
from table import TABLE_LENGTH

# ── Runtime-editable thresholds ──────────────────────────────────────────────
STRAIGHT_MAX_ANGLE: float = 15.0
CUTTABLE_MAX_ANGLE: float = 45.0
DIFFICULT_MAX_ANGLE: float = 70.0
ANGLE_FREE_ZONE: float = 30.0
DISTANCE_THRESHOLD: float = 0.25 * TABLE_LENGTH
BASE_MAKE_PROBABILITY: float = 0.95
KICK_PENALTY: float = 0.3


class Verdict(enum.Enum):
    STRAIGHTFORWARD = "Straightforward"
    CUTTABLE = "Cuttable"
    DIFFICULT = "Difficult"
    NEAR_IMPOSSIBLE = "NearImpossible"
    REQUIRES_KICK = "RequiresKick"


@dataclass(frozen=True)
class Classification:
    verdict: Verdict
    probability: float


def angle_factor(degrees: float) -> float:
    if degrees <= ANGLE_FREE_ZONE:
        return 1.0
    if degrees >= 90.0:
        return 0.0
    return math.cos(math.radians(degrees)) / math.cos(math.radians(ANGLE_FREE_ZONE))


def distance_factor(d: float) -> float:
    if d <= DISTANCE_THRESHOLD:
        return 1.0
    return 1.0 / (1.0 + (d - DISTANCE_THRESHOLD) / TABLE_LENGTH)


def _clamp01(p: float) -> float:
    return max(0.0, min(1.0, p))


def classify(cut: CutAngle | None, blocked: bool, d_cue_ghost: float,
             d_object_pocket: float, kick=None,
             object_path_blocked: bool = False) -> Classification:
    """
    Args:
        cut:     CutAngle of the direct shot (None when it could not be computed).
        blocked: cue-ball → ghost-ball path is obstructed.
        kick:    KickSolution when the direct path is blocked and a kick exists.
    """
    if object_path_blocked:
        return Classification(Verdict.NEAR_IMPOSSIBLE, 0.0)

    if blocked:
        if kick is None:
            return Classification(Verdict.NEAR_IMPOSSIBLE, 0.0)
        p = (BASE_MAKE_PROBABILITY * KICK_PENALTY
             * distance_factor(kick.path_length) * distance_factor(d_object_pocket))
        return Classification(Verdict.REQUIRES_KICK, _clamp01(p))

    if cut is None or not cut.makeable:
        return Classification(Verdict.NEAR_IMPOSSIBLE, 0.0)

    p = (BASE_MAKE_PROBABILITY * angle_factor(cut.degrees)
         * distance_factor(d_cue_ghost) * distance_factor(d_object_pocket))

    if cut.degrees < STRAIGHT_MAX_ANGLE:
        verdict = Verdict.STRAIGHTFORWARD
    elif cut.degrees < CUTTABLE_MAX_ANGLE:
        verdict = Verdict.CUTTABLE
    elif cut.degrees < DIFFICULT_MAX_ANGLE:
        verdict = Verdict.DIFFICULT
    else:
        verdict = Verdict.NEAR_IMPOSSIBLE
    return Classification(verdict, _clamp01(p))


_INSTRUCTIONS = {
    Verdict.STRAIGHTFORWARD: "Straight in: aim the centre of the cue ball at the ghost ball.",
    Verdict.CUTTABLE: "Cut shot: aim at the ghost ball, {thin}.",
    Verdict.DIFFICULT: "Thin cut: aim at the ghost ball and stroke smoothly, {thin}.",
    Verdict.NEAR_IMPOSSIBLE: "Near impossible: consider a safety or another pocket.",
    Verdict.REQUIRES_KICK: "Direct path blocked: kick off the {rail} rail.",
}


def describe(verdict: Verdict, cut: CutAngle | None = None, kick=None) -> str:
    """One-line shot instruction shown next to the verdict."""
    text = _INSTRUCTIONS[verdict]
    if "{thin}" in text:
        deg = cut.degrees if cut is not None else 0.0
        # contact fraction: 1.0 full ball, 0.5 half ball, 0 edge
        overlap = 1.0 - math.sin(math.radians(deg))
        text = text.format(thin=f"about {overlap:.0%} ball overlap ({deg:.1f}°)")
    elif "{rail}" in text:
        text = text.format(rail=kick.rail if kick is not None else "nearest")
    return text
