"""
Path / obstruction checker.

A ball blocks segment A-B when its centre is closer than 2r to the segment
and its perpendicular foot falls inside the segment, not merely on the
infinite line.
"""

from dataclasses import dataclass, field

import numpy as np

from geometry import EPSILON, points_equal, project_onto_segment, vec
from table import normalize_ball_id


@dataclass
class PathCheck:
    blocked: bool
    blocker: object = None                       # nearest blocking ball id
    blockers: list = field(default_factory=list)  # all blocking ids, nearest first

    def to_dict(self) -> dict:
        return {"blocked": self.blocked,
                "blocker": self.blocker,
                "blockers": list(self.blockers)}


def check_path(start, end, balls, radius: float, exclude=(),
               end_is_ball: bool = True) -> PathCheck:
    """
    Args:
        start, end:  segment endpoints.
        balls:       iterable of table.Ball.
        radius:      ball radius; the corridor half-width is 2 * radius.
        exclude:     ball ids that never count (e.g. the shooting ball).
        end_is_ball: ``end`` is the centre of the ball being aimed at, so a
                     ball there is the target rather than an obstruction.
                     False when ``end`` is an empty spot (ghost ball, rail
                     contact): a ball parked on it then blocks.

    A segment shorter than EPSILON has no corridor and is never blocked.
    """
    a, b = vec(start), vec(end)
    skip = {normalize_ball_id(x) for x in exclude}
    length = float(np.linalg.norm(b - a))
    if length < EPSILON:
        return PathCheck(blocked=False)
    corridor = 2.0 * radius

    hits = []
    for ball in balls:
        if ball.ball_id in skip:
            continue
        if points_equal(ball.position, a):
            continue
        if end_is_ball and points_equal(ball.position, b):
            continue
        t, foot = project_onto_segment(ball.position, a, b)
        if t < 0.0 or t > 1.0:
            continue
        if float(np.linalg.norm(ball.position - foot)) < corridor:
            hits.append((t * length, ball.ball_id))

    if not hits:
        return PathCheck(blocked=False)
    # stable on ties: str(id) keeps "cue" and ints comparable
    hits.sort(key=lambda h: (h[0], str(h[1])))
    ids = [bid for _, bid in hits]
    return PathCheck(blocked=True, blocker=ids[0], blockers=ids)
