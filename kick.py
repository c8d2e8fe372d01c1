"""
One-rail kick solver (mirror method).

The target is reflected across the line the cue-ball centre follows when it
touches a cushion (r inside the cushion nose). The straight line from the cue
ball to that virtual target crosses the rail line at the aim point.

        cue ──────► aim ◄── rail line (y = r)
                      ╲
                       ╲──► target        virtual target = mirror(target)
"""

from dataclasses import dataclass

import numpy as np

from errors import DegenerateGeometry, NoValidKick
from geometry import (
    EPSILON, X_AXIS, Y_AXIS, distance, line_intersection_with_axis,
    reflect_across_line, vec,
)
from obstruction import check_path
from table import TABLE_LENGTH, TABLE_WIDTH

# ── Runtime-editable constants ───────────────────────────────────────────────
KICK_ENGLISH_THROW: float = 2.0   # rail-contact shift (table units) at full side english
CORNER_MOUTH: float = 3.5         # no cushion this close to a corner, along the rail
SIDE_MOUTH: float = 2.5           # half-width of the side pocket opening

RAIL_ORDER = ("top", "bottom", "left", "right")


@dataclass(frozen=True)
class Rail:
    name: str
    axis: int        # coordinate that is constant along the cushion
    cushion: float   # cushion nose position on that axis
    inward: float    # +1 when the table interior lies at larger coordinates

    @property
    def along(self) -> int:
        return Y_AXIS if self.axis == X_AXIS else X_AXIS

    def contact_line(self, radius: float) -> float:
        return self.cushion + self.inward * radius

    def cushion_segments(self, length: float = TABLE_LENGTH,
                         width: float = TABLE_WIDTH) -> list:
        """Playable stretches of cushion, as (lo, hi) along the rail."""
        if self.axis == Y_AXIS:   # long rail, split by the side pocket
            mid = length / 2.0
            return [(CORNER_MOUTH, mid - SIDE_MOUTH),
                    (mid + SIDE_MOUTH, length - CORNER_MOUTH)]
        return [(CORNER_MOUTH, width - CORNER_MOUTH)]


def rails(length: float = TABLE_LENGTH, width: float = TABLE_WIDTH) -> dict:
    return {
        "top":    Rail("top",    Y_AXIS, 0.0,    +1.0),
        "bottom": Rail("bottom", Y_AXIS, width,  -1.0),
        "left":   Rail("left",   X_AXIS, 0.0,    +1.0),
        "right":  Rail("right",  X_AXIS, length, -1.0),
    }


@dataclass
class KickSolution:
    rail: str
    aim_point: np.ndarray       # mirror-method crossing, no english
    contact_point: np.ndarray   # cue-ball centre at the cushion, english applied
    rail_point: np.ndarray      # contact_point projected onto the cushion nose
    virtual_target: np.ndarray
    english_offset: float
    path_length: float

    def to_dict(self) -> dict:
        return {
            "rail": self.rail,
            "aim_point": [round(float(v), 6) for v in self.aim_point],
            "contact_point": [round(float(v), 6) for v in self.contact_point],
            "rail_point": [round(float(v), 6) for v in self.rail_point],
            "virtual_target": [round(float(v), 6) for v in self.virtual_target],
            "english_offset": round(self.english_offset, 6),
            "path_length": round(self.path_length, 6),
        }


def _segment_for(value: float, segments: list):
    for lo, hi in segments:
        if lo <= value <= hi:
            return lo, hi
    return None


def solve_kick(cue, target, rail, balls, radius: float, english_x: float = 0.0,
               exclude=(), length: float = TABLE_LENGTH,
               width: float = TABLE_WIDTH) -> KickSolution:
    """
    Kick off one rail.

    Args:
        rail:      rail name ("top", "bottom", "left", "right") or a Rail.
        english_x: side english in [-1, 1]; shifts the rail contact along the
                   cushion, never past the end of the cushion segment.
        exclude:   ball ids ignored on both legs (the cue ball). The ball at
                   ``target`` only counts on the cue→rail leg.

    Raises:
        NoValidKick: aim point off the cushion, a leg is blocked, or the
                     cue ball lies on the rail line.
    """
    if isinstance(rail, str):
        try:
            rail = rails(length, width)[rail]
        except KeyError:
            raise NoValidKick(f"unknown rail {rail!r}") from None

    c, t = vec(cue), vec(target)
    line = rail.contact_line(radius)
    if (c[rail.axis] - line) * rail.inward < EPSILON:
        raise NoValidKick(f"{rail.name}: cue ball is on the rail line")

    virtual = reflect_across_line(t, rail.axis, line)
    try:
        aim = line_intersection_with_axis(c, virtual, rail.axis, line)
    except DegenerateGeometry as exc:
        raise NoValidKick(f"{rail.name}: {exc}") from exc

    segments = rail.cushion_segments(length, width)
    s = float(aim[rail.along])
    seg = _segment_for(s, segments)
    if seg is None:
        raise NoValidKick(f"{rail.name}: aim point {s:.2f} falls on a pocket mouth")

    english_x = max(-1.0, min(1.0, float(english_x)))
    heading = 1.0 if aim[rail.along] >= c[rail.along] else -1.0
    shifted = min(seg[1], max(seg[0], s + heading * english_x * KICK_ENGLISH_THROW))
    contact = aim.copy()
    contact[rail.along] = shifted

    # the rail contact is an empty spot; the target is the object-ball centre
    legs = ((c, contact, "cue→rail", False), (contact, t, "rail→target", True))
    for leg_start, leg_end, leg, end_is_ball in legs:
        try:
            check = check_path(leg_start, leg_end, balls, radius, exclude=exclude,
                               end_is_ball=end_is_ball)
        except DegenerateGeometry as exc:
            raise NoValidKick(f"{rail.name}: {leg} leg {exc}") from exc
        if check.blocked:
            raise NoValidKick(f"{rail.name}: {leg} leg blocked by ball {check.blocker}")

    rail_point = contact.copy()
    rail_point[rail.axis] = rail.cushion
    return KickSolution(
        rail=rail.name,
        aim_point=aim,
        contact_point=contact,
        rail_point=rail_point,
        virtual_target=virtual,
        english_offset=shifted - s,
        path_length=distance(c, contact) + distance(contact, t),
    )


def find_kick(cue, target, balls, radius: float, english_x: float = 0.0,
              exclude=(), length: float = TABLE_LENGTH,
              width: float = TABLE_WIDTH) -> KickSolution:
    """Shortest valid one-rail kick over all four rails, independent of search order."""
    table_rails = rails(length, width)
    found = []
    reasons = {}
    for order, name in enumerate(RAIL_ORDER):
        try:
            sol = solve_kick(cue, target, table_rails[name], balls, radius,
                             english_x=english_x, exclude=exclude,
                             length=length, width=width)
        except NoValidKick as exc:
            reasons[name] = str(exc)
            continue
        found.append((sol.path_length, order, sol))
    if not found:
        raise NoValidKick("no rail offers an unobstructed kick", reasons)
    found.sort(key=lambda f: (f[0], f[1]))
    return found[0][2]
