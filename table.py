"""
Table model: playing surface, balls, the six pockets and the 8-ball rack.

Coordinates are normalized table units, x in [0, 100] (long axis) and
y in [0, 50], with y = 0 on the top rail (SVG orientation).
"""

import math
import random
from dataclasses import dataclass, field

import numpy as np

from errors import NoSuchBall, NoSuchPocket, OutOfBounds

# ──────────────────────────────────────────────
# Constants (table units)
# ──────────────────────────────────────────────
TABLE_LENGTH: float = 100.0
TABLE_WIDTH: float = 50.0
BALL_RADIUS: float = 1.125          # 2.25" ball on a 100" surface

CORNER_CAPTURE_RADIUS: float = 2.5
SIDE_CAPTURE_RADIUS: float = 2.25

FOOT_SPOT = (75.0, 25.0)
HEAD_SPOT = (25.0, 25.0)
RACK_GAP: float = 0.01              # clearance between racked balls

CUE = "cue"
OBJECT_BALL_IDS = tuple(range(1, 16))
SOLIDS = tuple(range(1, 8))
STRIPES = tuple(range(9, 16))


def normalize_ball_id(ball_id):
    """Map "cue"/0/"0" to "cue" and "7"/7 to 7. Raises NoSuchBall otherwise."""
    if isinstance(ball_id, str):
        key = ball_id.strip().lower()
        if key in ("cue", "0", "white"):
            return CUE
        if key.isdigit():
            ball_id = int(key)
        else:
            raise NoSuchBall(f"unknown ball id {ball_id!r}")
    if isinstance(ball_id, bool):
        raise NoSuchBall(f"unknown ball id {ball_id!r}")
    if isinstance(ball_id, (int, np.integer)):
        if ball_id == 0:
            return CUE
        if 1 <= ball_id <= 15:
            return int(ball_id)
    raise NoSuchBall(f"unknown ball id {ball_id!r}")


@dataclass
class Ball:
    """A ball resting on the table."""
    ball_id: object
    position: np.ndarray = field(default_factory=lambda: np.array([0.0, 0.0]))
    radius: float = BALL_RADIUS

    def __post_init__(self):
        self.position = np.array(self.position, dtype=float)

    @property
    def is_cue(self) -> bool:
        return self.ball_id == CUE

    @property
    def x(self) -> float:
        return float(self.position[0])

    @property
    def y(self) -> float:
        return float(self.position[1])


@dataclass(frozen=True)
class Pocket:
    pocket_id: str
    name: str
    x: float
    y: float
    capture_radius: float

    @property
    def position(self) -> np.ndarray:
        return np.array([self.x, self.y])


POCKETS = {
    "TL": Pocket("TL", "top-left",     0.0,   0.0,  CORNER_CAPTURE_RADIUS),
    "TR": Pocket("TR", "top-right",    100.0, 0.0,  CORNER_CAPTURE_RADIUS),
    "ML": Pocket("ML", "middle-left",  50.0,  0.0,  SIDE_CAPTURE_RADIUS),
    "MR": Pocket("MR", "middle-right", 50.0,  50.0, SIDE_CAPTURE_RADIUS),
    "BL": Pocket("BL", "bottom-left",  0.0,   50.0, CORNER_CAPTURE_RADIUS),
    "BR": Pocket("BR", "bottom-right", 100.0, 50.0, CORNER_CAPTURE_RADIUS),
}

# data-pocket names from the browser diagram markup
POCKET_ALIASES = {
    "top-left": "TL", "corner-tl": "TL",
    "top-right": "TR", "corner-tr": "TR",
    "middle-left": "ML", "side-top": "ML",
    "middle-right": "MR", "side-bottom": "MR",
    "bottom-left": "BL", "corner-bl": "BL",
    "bottom-right": "BR", "corner-br": "BR",
}


def resolve_pocket(pocket_id) -> Pocket:
    if isinstance(pocket_id, Pocket):
        return pocket_id
    if not isinstance(pocket_id, str):
        raise NoSuchPocket(f"unknown pocket {pocket_id!r}")
    key = pocket_id.strip()
    if key.upper() in POCKETS:
        return POCKETS[key.upper()]
    alias = POCKET_ALIASES.get(key.lower())
    if alias is None:
        raise NoSuchPocket(f"unknown pocket {pocket_id!r}")
    return POCKETS[alias]


class Table:
    """Set of balls keyed by id. Pockets are the module-level POCKETS."""

    def __init__(self, length: float = TABLE_LENGTH, width: float = TABLE_WIDTH,
                 ball_radius: float = BALL_RADIUS):
        self.length = length
        self.width = width
        self.ball_radius = ball_radius
        self.balls: dict = {}

    # ── Bounds ────────────────────────────────────────────────────────────

    def in_bounds(self, x: float, y: float) -> bool:
        r = self.ball_radius
        return r <= x <= self.length - r and r <= y <= self.width - r

    # ── Ball management ───────────────────────────────────────────────────

    def place_ball(self, ball_id, x: float, y: float) -> Ball:
        """Set or move a ball. Raises OutOfBounds / NoSuchBall."""
        bid = normalize_ball_id(ball_id)
        x, y = float(x), float(y)
        if not (math.isfinite(x) and math.isfinite(y)) or not self.in_bounds(x, y):
            raise OutOfBounds(
                f"ball {bid} at ({x:.3f}, {y:.3f}) is outside the playing surface")
        ball = self.balls.get(bid)
        if ball is None:
            ball = Ball(bid, position=[x, y], radius=self.ball_radius)
            self.balls[bid] = ball
        else:
            ball.position = np.array([x, y])
        return ball

    def remove_ball(self, ball_id) -> Ball:
        bid = normalize_ball_id(ball_id)
        try:
            return self.balls.pop(bid)
        except KeyError:
            raise NoSuchBall(f"ball {bid} is not on the table") from None

    def clear(self) -> None:
        self.balls.clear()

    def ball(self, ball_id) -> Ball:
        bid = normalize_ball_id(ball_id)
        ball = self.balls.get(bid)
        if ball is None:
            raise NoSuchBall(f"ball {bid} is not on the table")
        return ball

    def has_ball(self, ball_id) -> bool:
        try:
            return normalize_ball_id(ball_id) in self.balls
        except NoSuchBall:
            return False

    @property
    def cue_ball(self) -> Ball | None:
        return self.balls.get(CUE)

    def others(self, *exclude) -> list:
        skip = {normalize_ball_id(b) for b in exclude}
        return [b for bid, b in self.balls.items() if bid not in skip]

    def pocket(self, pocket_id) -> Pocket:
        return resolve_pocket(pocket_id)

    # ── Snapshots ─────────────────────────────────────────────────────────

    def snapshot(self) -> dict:
        return {str(bid): {"x": round(b.x, 6), "y": round(b.y, 6)}
                for bid, b in self.balls.items()}

    def copy(self) -> "Table":
        t = Table(self.length, self.width, self.ball_radius)
        for bid, b in self.balls.items():
            t.balls[bid] = Ball(bid, position=b.position.copy(), radius=b.radius)
        return t


# ──────────────────────────────────────────────
# 8-ball rack
# ──────────────────────────────────────────────

def rack_positions(apex=FOOT_SPOT, radius: float = BALL_RADIUS) -> list:
    """15 triangle slots, row by row from the apex, each row top to bottom."""
    dx = radius * math.sqrt(3.0) + RACK_GAP
    dy = radius + RACK_GAP / 2.0
    slots = []
    for row in range(5):
        for k in range(row + 1):
            slots.append((apex[0] + row * dx, apex[1] + (2 * k - row) * dy))
    return slots


def rack_eight_ball(table: Table, seed: int | None = None) -> dict:
    """
    Clear the table and rack 15 balls with the cue ball on the head spot.

    1-ball on the apex, 8-ball in the middle of the third row, one solid and
    one stripe in the back corners; the rest shuffled by random.Random(seed).

    Returns:
        {ball_id: (x, y)} of what was placed.
    """
    rng = random.Random(seed)
    slots = rack_positions(radius=table.ball_radius)
    apex_slot, eight_slot = 0, 4
    back_left, back_right = 10, 14

    solid_corner = rng.choice([s for s in SOLIDS if s != 1])
    stripe_corner = rng.choice(STRIPES)
    corners = [solid_corner, stripe_corner]
    rng.shuffle(corners)

    layout = {apex_slot: 1, eight_slot: 8, back_left: corners[0], back_right: corners[1]}
    rest = [b for b in OBJECT_BALL_IDS if b not in layout.values()]
    rng.shuffle(rest)
    for slot in range(len(slots)):
        if slot not in layout:
            layout[slot] = rest.pop()

    table.clear()
    placed = {}
    for slot, bid in sorted(layout.items()):
        x, y = slots[slot]
        table.place_ball(bid, x, y)
        placed[bid] = (x, y)
    table.place_ball(CUE, *HEAD_SPOT)
    placed[CUE] = HEAD_SPOT
    return placed
