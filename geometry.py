"""
Shot Geometry Engine — Layer 1 primitives
2D vector helpers over numpy float64 arrays (table units, y down).
"""

import math
import numpy as np

from errors import DegenerateGeometry

# ──────────────────────────────────────────────
# Constants
# ──────────────────────────────────────────────
EPSILON: float = 1e-6  # two positions closer than this are the same point

X_AXIS = 0
Y_AXIS = 1


def vec(p) -> np.ndarray:
    """Coerce (x, y) / list / ndarray into a float64 2-vector."""
    arr = np.array(p, dtype=float)
    if arr.shape != (2,):
        raise ValueError(f"expected a 2D point, got shape {arr.shape}")
    return arr


def distance(a, b) -> float:
    return float(np.linalg.norm(vec(b) - vec(a)))


def normalize(v) -> np.ndarray:
    """Unit vector along v. Raises DegenerateGeometry for (near) zero length."""
    v = vec(v)
    n = float(np.linalg.norm(v))
    if n < EPSILON:
        raise DegenerateGeometry(f"cannot normalize zero-length vector {v.tolist()}")
    return v / n


def rotate(v, degrees: float) -> np.ndarray:
    """Rotate v counter-clockwise (in x-right / y-up terms) by degrees."""
    v = vec(v)
    th = math.radians(degrees)
    cs, sn = math.cos(th), math.sin(th)
    return np.array([v[0] * cs - v[1] * sn, v[0] * sn + v[1] * cs])


def points_equal(a, b, eps: float = EPSILON) -> bool:
    return distance(a, b) < eps


def point_on_circle(p, centre, radius: float, eps: float = EPSILON) -> bool:
    return abs(distance(p, centre) - radius) < eps


def angle_between(u, v) -> float:
    """Unsigned angle between two vectors in degrees, range [0, 180]."""
    u_hat = normalize(u)
    v_hat = normalize(v)
    cos_a = float(np.clip(np.dot(u_hat, v_hat), -1.0, 1.0))
    return math.degrees(math.acos(cos_a))


def project_onto_segment(p, a, b) -> tuple:
    """
    Project p onto the infinite line through a→b.

    Returns:
        (t, closest): t is the line parameter (0 at a, 1 at b, unclamped),
        closest is the foot of the perpendicular on the infinite line.
    """
    p, a, b = vec(p), vec(a), vec(b)
    ab = b - a
    len_sq = float(np.dot(ab, ab))
    if len_sq < EPSILON ** 2:
        raise DegenerateGeometry("segment endpoints coincide")
    t = float(np.dot(p - a, ab)) / len_sq
    return t, a + t * ab


def reflect_across_line(p, axis: int, value: float) -> np.ndarray:
    """Mirror p across the axis-aligned line {axis coordinate == value}."""
    out = vec(p).copy()
    out[axis] = 2.0 * value - out[axis]
    return out


def line_intersection_with_axis(a, b, axis: int, value: float) -> np.ndarray:
    """Point where the infinite line a→b crosses {axis coordinate == value}."""
    a, b = vec(a), vec(b)
    da = b[axis] - a[axis]
    if abs(da) < EPSILON:
        raise DegenerateGeometry("line is parallel to the rail")
    t = (value - a[axis]) / da
    return a + t * (b - a)


def fold_into_range(value: float, low: float, high: float) -> float:
    """Reflect value back into [low, high] as a ball bouncing between two rails."""
    span = high - low
    if span <= 0:
        return low
    u = (value - low) % (2.0 * span)
    if u > span:
        u = 2.0 * span - u
    return low + u
