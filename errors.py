"""
Shot geometry error kinds.

Every error is recoverable at the call boundary: controller.execute_command()
and the WebSocket server turn them into a status message instead of crashing.
"""


class ShotGeometryError(Exception):
    """Base class. ``kind`` is the stable identifier sent to UI clients."""
    kind = "ShotGeometryError"


class DegenerateGeometry(ShotGeometryError):
    """Zero-length direction vector (e.g. object ball on the pocket point)."""
    kind = "DegenerateGeometry"


class OutOfBounds(ShotGeometryError):
    kind = "OutOfBounds"


class NoSuchBall(ShotGeometryError):
    kind = "NoSuchBall"


class NoSuchPocket(ShotGeometryError):
    kind = "NoSuchPocket"


class NoValidKick(ShotGeometryError):
    """Kick solver exhausted every rail it was asked to try."""
    kind = "NoValidKick"

    def __init__(self, message: str, reasons: dict | None = None):
        super().__init__(message)
        self.reasons = reasons or {}


class UnmakeableAngle(ShotGeometryError):
    kind = "UnmakeableAngle"

    def __init__(self, message: str, raw_degrees: float):
        super().__init__(message)
        self.raw_degrees = raw_degrees
