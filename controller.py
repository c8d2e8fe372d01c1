"""
ShotController — Layer 2 (engine facade)

Owns the table, the shot selection (object ball + pocket) and the
spin/power settings. Holds no derived state: every get_shot_result() call
recomputes the full shot from the current table.

Layer 3 (server.py, screenshot.py) calls:
  ctrl.place_ball(ball_id, x, y)     — set or move a ball
  ctrl.select_object_ball(ball_id)   — choose the ball to pot
  ctrl.select_pocket(pocket_id)      — choose the target pocket
  ctrl.set_english(x, y) / ctrl.set_power(percent)
  ctrl.get_shot_result()             — ShotResult or None
  ctrl.execute_command(text)         — JSON command, errors become status_msg
"""

import json
import logging
from dataclasses import dataclass, field

import numpy as np

import aiming as _aiming
import classifier as _classifier
import kick as _kick
import position as _position
from aiming import CutAngle, contact_point, cut_angle, ghost_ball
from classifier import Verdict, classify, describe
from errors import NoValidKick, ShotGeometryError
from geometry import distance
from kick import KickSolution, find_kick
from obstruction import PathCheck, check_path
from position import (
    English, RestEstimate, english_instruction, estimate_rest_positions,
    recommended_power, spin_label, validate_power,
)
from table import CUE, Table, rack_eight_ball, resolve_pocket

logger = logging.getLogger(__name__)

DEFAULT_STATUS_MSG = "Place balls and select a pocket."

# ── Runtime-tunable parameters: (module, attr, label, min, max) ──────────────
TUNABLE_PARAMS = [
    (_aiming,     "UNMAKEABLE_CUT_ANGLE",  "Unmakeable cut (°)", 60.0, 89.9),
    (_classifier, "STRAIGHT_MAX_ANGLE",    "Straight max (°)",    1.0, 45.0),
    (_classifier, "CUTTABLE_MAX_ANGLE",    "Cuttable max (°)",   10.0, 70.0),
    (_classifier, "DIFFICULT_MAX_ANGLE",   "Difficult max (°)",  30.0, 85.0),
    (_classifier, "DISTANCE_THRESHOLD",    "Distance threshold",  5.0, 100.0),
    (_classifier, "BASE_MAKE_PROBABILITY", "Base make prob.",     0.1, 1.0),
    (_classifier, "KICK_PENALTY",          "Kick penalty",        0.0, 1.0),
    (_kick,       "KICK_ENGLISH_THROW",    "Kick english throw",  0.0, 10.0),
    (_position,   "SPIN_TRANSFER",         "Follow/draw transfer", 0.0, 1.0),
    (_position,   "MAX_TRAVEL",            "Max roll distance",  50.0, 600.0),
]

PARAM_DEFAULTS = {(mod.__name__, attr): getattr(mod, attr) for mod, attr, *_ in TUNABLE_PARAMS}


def _round_pt(p) -> list:
    return [round(float(p[0]), 6), round(float(p[1]), 6)]


@dataclass
class ShotResult:
    cue: np.ndarray
    object_ball: object
    object_position: np.ndarray
    pocket: str
    pocket_position: np.ndarray
    ghost_ball: np.ndarray
    contact_point: np.ndarray
    cut: CutAngle
    cue_path: PathCheck
    object_path: PathCheck
    kick: KickSolution | None
    verdict: Verdict
    make_probability: float
    instructions: str
    english: English
    power: float
    recommended_power: int
    rest: RestEstimate | None = None
    kick_failure: dict = field(default_factory=dict)

    @property
    def cut_angle(self) -> float | None:
        """Cut angle in degrees, or None when the shot is physically unmakeable."""
        return self.cut.degrees if self.cut.makeable else None

    @property
    def unmakeable(self) -> bool:
        return not self.cut.makeable

    @property
    def direct(self) -> bool:
        return not self.cue_path.blocked and not self.object_path.blocked

    def to_dict(self) -> dict:
        return {
            "cue": _round_pt(self.cue),
            "object_ball": self.object_ball,
            "object_position": _round_pt(self.object_position),
            "pocket": self.pocket,
            "pocket_position": _round_pt(self.pocket_position),
            "ghost_ball": _round_pt(self.ghost_ball),
            "contact_point": _round_pt(self.contact_point),
            "cut_angle": None if self.cut_angle is None else round(self.cut_angle, 3),
            "raw_cut_angle": round(self.cut.raw_degrees, 3),
            "unmakeable": self.unmakeable,
            "cue_path": self.cue_path.to_dict(),
            "object_path": self.object_path.to_dict(),
            "shot_type": "Direct" if self.kick is None else "Kick",
            "kick": None if self.kick is None else self.kick.to_dict(),
            "kick_failure": dict(self.kick_failure),
            "verdict": self.verdict.value,
            "make_probability": round(self.make_probability, 4),
            "instructions": self.instructions,
            "spin": spin_label(self.english),
            "english": [self.english.x, self.english.y],
            "english_instruction": english_instruction(self.english),
            "power": self.power,
            "recommended_power": self.recommended_power,
            "rest": None if self.rest is None else self.rest.to_dict(),
        }


class ShotController:
    """Layer 2: table state + shot selection, recomputed on read."""

    BREAK_POWER = 70.0
    BREAK_ENGLISH = (0.0, 1.0)   # follow

    def __init__(self, table: Table | None = None):
        self.table = table or Table()
        self.object_ball = None
        self.pocket = None
        self.english = English()
        self.power = _position.DEFAULT_POWER
        self.status_msg = DEFAULT_STATUS_MSG

    # ──────────────────────────────────────────────────────────────────────
    # Ball management
    # ──────────────────────────────────────────────────────────────────────

    def place_ball(self, ball_id, x: float, y: float) -> None:
        ball = self.table.place_ball(ball_id, x, y)
        self.status_msg = f"Ball {ball.ball_id} placed at ({ball.x:.1f}, {ball.y:.1f})."

    def remove_ball(self, ball_id) -> None:
        ball = self.table.remove_ball(ball_id)
        if ball.ball_id == self.object_ball:
            self.object_ball = None
        self.status_msg = f"Ball {ball.ball_id} removed."

    def clear(self) -> None:
        self.table.clear()
        self.object_ball = None
        self.pocket = None
        self.status_msg = DEFAULT_STATUS_MSG

    def rack(self, seed: int | None = None) -> None:
        """8-ball rack with the cue ball in the kitchen, aimed at the head ball."""
        rack_eight_ball(self.table, seed=seed)
        self.object_ball = 1
        self.pocket = None
        self.english = English(*self.BREAK_ENGLISH)
        self.power = self.BREAK_POWER
        self.status_msg = "Racked for the break: follow, power 70%."

    # ──────────────────────────────────────────────────────────────────────
    # Selection / settings
    # ──────────────────────────────────────────────────────────────────────

    def select_object_ball(self, ball_id) -> None:
        ball = self.table.ball(ball_id)   # NoSuchBall when absent
        if ball.is_cue:
            raise ValueError("the cue ball cannot be the object ball")
        self.object_ball = ball.ball_id
        self.status_msg = f"Object ball {ball.ball_id} selected."

    def select_pocket(self, pocket_id) -> None:
        pocket = resolve_pocket(pocket_id)   # NoSuchPocket
        self.pocket = pocket.pocket_id
        self.status_msg = f"Pocket {pocket.name} selected."

    def set_english(self, x: float, y: float) -> None:
        self.english = English(x, y)
        self.status_msg = f"Spin: {spin_label(self.english)}."

    def set_power(self, percent: float) -> None:
        self.power = validate_power(percent)
        self.status_msg = f"Power {self.power:.0f}%."

    # ──────────────────────────────────────────────────────────────────────
    # Shot computation
    # ──────────────────────────────────────────────────────────────────────

    def aim_ghost(self) -> np.ndarray | None:
        """Ghost ball for the current selection; a full-ball hit when no pocket is set."""
        cue = self.table.cue_ball
        if cue is None or self.object_ball is None or not self.table.has_ball(self.object_ball):
            return None
        obj = self.table.ball(self.object_ball)
        r = self.table.ball_radius
        if self.pocket is None:
            beyond = 2.0 * obj.position - cue.position
            return ghost_ball(obj.position, beyond, r)
        return ghost_ball(obj.position, resolve_pocket(self.pocket).position, r)

    def get_shot_result(self) -> ShotResult | None:
        """Recompute the shot. None until cue ball, object ball and pocket are set."""
        cue = self.table.cue_ball
        if cue is None or self.object_ball is None or self.pocket is None:
            return None
        if not self.table.has_ball(self.object_ball):
            return None

        obj = self.table.ball(self.object_ball)
        pocket = resolve_pocket(self.pocket)
        r = self.table.ball_radius
        balls = list(self.table.balls.values())
        exclude = (CUE, obj.ball_id)

        c, o, p = cue.position, obj.position, pocket.position
        g = ghost_ball(o, p, r)
        cut = cut_angle(c, g, o, p)
        cue_path = check_path(c, g, balls, r, exclude=exclude, end_is_ball=False)
        object_path = check_path(o, p, balls, r, exclude=exclude, end_is_ball=False)

        kick_solution = None
        kick_failure = {}
        if cue_path.blocked:
            try:
                kick_solution = find_kick(c, o, balls, r, english_x=self.english.x,
                                          exclude=(CUE,), length=self.table.length,
                                          width=self.table.width)
            except NoValidKick as exc:
                kick_failure = exc.reasons

        d_cg = distance(c, g)
        d_op = distance(o, p)
        cls = classify(cut, cue_path.blocked, d_cg, d_op, kick=kick_solution,
                       object_path_blocked=object_path.blocked)

        rest = None
        if cut.makeable and not cue_path.blocked:
            rest = estimate_rest_positions(c, g, o, p, self.english, self.power, r,
                                           makeable=not object_path.blocked)

        return ShotResult(
            cue=c.copy(),
            object_ball=obj.ball_id,
            object_position=o.copy(),
            pocket=pocket.pocket_id,
            pocket_position=p,
            ghost_ball=g,
            contact_point=contact_point(o, p, r),
            cut=cut,
            cue_path=cue_path,
            object_path=object_path,
            kick=kick_solution,
            verdict=cls.verdict,
            make_probability=cls.probability,
            instructions=describe(cls.verdict, cut, kick_solution),
            english=self.english,
            power=self.power,
            recommended_power=recommended_power(d_cg, d_op),
            rest=rest,
            kick_failure=kick_failure,
        )

    # ──────────────────────────────────────────────────────────────────────
    # Tunable parameters
    # ──────────────────────────────────────────────────────────────────────

    @staticmethod
    def get_params() -> list:
        out = []
        for mod, attr, label, mn, mx in TUNABLE_PARAMS:
            out.append({"name": f"{mod.__name__}.{attr}", "label": label,
                        "value": getattr(mod, attr), "min": mn, "max": mx})
        return out

    @staticmethod
    def set_param(name: str, value: float) -> float:
        """Set a tunable by "module.ATTR" or bare "ATTR"; clamped to its range."""
        for mod, attr, _label, mn, mx in TUNABLE_PARAMS:
            if name in (attr, f"{mod.__name__}.{attr}"):
                new_val = max(mn, min(mx, float(value)))
                setattr(mod, attr, new_val)
                return new_val
        raise KeyError(name)

    @staticmethod
    def reset_params() -> None:
        for mod, attr, *_ in TUNABLE_PARAMS:
            setattr(mod, attr, PARAM_DEFAULTS[(mod.__name__, attr)])

    # ──────────────────────────────────────────────────────────────────────
    # JSON command console
    # ──────────────────────────────────────────────────────────────────────

    def get_state_json(self) -> str:
        """Compact single-line snapshot of balls, selection and settings."""
        return json.dumps({
            "balls": self.table.snapshot(),
            "object_ball": self.object_ball,
            "pocket": self.pocket,
            "english": [self.english.x, self.english.y],
            "power": self.power,
        }, separators=(',', ':'))

    def execute_command(self, text: str) -> dict:
        """
        Parse a JSON command and dispatch it.

        Engine errors never escape: they are reported in ``status_msg`` and in
        the returned ``{"ok": False, "error": kind, "message": ...}``.

        Commands::

            {"cmd": "place",   "ball": 1, "x": 60, "y": 25}
            {"cmd": "remove",  "ball": 1}
            {"cmd": "select",  "ball": 1}
            {"cmd": "pocket",  "pocket": "TR"}
            {"cmd": "english", "x": 1, "y": 0}
            {"cmd": "power",   "percent": 70}
            {"cmd": "rack",    "seed": 3}
            {"cmd": "clear"}
            {"cmd": "params",  "set": {"KICK_PENALTY": 0.4}}   (or "reset": true)
        """
        if not text:
            self.status_msg = "Empty command."
            return {"ok": False, "error": "EmptyCommand", "message": self.status_msg}
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            logger.debug("[CMD] JSON parse error: %s", exc)
            self.status_msg = f"JSON error: {exc}"
            return {"ok": False, "error": "JSONDecodeError", "message": self.status_msg}
        if not isinstance(data, dict):
            self.status_msg = "Command must be a JSON object."
            return {"ok": False, "error": "BadCommand", "message": self.status_msg}
        return self.dispatch(data)

    def dispatch(self, data: dict) -> dict:
        cmd = str(data.get("cmd", "")).lower().strip()
        logger.debug("[CMD] cmd=%s", cmd)
        try:
            if cmd == "place":
                self.place_ball(data["ball"], data["x"], data["y"])
            elif cmd == "remove":
                self.remove_ball(data["ball"])
            elif cmd == "select":
                self.select_object_ball(data["ball"])
            elif cmd == "pocket":
                self.select_pocket(data["pocket"])
            elif cmd == "english":
                self.set_english(data.get("x", 0.0), data.get("y", 0.0))
            elif cmd == "power":
                self.set_power(data["percent"])
            elif cmd == "rack":
                self.rack(seed=data.get("seed"))
            elif cmd == "clear":
                self.clear()
            elif cmd == "params":
                self._cmd_params(data)
            else:
                self.status_msg = (f"Unknown cmd '{cmd}'. Use place/remove/select/"
                                   "pocket/english/power/rack/clear/params.")
                return {"ok": False, "error": "UnknownCommand", "message": self.status_msg}
        except ShotGeometryError as exc:
            logger.debug("[CMD] %s failed: %s", cmd, exc)
            self.status_msg = f"{exc.kind}: {exc}"
            return {"ok": False, "error": exc.kind, "message": str(exc)}
        except KeyError as exc:
            self.status_msg = f"{cmd}: missing field {exc}"
            return {"ok": False, "error": "MissingField", "message": self.status_msg}
        except (TypeError, ValueError) as exc:
            self.status_msg = f"{cmd}: {exc}"
            return {"ok": False, "error": "InvalidValue", "message": str(exc)}
        return {"ok": True, "message": self.status_msg}

    def _cmd_params(self, data: dict) -> None:
        if data.get("reset"):
            self.reset_params()
            self.status_msg = "Parameters reset to defaults."
            return
        updated = {}
        for name, value in (data.get("set") or {}).items():
            try:
                updated[name] = self.set_param(name, value)
            except KeyError:
                raise ValueError(f"unknown parameter {name!r}") from None
        self.status_msg = f"params: {sorted(updated)} updated."
