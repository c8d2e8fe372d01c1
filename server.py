"""
Shot Geometry Web Server — Layer 3 adapter (FastAPI + WebSocket)

Exposes the controller to a browser diagram client. Every accepted command
is answered with a freshly recomputed shot frame; engine errors come back as
error frames and never drop the connection.
"""

import json
import logging

from fastapi import FastAPI, WebSocket, WebSocketDisconnect

import debug_hooks
from controller import ShotController
from errors import ShotGeometryError
from table import BALL_RADIUS, POCKETS, TABLE_LENGTH, TABLE_WIDTH

logger = logging.getLogger(__name__)

# ── Controller ──────────────────────────────────────────────────────────────

ctrl = ShotController()
hooks = debug_hooks.DebugHooks(ctrl) if debug_hooks.enabled() else None

app = FastAPI(title="Shot Geometry Engine")

clients: list[WebSocket] = []

# cmd name → controller command (see ShotController.dispatch)
COMMANDS = {
    "place_ball": "place",
    "remove_ball": "remove",
    "select_object_ball": "select",
    "select_pocket": "pocket",
    "set_english": "english",
    "set_power": "power",
    "rack": "rack",
    "clear": "clear",
    "params": "params",
}


def _init_message() -> dict:
    return {
        "type": "init",
        "table_length": TABLE_LENGTH,
        "table_width": TABLE_WIDTH,
        "ball_radius": BALL_RADIUS,
        "pockets": {pid: {"name": p.name, "pos": [p.x, p.y], "radius": p.capture_radius}
                    for pid, p in POCKETS.items()},
        "debug": hooks is not None,
    }


def _build_frame_message() -> dict:
    """Serialize current table + recomputed shot into a frame message."""
    frame = {
        "type": "shot",
        "balls": ctrl.table.snapshot(),
        "object_ball": ctrl.object_ball,
        "pocket": ctrl.pocket,
        "status": ctrl.status_msg,
        "shot": None,
    }
    try:
        result = ctrl.get_shot_result()
    except ShotGeometryError as exc:
        frame["status"] = f"{exc.kind}: {exc}"
        frame["error"] = {"kind": exc.kind, "message": str(exc)}
        return frame
    if result is not None:
        frame["shot"] = result.to_dict()
    return frame


def _error_message(kind: str, message: str) -> dict:
    return {"type": "error", "kind": kind, "message": message}


def handle_message(msg: dict) -> dict:
    """Apply one client message and return the reply frame."""
    cmd = str(msg.get("cmd", ""))

    if cmd == "get_shot":
        return _build_frame_message()
    if cmd == "get_state":
        return {"type": "state_json", "data": ctrl.get_state_json()}
    if cmd == "get_params":
        return {"type": "params", "data": ctrl.get_params()}

    if cmd.startswith("debug_"):
        if hooks is None:
            return _error_message("DebugDisabled",
                                  f"{cmd}: set {debug_hooks.ENV_FLAG}=1 to enable debug hooks")
        return _handle_debug(cmd, msg)

    target = COMMANDS.get(cmd)
    if target is None:
        return _error_message("UnknownCommand", f"unknown cmd '{cmd}'")
    reply = ctrl.dispatch({**msg, "cmd": target})
    if not reply["ok"]:
        return _error_message(reply["error"], reply["message"])
    return _build_frame_message()


def _handle_debug(cmd: str, msg: dict) -> dict:
    try:
        if cmd == "debug_balls":
            return {"type": "debug", "balls": hooks.balls()}
        if cmd == "debug_cue":
            return {"type": "debug", "cue": hooks.cue()}
        if cmd == "debug_place":
            return {"type": "debug", "balls": hooks.place_ball(msg["ball"], msg["x"], msg["y"])}
        if cmd == "debug_reset":
            hooks.reset(empty=bool(msg.get("empty", True)), seed=msg.get("seed"))
            return _build_frame_message()
    except ShotGeometryError as exc:
        return _error_message(exc.kind, str(exc))
    except KeyError as exc:
        return _error_message("MissingField", f"{cmd}: missing field {exc}")
    return _error_message("UnknownCommand", f"unknown cmd '{cmd}'")


# ── HTTP routes ─────────────────────────────────────────────────────────────

@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/shot")
async def shot():
    return _build_frame_message()


# ── WebSocket endpoint ──────────────────────────────────────────────────────

@app.websocket("/ws")
async def websocket_endpoint(ws: WebSocket):
    await ws.accept()
    clients.append(ws)
    logger.info("client connected (%d total)", len(clients))

    await ws.send_text(json.dumps(_init_message()))
    await ws.send_text(json.dumps(_build_frame_message()))

    try:
        while True:
            data = await ws.receive_text()
            try:
                msg = json.loads(data)
            except json.JSONDecodeError as exc:
                await ws.send_text(json.dumps(_error_message("JSONDecodeError", str(exc))))
                continue
            if not isinstance(msg, dict):
                await ws.send_text(json.dumps(_error_message("BadCommand", "expected an object")))
                continue
            reply = handle_message(msg)
            await ws.send_text(json.dumps(reply, separators=(',', ':')))
    except WebSocketDisconnect:
        pass
    finally:
        if ws in clients:
            clients.remove(ws)
        logger.info("client disconnected (%d left)", len(clients))


# ── Run with uvicorn ────────────────────────────────────────────────────────

if __name__ == "__main__":
    import uvicorn
    logging.basicConfig(level=logging.INFO)
    uvicorn.run("server:app", host="0.0.0.0", port=8000, reload=False)
