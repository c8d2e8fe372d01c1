"""
Shot diagram export (PIL).

Draws the table, pockets, balls and the current shot's aiming lines to a PNG.

    python screenshot.py out.png           # empty table
    python screenshot.py out.png --rack    # 8-ball rack, break aim
"""

import argparse
import logging

from PIL import Image, ImageDraw

from controller import ShotController
from errors import ShotGeometryError
from table import CUE, POCKETS, SOLIDS

logger = logging.getLogger(__name__)

FELT_RGB = (18, 102, 60)
RAIL_RGB = (92, 52, 24)
POCKET_RGB = (10, 10, 10)
CUE_RGB = (245, 245, 235)
SOLID_RGB = (230, 190, 30)
STRIPE_RGB = (200, 40, 40)
EIGHT_RGB = (20, 20, 20)
GHOST_RGB = (220, 220, 220)
LINE_RGB = (255, 255, 255)
TARGET_RGB = (255, 220, 80)
KICK_RGB = (120, 200, 255)
REST_RGB = (255, 140, 0)

RAIL_PX = 4   # rail border in scale units


def _ball_rgb(ball_id):
    if ball_id == CUE:
        return CUE_RGB
    if ball_id == 8:
        return EIGHT_RGB
    return SOLID_RGB if ball_id in SOLIDS else STRIPE_RGB


def render_diagram(controller: ShotController, path: str, scale: int = 10) -> Image.Image:
    """Render the controller's table and shot to ``path``; returns the image."""
    table = controller.table
    margin = RAIL_PX * scale // 2
    w = int(table.length * scale) + 2 * margin
    h = int(table.width * scale) + 2 * margin
    img = Image.new("RGB", (w, h), RAIL_RGB)
    draw = ImageDraw.Draw(img)

    def px(p):
        return (margin + float(p[0]) * scale, margin + float(p[1]) * scale)

    def circle(centre, radius, **kw):
        cx, cy = px(centre)
        rr = radius * scale
        draw.ellipse([cx - rr, cy - rr, cx + rr, cy + rr], **kw)

    draw.rectangle([margin, margin, w - margin, h - margin], fill=FELT_RGB)
    for pocket in POCKETS.values():
        circle(pocket.position, pocket.capture_radius, fill=POCKET_RGB)

    r = table.ball_radius
    try:
        result = controller.get_shot_result()
        aim = controller.aim_ghost() if result is None else None
    except ShotGeometryError as exc:
        # table only, no aiming lines
        logger.warning("diagram without shot: %s: %s", exc.kind, exc)
        result = aim = None
    if result is not None:
        draw.line([px(result.object_position), px(result.pocket_position)],
                  fill=TARGET_RGB, width=2)
        if result.kick is not None:
            draw.line([px(result.cue), px(result.kick.contact_point),
                       px(result.object_position)], fill=KICK_RGB, width=2)
        else:
            draw.line([px(result.cue), px(result.ghost_ball)], fill=LINE_RGB, width=2)
        circle(result.ghost_ball, r, outline=GHOST_RGB, width=2)
        if result.rest is not None:
            circle(result.rest.cue, r / 2, outline=REST_RGB, width=2)
    elif aim is not None and table.cue_ball is not None:
        draw.line([px(table.cue_ball.position), px(aim)], fill=LINE_RGB, width=2)
        circle(aim, r, outline=GHOST_RGB, width=2)

    for ball in table.balls.values():
        outline = LINE_RGB if ball.ball_id == controller.object_ball else None
        circle(ball.position, ball.radius, fill=_ball_rgb(ball.ball_id), outline=outline)

    img.save(path)
    logger.info("diagram saved to %s", path)
    return img


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(description="Export a shot diagram to PNG.")
    parser.add_argument("output", help="PNG file to write")
    parser.add_argument("--rack", action="store_true", help="start from an 8-ball rack")
    parser.add_argument("--seed", type=int, default=None, help="rack shuffle seed")
    parser.add_argument("--scale", type=int, default=10, help="pixels per table unit")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO)
    ctrl = ShotController()
    if args.rack:
        ctrl.rack(seed=args.seed)
    render_diagram(ctrl, args.output, scale=args.scale)
    print("Screenshot saved!")


if __name__ == "__main__":
    main()
