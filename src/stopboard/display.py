"""Error screen rendering and the board-or-error entry point."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from stopboard.canvas import BLACK, DrawOp, TextOp, render_ctx
from stopboard.config import LayoutConfig
from stopboard.errors import RenderError, error_chain
from stopboard.models import RenderTarget, StopData
from stopboard.renderer import stops_png
from stopboard.text import BODY_SIZE, HEADLINE_SIZE, Font, load_font, measure

logger = logging.getLogger(__name__)

# "ERROR" headline baseline-left corner
HEADLINE_ORIGIN = (100, 200)
# First cause line, then one line per cause
MESSAGE_X = 100
MESSAGE_Y = 250
MESSAGE_STEP = 20


def error_messages(error: BaseException | Sequence[str]) -> list[str]:
    """Flatten an error value into display lines, in source order.

    Multi-line messages are folded onto one line so each cause keeps its
    own 20px row.
    """
    if isinstance(error, BaseException):
        messages = error_chain(error)
    else:
        messages = [str(m) for m in error]
    return [" ".join(m.split()) for m in messages]


def layout_error(
    error: BaseException | Sequence[str],
    headline_font: Font,
    body_font: Font,
) -> list[DrawOp]:
    """Lay out the "ERROR" headline followed by the cause chain."""
    ops: list[DrawOp] = [TextOp(measure(headline_font, "ERROR"), HEADLINE_ORIGIN, BLACK)]
    y = MESSAGE_Y
    for message in error_messages(error):
        ops.append(TextOp(measure(body_font, message), (MESSAGE_X, y), BLACK))
        y += MESSAGE_STEP
    return ops


def error_png(
    target: RenderTarget,
    layout: LayoutConfig,
    error: BaseException | Sequence[str],
) -> bytes:
    """Render an error screen as PNG bytes, rotated like a normal board.

    There is no further fallback: if this raises, the caller has to
    produce its own last-resort response.
    """
    headline_font = load_font(bold=False, size=HEADLINE_SIZE)
    body_font = load_font(bold=False, size=BODY_SIZE)
    ops = layout_error(error, headline_font, body_font)
    return render_ctx(
        target, layout.width, layout.height, lambda canvas: canvas.apply_all(ops)
    )


def render_board(target: RenderTarget, stop_data: StopData, layout: LayoutConfig) -> bytes:
    """Render the board, replacing it with an error screen if rendering fails."""
    try:
        return stops_png(target, stop_data, layout)
    except RenderError as e:
        logger.error("Board render failed, rendering error screen: %s", e, exc_info=True)
        return error_png(target, layout, e)
