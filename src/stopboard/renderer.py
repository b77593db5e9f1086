"""Two-column departure board layout.

Turns stop data plus the static layout configuration into a list of
drawing instructions, then paints them on a canvas session.

Board layout (one panel shown; the right panel is identical, shifted by
``width // 2`` and preceded by a full-height divider):

    y=38  (N) Ocean Beach ...................... 3, 11 min
          ---- grey separator at y+15 (non-last lines) ----
    +40   (L) Taraval ........................... 7 min
    +15   ================ black section rule ===========
    +28   next section
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from stopboard.canvas import BLACK, GREY, DrawOp, LineOp, OvalOp, TextOp, render_ctx
from stopboard.config import LayoutConfig, SectionConfig
from stopboard.models import RenderTarget, StopData, Upcoming
from stopboard.text import CONTENT_SIZE, Font, load_font, measure

logger = logging.getLogger(__name__)

# First baseline of every panel
TOP_MARGIN = 38
# Inset of line labels from the panel's left edge
LABEL_INSET = 20
# Inset of the grey in-section separators from both panel edges
SEPARATOR_INSET = 40
# Grey separator sits this far below the current baseline
SEPARATOR_OFFSET = 15
# Cursor advance after a line that is followed by another line
LINE_STEP = 40
# Cursor advance after the last line of a section
LAST_LINE_STEP = 15
# Cursor advance after the black rule closing a section
SECTION_GAP = 28


@dataclass(frozen=True)
class Panel:
    """Horizontal extent [x1, x2] of one board column."""

    x1: int
    x2: int


@dataclass
class LayoutCursor:
    """Vertical position of the next baseline within one panel."""

    y: int = TOP_MARGIN


def format_minutes(upcoming: Sequence[Upcoming]) -> str:
    """Join arrival estimates in their given order, e.g. "3, 11 min"."""
    mins = ", ".join(str(u.minutes) for u in upcoming)
    return f"{mins} min"


def layout_section(
    section: SectionConfig,
    stop_data: StopData,
    panel: Panel,
    cursor: LayoutCursor,
    font: Font,
    height: int,
) -> list[DrawOp]:
    """Lay out one (agency, direction) section and advance the cursor.

    Sections whose agency or direction is missing from the data produce no
    instructions and leave the cursor untouched.
    """
    agency = stop_data.get(section.agency)
    if agency is None:
        logger.warning(
            "missing data for expected agency %s",
            section.agency,
            extra={"agency": section.agency},
        )
        return []

    lines = agency.get(section.direction)
    if lines is None:
        logger.warning(
            "missing data for expected direction %s within agency %s",
            section.direction,
            section.agency,
            extra={"agency": section.agency, "direction": section.direction},
        )
        return []

    x1, x2 = panel.x1, panel.x2
    ops: list[DrawOp] = []

    if x1 > 0:
        ops.append(LineOp((x1, 0), (x1, height), BLACK))

    for idx, (line, upcoming) in enumerate(lines):
        x = x1 + LABEL_INSET
        y = cursor.y

        # Grey oval behind the line label, then the label on top of it
        label = measure(font, line.line)
        ops.append(OvalOp(label.with_offset(x, y), GREY))
        ops.append(TextOp(label, (x, y), BLACK))

        destination = measure(font, line.destination)
        ops.append(TextOp(destination, (x + label.width, y), BLACK))

        # Right edge of the time string sits on the panel boundary
        times = measure(font, format_minutes(upcoming))
        ops.append(TextOp(times, (x2 - times.width, y), BLACK))

        if idx < len(lines) - 1:
            sep_y = y + SEPARATOR_OFFSET
            ops.append(
                LineOp((x1 + SEPARATOR_INSET, sep_y), (x2 - SEPARATOR_INSET, sep_y), GREY)
            )
            cursor.y += LINE_STEP
        else:
            cursor.y += LAST_LINE_STEP

    ops.append(LineOp((x1, cursor.y), (x2, cursor.y), BLACK))
    cursor.y += SECTION_GAP

    return ops


def layout_panel(
    sections: Sequence[SectionConfig],
    stop_data: StopData,
    panel: Panel,
    font: Font,
    height: int,
) -> list[DrawOp]:
    """Lay out a column of sections with its own cursor."""
    cursor = LayoutCursor()
    ops: list[DrawOp] = []
    for section in sections:
        ops.extend(layout_section(section, stop_data, panel, cursor, font, height))
    return ops


def layout_board(stop_data: StopData, layout: LayoutConfig, font: Font) -> list[DrawOp]:
    """Lay out both panels: left first, then right."""
    halfway = layout.width // 2
    ops = layout_panel(
        layout.left.sections, stop_data, Panel(0, halfway), font, layout.height
    )
    ops += layout_panel(
        layout.right.sections, stop_data, Panel(halfway, layout.width), font, layout.height
    )
    return ops


def stops_png(target: RenderTarget, stop_data: StopData, layout: LayoutConfig) -> bytes:
    """Render the departure board as PNG bytes.

    Raises:
        TypefaceError, AllocationError, DrawError, EncodingError: the
            render is aborted; callers route these to ``error_png``.
    """
    font = load_font(bold=True, size=CONTENT_SIZE)
    ops = layout_board(stop_data, layout, font)
    logger.debug("Board layout produced %d draw instructions", len(ops))
    return render_ctx(
        target, layout.width, layout.height, lambda canvas: canvas.apply_all(ops)
    )
