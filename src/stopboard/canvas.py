"""Offscreen grayscale canvas: allocation, drawing, orientation, PNG encoding.

Every render goes through ``render_ctx``: a white 8-bit buffer is
allocated, the caller draws on it, the buffer is rotated for Kindle
targets, and the result is encoded as PNG. Both the board and the error
screen leave through the same ``encode`` call.
"""

from __future__ import annotations

import io
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from PIL import Image, ImageDraw

from stopboard.errors import AllocationError, DrawError, EncodingError, RenderError
from stopboard.models import RenderTarget
from stopboard.text import TextBlob

logger = logging.getLogger(__name__)

# Single-channel 8-bit palette values
BLACK = 0
# 0.6 intensity, used for line-label ovals and in-section separators
GREY = 153
WHITE = 255

Point = tuple[int, int]


@dataclass(frozen=True)
class LineOp:
    """A 1px straight line between two points."""

    start: Point
    end: Point
    fill: int = BLACK


@dataclass(frozen=True)
class OvalOp:
    """A filled ellipse inscribed in a (x0, y0, x1, y1) box."""

    box: tuple[int, int, int, int]
    fill: int = GREY


@dataclass(frozen=True)
class TextOp:
    """A measured text blob drawn with its baseline-left corner at origin."""

    blob: TextBlob
    origin: Point
    fill: int = BLACK


DrawOp = LineOp | OvalOp | TextOp


class Canvas:
    """A live grayscale drawing surface of fixed size."""

    def __init__(self, image: Image.Image) -> None:
        self.image = image
        self._draw = ImageDraw.Draw(image)

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    def clear(self, fill: int = WHITE) -> None:
        self._draw.rectangle([(0, 0), (self.width, self.height)], fill=fill)

    def draw_line(self, start: Point, end: Point, fill: int = BLACK) -> None:
        self._draw.line([start, end], fill=fill, width=1)

    def draw_oval(self, box: tuple[int, int, int, int], fill: int = GREY) -> None:
        self._draw.ellipse(box, fill=fill)

    def draw_text(self, blob: TextBlob, origin: Point, fill: int = BLACK) -> None:
        # "ls" anchors the baseline-left corner at origin, matching how the
        # blob bounds were measured.
        self._draw.text(origin, blob.text, fill=fill, font=blob.font, anchor="ls")

    def apply(self, op: DrawOp) -> None:
        """Execute one layout instruction."""
        if isinstance(op, LineOp):
            self.draw_line(op.start, op.end, op.fill)
        elif isinstance(op, OvalOp):
            self.draw_oval(op.box, op.fill)
        elif isinstance(op, TextOp):
            self.draw_text(op.blob, op.origin, op.fill)
        else:
            raise DrawError(f"unsupported draw instruction: {op!r}")

    def apply_all(self, ops: Iterable[DrawOp]) -> None:
        for op in ops:
            self.apply(op)


def open_canvas(width: int, height: int) -> Canvas:
    """Allocate a white single-channel canvas of exactly width x height.

    Raises:
        AllocationError: if the dimensions are not positive or Pillow
            cannot allocate the buffer.
    """
    if width <= 0 or height <= 0:
        raise AllocationError(f"invalid canvas size {width}x{height}")
    try:
        image = Image.new("L", (width, height), WHITE)
    except (ValueError, MemoryError, OSError) as e:
        raise AllocationError(f"failed to allocate {width}x{height} canvas") from e
    return Canvas(image)


def draw(canvas: Canvas, closure: Callable[[Canvas], None]) -> None:
    """Run drawing commands against a live canvas.

    Any Pillow failure inside the closure aborts the render as DrawError.
    Errors that are already part of the render taxonomy pass through.
    """
    try:
        closure(canvas)
    except RenderError:
        raise
    except (ValueError, TypeError, OSError) as e:
        raise DrawError(f"failed to draw on canvas: {e}") from e


def orient(canvas: Canvas, target: RenderTarget) -> Canvas:
    """Return the canvas as it should be encoded for the render target.

    For KINDLE a second canvas with swapped dimensions receives the first
    one turned a quarter clockwise, equivalent to translating by
    (height, 0) and rotating 90 degrees about the origin. Source pixel
    (x, y) lands at (height - 1 - y, x).
    """
    if target is not RenderTarget.KINDLE:
        return canvas

    rotated = open_canvas(canvas.height, canvas.width)
    try:
        rotated.image.paste(canvas.image.transpose(Image.Transpose.ROTATE_270), (0, 0))
    except (ValueError, OSError) as e:
        raise DrawError("failed to rotate canvas") from e
    return rotated


def encode(canvas: Canvas) -> bytes:
    """Serialize the canvas as PNG.

    Raises:
        EncodingError: if Pillow fails to write the image.
    """
    buf = io.BytesIO()
    try:
        canvas.image.save(buf, format="PNG")
    except (ValueError, OSError) as e:
        raise EncodingError("failed to encode canvas as PNG") from e
    return buf.getvalue()


def render_ctx(
    target: RenderTarget,
    width: int,
    height: int,
    closure: Callable[[Canvas], None],
) -> bytes:
    """Allocate, draw, orient for the target and encode to PNG bytes."""
    canvas = open_canvas(width, height)
    canvas.clear(WHITE)
    draw(canvas, closure)
    final = orient(canvas, target)
    data = encode(final)
    logger.debug(
        "Encoded %dx%d canvas for %s (%d bytes)",
        final.width, final.height, target.value, len(data),
    )
    return data
