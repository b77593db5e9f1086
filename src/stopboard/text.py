"""Font loading and text measurement for glyph placement."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from PIL import ImageFont

from stopboard.errors import DrawError, TypefaceError

logger = logging.getLogger(__name__)

# Arial first, then metric-compatible faces commonly installed on Linux.
# Pillow searches the platform font directories for bare filenames.
_BOLD_FACES = (
    "arialbd.ttf",
    "Arial Bold.ttf",
    "LiberationSans-Bold.ttf",
    "DejaVuSans-Bold.ttf",
)
_REGULAR_FACES = (
    "arial.ttf",
    "Arial.ttf",
    "LiberationSans-Regular.ttf",
    "DejaVuSans.ttf",
)

# Board content: bold 24pt
CONTENT_SIZE = 24
# Error screen: "ERROR" headline and one line per cause
HEADLINE_SIZE = 36
BODY_SIZE = 12

Font = ImageFont.FreeTypeFont | ImageFont.ImageFont


def load_font(bold: bool, size: int) -> Font:
    """Load an Arial-like face at the given pixel size.

    Falls back to Pillow's bundled default face if none of the system
    faces can be opened.

    Raises:
        TypefaceError: if not even the bundled face can be constructed.
    """
    faces = _BOLD_FACES if bold else _REGULAR_FACES
    for name in faces:
        try:
            return ImageFont.truetype(name, size)
        except OSError:
            continue
    logger.debug("No system face found for bold=%s, using Pillow default", bold)
    try:
        return ImageFont.load_default(size)
    except (OSError, ValueError) as e:
        raise TypefaceError(f"failed to construct typeface (bold={bold}, size={size})") from e


@dataclass(frozen=True)
class TextBlob:
    """A measured run of text.

    Bounds are relative to the baseline-left origin the text is drawn at,
    so ``top`` is negative for glyphs rising above the baseline.
    """

    text: str
    font: Font
    left: int
    top: int
    right: int
    bottom: int

    @property
    def width(self) -> int:
        return self.right - self.left

    @property
    def height(self) -> int:
        return self.bottom - self.top

    @property
    def baseline(self) -> int:
        """Distance from the top of the bounds down to the baseline."""
        return -self.top

    def with_offset(self, x: int, y: int) -> tuple[int, int, int, int]:
        """Bounds translated to a drawing origin, as (x0, y0, x1, y1)."""
        return (self.left + x, self.top + y, self.right + x, self.bottom + y)


def measure(font: Font, text: str) -> TextBlob:
    """Measure text for placement at a baseline-left origin.

    Raises:
        DrawError: if the font cannot shape the text.
    """
    try:
        left, top, right, bottom = font.getbbox(text, anchor="ls")
    except (ValueError, TypeError, OSError) as e:
        raise DrawError(f"failed to measure text {text!r}") from e
    return TextBlob(
        text=text,
        font=font,
        left=int(left),
        top=int(top),
        right=int(right),
        bottom=int(bottom),
    )
