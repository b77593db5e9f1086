"""Pygame window for previewing a rendered board on the desktop.

Requires the 'preview' extra: pip install -e ".[preview]"
"""

from __future__ import annotations

import io
import logging
import time

import pygame
from PIL import Image

logger = logging.getLogger(__name__)


class BoardPreview:
    """Shows rendered PNG boards in a Pygame window sized to the image."""

    def __init__(self, width: int, height: int) -> None:
        """Open the preview window.

        Args:
            width: Window width in pixels; pass the encoded image width so
                Kindle-rotated boards are shown upright as the device would.
            height: Window height in pixels.
        """
        pygame.init()
        self.screen = pygame.display.set_mode((width, height))
        pygame.display.set_caption("stopboard preview")
        self.width = width
        self.height = height
        logger.info("Preview window opened (%dx%d)", width, height)

    def update(self, png: bytes) -> None:
        """Decode PNG bytes and blit them onto the window."""
        # Pygame ingests raw RGB bytes; expand the grayscale board first.
        img = Image.open(io.BytesIO(png)).convert("RGB")
        surface = pygame.image.fromstring(img.tobytes(), img.size, img.mode)
        self.screen.blit(surface, (0, 0))
        pygame.display.flip()

    def handle_events(self) -> bool:
        """Process Pygame events. Returns False if the window should close."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                logger.info("Received QUIT event")
                return False
            if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                logger.info("Received ESC keypress")
                return False
        return True

    def close(self) -> None:
        """Shut down the Pygame display."""
        logger.info("Closing preview window")
        pygame.quit()


def show_png(png: bytes) -> None:
    """Show a rendered board until the window is closed or ESC is pressed."""
    with Image.open(io.BytesIO(png)) as img:
        width, height = img.size
    preview = BoardPreview(width, height)
    try:
        preview.update(png)
        while preview.handle_events():
            time.sleep(0.05)
    finally:
        preview.close()
