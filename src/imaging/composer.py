"""Raw-buffer mosaic composition.

The canvas is one flat RGBA buffer. Tiles are copied into it pixel-by-pixel
as 32-bit little-endian units, row slices at a time, without going through
Pillow's paste/composite.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import numpy as np

from shared.constants import CANVAS_BACKGROUND, CANVAS_CHANNELS

logger = logging.getLogger(__name__)

# Один пиксель RGBA как uint32 little-endian
_PIXEL_DTYPE = np.dtype('<u4')


@dataclass(frozen=True)
class TileRect:
    """Destination rectangle of a tile on the canvas (pixels)."""

    x: int
    y: int
    w: int
    h: int


@dataclass
class MosaicCanvas:
    width: int
    height: int
    buffer: bytearray = field(repr=False)

    @property
    def pixels(self) -> np.ndarray:
        """Writable (height, width) uint32 view over the buffer."""
        return np.frombuffer(self.buffer, dtype=_PIXEL_DTYPE).reshape(
            self.height, self.width
        )


def new_canvas(
    width: int,
    height: int,
    background: tuple[int, int, int, int] = CANVAS_BACKGROUND,
) -> MosaicCanvas:
    """Allocate a canvas filled with ``background``."""
    if width <= 0 or height <= 0:
        msg = f'Canvas size must be positive, got {width}x{height}'
        raise ValueError(msg)
    buffer = bytearray(width * height * CANVAS_CHANNELS)
    canvas = MosaicCanvas(width=width, height=height, buffer=buffer)
    fill = np.frombuffer(bytes(background), dtype=_PIXEL_DTYPE)[0]
    canvas.pixels[:] = fill
    return canvas


def composite_tile(canvas: MosaicCanvas, pixels: bytes, rect: TileRect) -> int:
    """
    Copy one decoded RGBA tile into its rectangle of the canvas.

    The source is read with a row stride of ``rect.w`` pixels. Pixels whose
    4 bytes lie past the end of ``pixels`` are skipped and keep their
    previous canvas value, so a short (truncated) buffer never raises.

    Returns the number of pixels written.
    """
    if (
        rect.x < 0
        or rect.y < 0
        or rect.x + rect.w > canvas.width
        or rect.y + rect.h > canvas.height
    ):
        msg = f'Tile rect {rect} is outside the {canvas.width}x{canvas.height} canvas'
        raise ValueError(msg)

    src = np.frombuffer(pixels, dtype=_PIXEL_DTYPE, count=len(pixels) // CANVAS_CHANNELS)
    dst = canvas.pixels
    written = 0
    for py in range(rect.h):
        start = py * rect.w
        available = min(rect.w, src.size - start)
        if available <= 0:
            break
        dst[rect.y + py, rect.x : rect.x + available] = src[start : start + available]
        written += available

    expected = rect.w * rect.h
    if written < expected:
        logger.debug(
            'Short tile buffer at (%d, %d): %d of %d pixels written',
            rect.x,
            rect.y,
            written,
            expected,
        )
    return written
