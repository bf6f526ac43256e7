from __future__ import annotations

import contextlib
import os
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import TYPE_CHECKING, Any

from PIL import Image

from shared.constants import (
    JPEG_QUALITY_DEFAULT,
    JPEG_QUALITY_MAX,
    JPEG_QUALITY_MIN,
    PIL_DISABLE_LIMIT,
)

if TYPE_CHECKING:
    from imaging.composer import MosaicCanvas

_JPEG_SUFFIXES = {'.jpg', '.jpeg'}


@dataclass(frozen=True)
class DecodedTile:
    width: int
    height: int
    pixels: bytes


def _open(source: Path | bytes) -> Image.Image:
    if isinstance(source, (bytes, bytearray)):
        return Image.open(BytesIO(source))
    return Image.open(source)


def read_tile_size(source: Path | bytes) -> tuple[int, int]:
    """Width and height of an encoded tile, read from its header."""
    with _open(source) as img:
        return img.size


def decode_tile_rgba(source: Path | bytes) -> DecodedTile:
    """Decode a tile to a raw RGBA buffer, adding an opaque alpha if missing."""
    with _open(source) as img:
        rgba = img.convert('RGBA') if img.mode != 'RGBA' else img
        try:
            return DecodedTile(width=rgba.width, height=rgba.height, pixels=rgba.tobytes())
        finally:
            if rgba is not img:
                rgba.close()


def build_save_kwargs(quality: int = JPEG_QUALITY_DEFAULT) -> dict[str, Any]:
    """Build PIL.Image.save kwargs for JPEG based on quality value."""
    q = max(JPEG_QUALITY_MIN, min(JPEG_QUALITY_MAX, int(quality)))
    return {
        'format': 'JPEG',
        'quality': q,
        'subsampling': 0,
        'optimize': True,
        'progressive': True,
        'exif': b'',
    }


def save_jpeg(img: Image.Image, out_path: Path, save_kwargs: dict[str, Any]) -> None:
    """Save an image to JPEG path and fsync to ensure data is written."""
    tmp_rgb = img.convert('RGB') if img.mode != 'RGB' else img.copy()
    try:
        tmp_rgb.save(out_path, **save_kwargs)
    finally:
        with contextlib.suppress(Exception):
            tmp_rgb.close()
    _fsync(out_path)


def save_canvas(
    canvas: MosaicCanvas,
    out_path: str | Path,
    *,
    quality: int = JPEG_QUALITY_DEFAULT,
) -> Path:
    """Encode the canvas to ``out_path``; the format follows the extension.

    ``quality`` applies to JPEG outputs only.
    """
    out = Path(out_path)
    if PIL_DISABLE_LIMIT:
        Image.MAX_IMAGE_PIXELS = None
    img = Image.frombuffer(
        'RGBA', (canvas.width, canvas.height), canvas.buffer, 'raw', 'RGBA', 0, 1
    )
    try:
        if out.suffix.lower() in _JPEG_SUFFIXES:
            save_jpeg(img, out, build_save_kwargs(quality))
        else:
            img.save(out)
            _fsync(out)
    finally:
        img.close()
    return out


def _fsync(path: Path) -> None:
    # Ensure data is written to disk
    fd = os.open(path, os.O_RDONLY)
    try:
        os.fsync(fd)
    finally:
        os.close(fd)
