"""Imaging package - tile decoding, mosaic composition and encoding."""

from imaging.composer import MosaicCanvas, TileRect, composite_tile, new_canvas
from imaging.io import DecodedTile, decode_tile_rgba, read_tile_size, save_canvas

__all__ = [
    'DecodedTile',
    'MosaicCanvas',
    'TileRect',
    'composite_tile',
    'decode_tile_rgba',
    'new_canvas',
    'read_tile_size',
    'save_canvas',
]
