"""Geo module - slippy map projection."""

from .topography import TileCoordinate, lat_to_tile_y, latlng_to_tile, lon_to_tile_x

__all__ = [
    'TileCoordinate',
    'lat_to_tile_y',
    'latlng_to_tile',
    'lon_to_tile_x',
]
