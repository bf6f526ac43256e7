"""Tile fetching and caching pipeline.

This module provides:
- DiskCache: URL-keyed on-disk tile storage with sharded paths
- ConcurrencyGate: FIFO-queued bound on simultaneous cache lookups
- RequestThrottle: minimum spacing between network fetches
- TileFetcher: cache-first fetcher tying the three together
- TileGrid / plan_grid: tile rectangle for a bounding box
"""

from tiles.cache import DiskCache, cache_path_for
from tiles.coverage import TileGrid, iter_tile_requests, plan_grid, tile_url
from tiles.fetcher import FetchResult, TileFetcher
from tiles.gate import ConcurrencyGate
from tiles.throttle import RequestThrottle

__all__ = [
    'ConcurrencyGate',
    'DiskCache',
    'FetchResult',
    'RequestThrottle',
    'TileFetcher',
    'TileGrid',
    'cache_path_for',
    'iter_tile_requests',
    'plan_grid',
    'tile_url',
]
