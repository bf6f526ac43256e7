"""HTTP client infrastructure."""
from infrastructure.http.client import (
    TileDownloadError,
    fetch_tile_bytes,
    make_http_session,
)

__all__ = [
    'TileDownloadError',
    'fetch_tile_bytes',
    'make_http_session',
]
