"""Services package - mosaic generation pipeline."""

from services.map_context import MosaicContext
from services.map_download_service import (
    MapDownloadService,
    NoTilesError,
    TileDownloadError,
    download_mosaic,
)

__all__ = [
    'MapDownloadService',
    'MosaicContext',
    'NoTilesError',
    'TileDownloadError',
    'download_mosaic',
]
