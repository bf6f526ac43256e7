"""Mosaic download service - orchestrates the tile mosaic pipeline.

plan grid -> fetch every cell concurrently (gate + throttle inside the
fetcher) -> read tile size from the first tile -> allocate canvas ->
composite every tile -> encode to the output path.
"""

from __future__ import annotations

import asyncio
import contextlib
import functools
import logging
import time
from pathlib import Path
from typing import TYPE_CHECKING

from imaging.composer import TileRect, composite_tile, new_canvas
from imaging.io import decode_tile_rgba, read_tile_size, save_canvas
from infrastructure.http.client import TileDownloadError, fetch_tile_bytes, make_http_session
from services.map_context import MosaicContext
from shared.diagnostics import log_resource_usage, warn_if_canvas_too_large
from shared.progress import ConsoleProgress
from tiles.cache import DiskCache
from tiles.coverage import iter_tile_requests, plan_grid
from tiles.fetcher import FetchResult, TileFetcher
from tiles.gate import ConcurrencyGate
from tiles.throttle import RequestThrottle

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from settings import MosaicSettings

logger = logging.getLogger(__name__)

__all__ = [
    'MapDownloadService',
    'NoTilesError',
    'TileDownloadError',
    'download_mosaic',
]


class NoTilesError(RuntimeError):
    """The grid resolved to zero tiles, so there is nothing to compose."""

    def __init__(self) -> None:
        super().__init__('No tile downloaded')


class MapDownloadService:
    """Builds one mosaic image from a bounding box."""

    def __init__(
        self,
        settings: MosaicSettings,
        *,
        http_get: Callable[[str], Awaitable[bytes]] | None = None,
        cache: DiskCache | None = None,
        throttle: RequestThrottle | None = None,
    ) -> None:
        """
        Initialize service.

        Args:
            settings: Validated run settings
            http_get: Coroutine returning the body for a URL. Defaults to an
                aiohttp session owned by the run.
            cache: Tile cache. Defaults to one rooted at settings.cache_dir.
            throttle: Request throttle. Defaults to one spaced by
                settings.request_interval_s.

        """
        self.settings = settings
        self._http_get = http_get
        self.cache = cache or DiskCache(settings.cache_dir)
        self.throttle = throttle or RequestThrottle(settings.request_interval_s)

    async def download(self) -> Path:
        """Run the whole pipeline and return the written output path."""
        overall_start_time = time.monotonic()
        s = self.settings
        grid = plan_grid(s.lat_min, s.lon_min, s.lat_max, s.lon_max, s.zoom)
        ctx = MosaicContext(settings=s, grid=grid)
        logger.debug(
            'Nb tiles to download: %d (%dx%d at zoom %d)',
            grid.tile_count,
            grid.cols,
            grid.rows,
            grid.zoom,
        )

        async with contextlib.AsyncExitStack() as stack:
            http_get = self._http_get
            if http_get is None:
                client = await stack.enter_async_context(make_http_session())
                http_get = functools.partial(fetch_tile_bytes, client)

            fetcher = TileFetcher(
                self.cache,
                http_get,
                gate=ConcurrencyGate(self.cache.lookup, limit=s.max_parallel_fs),
                throttle=self.throttle,
            )
            ctx.tiles = await self._fetch_tiles(ctx, fetcher)

        if not ctx.tiles:
            raise NoTilesError

        await self._allocate_canvas(ctx)
        await self._compose(ctx)
        result_path = await self._save(ctx)

        logger.info(
            'Mosaic %s done: %d tiles (%d from cache, %d downloaded) in %.2fs',
            result_path,
            len(ctx.tiles),
            fetcher.stats['cache_hits'],
            fetcher.stats['downloads'],
            time.monotonic() - overall_start_time,
        )
        return result_path

    def _progress(self, total: int, label: str) -> ConsoleProgress | None:
        # В подробном режиме вместо прогресс-бара пишется лог
        if self.settings.verbose:
            return None
        return ConsoleProgress(total=total, label=label)

    async def _fetch_tiles(
        self, ctx: MosaicContext, fetcher: TileFetcher
    ) -> list[FetchResult]:
        requests = list(iter_tile_requests(ctx.grid, ctx.settings.base_url))
        if not requests:
            return []

        log_resource_usage('before cache lookups')
        progress = self._progress(len(requests), 'Downloading')
        with progress or contextlib.nullcontext():
            return await fetcher.fetch_many(
                requests,
                on_progress=progress.step if progress is not None else None,
            )

    async def _allocate_canvas(self, ctx: MosaicContext) -> None:
        ctx.tile_w, ctx.tile_h = await asyncio.to_thread(
            read_tile_size, ctx.tiles[0].path
        )
        width, height = ctx.canvas_size
        logger.debug('Size %d x %d', width, height)
        warn_if_canvas_too_large(width, height)
        ctx.canvas = new_canvas(width, height)
        log_resource_usage('after canvas allocation')

    async def _compose(self, ctx: MosaicContext) -> None:
        assert ctx.canvas is not None
        grid = ctx.grid
        progress = self._progress(len(ctx.tiles), 'Compose')
        with progress or contextlib.nullcontext():
            for tile in ctx.tiles:
                decoded = await asyncio.to_thread(decode_tile_rgba, tile.path)
                rect = TileRect(
                    x=(tile.x - grid.min_x) * ctx.tile_w,
                    y=(tile.y - grid.min_y) * ctx.tile_h,
                    w=ctx.tile_w,
                    h=ctx.tile_h,
                )
                composite_tile(ctx.canvas, decoded.pixels, rect)
                if progress is not None:
                    progress.step_sync(1)
        log_resource_usage('after composition')

    async def _save(self, ctx: MosaicContext) -> Path:
        """Save result image to file."""
        assert ctx.canvas is not None
        return await asyncio.to_thread(
            save_canvas,
            ctx.canvas,
            ctx.output_path,
            quality=ctx.settings.jpeg_quality,
        )


async def download_mosaic(settings: MosaicSettings) -> Path:
    """Convenience wrapper around MapDownloadService."""
    return await MapDownloadService(settings).download()
