from __future__ import annotations

import asyncio
import contextlib
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from tiles.gate import ConcurrencyGate
from tiles.throttle import RequestThrottle

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Iterable
    from pathlib import Path

    from tiles.cache import DiskCache

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchResult:
    """A grid position paired with its cached tile file."""

    x: int
    y: int
    path: Path


class TileFetcher:
    """Cache-first tile fetcher.

    A lookup goes through the concurrency gate; only on a miss does the
    request enter the shared throttle, hit the network and get persisted.
    Cache hits never touch the throttle.

    Usage:
        fetcher = TileFetcher(cache, http_get=lambda url: fetch_tile_bytes(session, url))
        path = await fetcher.fetch(url)
    """

    def __init__(
        self,
        cache: DiskCache,
        http_get: Callable[[str], Awaitable[bytes]],
        *,
        gate: ConcurrencyGate[Path | None] | None = None,
        throttle: RequestThrottle | None = None,
    ) -> None:
        self.cache = cache
        self._http_get = http_get
        self.gate = gate or ConcurrencyGate(cache.lookup)
        self.throttle = throttle or RequestThrottle()
        self._stats_cache_hits = 0
        self._stats_downloads = 0

    @property
    def stats(self) -> dict[str, int]:
        return {
            'cache_hits': self._stats_cache_hits,
            'downloads': self._stats_downloads,
        }

    async def fetch(self, url: str) -> Path:
        """Return the cache path of the tile at ``url``, downloading it on a miss."""
        cached = await self.gate.submit(url)
        if cached is not None:
            self._stats_cache_hits += 1
            logger.debug('Get %s from cache', url)
            return cached

        data = await self.throttle.schedule(lambda: self._download(url))
        path = await self.cache.store(url, data)
        self._stats_downloads += 1
        return path

    async def _download(self, url: str) -> bytes:
        logger.debug('Get %s from network', url)
        return await self._http_get(url)

    async def fetch_many(
        self,
        cells: Iterable[tuple[int, int, str]],
        *,
        on_progress: Callable[[int], Awaitable[None]] | None = None,
    ) -> list[FetchResult]:
        """Fetch every ``(x, y, url)`` cell concurrently.

        The first failure propagates; there is no partial result.
        """

        async def _worker(x: int, y: int, url: str) -> FetchResult:
            path = await self.fetch(url)
            if on_progress is not None:
                with contextlib.suppress(Exception):
                    await on_progress(1)
            return FetchResult(x=x, y=y, path=path)

        return list(await asyncio.gather(*(_worker(x, y, url) for x, y, url in cells)))
