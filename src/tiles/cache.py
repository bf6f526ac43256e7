"""Disk-backed tile cache keyed by URL.

Each tile is stored as a plain file under a two-level sharded tree:

    <root>/<h[0]>/<h[1]>/<token>.png

where ``token`` is the unpadded base64url encoding of the URL and ``h`` is
the lowercased unpadded base64url SHA-256 of ``token + '.png'``. The layout
is stable across runs, so pointing a new run at the same root reuses every
tile fetched before. Entries never expire and are never rewritten by this
module except when the same URL is fetched again.
"""

from __future__ import annotations

import asyncio
import base64
import hashlib
import logging
import os
import tempfile
from pathlib import Path

from shared.constants import TILE_CACHE_DIR, TILE_CACHE_SUFFIX

logger = logging.getLogger(__name__)


def _b64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b'=').decode('ascii')


def cache_path_for(url: str, root: str | Path = TILE_CACHE_DIR) -> Path:
    """Map a tile URL to its cache file path.

    Pure function: the same URL and root always give the same path.
    """
    token = _b64url(url.encode('utf-8'))
    file_name = token + TILE_CACHE_SUFFIX
    digest = _b64url(hashlib.sha256(file_name.encode('ascii')).digest()).lower()
    return Path(root) / digest[0] / digest[1] / file_name


class DiskCache:
    """URL-keyed tile storage on the local filesystem.

    All filesystem calls run in worker threads so that lookups and writes
    are suspension points for the event loop.

    Usage:
        cache = DiskCache('.cache')
        path = await cache.lookup(url)
        if path is None:
            path = await cache.store(url, tile_bytes)
    """

    def __init__(self, root: str | Path = TILE_CACHE_DIR) -> None:
        self.root = Path(root)
        self._init_lock = asyncio.Lock()
        self._initialized = False

    def path_for(self, url: str) -> Path:
        return cache_path_for(url, self.root)

    async def ensure_root(self) -> None:
        """Create the cache root once, even with many concurrent first callers."""
        if self._initialized:
            return
        async with self._init_lock:
            if not self._initialized:
                await asyncio.to_thread(self.root.mkdir, parents=True, exist_ok=True)
                self._initialized = True
                logger.debug('Tile cache root ready at %s', self.root)

    async def lookup(self, url: str) -> Path | None:
        """Return the cached file path for ``url`` or None on a miss.

        Only a missing file counts as a miss; other OS errors propagate.
        """
        await self.ensure_root()
        path = self.path_for(url)
        try:
            await asyncio.to_thread(os.stat, path)
        except FileNotFoundError:
            return None
        return path

    async def store(self, url: str, data: bytes) -> Path:
        """Persist ``data`` for ``url`` and return the cache file path."""
        await self.ensure_root()
        path = self.path_for(url)
        await asyncio.to_thread(self._write, path, data)
        return path

    async def read(self, url: str) -> bytes | None:
        path = await self.lookup(url)
        if path is None:
            return None
        return await asyncio.to_thread(path.read_bytes)

    @staticmethod
    def _write(path: Path, data: bytes) -> None:
        # Shard directories may be created concurrently by another writer
        path.parent.mkdir(parents=True, exist_ok=True)
        # The temp name must stay shorter than the final one: long URLs give
        # file names close to the 255-byte limit
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix='.', suffix='.tmp')
        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, 'wb') as f:
                f.write(data)
            os.replace(tmp_path, path)
        except BaseException:
            tmp_path.unlink(missing_ok=True)
            raise
