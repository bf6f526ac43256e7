from __future__ import annotations

import logging
import ssl

import aiohttp
import certifi

from shared.constants import (
    HTTP_ACCEPT,
    HTTP_OK,
    HTTP_TIMEOUT_DEFAULT,
    HTTP_USER_AGENT,
)

logger = logging.getLogger(__name__)


class TileDownloadError(RuntimeError):
    """A tile could not be downloaded (transport failure or non-200 status)."""

    def __init__(self, url: str, reason: str, status: int | None = None) -> None:
        super().__init__(f'Failed to download {url}: {reason}')
        self.url = url
        self.status = status


def make_http_session(timeout_s: float = HTTP_TIMEOUT_DEFAULT) -> aiohttp.ClientSession:
    # Создать SSL-контекст с сертификатами из certifi
    ssl_context = ssl.create_default_context(cafile=certifi.where())
    connector = aiohttp.TCPConnector(ssl=ssl_context)
    return aiohttp.ClientSession(
        connector=connector,
        headers={'user-agent': HTTP_USER_AGENT, 'accept': HTTP_ACCEPT},
        timeout=aiohttp.ClientTimeout(total=timeout_s),
    )


async def fetch_tile_bytes(client: aiohttp.ClientSession, url: str) -> bytes:
    """
    GET one tile and return the full response body.

    No retries: any transport error or non-200 status raises TileDownloadError.
    """
    try:
        async with client.get(url) as resp:
            sc = resp.status
            if sc != HTTP_OK:
                raise TileDownloadError(url, f'HTTP {sc}', status=sc)
            return await resp.read()
    except (aiohttp.ClientError, TimeoutError) as e:
        logger.debug('Transport error for %s: %r', url, e)
        raise TileDownloadError(url, str(e) or type(e).__name__) from e
