"""Tests for http_client module."""

from unittest.mock import MagicMock

import aiohttp
import pytest

from infrastructure.http.client import (
    TileDownloadError,
    fetch_tile_bytes,
    make_http_session,
)
from shared.constants import HTTP_ACCEPT, HTTP_USER_AGENT

URL = 'https://tile.example.org/3/4/2.png'


class FakeResponse:
    def __init__(self, status: int, body: bytes = b'') -> None:
        self.status = status
        self._body = body

    async def read(self) -> bytes:
        return self._body


class FakeRequest:
    """Async context manager standing in for ``session.get(url)``."""

    def __init__(self, response=None, error=None) -> None:
        self._response = response
        self._error = error

    async def __aenter__(self):
        if self._error is not None:
            raise self._error
        return self._response

    async def __aexit__(self, *exc):
        return False


def fake_client(response=None, error=None) -> MagicMock:
    client = MagicMock()
    client.get.return_value = FakeRequest(response, error)
    return client


class TestMakeHttpSession:
    @pytest.mark.asyncio
    async def test_default_headers(self):
        session = make_http_session()
        try:
            assert isinstance(session, aiohttp.ClientSession)
            assert session.headers['User-Agent'] == HTTP_USER_AGENT
            assert session.headers['Accept'] == HTTP_ACCEPT
        finally:
            await session.close()

    @pytest.mark.asyncio
    async def test_timeout(self):
        session = make_http_session(timeout_s=3.5)
        try:
            assert session.timeout.total == 3.5
        finally:
            await session.close()


class TestFetchTileBytes:
    @pytest.mark.asyncio
    async def test_ok(self):
        client = fake_client(FakeResponse(200, b'\x89PNG...'))
        assert await fetch_tile_bytes(client, URL) == b'\x89PNG...'
        client.get.assert_called_once_with(URL)

    @pytest.mark.asyncio
    @pytest.mark.parametrize('status', [404, 429, 500])
    async def test_non_200_raises(self, status):
        client = fake_client(FakeResponse(status, b'nope'))
        with pytest.raises(TileDownloadError) as exc_info:
            await fetch_tile_bytes(client, URL)
        assert exc_info.value.status == status
        assert exc_info.value.url == URL
        assert f'HTTP {status}' in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_transport_error_wrapped(self):
        cause = aiohttp.ClientConnectionError('connection reset')
        client = fake_client(error=cause)
        with pytest.raises(TileDownloadError, match='connection reset') as exc_info:
            await fetch_tile_bytes(client, URL)
        assert exc_info.value.__cause__ is cause
        assert exc_info.value.status is None

    @pytest.mark.asyncio
    async def test_timeout_wrapped(self):
        client = fake_client(error=TimeoutError())
        with pytest.raises(TileDownloadError, match='TimeoutError'):
            await fetch_tile_bytes(client, URL)


class TestTileDownloadError:
    def test_message(self):
        err = TileDownloadError(URL, 'HTTP 503', status=503)
        assert str(err) == f'Failed to download {URL}: HTTP 503'
        assert isinstance(err, RuntimeError)
