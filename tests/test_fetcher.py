from __future__ import annotations

import asyncio
import logging

import httpx
import pytest

from voicescribe.services.errors import NetworkError, PayloadTooLarge
from voicescribe.services.fetcher import RemoteFetcher
from voicescribe.services.logging import configure_logging


def _fetcher(handler, max_bytes: int = 1024) -> RemoteFetcher:
    return RemoteFetcher(max_bytes=max_bytes, transport=httpx.MockTransport(handler))


def test_fetch_returns_whole_body():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "GET"
        return httpx.Response(200, content=b"a" * 700)

    data = asyncio.run(_fetcher(handler).fetch("https://files.test/voice.oga"))
    assert data == b"a" * 700


def test_fetch_non_success_status_is_network_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, text="not found")

    with pytest.raises(NetworkError):
        asyncio.run(_fetcher(handler).fetch("https://files.test/missing"))


def test_fetch_connection_failure_is_network_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("dns failure", request=request)

    with pytest.raises(NetworkError):
        asyncio.run(_fetcher(handler).fetch("https://nowhere.test/x"))


def test_fetch_enforces_size_cap_while_streaming():
    def handler(request: httpx.Request) -> httpx.Response:
        async def body():
            yield b"x" * 600
            yield b"x" * 600

        # no content-length: generator body is streamed chunked
        return httpx.Response(200, content=body())

    with pytest.raises(PayloadTooLarge):
        asyncio.run(_fetcher(handler, max_bytes=1000).fetch("https://files.test/big"))


def test_fetch_rejects_declared_oversize():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"x" * 2000)

    with pytest.raises(PayloadTooLarge) as info:
        asyncio.run(_fetcher(handler, max_bytes=1000).fetch("https://files.test/big"))
    assert isinstance(info.value, NetworkError)
    assert info.value.limit == 1000


_TOKEN_URL = "https://api.telegram.org/file/bot123456:SECRET-TOKEN/voice/file_1.oga"


def test_bot_token_never_reaches_logs_or_errors(caplog):
    configure_logging("INFO")
    caplog.set_level(logging.INFO)

    ok = _fetcher(lambda request: httpx.Response(200, content=b"OggS"))
    assert asyncio.run(ok.fetch(_TOKEN_URL)) == b"OggS"

    missing = _fetcher(lambda request: httpx.Response(404, text="not found"))
    with pytest.raises(NetworkError) as info:
        asyncio.run(missing.fetch(_TOKEN_URL))

    assert "404" in str(info.value)
    assert "SECRET-TOKEN" not in str(info.value)
    assert info.value.__cause__ is None
    assert all("SECRET-TOKEN" not in r.getMessage() for r in caplog.records)
    assert "SECRET-TOKEN" not in caplog.text
