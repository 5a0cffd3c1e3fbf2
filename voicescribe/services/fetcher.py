from __future__ import annotations

"""Download remote media into memory."""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import httpx

from voicescribe.config.settings import Settings
from voicescribe.services.errors import NetworkError, PayloadTooLarge
from voicescribe.services.logging import get_logger


class RemoteFetcher:
    """Streams a URL into a single buffer, refusing bodies over ``max_bytes``."""

    def __init__(
        self,
        *,
        max_bytes: int,
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.max_bytes = max_bytes
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> "RemoteFetcher":
        return cls(
            max_bytes=settings.max_download_bytes,
            timeout=settings.download_timeout_seconds,
            **kwargs,
        )

    @asynccontextmanager
    async def _client(self) -> AsyncIterator[httpx.AsyncClient]:
        async with httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            transport=self._transport,
            follow_redirects=True,
        ) as client:
            yield client

    async def fetch(self, url: str) -> bytes:
        """GET ``url`` and return the whole body.

        Raises NetworkError on transport failures and non-2xx statuses,
        PayloadTooLarge once the body grows past the cap.
        """
        buf = bytearray()
        try:
            async with self._client() as client:
                async with client.stream("GET", url) as resp:
                    resp.raise_for_status()
                    declared = resp.headers.get("content-length")
                    if declared and declared.isdigit() and int(declared) > self.max_bytes:
                        raise PayloadTooLarge(self.max_bytes)
                    async for chunk in resp.aiter_bytes():
                        buf.extend(chunk)
                        if len(buf) > self.max_bytes:
                            raise PayloadTooLarge(self.max_bytes)
        except httpx.HTTPStatusError as exc:
            # never echo the URL: bot file URLs contain the token
            raise NetworkError(f"remote fetch failed with status {exc.response.status_code}") from None
        except httpx.HTTPError as exc:
            raise NetworkError(f"remote fetch failed: {type(exc).__name__}") from None
        get_logger().debug("remote_fetch_done", size=len(buf))
        return bytes(buf)
