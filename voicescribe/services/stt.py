from __future__ import annotations

"""ElevenLabs speech-to-text client.

One call per transcription, no retries: a failed request surfaces as a
single TranscriptionError.
"""

from contextlib import asynccontextmanager
from time import perf_counter
from typing import AsyncIterator, Optional

import httpx
from pydantic import ValidationError

from voicescribe.config.settings import Settings
from voicescribe.schemas.transcription import AudioPayload, TranscriptionRequest, TranscriptionResult
from voicescribe.services.errors import ProviderUnavailable, TranscriptionError
from voicescribe.services.logging import get_logger


SPEECH_TO_TEXT_PATH = "/v1/speech-to-text"


class ElevenLabsTranscriber:
    def __init__(
        self,
        api_key: Optional[str],
        *,
        base_url: str = "https://api.elevenlabs.io",
        model_id: str = "scribe_v1",
        timeout: float = 300.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.model_id = model_id
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> "ElevenLabsTranscriber":
        return cls(
            settings.elevenlabs_api_key,
            base_url=settings.elevenlabs_base_url,
            model_id=settings.elevenlabs_model_id,
            timeout=settings.transcription_timeout_seconds,
            **kwargs,
        )

    @property
    def available(self) -> bool:
        return bool(self._api_key)

    def ensure_available(self) -> None:
        if not self.available:
            raise ProviderUnavailable()

    @asynccontextmanager
    async def _client(self) -> AsyncIterator[httpx.AsyncClient]:
        async with httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(self.timeout),
            transport=self._transport,
        ) as client:
            yield client

    async def transcribe(self, data: bytes, mime_type: str, *, filename: str = "audio") -> TranscriptionResult:
        """Send audio bytes to the provider and return the parsed transcript.

        Raises ProviderUnavailable before any I/O when no API key is set and
        TranscriptionError for every provider-side failure.
        """
        self.ensure_available()
        req = TranscriptionRequest(
            payload=AudioPayload(data=data, mime_type=mime_type, filename=filename),
            model_id=self.model_id,
        )
        logger = get_logger().bind(mime_type=mime_type, size=len(data), model_id=self.model_id)
        logger.info("transcription_request_start")
        start = perf_counter()
        try:
            async with self._client() as client:
                resp = await client.post(
                    SPEECH_TO_TEXT_PATH,
                    headers={"xi-api-key": self._api_key or "", "Accept": "application/json"},
                    data=req.form_fields(),
                    files=req.files(),
                )
                resp.raise_for_status()
                result = TranscriptionResult.model_validate(resp.json())
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "transcription_http_error",
                status=exc.response.status_code,
                body_preview=exc.response.text[:500],
            )
            raise TranscriptionError(f"provider returned {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            logger.warning("transcription_transport_error", error=str(exc))
            raise TranscriptionError(str(exc)) from exc
        except (ValueError, ValidationError) as exc:
            # resp.json() raises ValueError on non-JSON bodies
            logger.warning("transcription_bad_payload", error=str(exc))
            raise TranscriptionError("malformed provider response") from exc

        logger.info(
            "transcription_done",
            elapsed_ms=int((perf_counter() - start) * 1000),
            language=result.language_code,
            language_probability=result.language_probability,
            text_len=len(result.text),
        )
        return result
