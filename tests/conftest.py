from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from types import SimpleNamespace
from typing import Any

import pytest

from voicescribe.config.settings import Settings
from voicescribe.schemas.transcription import TranscriptionResult
from voicescribe.services.errors import ProviderUnavailable, TranscriptionError


@dataclass
class FakeTranscriber:
    """Stands in for ElevenLabsTranscriber; records every call."""

    available: bool = True
    text: str = "hello world"
    fail: bool = False
    calls: list[tuple[bytes, str, str]] = field(default_factory=list)

    def ensure_available(self) -> None:
        if not self.available:
            raise ProviderUnavailable()

    async def transcribe(self, data: bytes, mime_type: str, *, filename: str = "audio") -> TranscriptionResult:
        self.ensure_available()
        self.calls.append((data, mime_type, filename))
        if self.fail:
            raise TranscriptionError("quota exceeded")
        return TranscriptionResult(text=self.text, language_code="rus", language_probability=0.98)


@dataclass
class FakeFetcher:
    data: bytes = b"OggS-fake"
    urls: list[str] = field(default_factory=list)

    async def fetch(self, url: str) -> bytes:
        self.urls.append(url)
        return self.data


class FakeBot:
    token = "42:secret"

    def __init__(self, file_path: str = "voice/file_1.oga") -> None:
        self.file_path = file_path
        self.get_file_calls: list[str] = []
        self.session = SimpleNamespace(
            api=SimpleNamespace(file_url=lambda token, path: f"https://files.test/bot{token}/{path}")
        )

    async def get_file(self, file_id: str) -> Any:
        self.get_file_calls.append(file_id)
        return SimpleNamespace(file_id=file_id, file_path=self.file_path)


class FakeMessage:
    def __init__(self, bot: FakeBot, **media: Any) -> None:
        self.bot = bot
        self.from_user = SimpleNamespace(id=7, username="tester")
        self.voice = media.get("voice")
        self.audio = media.get("audio")
        self.video_note = media.get("video_note")
        self.answers: list[str] = []

    async def answer(self, text: str, **_: Any) -> None:
        self.answers.append(text)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        upload_dir=tmp_path / "uploads",
        elevenlabs_api_key="test-key",
        bot_token=None,
        webhook_url=None,
    )
