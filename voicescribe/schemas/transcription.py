from __future__ import annotations

"""Models for the ElevenLabs speech-to-text contract and our HTTP replies."""

from dataclasses import dataclass
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True)
class AudioPayload:
    data: bytes
    mime_type: str
    filename: str = "audio"


@dataclass(frozen=True)
class TranscriptionRequest:
    payload: AudioPayload
    model_id: str = "scribe_v1"
    diarize: bool = True
    tag_audio_events: bool = True
    # None lets the provider detect the language
    language_code: Optional[str] = None

    def form_fields(self) -> dict[str, str]:
        fields = {
            "model_id": self.model_id,
            "diarize": "true" if self.diarize else "false",
            "tag_audio_events": "true" if self.tag_audio_events else "false",
        }
        if self.language_code:
            fields["language_code"] = self.language_code
        return fields

    def files(self) -> dict[str, tuple[str, bytes, str]]:
        p = self.payload
        return {"file": (p.filename, p.data, p.mime_type)}


class Word(BaseModel):
    """One token of the transcript: a word, a spacing or a tagged audio event."""

    model_config = ConfigDict(extra="allow")

    text: str
    type: Optional[str] = None
    start: Optional[float] = None
    end: Optional[float] = None
    speaker_id: Optional[str] = None


class TranscriptionResult(BaseModel):
    # Unknown provider fields are kept so callers get the response verbatim
    model_config = ConfigDict(extra="allow")

    text: str = ""
    language_code: Optional[str] = None
    language_probability: Optional[float] = None
    words: list[Word] = Field(default_factory=list)

    @property
    def has_text(self) -> bool:
        return bool(self.text.strip())


class UploadResponse(BaseModel):
    success: bool = True
    filename: str
    transcription: dict[str, Any]


class ErrorResponse(BaseModel):
    error: str
