from __future__ import annotations

"""Media helpers: MIME lookup by extension and Telegram file URLs."""

from pathlib import PurePosixPath

from aiogram import Bot


DEFAULT_MIME_TYPE = "audio/mpeg"

MIME_TYPES: dict[str, str] = {
    ".mp3": "audio/mp3",
    ".wav": "audio/wav",
    ".m4a": "audio/m4a",
    ".ogg": "audio/ogg",
    ".webm": "audio/webm",
}

# Fixed types for media kinds Telegram always encodes the same way
VOICE_MIME_TYPE = "audio/ogg"
VIDEO_NOTE_MIME_TYPE = "video/mp4"


def extension_of(name: str | None) -> str:
    if not name:
        return ""
    return PurePosixPath(name).suffix.lower()


def mime_type_for(name: str | None) -> str:
    """Map a file name or path to the MIME type sent to the provider."""

    return MIME_TYPES.get(extension_of(name), DEFAULT_MIME_TYPE)


def telegram_file_url(bot: Bot, file_path: str) -> str:
    # Honors custom Bot API servers configured on the session
    return bot.session.api.file_url(bot.token, file_path)
