from __future__ import annotations

"""Message handlers for voice notes, audio files and video notes."""

from dataclasses import dataclass
from typing import Optional

from aiogram import F, Router
from aiogram.types import Message

from voicescribe.services.errors import ProviderUnavailable
from voicescribe.services.fetcher import RemoteFetcher
from voicescribe.services.logging import get_logger
from voicescribe.services.media import (
    VIDEO_NOTE_MIME_TYPE,
    VOICE_MIME_TYPE,
    mime_type_for,
    telegram_file_url,
)
from voicescribe.services.metrics import metrics
from voicescribe.services.stt import ElevenLabsTranscriber
from voicescribe.utils.text import TELEGRAM_MESSAGE_LIMIT, split_message


messages_router = Router(name="messages")

TRANSCRIPT_PREFIX = "📝 Транскрипция:\n\n"
PROVIDER_UNAVAILABLE_TEXT = "❌ Сервис транскрипции не настроен."


@dataclass(frozen=True)
class Replies:
    ack: str
    empty: str
    error: str


VOICE_REPLIES = Replies(
    ack="🎤 Обрабатываю голосовое сообщение...",
    empty="❌ Не удалось распознать аудио.",
    error="❌ Произошла ошибка при обработке аудио.",
)
AUDIO_REPLIES = Replies(
    ack="🎵 Обрабатываю аудио файл...",
    empty="❌ Не удалось распознать аудио.",
    error="❌ Произошла ошибка при обработке аудио.",
)
VIDEO_NOTE_REPLIES = Replies(
    ack="🎥 Обрабатываю видео кружок...",
    empty="❌ Не удалось распознать аудио из видео.",
    error="❌ Произошла ошибка при обработке видео кружка.",
)


async def relay_transcription(
    message: Message,
    *,
    source: str,
    file_id: str,
    mime_type: Optional[str],
    replies: Replies,
    transcriber: ElevenLabsTranscriber,
    fetcher: RemoteFetcher,
) -> None:
    """Acknowledge, transcribe the Telegram file and reply with exactly one outcome.

    ``mime_type=None`` means it is inferred from the resolved file path.
    """
    user = message.from_user
    logger = get_logger().bind(
        source=source,
        user_id=(user.id if user else None),
        username=(user.username if user else None),
    )
    logger.info("media_received")
    await message.answer(replies.ack)

    try:
        transcriber.ensure_available()
        tg_file = await message.bot.get_file(file_id)
        file_path = tg_file.file_path or ""
        if mime_type is None:
            mime_type = mime_type_for(file_path)
        logger = logger.bind(file_path=file_path, mime_type=mime_type)
        data = await fetcher.fetch(telegram_file_url(message.bot, file_path))
        with metrics.track_transcription(source):
            result = await transcriber.transcribe(
                data, mime_type, filename=file_path.rsplit("/", 1)[-1] or "audio"
            )
    except ProviderUnavailable:
        logger.warning("transcription_unavailable")
        await message.answer(PROVIDER_UNAVAILABLE_TEXT)
        return
    except Exception:
        logger.exception("media_processing_failed")
        await message.answer(replies.error)
        return

    if not result.has_text:
        logger.info("transcript_empty")
        await message.answer(replies.empty)
        return
    chunks = split_message(result.text.strip(), TELEGRAM_MESSAGE_LIMIT - len(TRANSCRIPT_PREFIX))
    chunks[0] = TRANSCRIPT_PREFIX + chunks[0]
    for chunk in chunks:
        await message.answer(chunk)


@messages_router.message(F.voice)
async def on_voice(message: Message, transcriber: ElevenLabsTranscriber, fetcher: RemoteFetcher) -> None:
    await relay_transcription(
        message,
        source="voice",
        file_id=message.voice.file_id,
        mime_type=VOICE_MIME_TYPE,
        replies=VOICE_REPLIES,
        transcriber=transcriber,
        fetcher=fetcher,
    )


@messages_router.message(F.audio)
async def on_audio(message: Message, transcriber: ElevenLabsTranscriber, fetcher: RemoteFetcher) -> None:
    await relay_transcription(
        message,
        source="audio",
        file_id=message.audio.file_id,
        mime_type=None,
        replies=AUDIO_REPLIES,
        transcriber=transcriber,
        fetcher=fetcher,
    )


@messages_router.message(F.video_note)
async def on_video_note(message: Message, transcriber: ElevenLabsTranscriber, fetcher: RemoteFetcher) -> None:
    await relay_transcription(
        message,
        source="video_note",
        file_id=message.video_note.file_id,
        mime_type=VIDEO_NOTE_MIME_TYPE,
        replies=VIDEO_NOTE_REPLIES,
        transcriber=transcriber,
        fetcher=fetcher,
    )
