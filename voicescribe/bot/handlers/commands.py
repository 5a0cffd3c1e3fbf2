from __future__ import annotations

"""Command handlers: /start, /help; plus the dispatcher-wide error logger."""

from aiogram import Router
from aiogram.filters import Command, CommandStart
from aiogram.types import ErrorEvent, Message

from voicescribe.services.logging import get_logger


commands_router = Router(name="commands")

START_TEXT = "👋 Привет! Отправь мне голосовое сообщение, аудио файл или видео кружок, и я преобразую его в текст."
HELP_TEXT = (
    "Я понимаю голосовые сообщения, аудио файлы (mp3, wav, m4a, ogg, webm) и видео кружки.\n"
    "Просто пришли одно из них, и я отвечу текстом."
)


@commands_router.message(CommandStart())
async def cmd_start(message: Message) -> None:
    user = message.from_user
    get_logger().info(
        "start_command",
        user_id=(user.id if user else None),
        username=(user.username if user else None),
    )
    await message.answer(START_TEXT)


@commands_router.message(Command("help"))
async def cmd_help(message: Message) -> None:
    await message.answer(HELP_TEXT)


@commands_router.errors()
async def on_error(event: ErrorEvent) -> bool:
    get_logger().error(
        "update_handling_failed",
        update_id=event.update.update_id,
        exc_info=event.exception,
    )
    return True
