from __future__ import annotations

"""Initialize aiogram bot and dispatcher with the transcription pipeline."""

from dataclasses import dataclass

from aiogram import Bot, Dispatcher
from fastapi import FastAPI

from voicescribe.bot.handlers.commands import commands_router
from voicescribe.bot.handlers.messages import messages_router
from voicescribe.config.settings import Settings
from voicescribe.services.fetcher import RemoteFetcher
from voicescribe.services.logging import get_logger
from voicescribe.services.stt import ElevenLabsTranscriber


logger = get_logger()


@dataclass
class BotContext:
    bot: Bot
    dp: Dispatcher


def build_dispatcher(transcriber: ElevenLabsTranscriber, fetcher: RemoteFetcher) -> Dispatcher:
    # Workflow data is injected into handlers by parameter name
    dp = Dispatcher(transcriber=transcriber, fetcher=fetcher)
    dp.include_router(commands_router)
    dp.include_router(messages_router)
    return dp


def setup_bot(app: FastAPI, settings: Settings) -> BotContext | None:
    """Create bot and dispatcher and attach them to app state.

    Returns None when no bot token is configured; the webhook route is then
    never mounted.
    """
    if not settings.bot_enabled:
        logger.info("bot_disabled")
        return None
    # Transcripts go out as plain text, so no default parse mode
    bot = Bot(token=settings.bot_token)  # type: ignore[arg-type]
    dp = build_dispatcher(app.state.transcriber, app.state.fetcher)

    app.state.bot = bot
    app.state.dp = dp

    logger.info("bot_setup_complete", webhook_configured=settings.webhook_url is not None)
    return BotContext(bot=bot, dp=dp)
