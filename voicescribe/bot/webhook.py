from __future__ import annotations

"""Webhook endpoint for Telegram updates and startup webhook registration."""

import asyncio

from aiogram import Bot, Dispatcher
from aiogram.types import Update
from fastapi import APIRouter, Request

from voicescribe.config.settings import WEBHOOK_PATH, Settings
from voicescribe.services.logging import get_logger


router = APIRouter()


def _log_task_failure(task: asyncio.Task) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        get_logger().error("webhook_update_failed", exc_info=exc)


@router.post(WEBHOOK_PATH)
async def telegram_webhook(request: Request) -> dict:
    bot: Bot = request.app.state.bot
    dp: Dispatcher = request.app.state.dp
    body = await request.json()
    update = Update.model_validate(body, context={"bot": bot})
    if not request.app.state.settings.webhook_background:
        await dp.feed_update(bot, update)
        return {"ok": True}

    # Answer Telegram at once; transcription may outlive its webhook timeout
    task = asyncio.create_task(dp.feed_update(bot, update))
    tasks: set[asyncio.Task] = request.app.state.webhook_tasks
    tasks.add(task)
    task.add_done_callback(tasks.discard)
    task.add_done_callback(_log_task_failure)
    return {"ok": True}


async def register_webhook(bot: Bot, settings: Settings, dp: Dispatcher | None = None) -> bool:
    """Point Telegram at our webhook route. Failures are logged, never raised."""

    url = settings.webhook_endpoint
    logger = get_logger()
    if url is None:
        logger.info("webhook_registration_skipped", reason="WEBHOOK_URL not set")
        return False
    allowed = dp.resolve_used_update_types() if dp is not None else None
    try:
        await bot.set_webhook(url, allowed_updates=allowed)
    except Exception:
        logger.exception("webhook_registration_failed", url=url)
        return False
    logger.info("webhook_set", url=url)
    return True
