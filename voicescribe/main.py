from __future__ import annotations

"""FastAPI app entry: upload form, Telegram webhook, healthz, metrics."""

import asyncio
import uuid
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse
import structlog
import uvicorn

from voicescribe.bot.loader import setup_bot
from voicescribe.bot.webhook import register_webhook, router as webhook_router
from voicescribe.config.settings import Settings, get_settings
from voicescribe.schemas.transcription import ErrorResponse
from voicescribe.services.errors import NoFileUploaded, VoicescribeError
from voicescribe.services.fetcher import RemoteFetcher
from voicescribe.services.logging import configure_logging, get_logger, install_exception_hooks
from voicescribe.services.metrics import metrics
from voicescribe.services.stt import ElevenLabsTranscriber
from voicescribe.web.upload import router as upload_router


logger = get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    install_exception_hooks(asyncio.get_running_loop())
    settings: Settings = app.state.settings
    bot = app.state.bot
    if bot is not None:
        await register_webhook(bot, settings, app.state.dp)
    logger.info("startup", port=settings.port, transcription_enabled=app.state.transcriber.available)
    yield
    pending = list(app.state.webhook_tasks)
    if pending:
        await asyncio.gather(*pending, return_exceptions=True)
    if bot is not None:
        await bot.session.close()


async def _handle_known_error(request: Request, exc: VoicescribeError) -> JSONResponse:
    return JSONResponse(ErrorResponse(error=exc.public_message).model_dump(), status_code=exc.status_code)


async def _handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    # A non-file value in the upload field counts as a missing file
    if request.url.path == "/upload":
        return await _handle_known_error(request, NoFileUploaded())
    return await request_validation_exception_handler(request, exc)


async def _handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "request_failed",
        url=str(request.url),
        method=request.method,
        exc_info=exc,
    )
    return JSONResponse(ErrorResponse(error="Internal server error").model_dump(), status_code=500)


def create_app(
    settings: Settings | None = None,
    *,
    transcriber: ElevenLabsTranscriber | None = None,
    fetcher: RemoteFetcher | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)
    settings.upload_dir.mkdir(parents=True, exist_ok=True)

    app = FastAPI(lifespan=lifespan)
    app.state.settings = settings
    app.state.transcriber = transcriber or ElevenLabsTranscriber.from_settings(settings)
    app.state.fetcher = fetcher or RemoteFetcher.from_settings(settings)
    app.state.bot = None
    app.state.dp = None
    app.state.webhook_tasks = set()

    app.add_exception_handler(VoicescribeError, _handle_known_error)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _handle_validation_error)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _handle_unexpected_error)

    app.include_router(upload_router)
    if setup_bot(app, settings) is not None:
        app.include_router(webhook_router)

    @app.middleware("http")
    async def add_trace_id(request: Request, call_next):
        trace_id = request.headers.get("X-Trace-Id") or uuid.uuid4().hex
        structlog.contextvars.bind_contextvars(trace_id=trace_id)
        try:
            response = await call_next(request)
        finally:
            structlog.contextvars.clear_contextvars()
        return response

    @app.get("/healthz", response_class=PlainTextResponse)
    async def healthz() -> str:
        return "ok"

    @app.get("/metrics", response_class=PlainTextResponse)
    async def metrics_endpoint() -> str:
        return metrics.to_prometheus()

    return app


def run() -> None:
    settings = get_settings()
    install_exception_hooks()
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_config=None,
        timeout_keep_alive=120,
    )


if __name__ == "__main__":
    run()
