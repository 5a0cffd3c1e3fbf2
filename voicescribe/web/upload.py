from __future__ import annotations

"""Upload form and the multipart transcription endpoint."""

import time
import uuid
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, File, Request, UploadFile
from fastapi.responses import HTMLResponse

from voicescribe.schemas.transcription import UploadResponse
from voicescribe.services.errors import NoFileUploaded, TranscriptionError
from voicescribe.services.logging import get_logger
from voicescribe.services.media import extension_of, mime_type_for
from voicescribe.services.metrics import metrics
from voicescribe.services.stt import ElevenLabsTranscriber


router = APIRouter()

_INDEX_HTML = Path(__file__).parent / "static" / "index.html"
_CHUNK_SIZE = 1024 * 1024


def temp_name(original: str | None) -> str:
    """Timestamp plus a random suffix so same-millisecond uploads never collide."""

    return f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}{extension_of(original)}"


async def _save(file: UploadFile, dest: Path) -> None:
    # Save to disk in chunks
    with dest.open("wb") as out:
        while True:
            chunk = await file.read(_CHUNK_SIZE)
            if not chunk:
                break
            out.write(chunk)


def _discard(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as exc:
        get_logger().warning("temp_file_cleanup_failed", path=str(path), error=str(exc))


@router.get("/", response_class=HTMLResponse)
async def index() -> str:
    return _INDEX_HTML.read_text(encoding="utf-8")


@router.post("/upload")
async def upload_audio(
    request: Request,
    audio_file: Optional[UploadFile] = File(default=None, alias="audioFile"),
) -> dict:
    if audio_file is None or not audio_file.filename:
        raise NoFileUploaded()

    transcriber: ElevenLabsTranscriber = request.app.state.transcriber
    transcriber.ensure_available()

    upload_dir: Path = request.app.state.settings.upload_dir
    path = upload_dir / temp_name(audio_file.filename)
    mime_type = mime_type_for(audio_file.filename)
    logger = get_logger().bind(filename=audio_file.filename, mime_type=mime_type)
    logger.info("upload_received", temp_path=path.name)

    try:
        await _save(audio_file, path)
        with metrics.track_transcription("upload"):
            result = await transcriber.transcribe(
                path.read_bytes(), mime_type, filename=audio_file.filename
            )
    except Exception:
        logger.exception("upload_transcription_failed")
        raise TranscriptionError()
    finally:
        _discard(path)

    return UploadResponse(
        filename=audio_file.filename,
        transcription=result.model_dump(mode="json"),
    ).model_dump()
