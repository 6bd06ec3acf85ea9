"""Server-side transcription of uploaded audio."""

import structlog
from fastapi import APIRouter, Depends, File, UploadFile

from horizon_talk.api.dependencies import error_response, get_transcriber
from horizon_talk.audio.transcriber import Transcriber
from horizon_talk.errors import TranscriptionError

logger = structlog.get_logger()
router = APIRouter(prefix="/api")


@router.post("/transcribe")
async def transcribe(
    audio: UploadFile | None = File(default=None),
    transcriber: Transcriber | None = Depends(get_transcriber),
) -> dict:
    if audio is None:
        return error_response("No audio file provided", 400)
    if transcriber is None:
        logger.error("transcription_not_configured")
        return error_response("Speech service API key not configured", 500)

    data = await audio.read()
    if not data:
        return error_response("No audio file provided", 400)
    try:
        transcript = await transcriber.transcribe(
            data,
            filename=audio.filename or "audio.webm",
            content_type=audio.content_type or "application/octet-stream",
        )
    except TranscriptionError:
        return error_response("Failed to transcribe audio", 500)
    return {"transcript": transcript}
