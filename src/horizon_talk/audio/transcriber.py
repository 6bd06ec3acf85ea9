"""Uploaded audio to text via the OpenAI transcription API."""

import structlog
from openai import AsyncOpenAI

from horizon_talk.errors import TranscriptionError

logger = structlog.get_logger()


class Transcriber:
    """Transcribes a recorded answer.

    Args:
        api_key: OpenAI API key.
        model: Transcription model.
        timeout: Per-request timeout in seconds.
        language: ISO-639-1 language hint.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "whisper-1",
        timeout: float = 30.0,
        language: str = "en",
    ):
        self.client = AsyncOpenAI(api_key=api_key, timeout=timeout, max_retries=0)
        self.model = model
        self.language = language

    async def transcribe(
        self,
        audio: bytes,
        filename: str = "audio.webm",
        content_type: str = "audio/webm",
    ) -> str:
        """Return the transcript text for ``audio``.

        Raises:
            TranscriptionError: On any service failure.
        """
        try:
            result = await self.client.audio.transcriptions.create(
                model=self.model,
                file=(filename, audio, content_type),
                language=self.language,
            )
        except Exception as e:
            logger.exception("transcription_failed", size=len(audio))
            raise TranscriptionError(f"transcription failed: {e}") from e

        transcript = (result.text or "").strip()
        logger.info("audio_transcribed", size=len(audio), chars=len(transcript))
        return transcript
