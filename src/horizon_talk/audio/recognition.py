"""Continuous speech-to-text adapter over a platform recognition engine."""

from collections.abc import Callable, Sequence
from typing import Protocol

import structlog
from pydantic import BaseModel

logger = structlog.get_logger()


class RecognitionResult(BaseModel):
    """One recognized segment reported by the engine."""

    transcript: str
    is_final: bool


ResultsHandler = Callable[[Sequence[RecognitionResult]], None]


class RecognitionEngine(Protocol):
    """Platform speech recognizer (e.g. a browser's SpeechRecognition)."""

    def configure(
        self,
        *,
        language: str,
        continuous: bool,
        interim_results: bool,
        max_alternatives: int,
    ) -> None: ...

    def start(
        self,
        on_results: ResultsHandler,
        on_error: Callable[[str], None],
        on_end: Callable[[], None],
    ) -> None: ...

    def stop(self) -> None: ...


class SpeechCaptureAdapter:
    """Forwards final and interim text from a recognition engine.

    The adapter never restarts the engine by itself; when the engine ends
    (silence timeout, transient error) ``on_end`` fires and the caller
    decides whether to call ``start`` again.

    Args:
        engine: Platform recognizer, or None when the platform has none.
        language: BCP-47 recognition language.
    """

    def __init__(self, engine: RecognitionEngine | None = None, language: str = "en-US"):
        self.engine = engine
        self.language = language
        self.last_error_code: str | None = None
        self._listening = False
        if engine is not None:
            engine.configure(
                language=language,
                continuous=True,
                interim_results=True,
                max_alternatives=1,
            )

    def is_available(self) -> bool:
        return self.engine is not None

    @property
    def is_listening(self) -> bool:
        return self._listening

    def start(
        self,
        on_partial: Callable[[str], None],
        on_final: Callable[[str], None],
        on_error: Callable[[str], None],
        on_end: Callable[[], None] | None = None,
    ) -> None:
        """Start listening. Problems are reported through ``on_error``, never raised."""
        if self.engine is None:
            on_error("Speech recognition not supported on this platform")
            return
        if self._listening:
            return

        def handle_results(results: Sequence[RecognitionResult]) -> None:
            final = "".join(r.transcript for r in results if r.is_final)
            interim = "".join(r.transcript for r in results if not r.is_final)
            if final:
                on_final(final)
            if interim:
                on_partial(interim)

        def handle_error(code: str) -> None:
            self._listening = False
            self.last_error_code = code
            logger.warning("speech_recognition_error", code=code)
            on_error(f"Speech recognition error: {code}")

        def handle_end() -> None:
            self._listening = False
            if on_end:
                on_end()

        self.last_error_code = None
        self._listening = True
        try:
            self.engine.start(handle_results, handle_error, handle_end)
        except Exception:
            self._listening = False
            logger.exception("speech_recognition_start_failed")
            on_error("Failed to start speech recognition")
            return
        logger.debug("speech_recognition_started", language=self.language)

    def stop(self) -> None:
        """Stop listening. Safe to call repeatedly."""
        if self.engine is not None and self._listening:
            self._listening = False
            self.engine.stop()
            logger.debug("speech_recognition_stopped")
