"""Practice session controller: record, analyse, persist.

State machine::

    IDLE -> RECORDING -> STOPPED -> ANALYZING -> FEEDBACK
                                       |
                                       +-> ANALYSIS_FAILED -> (retry) ANALYZING

All callbacks run on the event loop that called ``start_recording``.
"""

import asyncio
import time
from collections.abc import Callable
from typing import Protocol

import structlog

from horizon_talk.audio.recognition import SpeechCaptureAdapter
from horizon_talk.auth.context import UserContext
from horizon_talk.errors import (
    AnalysisFailedError,
    EmptyTranscriptError,
    PersistenceError,
    SessionStateError,
    SpeechCaptureUnavailableError,
)
from horizon_talk.models.feedback import Feedback
from horizon_talk.models.session import PracticeSession, SessionState

logger = structlog.get_logger()

# Engine errors after which restarting cannot help
FATAL_RECOGNITION_ERRORS = frozenset({"not-allowed", "service-not-allowed", "audio-capture"})


class SpeechAnalyzer(Protocol):
    async def analyze_speech(self, transcript: str, prompt: str) -> Feedback: ...


class PracticeSessionController:
    """Drives one practice session at a time.

    The recognizer stops on its own after silence; while the controller is
    RECORDING it restarts the adapter after ``restart_delay`` seconds, at
    most ``max_restarts`` times per recording.

    Args:
        capture: Speech capture adapter.
        analyzer: Anything with ``analyze_speech`` (normally HorizonTalkClient).
        user_context: Signed-in user; sessions are only persisted when present.
        restart_delay: Seconds between an engine end event and the restart.
        max_restarts: Restart budget per recording.
        clock: Monotonic clock, replaceable in tests.
    """

    def __init__(
        self,
        capture: SpeechCaptureAdapter,
        analyzer: SpeechAnalyzer,
        user_context: UserContext | None = None,
        restart_delay: float = 0.1,
        max_restarts: int = 50,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.capture = capture
        self.analyzer = analyzer
        self.user_context = user_context
        self.restart_delay = restart_delay
        self.max_restarts = max_restarts
        self._clock = clock

        self.state = SessionState.IDLE
        self.partial = ""
        self.errors: list[str] = []
        self.duration_seconds = 0
        self.feedback: Feedback | None = None
        self.prompt: str | None = None
        self.session_id: str | None = None
        self.persist_task: asyncio.Task | None = None
        self.persist_error: Exception | None = None

        self._segments: list[str] = []
        self._started_at: float | None = None
        self._restarts = 0
        self._restart_enabled = True
        self._restart_handle: asyncio.TimerHandle | None = None
        self._loop: asyncio.AbstractEventLoop | None = None

    @property
    def transcript(self) -> str:
        return " ".join(self._segments)

    @property
    def elapsed_seconds(self) -> int:
        """Recording time so far (frozen once stopped)."""
        if self.state is SessionState.RECORDING and self._started_at is not None:
            return int(self._clock() - self._started_at)
        return self.duration_seconds

    @property
    def restart_count(self) -> int:
        return self._restarts

    # Recording

    def start_recording(self) -> None:
        if self.state in (SessionState.RECORDING, SessionState.ANALYZING):
            raise SessionStateError(f"cannot start recording while {self.state}")
        if not self.capture.is_available():
            raise SpeechCaptureUnavailableError(
                "Speech recognition is not available; type your response instead"
            )

        self._loop = asyncio.get_running_loop()
        self._segments = []
        self.partial = ""
        self.errors = []
        self.feedback = None
        self.session_id = None
        self.persist_task = None
        self.persist_error = None
        self.duration_seconds = 0
        self._restarts = 0
        self._restart_enabled = True
        self._started_at = self._clock()
        self.state = SessionState.RECORDING
        logger.info("recording_started")
        self._start_capture()

    def stop_recording(self) -> None:
        if self.state is not SessionState.RECORDING:
            raise SessionStateError(f"cannot stop recording while {self.state}")

        # Leave RECORDING first so the end event from stop() does not restart
        self.state = SessionState.STOPPED
        self._cancel_restart()
        self.capture.stop()
        if self.partial.strip():
            self._segments.append(self.partial.strip())
        self.partial = ""
        if self._started_at is not None:
            self.duration_seconds = int(self._clock() - self._started_at)
        logger.info(
            "recording_stopped",
            duration_seconds=self.duration_seconds,
            restarts=self._restarts,
        )

    def set_transcript(self, text: str) -> None:
        """Use typed text instead of (or to correct) the recorded transcript."""
        if self.state in (SessionState.RECORDING, SessionState.ANALYZING):
            raise SessionStateError(f"cannot edit the transcript while {self.state}")
        text = text.strip()
        self._segments = [text] if text else []
        self.partial = ""
        self.feedback = None
        self.state = SessionState.STOPPED

    def _start_capture(self) -> None:
        self.capture.start(self._on_partial, self._on_final, self._on_error, self._on_end)

    def _on_partial(self, text: str) -> None:
        if self.state is SessionState.RECORDING:
            self.partial = text

    def _on_final(self, text: str) -> None:
        if self.state is SessionState.RECORDING and text.strip():
            self._segments.append(text.strip())
            self.partial = ""

    def _on_error(self, message: str) -> None:
        self.errors.append(message)
        if self.capture.last_error_code in FATAL_RECOGNITION_ERRORS:
            self._restart_enabled = False
        logger.warning("recording_error", message=message, restart_enabled=self._restart_enabled)

    def _on_end(self) -> None:
        if self.state is not SessionState.RECORDING or not self._restart_enabled:
            return
        if self._restarts >= self.max_restarts:
            logger.warning("recording_restart_budget_exhausted", restarts=self._restarts)
            return
        self._restarts += 1
        self._restart_handle = self._loop.call_later(self.restart_delay, self._restart)

    def _restart(self) -> None:
        self._restart_handle = None
        if self.state is SessionState.RECORDING:
            logger.debug("recording_restarted", attempt=self._restarts)
            self._start_capture()

    def _cancel_restart(self) -> None:
        if self._restart_handle is not None:
            self._restart_handle.cancel()
            self._restart_handle = None

    # Analysis

    async def analyze(self, prompt_title: str) -> Feedback:
        """Request feedback for the transcript; also used to retry a failure.

        Raises:
            SessionStateError: Not STOPPED or ANALYSIS_FAILED.
            EmptyTranscriptError: Nothing to analyse; the state stays STOPPED.
            AnalysisFailedError: The endpoint failed; state is ANALYSIS_FAILED.
        """
        if self.state not in (SessionState.STOPPED, SessionState.ANALYSIS_FAILED):
            raise SessionStateError(f"cannot analyze while {self.state}")

        transcript = self.transcript.strip()
        if not transcript:
            self.state = SessionState.STOPPED
            raise EmptyTranscriptError("Please record some speech or type your response first")

        self.state = SessionState.ANALYZING
        self.prompt = prompt_title
        try:
            feedback = await self.analyzer.analyze_speech(transcript, prompt_title)
        except Exception as e:
            self.state = SessionState.ANALYSIS_FAILED
            logger.warning("analysis_failed", error=str(e))
            raise AnalysisFailedError("Analysis failed, please try again") from e

        self.feedback = feedback
        self.state = SessionState.FEEDBACK
        logger.info("analysis_complete", fluency=feedback.fluency_score)

        user_id = self.user_context.user_id if self.user_context else None
        if user_id:
            session = PracticeSession(
                user_id=user_id,
                prompt=prompt_title,
                transcript=transcript,
                feedback=feedback,
                duration=self.duration_seconds,
            )
            self.persist_task = asyncio.create_task(self._persist(session))
        return feedback

    async def _persist(self, session: PracticeSession) -> None:
        """Best-effort write; failure is recorded, the FEEDBACK state stays.

        A save that outlives its attempt (a new recording was started) still
        completes but no longer reports into the controller.
        """
        try:
            session_id = await asyncio.to_thread(
                self.user_context.user_service.record_practice_session, session
            )
        except PersistenceError as e:
            logger.warning("session_persist_failed", user_id=session.user_id)
            if self.persist_task is asyncio.current_task():
                self.persist_error = e
            return
        if self.persist_task is asyncio.current_task():
            self.session_id = session_id
        else:
            logger.debug("session_persisted_after_reset", session_id=session_id)
