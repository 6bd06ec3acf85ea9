"""Tests for the practice session state machine."""

import asyncio
import threading
from unittest.mock import AsyncMock, MagicMock

import pytest

from fakes import FakeRecognitionEngine
from horizon_talk.audio.recognition import SpeechCaptureAdapter
from horizon_talk.auth.context import UserContext
from horizon_talk.errors import (
    AnalysisFailedError,
    ApiClientError,
    EmptyTranscriptError,
    SessionStateError,
    SpeechCaptureUnavailableError,
)
from horizon_talk.models.session import SessionState
from horizon_talk.models.user_profile import UserIdentity
from horizon_talk.practice.orchestrator import PracticeSessionController


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def engine():
    return FakeRecognitionEngine()


@pytest.fixture
def analyzer(sample_feedback):
    mock = MagicMock()
    mock.analyze_speech = AsyncMock(return_value=sample_feedback)
    return mock


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def controller(engine, analyzer, clock):
    return PracticeSessionController(
        SpeechCaptureAdapter(engine), analyzer, restart_delay=0.01, clock=clock
    )


@pytest.fixture
def signed_in(user_service):
    context = UserContext(user_service)
    context.user = UserIdentity(uid="u1", email="sarah@example.com")
    return context


class TestRecording:
    async def test_start_enters_recording(self, controller, engine):
        controller.start_recording()
        assert controller.state is SessionState.RECORDING
        assert engine.start_count == 1

    async def test_unavailable_capture(self, analyzer):
        controller = PracticeSessionController(SpeechCaptureAdapter(), analyzer)
        with pytest.raises(SpeechCaptureUnavailableError):
            controller.start_recording()
        assert controller.state is SessionState.IDLE

    async def test_start_twice_rejected(self, controller):
        controller.start_recording()
        with pytest.raises(SessionStateError):
            controller.start_recording()

    async def test_stop_when_idle_rejected(self, controller):
        with pytest.raises(SessionStateError):
            controller.stop_recording()

    async def test_final_segments_joined_with_spaces(self, controller, engine):
        controller.start_recording()
        engine.emit(("Hello my name", True))
        engine.emit(("is Sarah", True))
        assert controller.transcript == "Hello my name is Sarah"

    async def test_partial_kept_separately_then_folded_on_stop(self, controller, engine):
        controller.start_recording()
        engine.emit(("I like", True), ("to tra", False))
        assert controller.transcript == "I like"
        assert controller.partial == "to tra"
        controller.stop_recording()
        assert controller.transcript == "I like to tra"
        assert controller.partial == ""

    async def test_duration_frozen_on_stop(self, controller, clock):
        controller.start_recording()
        clock.now += 42.7
        assert controller.elapsed_seconds == 42
        controller.stop_recording()
        clock.now += 10
        assert controller.duration_seconds == 42
        assert controller.elapsed_seconds == 42

    async def test_stop_does_not_restart(self, controller, engine):
        controller.start_recording()
        controller.stop_recording()
        await asyncio.sleep(0.05)
        assert controller.state is SessionState.STOPPED
        assert engine.start_count == 1
        assert controller.restart_count == 0


class TestRestart:
    async def test_engine_end_restarts_while_recording(self, controller, engine):
        controller.start_recording()
        engine.emit_end()
        await asyncio.sleep(0.05)
        assert engine.start_count == 2
        assert controller.restart_count == 1

    async def test_transcript_survives_restart(self, controller, engine):
        controller.start_recording()
        engine.emit(("first part", True))
        engine.emit_end()
        await asyncio.sleep(0.05)
        engine.emit(("second part", True))
        assert controller.transcript == "first part second part"

    async def test_stop_cancels_pending_restart(self, controller, engine):
        controller.start_recording()
        engine.emit_end()
        controller.stop_recording()
        await asyncio.sleep(0.05)
        assert engine.start_count == 1

    async def test_restart_budget(self, engine, analyzer):
        controller = PracticeSessionController(
            SpeechCaptureAdapter(engine), analyzer, restart_delay=0, max_restarts=2
        )
        controller.start_recording()
        for _ in range(4):
            engine.emit_end()
            await asyncio.sleep(0.01)
        assert engine.start_count == 3
        assert controller.state is SessionState.RECORDING

    async def test_fatal_error_disables_restart(self, controller, engine):
        controller.start_recording()
        engine.emit_error("not-allowed")
        engine.emit_end()
        await asyncio.sleep(0.05)
        assert engine.start_count == 1
        assert controller.errors == ["Speech recognition error: not-allowed"]

    async def test_transient_error_still_restarts(self, controller, engine):
        controller.start_recording()
        engine.emit_error("no-speech")
        engine.emit_end()
        await asyncio.sleep(0.05)
        assert engine.start_count == 2


class TestAnalysis:
    async def test_successful_analysis(self, controller, engine, analyzer, sample_feedback):
        controller.start_recording()
        engine.emit(("Hello my name is Sarah", True))
        controller.stop_recording()

        feedback = await controller.analyze("Introduce yourself")

        assert feedback == sample_feedback
        assert controller.state is SessionState.FEEDBACK
        analyzer.analyze_speech.assert_awaited_once_with(
            "Hello my name is Sarah", "Introduce yourself"
        )
        assert controller.persist_task is None

    async def test_empty_transcript_keeps_stopped(self, controller, analyzer):
        controller.start_recording()
        controller.stop_recording()
        with pytest.raises(EmptyTranscriptError):
            await controller.analyze("Introduce yourself")
        assert controller.state is SessionState.STOPPED
        analyzer.analyze_speech.assert_not_awaited()

    async def test_typed_transcript(self, controller, analyzer):
        controller.set_transcript("  I typed this instead  ")
        await controller.analyze("Describe your city")
        analyzer.analyze_speech.assert_awaited_once_with("I typed this instead", "Describe your city")

    async def test_analyze_while_recording_rejected(self, controller):
        controller.start_recording()
        with pytest.raises(SessionStateError):
            await controller.analyze("Introduce yourself")

    async def test_failure_then_retry(self, controller, analyzer, sample_feedback):
        controller.set_transcript("Hello there")
        analyzer.analyze_speech.side_effect = ApiClientError(500, "Failed to analyze speech")

        with pytest.raises(AnalysisFailedError):
            await controller.analyze("Introduce yourself")
        assert controller.state is SessionState.ANALYSIS_FAILED
        assert controller.transcript == "Hello there"

        analyzer.analyze_speech.side_effect = None
        analyzer.analyze_speech.return_value = sample_feedback
        assert await controller.analyze("Introduce yourself") == sample_feedback
        assert controller.state is SessionState.FEEDBACK

    async def test_new_recording_after_feedback(self, controller, engine):
        controller.set_transcript("Hello")
        await controller.analyze("Introduce yourself")
        controller.start_recording()
        assert controller.state is SessionState.RECORDING
        assert controller.transcript == ""
        assert controller.feedback is None


class TestPersistence:
    async def test_signed_in_session_recorded(
        self, engine, analyzer, clock, signed_in, fake_db
    ):
        controller = PracticeSessionController(
            SpeechCaptureAdapter(engine), analyzer, user_context=signed_in, clock=clock
        )
        controller.start_recording()
        engine.emit(("Hello my name is Sarah", True))
        clock.now += 90
        controller.stop_recording()

        await controller.analyze("Introduce yourself")
        await controller.persist_task

        user = fake_db.root["users"]["u1"]
        (session,) = user["sessions"].values()
        assert session["prompt"] == "Introduce yourself"
        assert session["duration"] == 90
        assert session["feedback"]["fluencyScore"] == 80
        assert user["profile"]["totalSessions"] == 1
        assert user["profile"]["fluencyScore"] == 80
        assert user["profile"]["speakingTime"] == 1.5
        assert controller.session_id == "-push0001"

    async def test_persist_failure_keeps_feedback(self, analyzer, signed_in, fake_db):
        controller = PracticeSessionController(
            SpeechCaptureAdapter(FakeRecognitionEngine()), analyzer, user_context=signed_in
        )
        controller.set_transcript("Hello")
        fake_db.fail = True

        await controller.analyze("Introduce yourself")
        await controller.persist_task

        assert controller.state is SessionState.FEEDBACK
        assert controller.persist_error is not None
        assert controller.session_id is None

    async def test_signed_out_context_skips_persistence(self, analyzer, user_service, fake_db):
        controller = PracticeSessionController(
            SpeechCaptureAdapter(FakeRecognitionEngine()),
            analyzer,
            user_context=UserContext(user_service),
        )
        controller.set_transcript("Hello")
        await controller.analyze("Introduce yourself")
        assert controller.persist_task is None
        assert fake_db.root == {}

    async def test_earlier_save_does_not_report_into_new_recording(
        self, engine, analyzer, signed_in, user_service
    ):
        release = threading.Event()
        record = user_service.record_practice_session

        def slow_record(session):
            release.wait(timeout=5)
            return record(session)

        user_service.record_practice_session = slow_record
        controller = PracticeSessionController(
            SpeechCaptureAdapter(engine), analyzer, user_context=signed_in
        )
        controller.set_transcript("first answer")
        await controller.analyze("Introduce yourself")
        earlier_save = controller.persist_task

        controller.start_recording()
        release.set()
        await earlier_save

        assert controller.state is SessionState.RECORDING
        assert controller.session_id is None
        assert controller.persist_error is None
        assert user_service.get_stats("u1").total_sessions == 1

    async def test_earlier_failure_does_not_report_into_new_recording(
        self, engine, analyzer, signed_in, user_service, fake_db
    ):
        release = threading.Event()
        record = user_service.record_practice_session

        def slow_record(session):
            release.wait(timeout=5)
            return record(session)

        user_service.record_practice_session = slow_record
        controller = PracticeSessionController(
            SpeechCaptureAdapter(engine), analyzer, user_context=signed_in
        )
        controller.set_transcript("first answer")
        await controller.analyze("Introduce yourself")
        earlier_save = controller.persist_task

        controller.start_recording()
        fake_db.fail = True
        release.set()
        await earlier_save

        assert controller.persist_error is None
