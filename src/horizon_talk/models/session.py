"""Practice session models."""

from enum import StrEnum

from pydantic import Field

from horizon_talk.models.base import CamelModel, UtcDatetime, utc_now
from horizon_talk.models.feedback import Feedback


class SessionState(StrEnum):
    """Practice session lifecycle states."""

    IDLE = "idle"
    RECORDING = "recording"
    STOPPED = "stopped"
    ANALYZING = "analyzing"
    FEEDBACK = "feedback"
    ANALYSIS_FAILED = "analysis_failed"


class PracticeSession(CamelModel):
    """One analysed speaking exercise. Written once, never updated."""

    id: str | None = None
    user_id: str
    prompt: str
    transcript: str
    feedback: Feedback
    created_at: UtcDatetime = Field(default_factory=utc_now)
    duration: int = Field(default=0, ge=0)  # seconds
