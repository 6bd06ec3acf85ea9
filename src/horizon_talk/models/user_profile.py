"""User profile model for tracking learning progress across sessions."""

from pydantic import Field

from horizon_talk.models.base import CamelModel, UtcDatetime, utc_now


class UserIdentity(CamelModel):
    """Authenticated user as reported by the identity provider."""

    uid: str
    email: str = ""
    display_name: str | None = None


class UserStats(CamelModel):
    total_sessions: int = 0
    vocabulary_learned: int = 0
    speaking_time: float = 0.0
    fluency_score: float = 0.0


class UserProfile(CamelModel):
    uid: str
    email: str = ""
    display_name: str | None = None
    bio: str | None = None
    learning_goals: str | None = None
    created_at: UtcDatetime = Field(default_factory=utc_now)
    last_login_at: UtcDatetime = Field(default_factory=utc_now)
    updated_at: UtcDatetime | None = None
    fluency_score: float = 0.0
    total_sessions: int = 0
    vocabulary_learned: int = 0
    speaking_time: float = 0.0  # minutes

    @classmethod
    def from_identity(cls, identity: UserIdentity) -> "UserProfile":
        return cls(
            uid=identity.uid,
            email=identity.email,
            display_name=identity.display_name,
        )

    def fold_session(self, fluency_score: float, duration_seconds: int) -> None:
        """Add one analysed session to the aggregate counters.

        The fluency score is the mean over all sessions; speaking time
        accumulates in minutes.
        """
        previous = self.total_sessions
        self.fluency_score = round(
            (self.fluency_score * previous + fluency_score) / (previous + 1), 1
        )
        self.total_sessions = previous + 1
        self.speaking_time = round(self.speaking_time + duration_seconds / 60, 2)
        self.updated_at = utc_now()

    def stats(self) -> UserStats:
        return UserStats(
            total_sessions=self.total_sessions,
            vocabulary_learned=self.vocabulary_learned,
            speaking_time=self.speaking_time,
            fluency_score=self.fluency_score,
        )
