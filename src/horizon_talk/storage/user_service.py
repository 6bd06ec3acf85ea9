"""User data in the Firebase Realtime Database.

Tree layout::

    users/{uid}/profile               UserProfile
    users/{uid}/sessions/{pushId}     PracticeSession (append-only)
    users/{uid}/vocabulary/{pushId}   VocabularyWord

Collections are read whole and sorted here; the database holds no
ordering or index. Reads log failures and return empty/default values,
writes log and raise PersistenceError.
"""

from collections.abc import Callable
from datetime import datetime
from typing import Any, TypeVar

import structlog
from firebase_admin import db
from pydantic import BaseModel, ValidationError
from pydantic.alias_generators import to_camel

from horizon_talk.errors import PersistenceError, VocabularyWordNotFoundError
from horizon_talk.models.base import utc_now
from horizon_talk.models.session import PracticeSession
from horizon_talk.models.user_profile import UserIdentity, UserProfile, UserStats
from horizon_talk.models.vocabulary import VocabularyWord
from horizon_talk.vocabulary.review import categories, filter_words, needs_review

logger = structlog.get_logger()

ModelT = TypeVar("ModelT", bound=BaseModel)


def _store_value(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True, exclude_none=True)
    return value


def _store_updates(updates: dict[str, Any]) -> dict[str, Any]:
    return {to_camel(key): _store_value(value) for key, value in updates.items()}


def _children(value: Any, model: type[ModelT], user_id: str) -> list[ModelT]:
    """Build models from a ``{pushId: data}`` mapping, skipping bad entries."""
    if not isinstance(value, dict):
        return []
    items = []
    for key, data in value.items():
        try:
            items.append(model.model_validate({**data, "id": key}))
        except (ValidationError, TypeError):
            logger.warning("store_entry_parse_error", user_id=user_id, key=key, model=model.__name__)
    return items


class UserService:
    """CRUD over one user's partition of the realtime database.

    Args:
        reference: Factory returning a database reference for a path.
            Defaults to ``firebase_admin.db.reference`` on the default app.
    """

    def __init__(self, reference: Callable[[str], Any] | None = None):
        self._reference = reference or db.reference

    def _ref(self, user_id: str, *parts: str):
        if not user_id:
            raise ValueError("user_id is required")
        return self._reference("/".join(("users", user_id, *parts)))

    # Profile

    def create_profile(self, identity: UserIdentity) -> UserProfile:
        profile = UserProfile.from_identity(identity)
        try:
            self._ref(identity.uid, "profile").set(profile.to_store())
        except Exception as e:
            logger.exception("profile_create_failed", user_id=identity.uid)
            raise PersistenceError("failed to create profile") from e
        logger.info("profile_created", user_id=identity.uid)
        return profile

    def _read_profile(self, user_id: str) -> UserProfile | None:
        data = self._ref(user_id, "profile").get()
        return UserProfile.model_validate(data) if data else None

    def get_profile(self, user_id: str) -> UserProfile | None:
        try:
            return self._read_profile(user_id)
        except Exception:
            logger.exception("profile_read_failed", user_id=user_id)
            return None

    def update_profile(self, user_id: str, **updates: Any) -> None:
        payload = _store_updates(updates)
        payload["updatedAt"] = utc_now().isoformat()
        try:
            self._ref(user_id, "profile").update(payload)
        except Exception as e:
            logger.exception("profile_update_failed", user_id=user_id)
            raise PersistenceError("failed to update profile") from e

    def touch_login(self, user_id: str) -> None:
        self.update_profile(user_id, last_login_at=utc_now())

    def ensure_profile(self, identity: UserIdentity) -> UserProfile:
        """Create the profile on first sign-in, otherwise record the login.

        A failed read raises instead of being treated as "no profile", so an
        outage can never overwrite existing counters with a fresh profile.
        """
        try:
            profile = self._read_profile(identity.uid)
        except Exception as e:
            logger.exception("profile_read_failed", user_id=identity.uid)
            raise PersistenceError("failed to read profile") from e
        if profile is None:
            return self.create_profile(identity)
        self.touch_login(identity.uid)
        profile.last_login_at = utc_now()
        return profile

    def get_stats(self, user_id: str) -> UserStats:
        profile = self.get_profile(user_id)
        return profile.stats() if profile else UserStats()

    def _transact_profile(self, user_id: str, change: Callable[[UserProfile], None]) -> UserProfile:
        """Apply ``change`` to the profile inside a database transaction."""

        def apply(current: dict | None) -> dict:
            profile = UserProfile.model_validate(current) if current else UserProfile(uid=user_id)
            change(profile)
            return profile.to_store()

        try:
            result = self._ref(user_id, "profile").transaction(apply)
        except Exception as e:
            logger.exception("profile_transaction_failed", user_id=user_id)
            raise PersistenceError("failed to update profile counters") from e
        return UserProfile.model_validate(result)

    # Sessions

    def save_practice_session(self, session: PracticeSession) -> str:
        data = session.model_dump(mode="json", by_alias=True, exclude_none=True, exclude={"id"})
        try:
            new_ref = self._ref(session.user_id, "sessions").push(data)
        except Exception as e:
            logger.exception("session_save_failed", user_id=session.user_id)
            raise PersistenceError("failed to save practice session") from e
        logger.info("session_saved", user_id=session.user_id, session_id=new_ref.key)
        return new_ref.key

    def record_practice_session(self, session: PracticeSession) -> str:
        """Save a session, then fold it into the profile counters.

        The counter update is a transaction, so concurrent sessions from
        other tabs are not lost. The two writes are still separate: if the
        second fails the session exists without being counted.
        """
        session_id = self.save_practice_session(session)
        self._transact_profile(
            session.user_id,
            lambda profile: profile.fold_session(session.feedback.fluency_score, session.duration),
        )
        return session_id

    def get_sessions(self, user_id: str, limit: int = 10) -> list[PracticeSession]:
        try:
            value = self._ref(user_id, "sessions").get()
        except Exception:
            logger.exception("sessions_read_failed", user_id=user_id)
            return []
        sessions = _children(value, PracticeSession, user_id)
        sessions.sort(key=lambda s: s.created_at, reverse=True)
        return sessions[:limit]

    # Vocabulary

    def save_vocabulary_word(self, word: VocabularyWord) -> str:
        data = word.model_dump(mode="json", by_alias=True, exclude_none=True, exclude={"id"})
        try:
            new_ref = self._ref(word.user_id, "vocabulary").push(data)
        except Exception as e:
            logger.exception("vocabulary_save_failed", user_id=word.user_id)
            raise PersistenceError("failed to save vocabulary word") from e
        logger.info("vocabulary_saved", user_id=word.user_id, word=word.word)
        return new_ref.key

    def _read_vocabulary(self, user_id: str) -> list[VocabularyWord]:
        words = _children(self._ref(user_id, "vocabulary").get(), VocabularyWord, user_id)
        words.sort(key=lambda w: w.created_at, reverse=True)
        return words

    def get_vocabulary(
        self,
        user_id: str,
        search: str | None = None,
        category: str | None = None,
    ) -> list[VocabularyWord]:
        """Newest-first vocabulary, optionally narrowed by text and category."""
        try:
            words = self._read_vocabulary(user_id)
        except Exception:
            logger.exception("vocabulary_read_failed", user_id=user_id)
            return []
        return filter_words(words, search, category)

    def get_review_queue(self, user_id: str) -> list[VocabularyWord]:
        """Flashcards still due: not learned, or reviewed fewer than three times."""
        return [w for w in self.get_vocabulary(user_id) if needs_review(w)]

    def get_vocabulary_categories(self, user_id: str) -> list[str]:
        return categories(self.get_vocabulary(user_id))

    def update_vocabulary_word(self, user_id: str, word_id: str, **updates: Any) -> None:
        try:
            self._ref(user_id, "vocabulary", word_id).update(_store_updates(updates))
        except Exception as e:
            logger.exception("vocabulary_update_failed", user_id=user_id, word_id=word_id)
            raise PersistenceError("failed to update vocabulary word") from e

    def review_word(self, user_id: str, word_id: str, learned: bool) -> VocabularyWord:
        """Record one flashcard answer and refresh the learned-word count."""

        def apply(current: dict | None) -> dict:
            if not current:
                raise VocabularyWordNotFoundError(f"unknown vocabulary word {word_id}")
            word = VocabularyWord.model_validate(current)
            word.learned = learned
            word.review_count += 1
            word.last_reviewed = utc_now()
            return word.model_dump(mode="json", by_alias=True, exclude_none=True, exclude={"id"})

        try:
            result = self._ref(user_id, "vocabulary", word_id).transaction(apply)
        except VocabularyWordNotFoundError:
            logger.warning("vocabulary_review_unknown_word", user_id=user_id, word_id=word_id)
            raise
        except Exception as e:
            logger.exception("vocabulary_review_failed", user_id=user_id, word_id=word_id)
            raise PersistenceError("failed to review vocabulary word") from e

        reviewed = VocabularyWord.model_validate({**result, "id": word_id})
        try:
            learned_count = sum(1 for w in self._read_vocabulary(user_id) if w.learned)
        except Exception:
            # The review itself is stored; the counter catches up on the next one
            logger.exception("vocabulary_recount_failed", user_id=user_id)
            return reviewed

        def set_learned(profile: UserProfile) -> None:
            profile.vocabulary_learned = learned_count
            profile.updated_at = utc_now()

        try:
            self._transact_profile(user_id, set_learned)
        except PersistenceError:
            logger.warning("vocabulary_recount_failed", user_id=user_id)
        return reviewed

    def get_recent_words(self, user_id: str, limit: int = 50) -> list[str]:
        """Lowercase spellings of the user's newest vocabulary words."""
        return [w.word.lower() for w in self.get_vocabulary(user_id)[:limit]]
