"""Request bodies accepted by the HTTP API.

Required fields are optional here so that a missing value reaches the
route and is answered with a 400 ``{"error": ...}`` body instead of a
framework validation error.
"""

from typing import Literal

from pydantic import Field

from horizon_talk.models.base import CamelModel
from horizon_talk.models.vocabulary import Difficulty


class AnalyzeSpeechRequest(CamelModel):
    transcript: str | None = None
    prompt: str | None = None


class DailyWordsRequest(CamelModel):
    count: int = 10
    user_id: str | None = None


class PromptRequest(CamelModel):
    category: str = "general"
    difficulty: str = "intermediate"


class WordDetailsRequest(CamelModel):
    word: str | None = None
    category: str = "general"
    difficulty: str = "intermediate"


class ContactRequest(CamelModel):
    name: str | None = None
    email: str | None = None
    subject: str | None = None
    message: str | None = None


class FeedbackFormRequest(CamelModel):
    rating: int | None = None
    category: str | None = None
    subject: str | None = None
    message: str | None = None
    user_id: str | None = None
    user_email: str | None = None


class ChatMessage(CamelModel):
    role: Literal["user", "assistant"]
    content: str


class ChatRequest(CamelModel):
    messages: list[ChatMessage] = Field(default_factory=list)


class ReviewRequest(CamelModel):
    learned: bool


class VocabularyWordCreate(CamelModel):
    """Manual entry or a kept daily suggestion."""

    word: str = Field(min_length=1)
    definition: str
    example: str
    pronunciation: str = ""
    difficulty: Difficulty = Difficulty.INTERMEDIATE
    category: str = "general"


class ProfileUpdate(CamelModel):
    """Editable profile fields; omitted fields are left unchanged."""

    display_name: str | None = None
    bio: str | None = None
    learning_goals: str | None = None
