"""Vocabulary models."""

from enum import StrEnum

from pydantic import Field

from horizon_talk.models.base import CamelModel, UtcDatetime, utc_now


class Difficulty(StrEnum):
    """Word and prompt difficulty levels."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class WordDetails(CamelModel):
    """Definition card for a single word."""

    word: str = Field(min_length=1)
    definition: str
    example: str
    pronunciation: str


class DailyWordSuggestion(WordDetails):
    """Generated word of the day. Not persisted until the user keeps it."""

    difficulty: Difficulty
    category: str

    def to_vocabulary_word(self, user_id: str) -> "VocabularyWord":
        return VocabularyWord(
            user_id=user_id,
            word=self.word,
            definition=self.definition,
            example=self.example,
            pronunciation=self.pronunciation,
            difficulty=self.difficulty,
            category=self.category,
        )


class DailyWords(CamelModel):
    words: list[DailyWordSuggestion]


class VocabularyWord(CamelModel):
    """A user-owned flashcard."""

    id: str | None = None
    user_id: str
    word: str
    definition: str
    example: str
    pronunciation: str = ""
    difficulty: Difficulty = Difficulty.INTERMEDIATE
    category: str = "general"
    learned: bool = False
    review_count: int = Field(default=0, ge=0)
    last_reviewed: UtcDatetime | None = None
    created_at: UtcDatetime = Field(default_factory=utc_now)
