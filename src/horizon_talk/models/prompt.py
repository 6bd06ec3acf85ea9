"""Speaking practice prompt model."""

from pydantic import Field

from horizon_talk.models.base import CamelModel
from horizon_talk.models.vocabulary import Difficulty


class SpeakingPrompt(CamelModel):
    title: str
    description: str
    vocabulary: list[str] = Field(min_length=5, max_length=5)
    difficulty: Difficulty
    category: str
    tips: list[str] = Field(default_factory=list, max_length=3)
