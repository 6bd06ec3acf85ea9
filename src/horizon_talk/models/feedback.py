"""Speech feedback models."""

from pydantic import Field

from horizon_talk.models.base import CamelModel


class ImprovedWord(CamelModel):
    """A vocabulary word the speaker could have used."""

    word: str
    definition: str
    example: str


class Feedback(CamelModel):
    """Structured feedback for one transcript.

    Bounds mirror the schema given to the generative service; a response
    outside them is rejected rather than clamped.
    """

    fluency_score: float = Field(ge=0, le=100)
    grammar_score: float = Field(ge=0, le=100)
    vocabulary_usage: int = Field(ge=0, le=5)
    filler_words: int = Field(ge=0)
    suggestions: list[str] = Field(default_factory=list, max_length=5)
    improved_vocabulary: list[ImprovedWord] = Field(default_factory=list, max_length=5)
