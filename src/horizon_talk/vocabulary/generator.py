"""AI-assisted vocabulary: daily word lists and single-word detail cards."""

from collections.abc import Iterable

import structlog

from horizon_talk.conversation.prompts import (
    DAILY_WORDS_EXCLUSION,
    DAILY_WORDS_PROMPT,
    WORD_DETAILS_PROMPT,
)
from horizon_talk.generation.structured import StructuredGenerator
from horizon_talk.models.vocabulary import DailyWords, DailyWordSuggestion, WordDetails

logger = structlog.get_logger()


def filter_previous_words(
    words: list[DailyWordSuggestion],
    previous_words: Iterable[str],
) -> list[DailyWordSuggestion]:
    """Drop suggestions whose lowercase form matches a previously served word."""
    seen = {w.strip().lower() for w in previous_words if w and w.strip()}
    if not seen:
        return list(words)
    return [w for w in words if w.word.strip().lower() not in seen]


class VocabularyGenerator:
    """Generates vocabulary content through the structured generator.

    Args:
        generator: Structured generation client.
    """

    def __init__(self, generator: StructuredGenerator):
        self.generator = generator

    async def daily_words(
        self,
        count: int = 10,
        previous_words: list[str] | None = None,
    ) -> list[DailyWordSuggestion]:
        """Generate a daily word list, steering away from ``previous_words``.

        The exclusion is best effort: the service is asked to avoid the
        listed words and any that slip through are removed locally.
        """
        previous_words = previous_words or []
        exclusions = (
            DAILY_WORDS_EXCLUSION.format(words=", ".join(previous_words))
            if previous_words
            else ""
        )
        result = await self.generator.generate(
            DAILY_WORDS_PROMPT.format(count=count, exclusions=exclusions),
            DailyWords,
            temperature=0.9,
        )
        words = filter_previous_words(result.words, previous_words)
        dropped = len(result.words) - len(words)
        if dropped:
            logger.info("daily_words_repeats_dropped", dropped=dropped)
        logger.info("daily_words_generated", requested=count, returned=len(words))
        return words

    async def word_details(
        self,
        word: str,
        category: str = "general",
        difficulty: str = "intermediate",
    ) -> WordDetails:
        """Definition, example and pronunciation for one word.

        The returned ``word`` may carry a corrected spelling.
        """
        details = await self.generator.generate(
            WORD_DETAILS_PROMPT.format(word=word, category=category, difficulty=difficulty),
            WordDetails,
            temperature=0.3,
        )
        logger.info("word_details_generated", word=details.word)
        return details
