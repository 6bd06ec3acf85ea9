"""In-process filtering of a user's vocabulary list."""

from horizon_talk.models.vocabulary import VocabularyWord

ALL_CATEGORIES = "all"

# A learned word leaves the review queue after this many reviews
REVIEW_TARGET = 3


def filter_words(
    words: list[VocabularyWord],
    search: str | None = None,
    category: str | None = None,
) -> list[VocabularyWord]:
    """Keep words whose spelling or definition contains ``search`` (case-insensitive)
    and whose category matches; ``"all"`` or None matches every category."""
    needle = (search or "").strip().lower()
    result = []
    for word in words:
        if needle and needle not in word.word.lower() and needle not in word.definition.lower():
            continue
        if category and category != ALL_CATEGORIES and word.category != category:
            continue
        result.append(word)
    return result


def needs_review(word: VocabularyWord) -> bool:
    return not word.learned or word.review_count < REVIEW_TARGET


def categories(words: list[VocabularyWord]) -> list[str]:
    """``"all"`` followed by each distinct category in first-seen order."""
    return [ALL_CATEGORIES, *dict.fromkeys(w.category for w in words)]
