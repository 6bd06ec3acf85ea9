"""Per-user progress and vocabulary routes over the persistence service."""

import asyncio

from fastapi import APIRouter, Depends, Query

from horizon_talk.api.dependencies import error_response, get_user_service
from horizon_talk.errors import PersistenceError, VocabularyWordNotFoundError
from horizon_talk.models.requests import ProfileUpdate, ReviewRequest, VocabularyWordCreate
from horizon_talk.models.session import PracticeSession
from horizon_talk.models.user_profile import UserProfile, UserStats
from horizon_talk.models.vocabulary import VocabularyWord
from horizon_talk.storage.user_service import UserService

router = APIRouter(prefix="/api/users/{user_id}")


@router.get("/profile", response_model=UserProfile)
async def get_profile(user_id: str, service: UserService = Depends(get_user_service)):
    profile = await asyncio.to_thread(service.get_profile, user_id)
    if profile is None:
        return error_response("Profile not found", 404)
    return profile


@router.patch("/profile", response_model=UserProfile)
async def update_profile(
    user_id: str,
    body: ProfileUpdate,
    service: UserService = Depends(get_user_service),
):
    """Update display name, bio and learning goals; returns the stored profile."""
    updates = body.model_dump(exclude_none=True)
    if not updates:
        return error_response("No profile fields provided", 400)
    # A partial update on a missing node would leave a profile without a uid
    if await asyncio.to_thread(service.get_profile, user_id) is None:
        return error_response("Profile not found", 404)
    try:
        await asyncio.to_thread(service.update_profile, user_id, **updates)
    except PersistenceError:
        return error_response("Failed to update profile", 500)
    profile = await asyncio.to_thread(service.get_profile, user_id)
    if profile is None:
        return error_response("Failed to update profile", 500)
    return profile


@router.get("/stats", response_model=UserStats)
async def get_stats(user_id: str, service: UserService = Depends(get_user_service)):
    return await asyncio.to_thread(service.get_stats, user_id)


@router.get("/sessions", response_model=list[PracticeSession])
async def list_sessions(
    user_id: str,
    limit: int = Query(default=10, ge=1, le=100),
    service: UserService = Depends(get_user_service),
):
    """Most recent practice sessions, newest first."""
    return await asyncio.to_thread(service.get_sessions, user_id, limit)


@router.get("/vocabulary", response_model=list[VocabularyWord])
async def list_vocabulary(
    user_id: str,
    search: str | None = None,
    category: str | None = None,
    service: UserService = Depends(get_user_service),
):
    """Newest first; `search` matches word or definition, `category=all` keeps every category."""
    return await asyncio.to_thread(service.get_vocabulary, user_id, search, category)


@router.get("/vocabulary/review-queue", response_model=list[VocabularyWord])
async def review_queue(user_id: str, service: UserService = Depends(get_user_service)):
    return await asyncio.to_thread(service.get_review_queue, user_id)


@router.get("/vocabulary/categories")
async def vocabulary_categories(
    user_id: str, service: UserService = Depends(get_user_service)
) -> list[str]:
    return await asyncio.to_thread(service.get_vocabulary_categories, user_id)


@router.post("/vocabulary", status_code=201)
async def add_vocabulary_word(
    user_id: str,
    body: VocabularyWordCreate,
    service: UserService = Depends(get_user_service),
) -> dict:
    word = VocabularyWord(user_id=user_id, **body.model_dump())
    try:
        word_id = await asyncio.to_thread(service.save_vocabulary_word, word)
    except PersistenceError:
        return error_response("Failed to save word", 500)
    return {"id": word_id}


@router.post("/vocabulary/{word_id}/review", response_model=VocabularyWord)
async def review_vocabulary_word(
    user_id: str,
    word_id: str,
    body: ReviewRequest,
    service: UserService = Depends(get_user_service),
):
    """Record a flashcard answer: learned or needs review."""
    try:
        return await asyncio.to_thread(service.review_word, user_id, word_id, body.learned)
    except VocabularyWordNotFoundError:
        return error_response("Word not found", 404)
    except PersistenceError:
        return error_response("Failed to update word", 500)
