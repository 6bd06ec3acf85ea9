"""FastAPI dependency providers for services and clients."""

import functools

from fastapi.responses import JSONResponse

from horizon_talk.analysis.feedback import FeedbackGenerator
from horizon_talk.audio.transcriber import Transcriber
from horizon_talk.config import get_settings
from horizon_talk.conversation.chat import ChatPartner
from horizon_talk.conversation.prompt_generator import SpeakingPromptGenerator
from horizon_talk.generation.structured import StructuredGenerator
from horizon_talk.storage.user_service import UserService
from horizon_talk.vocabulary.generator import VocabularyGenerator


def error_response(message: str, status_code: int) -> JSONResponse:
    """JSON error body shared by every route: ``{"error": message}``."""
    return JSONResponse({"error": message}, status_code=status_code)


@functools.lru_cache
def get_structured_generator() -> StructuredGenerator:
    settings = get_settings()
    return StructuredGenerator(
        api_key=settings.openai_api_key,
        model=settings.generation_model,
        timeout=settings.llm_timeout_seconds,
    )


def get_feedback_generator() -> FeedbackGenerator:
    return FeedbackGenerator(get_structured_generator())


def get_vocabulary_generator() -> VocabularyGenerator:
    return VocabularyGenerator(get_structured_generator())


def get_prompt_generator() -> SpeakingPromptGenerator:
    return SpeakingPromptGenerator(get_structured_generator())


@functools.lru_cache
def get_chat_partner() -> ChatPartner:
    settings = get_settings()
    return ChatPartner(
        api_key=settings.openai_api_key,
        model=settings.generation_model,
        timeout=settings.llm_timeout_seconds,
    )


def get_transcriber() -> Transcriber | None:
    """Transcriber, or None when no speech service key is configured."""
    settings = get_settings()
    if not settings.openai_api_key:
        return None
    return _transcriber(
        settings.openai_api_key, settings.transcription_model, settings.llm_timeout_seconds
    )


@functools.lru_cache
def _transcriber(api_key: str, model: str, timeout: float) -> Transcriber:
    return Transcriber(api_key=api_key, model=model, timeout=timeout)


@functools.lru_cache
def get_user_service() -> UserService:
    return UserService()
