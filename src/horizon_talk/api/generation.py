"""AI-backed routes: speech feedback, vocabulary, prompts and chat.

Every route validates its input first (400 without calling the service)
and collapses any service failure into a generic 500 message; the
underlying error is only logged.
"""

import asyncio

import structlog
from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from horizon_talk.analysis.feedback import FeedbackGenerator
from horizon_talk.api.dependencies import (
    error_response,
    get_chat_partner,
    get_feedback_generator,
    get_prompt_generator,
    get_user_service,
    get_vocabulary_generator,
)
from horizon_talk.config import Settings, get_settings
from horizon_talk.conversation.chat import ChatPartner
from horizon_talk.conversation.prompt_generator import SpeakingPromptGenerator
from horizon_talk.errors import GenerationError
from horizon_talk.models.feedback import Feedback
from horizon_talk.models.prompt import SpeakingPrompt
from horizon_talk.models.requests import (
    AnalyzeSpeechRequest,
    ChatRequest,
    DailyWordsRequest,
    PromptRequest,
    WordDetailsRequest,
)
from horizon_talk.models.vocabulary import DailyWords, WordDetails
from horizon_talk.storage.user_service import UserService
from horizon_talk.vocabulary.generator import VocabularyGenerator

logger = structlog.get_logger()
router = APIRouter(prefix="/api")

MAX_DAILY_WORDS = 50


@router.post("/analyze-speech", response_model=Feedback)
async def analyze_speech(
    body: AnalyzeSpeechRequest,
    analyzer: FeedbackGenerator = Depends(get_feedback_generator),
):
    """Score a transcript against the prompt it answered."""
    transcript = (body.transcript or "").strip()
    prompt = (body.prompt or "").strip()
    if not transcript or not prompt:
        return error_response("Missing transcript or prompt", 400)
    try:
        return await analyzer.analyze(transcript, prompt)
    except GenerationError:
        return error_response("Failed to analyze speech", 500)


@router.post("/generate-daily-words", response_model=DailyWords)
async def generate_daily_words(
    body: DailyWordsRequest,
    generator: VocabularyGenerator = Depends(get_vocabulary_generator),
    user_service: UserService = Depends(get_user_service),
    settings: Settings = Depends(get_settings),
):
    """Daily word list, avoiding words the user already has when known."""
    if not 1 <= body.count <= MAX_DAILY_WORDS:
        return error_response(f"Count must be between 1 and {MAX_DAILY_WORDS}", 400)

    previous_words: list[str] = []
    if body.user_id:
        previous_words = await asyncio.to_thread(
            user_service.get_recent_words, body.user_id, settings.daily_words_history_limit
        )
    try:
        words = await generator.daily_words(body.count, previous_words)
    except GenerationError:
        return error_response("Failed to generate daily words", 500)
    return DailyWords(words=words)


@router.post("/generate-prompt", response_model=SpeakingPrompt)
async def generate_prompt(
    body: PromptRequest,
    generator: SpeakingPromptGenerator = Depends(get_prompt_generator),
):
    try:
        return await generator.generate(body.category, body.difficulty)
    except GenerationError:
        return error_response("Failed to generate prompt", 500)


@router.post("/generate-word-details", response_model=WordDetails)
async def generate_word_details(
    body: WordDetailsRequest,
    generator: VocabularyGenerator = Depends(get_vocabulary_generator),
):
    word = (body.word or "").strip()
    if not word:
        return error_response("Word is required", 400)
    try:
        return await generator.word_details(word, body.category, body.difficulty)
    except GenerationError:
        return error_response("Failed to generate word details", 500)


@router.post("/chat")
async def chat(
    body: ChatRequest,
    partner: ChatPartner = Depends(get_chat_partner),
):
    """Stream the conversation partner's next reply as plain text.

    The status is sent before the first delta, so a failure mid-reply ends
    the body with ``INTERRUPTED_MARKER`` instead of changing the status.
    """
    if not body.messages:
        return error_response("Messages are required", 400)
    try:
        deltas = await partner.open_stream([m.model_dump() for m in body.messages])
    except GenerationError:
        return error_response("Failed to generate reply", 500)
    return StreamingResponse(deltas, media_type="text/plain; charset=utf-8")
