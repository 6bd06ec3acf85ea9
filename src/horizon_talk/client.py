"""Async HTTP client for the HorizonTalk API."""

from typing import Any

import httpx
import structlog

from horizon_talk.errors import ApiClientError
from horizon_talk.models.feedback import Feedback
from horizon_talk.models.prompt import SpeakingPrompt
from horizon_talk.models.vocabulary import DailyWordSuggestion, WordDetails

logger = structlog.get_logger()


class HorizonTalkClient:
    """Calls the HorizonTalk endpoints and returns typed results.

    Args:
        base_url: Server root, e.g. ``http://localhost:8000``.
        app_secret: Value for the ``X-App-Secret`` header, if the server needs one.
        timeout: Request timeout in seconds.
        transport: Optional httpx transport (tests use ``httpx.MockTransport``).
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        app_secret: str | None = None,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        headers = {"X-App-Secret": app_secret} if app_secret else {}
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "HorizonTalkClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def _request(self, path: str, **kwargs: Any) -> Any:
        try:
            response = await self._client.post(path, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("api_request_failed", path=path, error=str(e))
            raise ApiClientError(None, f"request to {path} failed") from e

        if response.is_success:
            return response.json()

        try:
            message = response.json().get("error", response.reason_phrase)
        except ValueError:
            message = response.reason_phrase
        logger.warning("api_error_response", path=path, status=response.status_code)
        raise ApiClientError(response.status_code, message)

    async def analyze_speech(self, transcript: str, prompt: str) -> Feedback:
        data = await self._request(
            "/api/analyze-speech", json={"transcript": transcript, "prompt": prompt}
        )
        return Feedback.model_validate(data)

    async def generate_daily_words(
        self, count: int = 10, user_id: str | None = None
    ) -> list[DailyWordSuggestion]:
        body: dict[str, Any] = {"count": count}
        if user_id:
            body["userId"] = user_id
        data = await self._request("/api/generate-daily-words", json=body)
        return [DailyWordSuggestion.model_validate(w) for w in data["words"]]

    async def generate_prompt(
        self, category: str = "general", difficulty: str = "intermediate"
    ) -> SpeakingPrompt:
        data = await self._request(
            "/api/generate-prompt", json={"category": category, "difficulty": difficulty}
        )
        return SpeakingPrompt.model_validate(data)

    async def generate_word_details(
        self, word: str, category: str = "general", difficulty: str = "intermediate"
    ) -> WordDetails:
        data = await self._request(
            "/api/generate-word-details",
            json={"word": word, "category": category, "difficulty": difficulty},
        )
        return WordDetails.model_validate(data)

    async def transcribe(
        self, audio: bytes, filename: str = "audio.webm", content_type: str = "audio/webm"
    ) -> str:
        data = await self._request(
            "/api/transcribe", files={"audio": (filename, audio, content_type)}
        )
        return data["transcript"]

    async def contact(self, name: str, email: str, subject: str, message: str) -> str:
        data = await self._request(
            "/api/contact",
            json={"name": name, "email": email, "subject": subject, "message": message},
        )
        return data["message"]

    async def submit_feedback(
        self,
        rating: int,
        category: str,
        subject: str,
        message: str,
        user_id: str | None = None,
        user_email: str | None = None,
    ) -> str:
        data = await self._request(
            "/api/feedback",
            json={
                "rating": rating,
                "category": category,
                "subject": subject,
                "message": message,
                "userId": user_id,
                "userEmail": user_email,
            },
        )
        return data["message"]
