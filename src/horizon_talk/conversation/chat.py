"""Streaming conversation partner."""

from collections.abc import AsyncIterator

import structlog
from openai import AsyncOpenAI

from horizon_talk.conversation.prompts import CHAT_SYSTEM_PROMPT
from horizon_talk.errors import GenerationError

logger = structlog.get_logger()

# Appended when the upstream stream fails after text has started flowing
INTERRUPTED_MARKER = "\n\n[reply interrupted]"


class ChatPartner:
    """Replies to a learner's conversation as a streaming text source.

    Args:
        api_key: OpenAI API key. When None ``open_stream`` fails with GenerationError.
        model: Chat model to use.
        timeout: Per-request timeout in seconds.
    """

    def __init__(self, api_key: str | None, model: str = "gpt-4o-mini", timeout: float = 30.0):
        self.client = (
            AsyncOpenAI(api_key=api_key, timeout=timeout, max_retries=0)
            if api_key
            else None
        )
        self.model = model

    async def open_stream(self, messages: list[dict[str, str]]) -> AsyncIterator[str]:
        """Start a completion and return an iterator over its text deltas.

        The request is issued before this returns, so connection and
        authentication failures surface here as GenerationError rather than
        in the middle of a streamed response.
        """
        if self.client is None:
            raise GenerationError("OpenAI API key not configured")
        try:
            stream = await self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "system", "content": CHAT_SYSTEM_PROMPT}, *messages],
                temperature=0.8,
                stream=True,
            )
        except Exception as e:
            logger.exception("chat_request_failed")
            raise GenerationError(f"chat request failed: {e}") from e
        logger.info("chat_stream_opened", turns=len(messages))
        return self._deltas(stream)

    @staticmethod
    async def _deltas(stream) -> AsyncIterator[str]:
        try:
            async for chunk in stream:
                if not chunk.choices:
                    continue
                delta = chunk.choices[0].delta.content
                if delta:
                    yield delta
        except Exception:
            logger.exception("chat_stream_interrupted")
            yield INTERRUPTED_MARKER
