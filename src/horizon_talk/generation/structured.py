"""Schema-constrained JSON generation over the OpenAI chat API."""

import json
from typing import TypeVar

import structlog
from openai import AsyncOpenAI
from pydantic import BaseModel, ValidationError

from horizon_talk.errors import GenerationError

logger = structlog.get_logger()

ModelT = TypeVar("ModelT", bound=BaseModel)

SYSTEM_PROMPT = """\
You are the content engine of an English-learning application. \
Respond ONLY with a JSON object that validates against this JSON Schema \
(use the property names exactly as written):

{schema}
"""


def schema_instruction(schema: type[BaseModel]) -> str:
    """Render the system instruction that pins the response to ``schema``."""
    return SYSTEM_PROMPT.format(
        schema=json.dumps(schema.model_json_schema(by_alias=True), indent=2)
    )


class StructuredGenerator:
    """Asks the generative-language service for an object of a fixed schema.

    No retries are attempted here; the client is built with ``max_retries=0``
    and an explicit timeout so a hung call fails instead of waiting forever.

    Args:
        api_key: OpenAI API key. When None every call fails with GenerationError.
        model: Chat model to use.
        timeout: Per-request timeout in seconds.
    """

    def __init__(
        self,
        api_key: str | None,
        model: str = "gpt-4o-mini",
        timeout: float = 30.0,
    ):
        self.client = (
            AsyncOpenAI(api_key=api_key, timeout=timeout, max_retries=0)
            if api_key
            else None
        )
        self.model = model
        self.timeout = timeout

    async def generate(
        self,
        prompt: str,
        schema: type[ModelT],
        temperature: float = 0.7,
    ) -> ModelT:
        """Generate and validate one object.

        Args:
            prompt: Task instruction.
            schema: Pydantic model the response must satisfy.
            temperature: Sampling temperature.

        Returns:
            A validated ``schema`` instance.

        Raises:
            GenerationError: On transport failure, timeout, quota errors or
                output that does not match the schema.
        """
        if self.client is None:
            raise GenerationError("OpenAI API key not configured")

        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": schema_instruction(schema)},
                    {"role": "user", "content": prompt},
                ],
                temperature=temperature,
                response_format={"type": "json_object"},
            )
            content = response.choices[0].message.content or ""
        except Exception as e:
            logger.exception("generation_request_failed", schema=schema.__name__)
            raise GenerationError(f"generation request failed: {e}") from e

        try:
            result = schema.model_validate_json(content)
        except ValidationError as e:
            logger.warning(
                "generation_schema_mismatch",
                schema=schema.__name__,
                errors=e.error_count(),
            )
            raise GenerationError(f"response did not match {schema.__name__}") from e

        logger.info("generation_complete", schema=schema.__name__, model=self.model)
        return result
