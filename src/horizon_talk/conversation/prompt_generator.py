"""Speaking practice prompt generation."""

import structlog

from horizon_talk.conversation.prompts import SPEAKING_PROMPT_PROMPT
from horizon_talk.generation.structured import StructuredGenerator
from horizon_talk.models.prompt import SpeakingPrompt

logger = structlog.get_logger()


class SpeakingPromptGenerator:
    """Creates a speaking exercise for a category and difficulty."""

    def __init__(self, generator: StructuredGenerator):
        self.generator = generator

    async def generate(
        self,
        category: str = "general",
        difficulty: str = "intermediate",
    ) -> SpeakingPrompt:
        prompt = await self.generator.generate(
            SPEAKING_PROMPT_PROMPT.format(category=category, difficulty=difficulty),
            SpeakingPrompt,
            temperature=0.9,
        )
        logger.info("speaking_prompt_generated", title=prompt.title, category=category)
        return prompt
