"""Speech transcript feedback using the generative-language service."""

import structlog

from horizon_talk.conversation.prompts import FEEDBACK_PROMPT
from horizon_talk.generation.structured import StructuredGenerator
from horizon_talk.models.feedback import Feedback

logger = structlog.get_logger()


class FeedbackGenerator:
    """Scores a spoken answer to a practice prompt.

    Args:
        generator: Structured generation client.
    """

    def __init__(self, generator: StructuredGenerator):
        self.generator = generator

    async def analyze(self, transcript: str, prompt: str) -> Feedback:
        """Generate feedback for one transcript.

        Args:
            transcript: What the learner said.
            prompt: Title of the practice prompt they answered.

        Returns:
            Feedback within the schema bounds.

        Raises:
            GenerationError: The service failed or returned invalid output.
        """
        feedback = await self.generator.generate(
            FEEDBACK_PROMPT.format(prompt=prompt, transcript=transcript),
            Feedback,
            temperature=0.5,
        )
        logger.info(
            "speech_analyzed",
            fluency=feedback.fluency_score,
            grammar=feedback.grammar_score,
            filler_words=feedback.filler_words,
        )
        return feedback
