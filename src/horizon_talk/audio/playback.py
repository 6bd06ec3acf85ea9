"""Word pronunciation through a platform text-to-speech engine."""

from typing import Protocol

import structlog
from pydantic import BaseModel

logger = structlog.get_logger()


class Voice(BaseModel):
    name: str
    lang: str
    default: bool = False


class Utterance(BaseModel):
    text: str
    lang: str = "en-US"
    voice: Voice | None = None
    rate: float = 0.8
    pitch: float = 1.0
    volume: float = 1.0


class SynthesisEngine(Protocol):
    """Platform speech synthesizer (e.g. a browser's speechSynthesis)."""

    def voices(self) -> list[Voice]: ...

    def speak(self, utterance: Utterance) -> None: ...

    def cancel(self) -> None: ...


def select_voice(voices: list[Voice], preferred: str = "Google") -> Voice | None:
    """Pick an English voice, favouring names containing ``preferred``.

    Returns None when no English voice exists, meaning the platform default.
    """
    english = [v for v in voices if v.lang.lower().startswith("en")]
    for voice in english:
        if preferred and preferred in voice.name:
            return voice
    return english[0] if english else None


class PronunciationPlayer:
    """Speaks one utterance at a time.

    Args:
        engine: Platform synthesizer, or None when the platform has none.
        preferred_voice: Substring identifying the preferred voice family.
        language: Utterance language.
    """

    DEFAULT_RATE = 0.8

    def __init__(
        self,
        engine: SynthesisEngine | None = None,
        preferred_voice: str = "Google",
        language: str = "en-US",
    ):
        self.engine = engine
        self.preferred_voice = preferred_voice
        self.language = language

    def is_available(self) -> bool:
        return self.engine is not None

    def speak(
        self,
        text: str,
        rate: float | None = None,
        pitch: float | None = None,
        volume: float | None = None,
    ) -> Utterance | None:
        """Cancel whatever is playing and speak ``text``.

        Returns the utterance handed to the engine, or None when unavailable.
        """
        if self.engine is None:
            return None

        self.engine.cancel()
        # Voices can load after start-up, so look them up on every call
        voice = select_voice(self.engine.voices(), self.preferred_voice)
        utterance = Utterance(
            text=text,
            lang=self.language,
            voice=voice,
            rate=self.DEFAULT_RATE if rate is None else rate,
            pitch=1.0 if pitch is None else pitch,
            volume=1.0 if volume is None else volume,
        )
        self.engine.speak(utterance)
        logger.debug("pronunciation_spoken", text=text, voice=voice.name if voice else None)
        return utterance

    def stop(self) -> None:
        if self.engine is not None:
            self.engine.cancel()
