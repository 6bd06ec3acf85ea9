"""Exception types shared across the application."""


class HorizonTalkError(Exception):
    """Base class for application errors."""


class GenerationError(HorizonTalkError):
    """The generative-language service failed or returned an unusable result."""


class TranscriptionError(HorizonTalkError):
    """The audio transcription service failed."""


class PersistenceError(HorizonTalkError):
    """A write to the realtime database failed."""


class SessionStateError(HorizonTalkError):
    """An orchestrator action is not allowed in the current state."""


class EmptyTranscriptError(HorizonTalkError):
    """Analysis was requested for a blank transcript."""


class AnalysisFailedError(HorizonTalkError):
    """The analyze-speech endpoint did not return feedback."""


class SpeechCaptureUnavailableError(HorizonTalkError):
    """No speech recognition engine is available on this platform."""


class NotSignedInError(HorizonTalkError):
    """An operation needs a signed-in user and there is none."""


class ApiClientError(HorizonTalkError):
    """Non-success response (or transport failure) from the HorizonTalk API.

    Args:
        status_code: HTTP status, or None when the request never completed.
        message: Error message from the response body, if any.
    """

    def __init__(self, status_code: int | None, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class VocabularyWordNotFoundError(PersistenceError):
    """The referenced vocabulary word does not exist for this user."""
