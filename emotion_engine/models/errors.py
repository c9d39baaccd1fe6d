"""Exception hierarchy for emotion analysis

Every error carries a human-readable message and a recovery suggestion that
callers can surface to the user.
"""


class EmotionAnalysisError(Exception):
    """Base class for all emotion analysis errors"""

    default_message = "Emotion analysis failed"
    recovery_suggestion = "Please try again. If the problem persists, contact support"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class AudioTooShortError(EmotionAnalysisError):
    default_message = "Audio recording is too short for analysis (minimum 1 second)"
    recovery_suggestion = "Please record for at least 1 second"


class AudioTooLongError(EmotionAnalysisError):
    default_message = "Audio recording is too long for analysis (maximum 2 minutes)"
    recovery_suggestion = "Please record for no more than 2 minutes"


class InvalidAudioFormatError(EmotionAnalysisError):
    default_message = "Invalid audio format for emotion analysis"
    recovery_suggestion = "Please provide mono PCM float samples"


class AudioProcessingFailedError(EmotionAnalysisError):
    default_message = "Failed to process audio data"
    recovery_suggestion = "Please try recording again in a quieter environment"


class InvalidFeatureVectorError(EmotionAnalysisError):
    """Feature vector has the wrong number of dimensions"""

    recovery_suggestion = "Please try recording again with clearer speech"

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Invalid feature vector dimensions: expected {expected}, got {actual}"
        )


class InvalidFeatureValuesError(EmotionAnalysisError):
    default_message = "Feature vector contains invalid values (NaN or infinite)"
    recovery_suggestion = "Please try recording again with clearer speech"


class NoSpeechDetectedError(EmotionAnalysisError):
    default_message = "No speech detected in transcript"
    recovery_suggestion = "Please speak clearly during the recording"


class InsufficientSpeechError(EmotionAnalysisError):
    default_message = "Not enough speech for linguistic analysis"
    recovery_suggestion = "Please speak for a little longer"


class ModelNotLoadedError(EmotionAnalysisError):
    default_message = "Emotion analysis model is not loaded"
    recovery_suggestion = "Please restart the service and try again"


class InvalidModelOutputError(EmotionAnalysisError):
    default_message = "Invalid output from emotion analysis model"
    recovery_suggestion = "Please try recording again"


class ServiceUnavailableError(EmotionAnalysisError):
    default_message = "Emotion analysis service is currently unavailable"
    recovery_suggestion = "Please try again later"


class LinguisticProcessingError(EmotionAnalysisError):
    default_message = "Failed to analyze transcript sentiment"
    recovery_suggestion = "Voice-only analysis is still available"
