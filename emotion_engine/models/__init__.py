"""Data models and interfaces"""

from emotion_engine.models.frames import AudioBuffer
from emotion_engine.models.features import (
    AcousticFeatures,
    FeatureVector,
    FEATURE_DIMENSION,
    MFCC_DIMENSION,
    PROSODIC_FEATURE_NAMES,
)
from emotion_engine.models.results import (
    AcousticScoring,
    AnalysisResult,
    EmotionalKeyword,
    EmotionScores,
    FusionResult,
    LinguisticResult,
    SubEmotionScores,
)
from emotion_engine.models.enums import (
    AudioQuality,
    EmotionCategory,
    EmotionIntensity,
    EmotionValence,
    FusionPolicy,
    SentimentPolarity,
    SubEmotion,
)
from emotion_engine.models.errors import (
    EmotionAnalysisError,
    AudioTooShortError,
    AudioTooLongError,
    InvalidAudioFormatError,
    AudioProcessingFailedError,
    InvalidFeatureVectorError,
    InvalidFeatureValuesError,
    NoSpeechDetectedError,
    InsufficientSpeechError,
    ModelNotLoadedError,
    InvalidModelOutputError,
    ServiceUnavailableError,
    LinguisticProcessingError,
)
from emotion_engine.models.interfaces import EmotionScorer, SentimentAnalyzer

__all__ = [
    # Frames
    "AudioBuffer",
    # Features
    "AcousticFeatures",
    "FeatureVector",
    "FEATURE_DIMENSION",
    "MFCC_DIMENSION",
    "PROSODIC_FEATURE_NAMES",
    # Results
    "AcousticScoring",
    "AnalysisResult",
    "EmotionalKeyword",
    "EmotionScores",
    "FusionResult",
    "LinguisticResult",
    "SubEmotionScores",
    # Enums
    "AudioQuality",
    "EmotionCategory",
    "EmotionIntensity",
    "EmotionValence",
    "FusionPolicy",
    "SentimentPolarity",
    "SubEmotion",
    # Errors
    "EmotionAnalysisError",
    "AudioTooShortError",
    "AudioTooLongError",
    "InvalidAudioFormatError",
    "AudioProcessingFailedError",
    "InvalidFeatureVectorError",
    "InvalidFeatureValuesError",
    "NoSpeechDetectedError",
    "InsufficientSpeechError",
    "ModelNotLoadedError",
    "InvalidModelOutputError",
    "ServiceUnavailableError",
    "LinguisticProcessingError",
    # Interfaces
    "EmotionScorer",
    "SentimentAnalyzer",
]
