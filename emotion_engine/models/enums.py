"""Enumerations for emotion categories, intensities and audio quality"""

from enum import Enum


class EmotionValence(Enum):
    """Polarity of an emotion category"""
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class EmotionCategory(Enum):
    """The seven core emotion categories, in scoring order"""
    JOY = "joy"
    SADNESS = "sadness"
    ANGER = "anger"
    FEAR = "fear"
    SURPRISE = "surprise"
    DISGUST = "disgust"
    NEUTRAL = "neutral"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    @property
    def valence(self) -> EmotionValence:
        if self in (EmotionCategory.JOY, EmotionCategory.SURPRISE):
            return EmotionValence.POSITIVE
        if self is EmotionCategory.NEUTRAL:
            return EmotionValence.NEUTRAL
        return EmotionValence.NEGATIVE


class EmotionIntensity(Enum):
    """Ordinal strength of the primary emotion"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def multiplier(self) -> float:
        return {
            EmotionIntensity.LOW: 0.3,
            EmotionIntensity.MEDIUM: 0.6,
            EmotionIntensity.HIGH: 1.0,
        }[self]

    @classmethod
    def from_score(cls, score: float) -> "EmotionIntensity":
        """Derive intensity from the primary emotion score.

        Scores below 0.4 are low, below 0.7 medium, anything else high.
        """
        if score < 0.4:
            return cls.LOW
        if score < 0.7:
            return cls.MEDIUM
        return cls.HIGH


class AudioQuality(Enum):
    """Composite signal quality of an analyzed buffer"""
    POOR = "poor"
    FAIR = "fair"
    GOOD = "good"
    EXCELLENT = "excellent"

    @property
    def confidence_multiplier(self) -> float:
        """Multiplier applied to the analysis confidence"""
        return {
            AudioQuality.EXCELLENT: 1.1,
            AudioQuality.GOOD: 1.0,
            AudioQuality.FAIR: 0.9,
            AudioQuality.POOR: 0.7,
        }[self]

    @property
    def reliability_score(self) -> float:
        return {
            AudioQuality.EXCELLENT: 1.0,
            AudioQuality.GOOD: 0.8,
            AudioQuality.FAIR: 0.6,
            AudioQuality.POOR: 0.3,
        }[self]

    @classmethod
    def from_points(cls, points: int) -> "AudioQuality":
        """Map quality points (0-8) to a quality level"""
        if points >= 7:
            return cls.EXCELLENT
        if points >= 5:
            return cls.GOOD
        if points >= 3:
            return cls.FAIR
        return cls.POOR


class SubEmotion(Enum):
    """Fine-grained emotions, six per core category"""
    # joy
    HAPPINESS = "happiness"
    EXCITEMENT = "excitement"
    CONTENTMENT = "contentment"
    EUPHORIA = "euphoria"
    OPTIMISM = "optimism"
    GRATITUDE = "gratitude"
    # sadness
    MELANCHOLY = "melancholy"
    GRIEF = "grief"
    DISAPPOINTMENT = "disappointment"
    LONELINESS = "loneliness"
    DESPAIR = "despair"
    SORROW = "sorrow"
    # anger
    FRUSTRATION = "frustration"
    IRRITATION = "irritation"
    RAGE = "rage"
    RESENTMENT = "resentment"
    INDIGNATION = "indignation"
    HOSTILITY = "hostility"
    # fear
    ANXIETY = "anxiety"
    WORRY = "worry"
    NERVOUSNESS = "nervousness"
    PANIC = "panic"
    DREAD = "dread"
    APPREHENSION = "apprehension"
    # surprise
    AMAZEMENT = "amazement"
    ASTONISHMENT = "astonishment"
    BEWILDERMENT = "bewilderment"
    CURIOSITY = "curiosity"
    CONFUSION = "confusion"
    WONDER = "wonder"
    # disgust
    CONTEMPT = "contempt"
    AVERSION = "aversion"
    REPULSION = "repulsion"
    REVULSION = "revulsion"
    LOATHING = "loathing"
    DISTASTE = "distaste"
    # neutral
    CALM = "calm"
    BALANCED = "balanced"
    STABLE = "stable"
    PEACEFUL = "peaceful"
    COMPOSED = "composed"
    INDIFFERENT = "indifferent"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


class SentimentPolarity(Enum):
    """Paragraph-level sentiment polarity of a transcript"""
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class FusionPolicy(Enum):
    """Which fusion rule produced the final scores"""
    ACOUSTIC_ONLY = "acoustic_only"
    LINGUISTIC_DOMINANT = "linguistic_dominant"
    ACOUSTIC_DOMINANT = "acoustic_dominant"
    DYNAMIC = "dynamic"
    LOW_CONFIDENCE_FALLBACK = "low_confidence_fallback"
