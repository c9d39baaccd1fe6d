"""Data models for analysis results"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Optional, Tuple

from emotion_engine.models.enums import (
    AudioQuality,
    EmotionCategory,
    EmotionIntensity,
    FusionPolicy,
    SentimentPolarity,
    SubEmotion,
)
from emotion_engine.models.features import AcousticFeatures


EmotionScores = Dict[EmotionCategory, float]
SubEmotionScores = Dict[SubEmotion, float]


def neutral_scores() -> EmotionScores:
    """Degenerate score set used on failure or low-confidence rejection"""
    return {EmotionCategory.NEUTRAL: 1.0}


def normalize_scores(scores: EmotionScores) -> EmotionScores:
    """Divide every score by the total; {neutral: 1.0} when the total is zero."""
    total = sum(scores.values())
    if total <= 0:
        return neutral_scores()
    return {category: score / total for category, score in scores.items()}


def ranked_scores(scores: EmotionScores) -> Tuple[Tuple[EmotionCategory, float], ...]:
    """Scores sorted highest first; ties keep category declaration order."""
    order = list(EmotionCategory)
    return tuple(sorted(scores.items(), key=lambda item: (-item[1], order.index(item[0]))))


def top_two(scores: EmotionScores) -> Tuple[float, float]:
    """Highest and second-highest score (missing categories count as 0)"""
    ranked = ranked_scores(scores)
    top = ranked[0][1] if ranked else 0.0
    second = ranked[1][1] if len(ranked) > 1 else 0.0
    return top, second


def _assert_scores(scores: EmotionScores) -> None:
    for emotion, score in scores.items():
        assert isinstance(emotion, EmotionCategory), f"Unknown emotion key {emotion!r}"
        assert 0.0 <= score <= 1.0 + 1e-9, f"Emotion score for {emotion.value} must be in [0, 1]"


@dataclass(frozen=True)
class AcousticScoring:
    """Output of an acoustic scorer

    Attributes:
        scores: Final emotion scores (degenerate {neutral: 1.0} when rejected)
        distribution: Normalized scores before the low-confidence override
        raw_total: Sum of per-category scores before normalization
        rejected: Whether the low-confidence rejection policy replaced the scores
    """
    scores: EmotionScores
    distribution: EmotionScores
    raw_total: float
    rejected: bool = False

    def __post_init__(self):
        """Validate result data"""
        _assert_scores(self.scores)
        _assert_scores(self.distribution)
        assert self.raw_total >= 0, "Raw total must be non-negative"


@dataclass(frozen=True)
class EmotionalKeyword:
    """A lexicon word found in a transcript

    Attributes:
        word: Matched lexicon entry
        emotion: Category the entry belongs to
        weight: Lexicon weight in [0, 1]
        context: Up to two words either side of the match
    """
    word: str
    emotion: EmotionCategory
    weight: float
    context: str


@dataclass(frozen=True)
class LinguisticResult:
    """Result from transcript analysis

    Attributes:
        transcript: Analyzed text
        emotion_scores: Normalized emotion scores
        confidence: Overall confidence in this result [0, 1]
        polarity: Paragraph-level sentiment polarity
        sentiment_confidence: Magnitude of the sentiment score [0, 1]
        keywords: Matched lexicon entries
    """
    transcript: str
    emotion_scores: EmotionScores
    confidence: float
    polarity: SentimentPolarity
    sentiment_confidence: float
    keywords: Tuple[EmotionalKeyword, ...] = ()

    def __post_init__(self):
        """Validate result data"""
        assert 0.0 <= self.confidence <= 1.0, "Confidence must be in [0, 1]"
        assert 0.0 <= self.sentiment_confidence <= 1.0, "Sentiment confidence must be in [0, 1]"
        _assert_scores(self.emotion_scores)


@dataclass(frozen=True)
class FusionResult:
    """Output of the fusion policy

    Attributes:
        emotion_scores: Combined emotion scores
        policy: Fusion rule that produced the scores
        acoustic_confidence: Voice channel confidence used by the policy
        linguistic_confidence: Text channel confidence, None if the channel failed
        low_confidence: True when both channels fell below the combination threshold
    """
    emotion_scores: EmotionScores
    policy: FusionPolicy
    acoustic_confidence: float
    linguistic_confidence: Optional[float] = None
    low_confidence: bool = False

    def __post_init__(self):
        """Validate result data"""
        assert 0.0 <= self.acoustic_confidence <= 1.0, "Acoustic confidence must be in [0, 1]"
        if self.linguistic_confidence is not None:
            assert 0.0 <= self.linguistic_confidence <= 1.0, "Linguistic confidence must be in [0, 1]"
        _assert_scores(self.emotion_scores)


@dataclass(frozen=True)
class AnalysisResult:
    """Final result of one analysis call

    Attributes:
        timestamp: When the analysis completed
        primary_emotion: Highest-scoring emotion category
        sub_emotion: Selected fine-grained emotion within the primary category
        intensity: Ordinal strength derived from the primary score
        confidence: Overall confidence in [0.1, 0.98]
        emotion_scores: Final emotion scores
        sub_emotion_scores: Scores for the primary category's sub-emotions
        audio_quality: Signal quality of the analyzed buffer
        session_duration: Source duration in seconds
        acoustic_features: Extracted prosodic features
        fusion_policy: Fusion rule that produced the final scores
        low_confidence: True when neither channel was confident
        transcript: Transcript supplied with the recording, if any
    """
    timestamp: datetime
    primary_emotion: EmotionCategory
    sub_emotion: SubEmotion
    intensity: EmotionIntensity
    confidence: float
    emotion_scores: EmotionScores
    sub_emotion_scores: SubEmotionScores
    audio_quality: AudioQuality
    session_duration: float
    acoustic_features: AcousticFeatures
    fusion_policy: FusionPolicy = FusionPolicy.ACOUSTIC_ONLY
    low_confidence: bool = False
    transcript: Optional[str] = field(default=None)

    def __post_init__(self):
        """Validate result data"""
        assert 0.1 <= self.confidence <= 0.98, "Confidence must be in [0.1, 0.98]"
        assert self.session_duration > 0, "Session duration must be positive"
        _assert_scores(self.emotion_scores)

    @property
    def confidence_percentage(self) -> int:
        return int(self.confidence * 100)

    @property
    def is_high_confidence(self) -> bool:
        return self.confidence >= 0.7

    def to_dict(self) -> dict:
        """Plain-data view for persistence and display layers"""
        return {
            "timestamp": self.timestamp.isoformat(),
            "primary_emotion": self.primary_emotion.value,
            "sub_emotion": self.sub_emotion.value,
            "intensity": self.intensity.value,
            "confidence": self.confidence,
            "emotion_scores": {k.value: v for k, v in self.emotion_scores.items()},
            "sub_emotion_scores": {k.value: v for k, v in self.sub_emotion_scores.items()},
            "audio_quality": self.audio_quality.value,
            "session_duration": self.session_duration,
            "acoustic_features": self.acoustic_features.to_dict(),
            "fusion_policy": self.fusion_policy.value,
            "low_confidence": self.low_confidence,
            "transcript": self.transcript,
        }
