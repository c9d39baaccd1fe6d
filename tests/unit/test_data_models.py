"""Unit tests for data models"""

from datetime import datetime

import numpy as np
import pytest
from emotion_engine.models import (
    AcousticFeatures,
    AnalysisResult,
    AudioBuffer,
    AudioQuality,
    EmotionCategory,
    EmotionIntensity,
    EmotionValence,
    FeatureVector,
    FEATURE_DIMENSION,
    FusionPolicy,
    FusionResult,
    InvalidFeatureValuesError,
    InvalidFeatureVectorError,
    LinguisticResult,
    SentimentPolarity,
    SubEmotion,
)
from emotion_engine.models.results import normalize_scores, ranked_scores, top_two


def make_features(**overrides) -> AcousticFeatures:
    values = dict(
        pitch=150.0,
        energy=0.5,
        spectral_centroid=1500.0,
        zero_crossing_rate=0.1,
        spectral_rolloff=3000.0,
        jitter=0.02,
        shimmer=0.05,
        formant_frequencies=(500.0, 1500.0, 0.0),
        harmonic_to_noise_ratio=12.0,
        voice_onset_time=0.05,
    )
    values.update(overrides)
    return AcousticFeatures(**values)


class TestAudioBuffer:
    """Tests for AudioBuffer model"""

    def test_create_valid_buffer(self):
        """Test creating a valid audio buffer"""
        samples = np.random.randn(16000).astype(np.float32)
        buffer = AudioBuffer(samples=samples, sample_rate=16000, duration=1.0)

        assert buffer.sample_rate == 16000
        assert buffer.duration == 1.0
        assert buffer.num_samples == 16000

    def test_buffer_validation(self):
        """Test audio buffer validation"""
        samples = np.random.randn(16000)

        with pytest.raises(AssertionError):
            AudioBuffer(samples=samples, sample_rate=-1, duration=1.0)

        with pytest.raises(AssertionError):
            AudioBuffer(samples=samples, sample_rate=16000, duration=0.0)

        with pytest.raises(AssertionError):
            AudioBuffer(samples=samples.reshape(2, -1), sample_rate=16000, duration=1.0)


class TestAcousticFeatures:
    """Tests for AcousticFeatures model"""

    def test_feature_validation(self):
        with pytest.raises(AssertionError):
            make_features(energy=1.5)

        with pytest.raises(AssertionError):
            make_features(pitch=-1.0)

        with pytest.raises(AssertionError):
            make_features(formant_frequencies=(500.0, 1500.0))

    def test_to_dict(self):
        data = make_features().to_dict()
        assert data["pitch"] == 150.0
        assert data["formant_frequencies"] == [500.0, 1500.0, 0.0]


class TestFeatureVector:
    """Tests for FeatureVector model"""

    def test_valid_vector(self):
        vector = FeatureVector(np.arange(FEATURE_DIMENSION, dtype=float))

        assert len(vector) == FEATURE_DIMENSION
        assert vector.mfcc.shape == (13,)
        assert vector.prosodic.shape == (11,)
        assert vector.prosodic[0] == 13.0

    def test_wrong_length_raises(self):
        with pytest.raises(InvalidFeatureVectorError) as exc_info:
            FeatureVector(np.zeros(10))

        assert exc_info.value.expected == FEATURE_DIMENSION
        assert exc_info.value.actual == 10
        assert "expected 24, got 10" in exc_info.value.message

    def test_non_finite_raises(self):
        values = np.zeros(FEATURE_DIMENSION)
        values[5] = np.nan
        with pytest.raises(InvalidFeatureValuesError):
            FeatureVector(values)

        values[5] = np.inf
        with pytest.raises(InvalidFeatureValuesError):
            FeatureVector(values)

    def test_vector_is_read_only_copy(self):
        source = np.zeros(FEATURE_DIMENSION)
        vector = FeatureVector(source)
        source[0] = 1.0

        assert vector.values[0] == 0.0
        with pytest.raises(ValueError):
            vector.values[0] = 2.0


class TestScoreHelpers:
    """Tests for score normalization and ranking helpers"""

    def test_normalize_scores(self):
        scores = normalize_scores({EmotionCategory.JOY: 2.0, EmotionCategory.ANGER: 2.0})
        assert scores == {EmotionCategory.JOY: 0.5, EmotionCategory.ANGER: 0.5}

    def test_normalize_zero_total_is_neutral(self):
        scores = normalize_scores({EmotionCategory.JOY: 0.0})
        assert scores == {EmotionCategory.NEUTRAL: 1.0}

    def test_ranking_ties_follow_declaration_order(self):
        ranked = ranked_scores({
            EmotionCategory.NEUTRAL: 0.4,
            EmotionCategory.ANGER: 0.4,
            EmotionCategory.JOY: 0.2,
        })
        assert [category for category, _ in ranked] == [
            EmotionCategory.ANGER, EmotionCategory.NEUTRAL, EmotionCategory.JOY
        ]

    def test_top_two_single_entry(self):
        assert top_two({EmotionCategory.NEUTRAL: 1.0}) == (1.0, 0.0)


class TestEnums:
    """Tests for enumeration helpers"""

    def test_valence(self):
        assert EmotionCategory.JOY.valence is EmotionValence.POSITIVE
        assert EmotionCategory.SURPRISE.valence is EmotionValence.POSITIVE
        assert EmotionCategory.FEAR.valence is EmotionValence.NEGATIVE
        assert EmotionCategory.NEUTRAL.valence is EmotionValence.NEUTRAL

    @pytest.mark.parametrize("score,expected", [
        (0.0, EmotionIntensity.LOW),
        (0.39, EmotionIntensity.LOW),
        (0.4, EmotionIntensity.MEDIUM),
        (0.69, EmotionIntensity.MEDIUM),
        (0.7, EmotionIntensity.HIGH),
        (1.0, EmotionIntensity.HIGH),
    ])
    def test_intensity_from_score(self, score, expected):
        assert EmotionIntensity.from_score(score) is expected

    @pytest.mark.parametrize("points,expected", [
        (8, AudioQuality.EXCELLENT),
        (7, AudioQuality.EXCELLENT),
        (6, AudioQuality.GOOD),
        (5, AudioQuality.GOOD),
        (4, AudioQuality.FAIR),
        (3, AudioQuality.FAIR),
        (2, AudioQuality.POOR),
        (0, AudioQuality.POOR),
    ])
    def test_quality_from_points(self, points, expected):
        assert AudioQuality.from_points(points) is expected

    def test_quality_multipliers(self):
        assert AudioQuality.EXCELLENT.confidence_multiplier == 1.1
        assert AudioQuality.POOR.confidence_multiplier == 0.7
        assert AudioQuality.GOOD.reliability_score == 0.8

    def test_sub_emotion_count(self):
        assert len(SubEmotion) == 42


class TestResults:
    """Tests for result models"""

    def test_linguistic_result_validation(self):
        with pytest.raises(AssertionError):
            LinguisticResult(
                transcript="hello there friend",
                emotion_scores={EmotionCategory.NEUTRAL: 1.0},
                confidence=1.5,
                polarity=SentimentPolarity.NEUTRAL,
                sentiment_confidence=0.0,
            )

    def test_fusion_result_validation(self):
        with pytest.raises(AssertionError):
            FusionResult(
                emotion_scores={EmotionCategory.NEUTRAL: 1.0},
                policy=FusionPolicy.ACOUSTIC_ONLY,
                acoustic_confidence=-0.1,
            )

    def test_analysis_result_to_dict(self):
        result = AnalysisResult(
            timestamp=datetime(2024, 1, 15, 12, 30, 0),
            primary_emotion=EmotionCategory.JOY,
            sub_emotion=SubEmotion.EXCITEMENT,
            intensity=EmotionIntensity.MEDIUM,
            confidence=0.75,
            emotion_scores={EmotionCategory.JOY: 0.6, EmotionCategory.NEUTRAL: 0.4},
            sub_emotion_scores={SubEmotion.EXCITEMENT: 0.72},
            audio_quality=AudioQuality.GOOD,
            session_duration=3.0,
            acoustic_features=make_features(),
        )

        data = result.to_dict()
        assert data["timestamp"] == "2024-01-15T12:30:00"
        assert data["primary_emotion"] == "joy"
        assert data["sub_emotion"] == "excitement"
        assert data["emotion_scores"] == {"joy": 0.6, "neutral": 0.4}
        assert data["audio_quality"] == "good"
        assert data["fusion_policy"] == "acoustic_only"
        assert data["transcript"] is None
        assert result.confidence_percentage == 75
        assert result.is_high_confidence

    def test_analysis_result_confidence_bounds(self):
        with pytest.raises(AssertionError):
            AnalysisResult(
                timestamp=datetime(2024, 1, 15),
                primary_emotion=EmotionCategory.NEUTRAL,
                sub_emotion=SubEmotion.CALM,
                intensity=EmotionIntensity.LOW,
                confidence=0.05,
                emotion_scores={EmotionCategory.NEUTRAL: 1.0},
                sub_emotion_scores={},
                audio_quality=AudioQuality.POOR,
                session_duration=1.0,
                acoustic_features=make_features(),
            )
