"""
Integration tests for the end-to-end emotion analysis pipeline.

Covers:
- Input contract (duration bounds, sample format)
- Degenerate input (silence)
- Deterministic results for identical input
- Acoustic and linguistic fusion, including linguistic failure
- Async execution and shutdown
"""

import json
from unittest.mock import MagicMock

import numpy as np
import pytest

from emotion_engine.analysis.linguistic import EmotionLexicon, LinguisticEmotionScorer
from emotion_engine.models.enums import (
    AudioQuality,
    EmotionCategory,
    EmotionIntensity,
    FusionPolicy,
    SubEmotion,
)
from emotion_engine.models.errors import (
    AudioTooLongError,
    AudioTooShortError,
    InvalidAudioFormatError,
    InvalidModelOutputError,
    ServiceUnavailableError,
)
from emotion_engine.models.interfaces import EmotionScorer
from emotion_engine.models.results import AnalysisResult
from emotion_engine.pipeline import EmotionAnalysisPipeline

from conftest import FIXED_TIME, SAMPLE_RATE, FailingSentimentAnalyzer, FakeSentimentAnalyzer, make_sine


@pytest.fixture(scope="module")
def lexicon():
    return EmotionLexicon.load()


@pytest.fixture
def pipeline(fixed_clock, lexicon):
    """Pipeline with a stubbed sentiment model and a fixed clock"""
    linguistic_scorer = LinguisticEmotionScorer(
        sentiment_analyzer=FakeSentimentAnalyzer(0.9), lexicon=lexicon
    )
    pipeline = EmotionAnalysisPipeline(linguistic_scorer=linguistic_scorer, clock=fixed_clock)
    yield pipeline
    pipeline.close()


class TestInputContract:
    """Input validation happens before any feature work"""

    def test_minimum_duration_is_inclusive(self, pipeline):
        result = pipeline.analyze(make_sine(220.0, 1.0), SAMPLE_RATE, 1.00)
        assert isinstance(result, AnalysisResult)
        assert result.session_duration == 1.0

    def test_too_short(self, pipeline):
        with pytest.raises(AudioTooShortError):
            pipeline.analyze(make_sine(220.0, 1.0), SAMPLE_RATE, 0.99)

    def test_too_long(self, pipeline):
        with pytest.raises(AudioTooLongError):
            pipeline.analyze(make_sine(220.0, 1.0), SAMPLE_RATE, 120.01)

    def test_duration_checked_before_features(self, pipeline):
        analyzer = MagicMock()
        pipeline.acoustic_analyzer = analyzer
        with pytest.raises(AudioTooShortError):
            pipeline.analyze(np.zeros(10, dtype=np.float32), SAMPLE_RATE, 0.5)
        analyzer.analyze.assert_not_called()

    @pytest.mark.parametrize("samples", [
        np.zeros(0, dtype=np.float32),
        np.zeros((2, 16000), dtype=np.float32),
        np.array(["a"] * 16000),
        np.full(16000, np.nan, dtype=np.float32),
    ])
    def test_invalid_samples(self, pipeline, samples):
        with pytest.raises(InvalidAudioFormatError):
            pipeline.analyze(samples, SAMPLE_RATE, 1.0)

    def test_invalid_sample_rate(self, pipeline):
        with pytest.raises(InvalidAudioFormatError):
            pipeline.analyze(make_sine(220.0, 1.0), 0, 1.0)


class TestAcousticAnalysis:
    """Voice-only analysis"""

    def test_silence(self, pipeline, silence):
        result = pipeline.analyze(silence, SAMPLE_RATE, 2.0)

        assert result.audio_quality is AudioQuality.POOR
        assert result.emotion_scores == {EmotionCategory.NEUTRAL: 1.0}
        assert result.primary_emotion is EmotionCategory.NEUTRAL
        assert result.sub_emotion is SubEmotion.CALM
        assert result.confidence <= 0.4
        assert result.intensity is EmotionIntensity.LOW
        assert result.fusion_policy is FusionPolicy.ACOUSTIC_ONLY
        assert result.timestamp == FIXED_TIME

    def test_tone_features(self, pipeline, sine_220):
        result = pipeline.analyze(sine_220, SAMPLE_RATE, 2.0)

        assert abs(result.acoustic_features.pitch - 220.0) <= 5.0
        assert len(result.acoustic_features.formant_frequencies) == 3
        assert result.audio_quality in (AudioQuality.GOOD, AudioQuality.EXCELLENT)
        assert 0.1 <= result.confidence <= 0.98
        assert sum(result.emotion_scores.values()) == pytest.approx(1.0)
        assert set(result.emotion_scores) == set(EmotionCategory)
        assert result.emotion_scores != {EmotionCategory.NEUTRAL: 1.0}

    def test_resampling(self, pipeline):
        samples = make_sine(220.0, 2.0, sample_rate=8000)
        result = pipeline.analyze(samples, 8000, 2.0)
        assert abs(result.acoustic_features.pitch - 220.0) <= 5.0

    def test_identical_input_gives_identical_result(self, pipeline, sine_220):
        first = pipeline.analyze(sine_220, SAMPLE_RATE, 2.0)
        second = pipeline.analyze(sine_220.copy(), SAMPLE_RATE, 2.0)
        assert first == second

    def test_result_serializes_to_json(self, pipeline, sine_220):
        result = pipeline.analyze(sine_220, SAMPLE_RATE, 2.0, "I am so happy and excited today")
        data = json.loads(json.dumps(result.to_dict()))

        assert data["primary_emotion"] == result.primary_emotion.value
        assert data["timestamp"] == FIXED_TIME.isoformat()

    def test_scorer_errors_propagate(self, pipeline, sine_220):
        scorer = MagicMock(spec=EmotionScorer)
        scorer.score.side_effect = InvalidModelOutputError()
        pipeline.scorer = scorer

        with pytest.raises(InvalidModelOutputError):
            pipeline.analyze(sine_220, SAMPLE_RATE, 2.0)


class TestFusion:
    """Voice and transcript fusion"""

    def test_confident_transcript_dominates(self, pipeline, sine_220):
        result = pipeline.analyze(sine_220, SAMPLE_RATE, 2.0, "I am so happy and excited today")

        assert result.fusion_policy is FusionPolicy.LINGUISTIC_DOMINANT
        assert result.primary_emotion is EmotionCategory.JOY
        assert result.sub_emotion in (SubEmotion.EXCITEMENT, SubEmotion.EUPHORIA)
        assert result.sub_emotion_scores[result.sub_emotion] == max(result.sub_emotion_scores.values())
        assert result.intensity is EmotionIntensity.HIGH
        assert result.transcript == "I am so happy and excited today"
        assert sum(result.emotion_scores.values()) == pytest.approx(1.0)

    def test_linguistic_failure_falls_back_to_voice(self, fixed_clock, lexicon, sine_220):
        linguistic_scorer = LinguisticEmotionScorer(
            sentiment_analyzer=FailingSentimentAnalyzer(), lexicon=lexicon
        )
        with EmotionAnalysisPipeline(linguistic_scorer=linguistic_scorer, clock=fixed_clock) as pipeline:
            with_text = pipeline.analyze(sine_220, SAMPLE_RATE, 2.0, "I am so happy and excited today")
            without_text = pipeline.analyze(sine_220, SAMPLE_RATE, 2.0)

        assert with_text.fusion_policy is FusionPolicy.ACOUSTIC_ONLY
        assert with_text.transcript is None
        assert with_text == without_text

    def test_rejected_voice_channel_is_confident_neutral(self, fixed_clock, lexicon, silence):
        linguistic_scorer = LinguisticEmotionScorer(
            sentiment_analyzer=FakeSentimentAnalyzer(0.05), lexicon=lexicon
        )
        with EmotionAnalysisPipeline(linguistic_scorer=linguistic_scorer, clock=fixed_clock) as pipeline:
            result = pipeline.analyze(silence, SAMPLE_RATE, 2.0, "we will meet on the fourth floor")

        # {neutral: 1.0} gives full voice confidence against a weak transcript
        assert result.fusion_policy is FusionPolicy.ACOUSTIC_DOMINANT
        assert result.primary_emotion is EmotionCategory.NEUTRAL
        assert result.emotion_scores[EmotionCategory.NEUTRAL] == pytest.approx(1.0)
        assert result.sub_emotion is SubEmotion.CALM
        assert not result.low_confidence
        assert result.confidence <= 0.6

    def test_short_transcript_is_ignored(self, pipeline, sine_220):
        result = pipeline.analyze(sine_220, SAMPLE_RATE, 2.0, "hi")
        assert result.fusion_policy is FusionPolicy.ACOUSTIC_ONLY


class TestLifecycle:
    """Async execution and shutdown"""

    @pytest.mark.asyncio
    async def test_analyze_async(self, pipeline, sine_220):
        result = await pipeline.analyze_async(sine_220, SAMPLE_RATE, 2.0)
        assert result == pipeline.analyze(sine_220, SAMPLE_RATE, 2.0)

    @pytest.mark.asyncio
    async def test_async_input_errors_propagate(self, pipeline):
        with pytest.raises(AudioTooShortError):
            await pipeline.analyze_async(make_sine(220.0, 0.5), SAMPLE_RATE, 0.5)

    def test_closed_pipeline(self, pipeline, sine_220):
        pipeline.close()
        with pytest.raises(ServiceUnavailableError):
            pipeline.analyze(sine_220, SAMPLE_RATE, 2.0)

    @pytest.mark.asyncio
    async def test_closed_pipeline_async(self, pipeline, sine_220):
        pipeline.close()
        with pytest.raises(ServiceUnavailableError):
            await pipeline.analyze_async(sine_220, SAMPLE_RATE, 2.0)
