"""Property-based tests for acoustic score normalization

Feature: voice-emotion-analysis, Property 2: Emotion score normalization
"""

import numpy as np
import pytest
from hypothesis import given, strategies as st, settings

from emotion_engine.analysis.acoustic import prosodic_values
from emotion_engine.analysis.profiles import load_emotion_profiles
from emotion_engine.analysis.scoring import AcousticEmotionScorer, calculate_confidence
from emotion_engine.models.enums import AudioQuality, EmotionCategory
from emotion_engine.models.features import AcousticFeatures, FeatureVector, MFCC_DIMENSION


profiles = load_emotion_profiles()
scorer = AcousticEmotionScorer(profiles=profiles)


@st.composite
def acoustic_features_strategy(draw):
    """Generate random AcousticFeatures within physically plausible ranges"""
    formant_count = draw(st.integers(min_value=0, max_value=3))
    formants = [draw(st.floats(min_value=80.0, max_value=4000.0)) for _ in range(formant_count)]
    formants += [0.0] * (3 - formant_count)

    return AcousticFeatures(
        pitch=draw(st.floats(min_value=0.0, max_value=800.0)),
        energy=draw(st.floats(min_value=0.0, max_value=1.0)),
        spectral_centroid=draw(st.floats(min_value=0.0, max_value=8000.0)),
        zero_crossing_rate=draw(st.floats(min_value=0.0, max_value=1.0)),
        spectral_rolloff=draw(st.floats(min_value=0.0, max_value=8000.0)),
        jitter=draw(st.floats(min_value=0.0, max_value=1.0)),
        shimmer=draw(st.floats(min_value=0.0, max_value=1.0)),
        formant_frequencies=tuple(formants),
        harmonic_to_noise_ratio=draw(st.floats(min_value=-20.0, max_value=40.0)),
        voice_onset_time=draw(st.floats(min_value=0.0, max_value=2.0)),
    )


@st.composite
def feature_vector_strategy(draw):
    features = draw(acoustic_features_strategy())
    mfcc = draw(st.lists(st.floats(min_value=-500.0, max_value=500.0),
                         min_size=MFCC_DIMENSION, max_size=MFCC_DIMENSION))
    weighted = prosodic_values(features) * profiles.importance_vector()
    return FeatureVector(np.concatenate([np.array(mfcc), weighted]))


@settings(max_examples=100, deadline=None)
@given(feature_vector_strategy())
def test_property_scores_sum_to_one(feature_vector):
    """
    Property 2: Emotion score normalization

    For any valid feature vector, both the final scores and the underlying
    distribution are non-negative and sum to 1.
    """
    scoring = scorer.score(feature_vector)

    for scores in (scoring.scores, scoring.distribution):
        assert sum(scores.values()) == pytest.approx(1.0, abs=1e-6)
        assert all(0.0 <= s <= 1.0 for s in scores.values())
        assert all(isinstance(c, EmotionCategory) for c in scores)


@settings(max_examples=100, deadline=None)
@given(feature_vector_strategy())
def test_property_rejection_policy(feature_vector):
    """
    Property 2: Emotion score normalization

    A distribution is rejected to {neutral: 1.0} exactly when the buffer is
    silent or its best category score before normalization is below the
    rejection threshold.
    """
    scoring = scorer.score(feature_vector)
    best_raw = max(scoring.distribution.values()) * scoring.raw_total
    silent = feature_vector.prosodic[1] <= scorer.min_voice_energy

    if scoring.rejected:
        assert scoring.scores == {EmotionCategory.NEUTRAL: 1.0}
        assert silent or best_raw < scorer.rejection_threshold + 1e-9
    else:
        assert not silent
        assert best_raw >= scorer.rejection_threshold - 1e-9
        assert scoring.scores == scoring.distribution


@settings(max_examples=100, deadline=None)
@given(feature_vector_strategy().filter(lambda v: v.prosodic[1] > 0))
def test_property_voiced_input_is_accepted(feature_vector):
    """
    Property 2: Emotion score normalization

    With the default tables every voiced buffer keeps its distribution; the
    neutral profile alone never scores below 0.4.
    """
    scoring = scorer.score(feature_vector)

    assert not scoring.rejected
    assert max(scoring.scores.values()) == max(scoring.distribution.values())


@settings(max_examples=100, deadline=None)
@given(
    feature_vector_strategy(),
    st.sampled_from(list(AudioQuality)),
    st.floats(min_value=1.0, max_value=120.0),
)
def test_property_confidence_bounds(feature_vector, quality, duration):
    """
    Property 2: Emotion score normalization

    Confidence always lies within [0.1, 0.98].
    """
    scoring = scorer.score(feature_vector)
    confidence = calculate_confidence(scoring.distribution, quality, duration, scoring.raw_total)

    assert 0.1 <= confidence <= 0.98
