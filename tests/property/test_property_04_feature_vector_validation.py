"""Property-based tests for feature vector validation

Feature: voice-emotion-analysis, Property 4: Feature vector validation
"""

import numpy as np
import pytest
from hypothesis import given, strategies as st, settings

from emotion_engine.models.errors import InvalidFeatureValuesError, InvalidFeatureVectorError
from emotion_engine.models.features import FEATURE_DIMENSION, FeatureVector


finite = st.floats(min_value=-1e6, max_value=1e6)


@settings(max_examples=100, deadline=None)
@given(st.lists(finite, min_size=0, max_size=64).filter(lambda v: len(v) != FEATURE_DIMENSION))
def test_property_wrong_length_rejected(values):
    """
    Property 4: Feature vector validation

    Any vector whose length differs from the fixed dimension is rejected
    with the expected and actual sizes.
    """
    with pytest.raises(InvalidFeatureVectorError) as exc_info:
        FeatureVector(np.array(values, dtype=float))

    assert exc_info.value.expected == FEATURE_DIMENSION
    assert exc_info.value.actual == len(values)


@settings(max_examples=100, deadline=None)
@given(
    st.lists(finite, min_size=FEATURE_DIMENSION, max_size=FEATURE_DIMENSION),
    st.integers(min_value=0, max_value=FEATURE_DIMENSION - 1),
    st.sampled_from([np.nan, np.inf, -np.inf]),
)
def test_property_non_finite_rejected(values, index, bad_value):
    """
    Property 4: Feature vector validation

    Any vector containing NaN or infinity is rejected.
    """
    values = np.array(values, dtype=float)
    values[index] = bad_value

    with pytest.raises(InvalidFeatureValuesError):
        FeatureVector(values)


@settings(max_examples=100, deadline=None)
@given(st.lists(finite, min_size=FEATURE_DIMENSION, max_size=FEATURE_DIMENSION))
def test_property_valid_vectors_accepted(values):
    """
    Property 4: Feature vector validation

    Finite vectors of the fixed dimension are accepted unchanged.
    """
    vector = FeatureVector(np.array(values))
    assert np.array_equal(vector.values, np.array(values))
