"""Pytest configuration and fixtures"""

from datetime import datetime

import numpy as np
import pytest
from hypothesis import settings, Verbosity

from emotion_engine.models.interfaces import SentimentAnalyzer
from emotion_engine.models.errors import LinguisticProcessingError

# Register Hypothesis profiles
settings.register_profile("ci", max_examples=100, verbosity=Verbosity.verbose)
settings.register_profile("dev", max_examples=20, verbosity=Verbosity.normal)
settings.register_profile("debug", max_examples=10, verbosity=Verbosity.verbose)

# Use CI profile by default
settings.load_profile("ci")


SAMPLE_RATE = 16000
FIXED_TIME = datetime(2024, 1, 15, 12, 30, 0)


def make_sine(frequency: float, duration: float, sample_rate: int = SAMPLE_RATE,
              amplitude: float = 0.5) -> np.ndarray:
    """Generate a pure sine tone"""
    t = np.arange(int(round(sample_rate * duration))) / sample_rate
    return (amplitude * np.sin(2 * np.pi * frequency * t)).astype(np.float32)


class FakeSentimentAnalyzer(SentimentAnalyzer):
    """Sentiment analyzer returning a fixed score"""

    def __init__(self, score: float = 0.0):
        self.score = score
        self.calls = []

    def sentiment_score(self, text: str) -> float:
        self.calls.append(text)
        return self.score


class FailingSentimentAnalyzer(SentimentAnalyzer):
    """Sentiment analyzer whose model is unavailable"""

    def sentiment_score(self, text: str) -> float:
        raise LinguisticProcessingError("Sentiment model unavailable")


@pytest.fixture
def sine_220():
    """Two seconds of a 220 Hz tone at 16 kHz"""
    return make_sine(220.0, 2.0)


@pytest.fixture
def silence():
    """Two seconds of digital silence at 16 kHz"""
    return np.zeros(2 * SAMPLE_RATE, dtype=np.float32)


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_TIME
