"""Base interfaces for pluggable analysis components"""

from abc import ABC, abstractmethod

from emotion_engine.models.features import FeatureVector
from emotion_engine.models.results import AcousticScoring


class EmotionScorer(ABC):
    """Scores emotion categories from a feature vector

    Implementations are interchangeable: the heuristic threshold scorer and
    the pretrained-model scorer consume the same FeatureVector.
    """

    @abstractmethod
    def score(self, feature_vector: FeatureVector) -> AcousticScoring:
        """Score a feature vector

        Args:
            feature_vector: Validated model input

        Returns:
            Acoustic scoring with normalized scores
        """
        pass


class SentimentAnalyzer(ABC):
    """Paragraph-level sentiment scoring for transcripts"""

    @abstractmethod
    def sentiment_score(self, text: str) -> float:
        """Score the sentiment of a text

        Args:
            text: Transcript to score

        Returns:
            Score in [-1, 1], negative to positive

        Raises:
            LinguisticProcessingError: If the sentiment model fails
        """
        pass
