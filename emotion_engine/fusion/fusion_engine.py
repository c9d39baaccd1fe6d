"""Fusion Engine

Combines the acoustic and linguistic emotion estimates into a single score
set using an ordered, confidence-driven policy. The first matching rule wins:

    1. No linguistic result: acoustic scores unchanged
    2. Linguistic confidence >= 0.6: 0.8 linguistic + 0.2 acoustic
    3. Acoustic confidence >= 0.5 and linguistic < 0.4: 0.7 acoustic + 0.3 linguistic
    4. Both confidences >= 0.4: weights proportional to confidence
    5. Otherwise: acoustic scores, flagged as low confidence

The combination helpers are pure functions over score mappings.
"""

import logging
from typing import Optional

from emotion_engine.config.config_loader import config as default_config
from emotion_engine.models.enums import EmotionCategory, FusionPolicy
from emotion_engine.models.results import EmotionScores, FusionResult, LinguisticResult


logger = logging.getLogger(__name__)


class FusionEngine:
    """Confidence-weighted fusion of acoustic and linguistic emotion scores.

    Attributes:
        linguistic_threshold: Linguistic confidence at which text dominates
        acoustic_threshold: Acoustic confidence at which voice dominates
        combination_threshold: Confidence both channels need for dynamic weighting
        linguistic_dominant_weights: (linguistic, acoustic) weights for rule 2
        acoustic_dominant_weights: (acoustic, linguistic) weights for rule 3
    """

    def __init__(self, config=None):
        config = config or default_config
        self.linguistic_threshold = config.get('fusion.linguistic_threshold', 0.6)
        self.acoustic_threshold = config.get('fusion.acoustic_threshold', 0.5)
        self.combination_threshold = config.get('fusion.combination_threshold', 0.4)

        dominant = config.get('fusion.linguistic_dominant_weights', {})
        self.linguistic_dominant_weights = (
            dominant.get('linguistic', 0.8), dominant.get('acoustic', 0.2)
        )
        dominant = config.get('fusion.acoustic_dominant_weights', {})
        self.acoustic_dominant_weights = (
            dominant.get('acoustic', 0.7), dominant.get('linguistic', 0.3)
        )

        logger.info(f"FusionEngine initialized with thresholds "
                    f"linguistic={self.linguistic_threshold}, acoustic={self.acoustic_threshold}, "
                    f"combination={self.combination_threshold}")

    def fuse(
        self,
        acoustic_scores: EmotionScores,
        acoustic_confidence: float,
        linguistic: Optional[LinguisticResult] = None
    ) -> FusionResult:
        """Apply the fusion policy.

        Args:
            acoustic_scores: Acoustic emotion scores
            acoustic_confidence: Voice channel confidence in [0, 1]
            linguistic: Linguistic result, or None if that channel failed or was absent

        Returns:
            FusionResult with the combined scores and the rule that produced them
        """
        if linguistic is None:
            logger.debug("No linguistic result, using acoustic scores")
            return FusionResult(
                emotion_scores=dict(acoustic_scores),
                policy=FusionPolicy.ACOUSTIC_ONLY,
                acoustic_confidence=acoustic_confidence,
            )

        linguistic_confidence = linguistic.confidence
        linguistic_scores = linguistic.emotion_scores

        if linguistic_confidence >= self.linguistic_threshold:
            text_weight, voice_weight = self.linguistic_dominant_weights
            scores = combine_scores(linguistic_scores, acoustic_scores, text_weight, voice_weight)
            policy = FusionPolicy.LINGUISTIC_DOMINANT
        elif (acoustic_confidence >= self.acoustic_threshold
              and linguistic_confidence < self.combination_threshold):
            voice_weight, text_weight = self.acoustic_dominant_weights
            scores = combine_scores(acoustic_scores, linguistic_scores, voice_weight, text_weight)
            policy = FusionPolicy.ACOUSTIC_DOMINANT
        elif (acoustic_confidence >= self.combination_threshold
              and linguistic_confidence >= self.combination_threshold):
            text_weight, voice_weight = dynamic_weights(linguistic_confidence, acoustic_confidence)
            scores = combine_scores(linguistic_scores, acoustic_scores, text_weight, voice_weight)
            policy = FusionPolicy.DYNAMIC
        else:
            logger.warning(f"Both channels below {self.combination_threshold} confidence "
                           f"(acoustic={acoustic_confidence:.3f}, "
                           f"linguistic={linguistic_confidence:.3f}), using acoustic scores")
            return FusionResult(
                emotion_scores=dict(acoustic_scores),
                policy=FusionPolicy.LOW_CONFIDENCE_FALLBACK,
                acoustic_confidence=acoustic_confidence,
                linguistic_confidence=linguistic_confidence,
                low_confidence=True,
            )

        logger.debug(f"Fused scores with policy {policy.value}")
        return FusionResult(
            emotion_scores=scores,
            policy=policy,
            acoustic_confidence=acoustic_confidence,
            linguistic_confidence=linguistic_confidence,
        )


def dynamic_weights(first_confidence: float, second_confidence: float) -> tuple:
    """Weights proportional to each channel's share of the total confidence"""
    total = first_confidence + second_confidence
    if total <= 0:
        return 0.5, 0.5
    return first_confidence / total, second_confidence / total


def combine_scores(
    primary: EmotionScores,
    secondary: EmotionScores,
    primary_weight: float,
    secondary_weight: float
) -> EmotionScores:
    """Per-category weighted sum, renormalized to sum to 1 when positive.

    Categories missing from a mapping count as 0.
    """
    combined = {
        category: primary.get(category, 0.0) * primary_weight
        + secondary.get(category, 0.0) * secondary_weight
        for category in EmotionCategory
    }
    total = sum(combined.values())
    if total > 0:
        combined = {category: score / total for category, score in combined.items()}
    return combined
