"""Acoustic Emotion Scoring

Heuristic emotion scorer driven by the versioned emotion profile tables, plus
the sub-emotion resolution and confidence calculations shared by every scorer.

Each emotion category receives a 0-1 contribution from pitch, energy,
spectral centroid, jitter and formant-band membership. Contributions are
combined with the category's own feature weights and normalized by the total
weight. A buffer whose best category score stays below the rejection
threshold, or whose energy sits at the floor of the energy scale, is replaced
by {neutral: 1.0}; otherwise category scores are normalized to sum to 1.
"""

import logging
from typing import Optional, Tuple
import numpy as np

from emotion_engine.analysis.profiles import EmotionProfile, EmotionProfiles, load_emotion_profiles
from emotion_engine.config.config_loader import config as default_config
from emotion_engine.models.enums import AudioQuality, EmotionCategory, SubEmotion
from emotion_engine.models.features import FeatureVector, PROSODIC_FEATURE_NAMES
from emotion_engine.models.interfaces import EmotionScorer
from emotion_engine.models.results import (
    AcousticScoring,
    EmotionScores,
    SubEmotionScores,
    neutral_scores,
    normalize_scores,
    ranked_scores,
    top_two,
)


logger = logging.getLogger(__name__)


SEPARATION_BONUS = 0.3
VOICE_SEPARATION_BONUS = 0.5
MAX_DURATION_BONUS = 0.15
WEAK_EVIDENCE_TOTAL = 0.8
WEAK_EVIDENCE_PENALTY = 0.8
MIN_CONFIDENCE = 0.1
MAX_CONFIDENCE = 0.98


class AcousticEmotionScorer(EmotionScorer):
    """Threshold-table emotion scorer over the acoustic feature vector.

    Attributes:
        profiles: Emotion profile tables
        rejection_threshold: Minimum best category score, before normalization,
            to accept a distribution
        min_voice_energy: Normalized energy at or below which the buffer is
            treated as silent
    """

    def __init__(self, config=None, profiles: Optional[EmotionProfiles] = None):
        config = config or default_config
        self.profiles = profiles or load_emotion_profiles()
        self.rejection_threshold = config.get('scoring.rejection_threshold', 0.4)
        self.min_voice_energy = config.get('scoring.min_voice_energy', 0.0)

        logger.info(f"AcousticEmotionScorer initialized with profiles v{self.profiles.version}")

    def score(self, feature_vector: FeatureVector) -> AcousticScoring:
        """Score all emotion categories from a feature vector.

        The prosodic block is divided by the importance weights to recover
        raw feature values before the threshold rules are applied.

        Args:
            feature_vector: Validated feature vector

        Returns:
            AcousticScoring; `rejected` is set when the low-confidence policy
            replaced the distribution with {neutral: 1.0}
        """
        raw = feature_vector.prosodic / self.profiles.importance_vector()
        values = dict(zip(PROSODIC_FEATURE_NAMES, (float(v) for v in raw)))

        raw_scores = {
            category: self._category_score(self.profiles[category], values)
            for category in EmotionCategory
        }
        raw_total = sum(raw_scores.values())

        if raw_total <= 0:
            logger.warning("All emotion scores are zero, defaulting to neutral")
            return AcousticScoring(neutral_scores(), neutral_scores(), 0.0, rejected=True)

        distribution = normalize_scores(raw_scores)

        if values["energy"] <= self.min_voice_energy:
            logger.debug("Buffer energy at the silence floor, defaulting to neutral")
            return AcousticScoring(neutral_scores(), distribution, raw_total, rejected=True)

        best = max(raw_scores.values())
        if best < self.rejection_threshold:
            logger.debug(f"Best acoustic score {best:.3f} below {self.rejection_threshold}, "
                         f"rejecting to neutral")
            return AcousticScoring(neutral_scores(), distribution, raw_total, rejected=True)

        return AcousticScoring(distribution, distribution, raw_total)

    def _category_score(self, profile: EmotionProfile, values: dict) -> float:
        contributions = {
            name: rule.evaluate(values[name]) for name, rule in profile.rules.items()
        }
        # Undetected formants are zero-padded and evaluated as 0 Hz
        contributions["formant1"] = profile.formant_rule.evaluate(
            values["formant1"], values["formant2"]
        )

        total_weight = sum(profile.weights.values())
        if total_weight <= 0:
            return 0.0
        weighted = sum(contributions[name] * w for name, w in profile.weights.items())
        return weighted / total_weight


def primary_emotion(scores: EmotionScores) -> Tuple[EmotionCategory, float]:
    """Highest-scoring category; ties resolve in category declaration order"""
    if not scores:
        return EmotionCategory.NEUTRAL, 0.0
    return ranked_scores(scores)[0]


def resolve_sub_emotion(
    scores: EmotionScores,
    primary: EmotionCategory,
    profiles: EmotionProfiles
) -> Tuple[SubEmotion, SubEmotionScores]:
    """Pick the strongest sub-emotion of the primary category.

    Each candidate scores parent * multiplier plus an optional fraction of
    another category's score, clamped to [0, 1]. Ties keep table order.

    Returns:
        Tuple of (selected sub-emotion, scores of all candidates)
    """
    parent = scores.get(primary, 0.0)
    candidates: SubEmotionScores = {}
    for rule in profiles[primary].sub_emotions:
        blended = parent * rule.multiplier
        if rule.blend_category is not None:
            blended += rule.blend_weight * scores.get(rule.blend_category, 0.0)
        candidates[rule.sub_emotion] = float(np.clip(blended, 0.0, 1.0))

    if not candidates:
        return SubEmotion.CALM, {}

    selected = max(candidates, key=candidates.get)
    return selected, candidates


def calculate_confidence(
    distribution: EmotionScores,
    quality: AudioQuality,
    duration: float,
    raw_total: float
) -> float:
    """Overall analysis confidence in [0.1, 0.98].

    Starts from the best score, adds 0.3x its margin over the runner-up,
    scales by the audio quality multiplier, adds up to 0.15 for longer
    recordings and applies a 0.8x penalty when the pre-normalization score
    total was weak.

    Args:
        distribution: Normalized scores the decision was based on
        quality: Audio quality of the buffer
        duration: Recording duration in seconds
        raw_total: Sum of category scores before normalization
    """
    top, second = top_two(distribution)
    confidence = top + SEPARATION_BONUS * (top - second)
    confidence *= quality.confidence_multiplier
    confidence += min(duration / 10.0, MAX_DURATION_BONUS)
    if raw_total < WEAK_EVIDENCE_TOTAL:
        confidence *= WEAK_EVIDENCE_PENALTY
    return float(np.clip(confidence, MIN_CONFIDENCE, MAX_CONFIDENCE))


def voice_confidence(distribution: EmotionScores) -> float:
    """Acoustic channel confidence used by the fusion policy"""
    top, second = top_two(distribution)
    return min(1.0, top + VOICE_SEPARATION_BONUS * (top - second))
