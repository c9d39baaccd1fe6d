"""Emotion profile tables

Typed view over config/emotion_profiles.yaml: per-emotion contribution rules,
feature weights and sub-emotion modifiers, plus the feature importance
weights used to build the feature vector.
"""

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, Mapping, Optional, Tuple
import numpy as np

from emotion_engine.config.config_loader import load_data_table
from emotion_engine.models.enums import EmotionCategory, SubEmotion
from emotion_engine.models.features import PROSODIC_FEATURE_NAMES


logger = logging.getLogger(__name__)


SUPPORTED_VERSION = 1
SCORED_FEATURES = ("pitch", "energy", "spectral_centroid", "jitter", "formant1")
RANGE_RULE_FEATURES = ("pitch", "energy", "spectral_centroid", "jitter")


@dataclass(frozen=True)
class Bounds:
    """Open interval low < x < high; None leaves a side unbounded"""
    low: Optional[float] = None
    high: Optional[float] = None

    def contains(self, value: float) -> bool:
        if self.low is not None and not value > self.low:
            return False
        if self.high is not None and not value < self.high:
            return False
        return True


@dataclass(frozen=True)
class RangeRule:
    """Contributes `match` when a feature falls inside bounds, else `otherwise`"""
    bounds: Bounds
    match: float
    otherwise: float

    def evaluate(self, value: float) -> float:
        return self.match if self.bounds.contains(value) else self.otherwise


@dataclass(frozen=True)
class FormantRule:
    """Joint rule over the first two formants"""
    f1: Bounds
    f2: Bounds
    match: float
    otherwise: float

    def evaluate(self, f1: float, f2: float) -> float:
        if self.f1.contains(f1) and self.f2.contains(f2):
            return self.match
        return self.otherwise


@dataclass(frozen=True)
class SubEmotionRule:
    """score = parent * multiplier + blend_weight * score[blend_category]"""
    sub_emotion: SubEmotion
    multiplier: float
    blend_category: Optional[EmotionCategory] = None
    blend_weight: float = 0.0


@dataclass(frozen=True)
class EmotionProfile:
    category: EmotionCategory
    weights: Mapping[str, float]
    rules: Mapping[str, RangeRule]
    formant_rule: FormantRule
    sub_emotions: Tuple[SubEmotionRule, ...]


@dataclass(frozen=True)
class EmotionProfiles:
    """All tables from one versioned profile file

    Attributes:
        version: Table format version
        feature_importance: Weight applied to each prosodic feature in the vector
        profiles: Per-category profile, in EmotionCategory order
    """
    version: int
    feature_importance: Mapping[str, float]
    profiles: Mapping[EmotionCategory, EmotionProfile]

    def __getitem__(self, category: EmotionCategory) -> EmotionProfile:
        return self.profiles[category]

    def importance_vector(self) -> np.ndarray:
        """Importance weights in feature-vector order"""
        return np.array([self.feature_importance[name] for name in PROSODIC_FEATURE_NAMES])


def _bounds(spec: Optional[dict]) -> Bounds:
    spec = spec or {}
    return Bounds(low=spec.get('low'), high=spec.get('high'))


def _range_rule(spec: dict) -> RangeRule:
    return RangeRule(bounds=_bounds(spec), match=float(spec['match']),
                     otherwise=float(spec['otherwise']))


def parse_profiles(table: dict) -> EmotionProfiles:
    """Build EmotionProfiles from a parsed YAML table.

    Raises:
        ValueError: If the version is unsupported or any table is incomplete
    """
    version = table.get('version')
    if version != SUPPORTED_VERSION:
        raise ValueError(f"Unsupported emotion profile version: {version}")

    importance = {name: float(w) for name, w in (table.get('feature_importance') or {}).items()}
    missing = [name for name in PROSODIC_FEATURE_NAMES if name not in importance]
    if missing:
        raise ValueError(f"Feature importance missing for: {', '.join(missing)}")

    emotions = table.get('emotions') or {}
    profiles: Dict[EmotionCategory, EmotionProfile] = {}
    for category in EmotionCategory:
        spec = emotions.get(category.value)
        if spec is None:
            raise ValueError(f"No profile for emotion '{category.value}'")

        weights = {name: float(spec['weights'][name]) for name in SCORED_FEATURES}
        rules = {name: _range_rule(spec['rules'][name]) for name in RANGE_RULE_FEATURES}
        formant_spec = spec['rules']['formants']
        formant_rule = FormantRule(
            f1=_bounds(formant_spec.get('f1')),
            f2=_bounds(formant_spec.get('f2')),
            match=float(formant_spec['match']),
            otherwise=float(formant_spec['otherwise']),
        )

        sub_emotions = []
        for entry in spec.get('sub_emotions') or []:
            blend = entry.get('blend') or {}
            sub_emotions.append(SubEmotionRule(
                sub_emotion=SubEmotion(entry['name']),
                multiplier=float(entry['multiplier']),
                blend_category=EmotionCategory(blend['category']) if blend else None,
                blend_weight=float(blend.get('weight', 0.0)),
            ))
        if len(sub_emotions) != 6:
            raise ValueError(
                f"Emotion '{category.value}' must define 6 sub-emotions, got {len(sub_emotions)}"
            )

        profiles[category] = EmotionProfile(
            category=category,
            weights=weights,
            rules=rules,
            formant_rule=formant_rule,
            sub_emotions=tuple(sub_emotions),
        )

    return EmotionProfiles(
        version=version,
        feature_importance=importance,
        profiles=profiles,
    )


@lru_cache(maxsize=None)
def load_emotion_profiles(name: str = "emotion_profiles.yaml") -> EmotionProfiles:
    """Load and validate a packaged profile table (cached, read-only)"""
    profiles = parse_profiles(load_data_table(name))
    logger.info(f"Loaded emotion profiles v{profiles.version} from {name}")
    return profiles
