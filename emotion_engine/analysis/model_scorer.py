"""Pretrained-model emotion scoring

Optional data-driven replacement for the heuristic scorer. A TorchScript
classifier mapping the feature vector to seven emotion logits is loaded once
at construction and treated as read-only afterwards.
"""

import logging
from pathlib import Path
from typing import Optional
import numpy as np
import torch

from emotion_engine.analysis.profiles import EmotionProfiles
from emotion_engine.analysis.scoring import AcousticEmotionScorer
from emotion_engine.config.config_loader import config as default_config
from emotion_engine.models.enums import EmotionCategory
from emotion_engine.models.errors import InvalidModelOutputError, ModelNotLoadedError
from emotion_engine.models.features import FeatureVector
from emotion_engine.models.interfaces import EmotionScorer
from emotion_engine.models.results import AcousticScoring, normalize_scores


logger = logging.getLogger(__name__)


class ModelEmotionScorer(EmotionScorer):
    """Scores emotions with a pretrained TorchScript classifier.

    Attributes:
        model_path: Location of the TorchScript file
        device: Torch device the model runs on
        model: Loaded classifier in evaluation mode
    """

    def __init__(self, model_path: str, config=None):
        config = config or default_config
        self.model_path = Path(model_path) if model_path else None
        self.device = "cuda" if config.get('model.use_gpu', False) and torch.cuda.is_available() else "cpu"
        self.model = self._load_model()

        logger.info(f"ModelEmotionScorer initialized with device: {self.device}")

    def _load_model(self):
        """Load the classifier.

        Raises:
            ModelNotLoadedError: If no path is configured, the file is missing
                                 or loading fails
        """
        if self.model_path is None:
            raise ModelNotLoadedError("No emotion model path configured")
        if not self.model_path.exists():
            raise ModelNotLoadedError(f"Emotion model not found: {self.model_path}")

        try:
            logger.info(f"Loading emotion model from {self.model_path}")
            model = torch.jit.load(str(self.model_path), map_location=self.device)
            model.eval()
            logger.info("Emotion model loaded successfully")
            return model
        except Exception as e:
            logger.error(f"Failed to load emotion model: {e}", exc_info=True)
            raise ModelNotLoadedError(f"Failed to load emotion model: {e}") from e

    def score(self, feature_vector: FeatureVector) -> AcousticScoring:
        """Predict emotion probabilities for a feature vector.

        Raises:
            InvalidModelOutputError: If the model does not return seven finite values
        """
        inputs = torch.from_numpy(feature_vector.values.astype(np.float32)).unsqueeze(0)
        inputs = inputs.to(self.device)

        with torch.no_grad():
            logits = self.model(inputs)
            probs = torch.nn.functional.softmax(logits, dim=-1)

        probs_np = probs.cpu().numpy().ravel()
        categories = list(EmotionCategory)
        if probs_np.shape[0] != len(categories) or not np.all(np.isfinite(probs_np)):
            logger.error(f"Emotion model returned invalid output with shape {tuple(probs.shape)}")
            raise InvalidModelOutputError()

        raw_scores = {category: float(p) for category, p in zip(categories, probs_np)}
        distribution = normalize_scores(raw_scores)
        return AcousticScoring(distribution, distribution, float(np.sum(probs_np)))


def build_scorer(config=None, profiles: Optional[EmotionProfiles] = None) -> EmotionScorer:
    """Select the scorer at construction time.

    Uses the pretrained model when `model.path` is configured and loads;
    otherwise falls back to the heuristic scorer.
    """
    config = config or default_config
    model_path = config.get('model.path')
    if model_path:
        try:
            return ModelEmotionScorer(model_path, config)
        except ModelNotLoadedError as e:
            logger.warning(f"{e.message}; falling back to heuristic scoring")
    else:
        logger.info("No emotion model configured, using heuristic scoring")
    return AcousticEmotionScorer(config, profiles)
