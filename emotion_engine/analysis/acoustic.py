"""Acoustic Analysis Module

Turns a PCM buffer into the inputs of the emotion scorers: the prosodic
feature set, the fixed-length feature vector (13 mean MFCCs followed by the
importance-weighted prosodic values) and the audio quality report.

Requirements:
    - Buffers are resampled to the classification rate before extraction
    - Feature vectors have a fixed dimension and contain only finite values
    - Unexpected failures during extraction surface as AudioProcessingFailedError
"""

import logging
from dataclasses import dataclass
from typing import Optional
import numpy as np
import librosa

from emotion_engine.analysis.mfcc import MFCCExtractor
from emotion_engine.analysis.profiles import EmotionProfiles, load_emotion_profiles
from emotion_engine.analysis.prosodic import ProsodicFeatureExtractor
from emotion_engine.analysis.quality import QualityAssessor, QualityReport
from emotion_engine.config.config_loader import config as default_config
from emotion_engine.models.errors import AudioProcessingFailedError, EmotionAnalysisError
from emotion_engine.models.features import AcousticFeatures, FeatureVector
from emotion_engine.models.frames import AudioBuffer


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AcousticAnalysis:
    """Everything extracted from one buffer

    Attributes:
        features: Prosodic features
        feature_vector: Scorer input
        quality: Audio quality report
    """
    features: AcousticFeatures
    feature_vector: FeatureVector
    quality: QualityReport


def prosodic_values(features: AcousticFeatures) -> np.ndarray:
    """Raw prosodic values in feature-vector order (before importance weighting)"""
    f1, f2, _ = features.formant_frequencies
    return np.array([
        features.pitch,
        features.energy,
        features.spectral_centroid,
        features.zero_crossing_rate,
        features.spectral_rolloff,
        features.jitter,
        features.shimmer,
        features.harmonic_to_noise_ratio,
        features.voice_onset_time,
        f1,
        f2,
    ], dtype=np.float64)


class AcousticAnalyzer:
    """Extracts acoustic features and the scorer feature vector from audio.

    Attributes:
        sample_rate: Classification sample rate; other rates are resampled
        profiles: Emotion profile tables (source of the importance weights)
        prosodic_extractor: Pitch, energy, spectral and perturbation features
        mfcc_extractor: Utterance-level MFCCs
        quality_assessor: Signal quality scoring
    """

    def __init__(
        self,
        config=None,
        profiles: Optional[EmotionProfiles] = None,
        prosodic_extractor: Optional[ProsodicFeatureExtractor] = None,
        mfcc_extractor: Optional[MFCCExtractor] = None,
        quality_assessor: Optional[QualityAssessor] = None
    ):
        config = config or default_config
        self.sample_rate = config.get('audio.sample_rate', 16000)
        self.profiles = profiles or load_emotion_profiles()
        self.prosodic_extractor = prosodic_extractor or ProsodicFeatureExtractor(config)
        self.mfcc_extractor = mfcc_extractor or MFCCExtractor(config)
        self.quality_assessor = quality_assessor or QualityAssessor()

        logger.info(f"AcousticAnalyzer initialized at {self.sample_rate} Hz")

    def analyze(self, buffer: AudioBuffer) -> AcousticAnalysis:
        """Extract features, feature vector and quality from a buffer.

        Args:
            buffer: Validated audio buffer

        Returns:
            AcousticAnalysis for the buffer

        Raises:
            AudioTooShortError: If the buffer is shorter than one MFCC frame
            InvalidFeatureVectorError: If the assembled vector has the wrong length
            InvalidFeatureValuesError: If the assembled vector is not finite
            AudioProcessingFailedError: If extraction fails unexpectedly
        """
        try:
            samples = self._prepare_samples(buffer)
            mfcc = self.mfcc_extractor.extract(samples, self.sample_rate)
            features = self.prosodic_extractor.extract(samples, self.sample_rate)
            feature_vector = self.build_feature_vector(mfcc, features)
        except EmotionAnalysisError:
            raise
        except Exception as e:
            logger.error(f"Acoustic feature extraction failed: {e}", exc_info=True)
            raise AudioProcessingFailedError(f"Failed to extract acoustic features: {e}") from e

        # Quality is assessed on the caller's samples, independent of resampling
        quality = self.quality_assessor.report(buffer.samples)

        logger.info(f"Acoustic analysis complete: pitch={features.pitch:.1f}Hz, "
                    f"energy={features.energy:.3f}, quality={quality.quality.value}")
        return AcousticAnalysis(features=features, feature_vector=feature_vector, quality=quality)

    def build_feature_vector(self, mfcc: np.ndarray, features: AcousticFeatures) -> FeatureVector:
        """Concatenate MFCCs with importance-weighted prosodic values"""
        weighted = prosodic_values(features) * self.profiles.importance_vector()
        return FeatureVector(np.concatenate([np.asarray(mfcc, dtype=np.float64), weighted]))

    def _prepare_samples(self, buffer: AudioBuffer) -> np.ndarray:
        samples = buffer.samples.astype(np.float32)
        if buffer.sample_rate != self.sample_rate:
            logger.debug(f"Resampling from {buffer.sample_rate} Hz to {self.sample_rate} Hz")
            samples = librosa.resample(
                samples,
                orig_sr=buffer.sample_rate,
                target_sr=self.sample_rate
            )
        return samples
