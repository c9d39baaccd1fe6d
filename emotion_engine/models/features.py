"""Data models for extracted acoustic features"""

from dataclasses import dataclass
from typing import Tuple
import numpy as np

from emotion_engine.models.errors import InvalidFeatureVectorError, InvalidFeatureValuesError


MFCC_DIMENSION = 13

# Scalar features appended after the MFCC block, in vector order.
PROSODIC_FEATURE_NAMES = (
    "pitch",
    "energy",
    "spectral_centroid",
    "zero_crossing_rate",
    "spectral_rolloff",
    "jitter",
    "shimmer",
    "harmonic_to_noise_ratio",
    "voice_onset_time",
    "formant1",
    "formant2",
)

FEATURE_DIMENSION = MFCC_DIMENSION + len(PROSODIC_FEATURE_NAMES)


@dataclass(frozen=True)
class AcousticFeatures:
    """Prosodic and spectral features extracted from one buffer

    Attributes:
        pitch: Fundamental frequency estimate in Hz
        energy: RMS energy normalized to [0, 1]
        spectral_centroid: Magnitude-weighted mean frequency in Hz
        zero_crossing_rate: Sign changes per sample
        spectral_rolloff: Frequency below which 85% of magnitude lies, in Hz
        jitter: Relative period-to-period variation
        shimmer: Relative peak-amplitude variation
        formant_frequencies: Exactly three formant frequencies in Hz, ordered by
                             descending spectral magnitude and zero-padded
        harmonic_to_noise_ratio: HNR in dB
        voice_onset_time: Seconds until the first voiced onset (0 if none)
    """
    pitch: float
    energy: float
    spectral_centroid: float
    zero_crossing_rate: float
    spectral_rolloff: float
    jitter: float
    shimmer: float
    formant_frequencies: Tuple[float, float, float]
    harmonic_to_noise_ratio: float
    voice_onset_time: float

    def __post_init__(self):
        """Validate feature ranges"""
        assert self.pitch >= 0, "Pitch must be non-negative"
        assert 0.0 <= self.energy <= 1.0, "Energy must be in [0, 1]"
        assert self.spectral_centroid >= 0, "Spectral centroid must be non-negative"
        assert self.zero_crossing_rate >= 0, "Zero crossing rate must be non-negative"
        assert len(self.formant_frequencies) == 3, "Exactly three formants required"

    def to_dict(self) -> dict:
        return {
            "pitch": self.pitch,
            "energy": self.energy,
            "spectral_centroid": self.spectral_centroid,
            "zero_crossing_rate": self.zero_crossing_rate,
            "spectral_rolloff": self.spectral_rolloff,
            "jitter": self.jitter,
            "shimmer": self.shimmer,
            "formant_frequencies": list(self.formant_frequencies),
            "harmonic_to_noise_ratio": self.harmonic_to_noise_ratio,
            "voice_onset_time": self.voice_onset_time,
        }


@dataclass(frozen=True, eq=False)
class FeatureVector:
    """Fixed-length model input: 13 MFCCs followed by 11 weighted prosodic values

    The array is copied and made read-only on construction.

    Raises:
        InvalidFeatureVectorError: If the length differs from FEATURE_DIMENSION
        InvalidFeatureValuesError: If any element is NaN or infinite
    """
    values: np.ndarray

    def __post_init__(self):
        values = np.array(self.values, dtype=np.float64).ravel()
        if values.shape[0] != FEATURE_DIMENSION:
            raise InvalidFeatureVectorError(FEATURE_DIMENSION, values.shape[0])
        if not np.all(np.isfinite(values)):
            raise InvalidFeatureValuesError()
        values.flags.writeable = False
        object.__setattr__(self, "values", values)

    def __len__(self) -> int:
        return self.values.shape[0]

    @property
    def mfcc(self) -> np.ndarray:
        return self.values[:MFCC_DIMENSION]

    @property
    def prosodic(self) -> np.ndarray:
        """Importance-weighted scalar features, in PROSODIC_FEATURE_NAMES order"""
        return self.values[MFCC_DIMENSION:]
