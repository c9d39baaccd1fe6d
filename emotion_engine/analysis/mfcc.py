"""MFCC Extraction

Mel-frequency cepstral coefficients pooled over an utterance. Each frame is
Hamming-windowed, converted to a decibel magnitude spectrum, passed through a
triangular mel filter bank, log-compressed and projected with a type-II DCT.
Coefficients are averaged across frames, so intra-utterance dynamics are not
retained.
"""

import logging
import numpy as np
import librosa

from emotion_engine.analysis.spectral import decibel_spectrum
from emotion_engine.config.config_loader import config as default_config
from emotion_engine.models.errors import AudioTooShortError


logger = logging.getLogger(__name__)


ENERGY_FLOOR = 1e-10


def mel_filter_bank(num_filters: int, frame_size: int, sample_rate: int) -> np.ndarray:
    """Build a triangular mel filter bank spanning 0 Hz to Nyquist.

    Filter edges are spaced evenly on the HTK mel scale and mapped to FFT bins
    with floor(frame_size * hz / sample_rate).

    Args:
        num_filters: Number of triangular filters
        frame_size: FFT frame length (the bank covers frame_size / 2 bins)
        sample_rate: Sample rate in Hz

    Returns:
        Array of shape (num_filters, frame_size // 2)
    """
    num_bins = frame_size // 2
    max_mel = librosa.hz_to_mel(sample_rate / 2.0, htk=True)
    mel_points = np.linspace(0.0, max_mel, num_filters + 2)
    hz_points = librosa.mel_to_hz(mel_points, htk=True)
    bin_points = np.floor(frame_size * hz_points / sample_rate).astype(int)

    bank = np.zeros((num_filters, num_bins))
    for m in range(num_filters):
        left, center, right = bin_points[m], bin_points[m + 1], bin_points[m + 2]
        for k in range(left, min(center, num_bins)):
            bank[m, k] = (k - left) / (center - left)
        for k in range(center, min(right, num_bins)):
            bank[m, k] = (right - k) / (right - center)
    return bank


def dct_basis(num_coefficients: int, num_filters: int) -> np.ndarray:
    """Unnormalized type-II DCT basis: cos(pi * k * (n + 0.5) / N)"""
    k = np.arange(num_coefficients)[:, np.newaxis]
    n = np.arange(num_filters)[np.newaxis, :]
    return np.cos(np.pi * k * (n + 0.5) / num_filters)


class MFCCExtractor:
    """Computes utterance-level MFCCs.

    The filter bank and DCT basis depend only on configuration and sample
    rate, so banks are built per call and never shared between calls.

    Attributes:
        frame_size: Samples per analysis frame (power of two)
        hop_size: Samples between frame starts
        num_filters: Triangular mel filters in the bank
        num_coefficients: Cepstral coefficients retained
    """

    def __init__(self, config=None):
        config = config or default_config
        self.frame_size = config.get('audio.frame_size', 1024)
        self.hop_size = config.get('audio.hop_size', 512)
        self.num_filters = config.get('mfcc.num_filters', 26)
        self.num_coefficients = config.get('mfcc.num_coefficients', 13)

    def extract(self, samples: np.ndarray, sample_rate: int) -> np.ndarray:
        """Extract mean MFCCs over all frames.

        Args:
            samples: Mono float PCM samples
            sample_rate: Sample rate in Hz

        Returns:
            Array of num_coefficients averaged coefficients

        Raises:
            AudioTooShortError: If the buffer is shorter than one frame
        """
        samples = np.ascontiguousarray(samples, dtype=np.float64)
        if samples.shape[0] < self.frame_size:
            raise AudioTooShortError(
                f"Audio buffer has {samples.shape[0]} samples, "
                f"at least {self.frame_size} required for MFCC extraction"
            )

        frames = librosa.util.frame(
            samples, frame_length=self.frame_size, hop_length=self.hop_size, axis=0
        )
        window = np.hamming(self.frame_size)
        bank = mel_filter_bank(self.num_filters, self.frame_size, sample_rate)
        basis = dct_basis(self.num_coefficients, self.num_filters)

        coefficients = np.empty((frames.shape[0], self.num_coefficients))
        for i, frame in enumerate(frames):
            spectrum = decibel_spectrum(frame * window)
            energies = np.log(np.maximum(bank @ spectrum, ENERGY_FLOOR))
            coefficients[i] = basis @ energies

        mfcc = coefficients.mean(axis=0)
        logger.debug(f"Extracted MFCCs from {frames.shape[0]} frames")
        return mfcc
