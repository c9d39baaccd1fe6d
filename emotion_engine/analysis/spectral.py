"""Spectral analysis helpers

Pure functions over real-valued frames. Frames passed to the FFT helpers must
have a power-of-two length; whole-signal callers use power_of_two_frame() to
truncate first.
"""

import numpy as np


# Magnitude floor used before converting to decibels
MAGNITUDE_FLOOR = 1e-10


def power_of_two_frame(samples: np.ndarray) -> np.ndarray:
    """Truncate samples to the largest power-of-two length that fits.

    Args:
        samples: 1-D signal with at least one sample

    Returns:
        View of the first 2**floor(log2(n)) samples
    """
    n = samples.shape[0]
    if n < 1:
        return samples
    length = 1 << (int(n).bit_length() - 1)
    return samples[:length]


def magnitude_spectrum(frame: np.ndarray) -> np.ndarray:
    """Linear magnitude spectrum of a power-of-two frame.

    Used by the centroid, rolloff, formant and HNR computations.

    Args:
        frame: Real-valued frame of length N (power of two)

    Returns:
        Array of N/2 bin magnitudes; bin i sits at i * sample_rate / N Hz
    """
    n = frame.shape[0]
    spectrum = np.fft.rfft(np.asarray(frame, dtype=np.float64))
    return np.abs(spectrum[:n // 2])


def decibel_spectrum(frame: np.ndarray) -> np.ndarray:
    """Magnitude spectrum in decibels (20 * log10 |X|), as fed to the mel filter bank."""
    magnitudes = magnitude_spectrum(frame)
    return 20.0 * np.log10(np.maximum(magnitudes, MAGNITUDE_FLOOR))


def bin_frequencies(num_bins: int, frame_length: int, sample_rate: int) -> np.ndarray:
    """Center frequency in Hz of each of the first num_bins FFT bins"""
    return np.arange(num_bins) * sample_rate / frame_length
