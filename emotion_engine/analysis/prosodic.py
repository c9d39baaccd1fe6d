"""Prosodic Feature Extraction

Time- and frequency-domain voice features used by the emotion scorers:
pitch, energy, zero-crossing rate, spectral centroid and rolloff, jitter,
shimmer, formants, harmonic-to-noise ratio and voice onset time.

All methods are pure functions of their inputs.
"""

import logging
from typing import Tuple
import numpy as np
import librosa

from emotion_engine.analysis.spectral import (
    bin_frequencies,
    magnitude_spectrum,
    power_of_two_frame,
)
from emotion_engine.config.config_loader import config as default_config
from emotion_engine.models.features import AcousticFeatures


logger = logging.getLogger(__name__)


ENERGY_FLOOR_DB = -80.0
ENERGY_RANGE_DB = 60.0
FORMANT_SMOOTHING_WINDOW = 5
FORMANT_PEAK_RATIO = 0.3
NUM_FORMANTS = 3
NUM_HARMONICS = 5
HARMONIC_HALF_WIDTH = 2


class ProsodicFeatureExtractor:
    """Extracts prosodic and spectral voice features from a PCM buffer.

    Attributes:
        min_pitch: Lowest pitch considered by the autocorrelation search (Hz)
        max_pitch: Highest pitch considered by the autocorrelation search (Hz)
        rolloff_fraction: Cumulative magnitude fraction defining the rolloff
        formant_band: Inclusive (low, high) band in Hz that formants must fall in
        onset_window: Voice onset window length in seconds
        onset_hop: Voice onset window hop in seconds
        onset_energy_threshold: Normalized energy a window must exceed to count as onset
    """

    def __init__(self, config=None):
        config = config or default_config
        self.min_pitch = config.get('prosody.min_pitch', 80.0)
        self.max_pitch = config.get('prosody.max_pitch', 800.0)
        self.rolloff_fraction = config.get('prosody.rolloff_fraction', 0.85)
        self.formant_band = tuple(config.get('prosody.formant_band', [80.0, 4000.0]))
        self.onset_window = config.get('prosody.onset_window', 0.025)
        self.onset_hop = config.get('prosody.onset_hop', 0.010)
        self.onset_energy_threshold = config.get('prosody.onset_energy_threshold', 0.1)

    def extract(self, samples: np.ndarray, sample_rate: int) -> AcousticFeatures:
        """Extract the full prosodic feature set from a buffer.

        The magnitude spectrum is computed once over the largest power-of-two
        prefix of the buffer and shared by the spectral features.

        Args:
            samples: Mono float PCM samples
            sample_rate: Sample rate in Hz

        Returns:
            AcousticFeatures for the buffer
        """
        samples = np.asarray(samples, dtype=np.float64)
        frame = power_of_two_frame(samples)
        magnitudes = magnitude_spectrum(frame)
        frame_length = frame.shape[0]

        pitch = self.estimate_pitch(samples, sample_rate)
        features = AcousticFeatures(
            pitch=pitch,
            energy=self.compute_energy(samples),
            spectral_centroid=self.spectral_centroid(magnitudes, frame_length, sample_rate),
            zero_crossing_rate=self.zero_crossing_rate(samples),
            spectral_rolloff=self.spectral_rolloff(magnitudes, frame_length, sample_rate),
            jitter=self.jitter(samples, sample_rate, pitch),
            shimmer=self.shimmer(samples, sample_rate, pitch),
            formant_frequencies=self.formants(magnitudes, frame_length, sample_rate),
            harmonic_to_noise_ratio=self.harmonic_to_noise_ratio(
                magnitudes, frame_length, sample_rate, pitch
            ),
            voice_onset_time=self.voice_onset_time(samples, sample_rate),
        )

        logger.debug(f"Extracted prosodic features: pitch={features.pitch:.1f}Hz, "
                     f"energy={features.energy:.3f}, centroid={features.spectral_centroid:.1f}Hz, "
                     f"formants={features.formant_frequencies}")
        return features

    def estimate_pitch(self, samples: np.ndarray, sample_rate: int) -> float:
        """Estimate pitch by autocorrelation over the 80-800 Hz lag range.

        Correlation at each lag is normalized by the overlap length. When no
        lag yields a positive correlation the minimum lag is kept, so unvoiced
        or silent input reports the upper pitch bound.

        Args:
            samples: Mono float PCM samples
            sample_rate: Sample rate in Hz

        Returns:
            Pitch estimate in Hz (sample_rate / best lag)
        """
        n = samples.shape[0]
        min_lag = max(1, int(sample_rate / self.max_pitch))
        max_lag = min(int(sample_rate / self.min_pitch), n // 2)

        best_lag = min_lag
        best_correlation = 0.0
        for lag in range(min_lag, max_lag + 1):
            correlation = float(np.dot(samples[:n - lag], samples[lag:])) / (n - lag)
            if correlation > best_correlation:
                best_correlation = correlation
                best_lag = lag

        return sample_rate / best_lag

    @staticmethod
    def compute_energy(samples: np.ndarray) -> float:
        """RMS energy in dB (-80 dB floor) mapped from [-60, 0] dB onto [0, 1]"""
        if samples.shape[0] == 0:
            return 0.0
        rms = float(np.sqrt(np.mean(np.square(samples))))
        db = 20.0 * np.log10(max(rms, 10 ** (ENERGY_FLOOR_DB / 20.0)))
        return float(np.clip((db + ENERGY_RANGE_DB) / ENERGY_RANGE_DB, 0.0, 1.0))

    @staticmethod
    def zero_crossing_rate(samples: np.ndarray) -> float:
        """Sign changes divided by (N - 1); zero-valued samples count as positive"""
        n = samples.shape[0]
        if n < 2:
            return 0.0
        signs = samples >= 0
        return float(np.count_nonzero(signs[1:] != signs[:-1])) / (n - 1)

    @staticmethod
    def spectral_centroid(magnitudes: np.ndarray, frame_length: int, sample_rate: int) -> float:
        """Magnitude-weighted mean frequency in Hz (0 for an empty spectrum)"""
        total = float(np.sum(magnitudes))
        if total <= 0:
            return 0.0
        frequencies = bin_frequencies(magnitudes.shape[0], frame_length, sample_rate)
        return float(np.dot(frequencies, magnitudes)) / total

    def spectral_rolloff(self, magnitudes: np.ndarray, frame_length: int, sample_rate: int) -> float:
        """Lowest bin frequency where cumulative magnitude reaches the rolloff fraction.

        Falls back to the Nyquist frequency when the threshold is never reached.
        """
        if magnitudes.shape[0] == 0:
            return sample_rate / 2.0
        cumulative = np.cumsum(magnitudes)
        threshold = self.rolloff_fraction * cumulative[-1]
        reached = np.nonzero(cumulative >= threshold)[0]
        if reached.shape[0] == 0:
            return sample_rate / 2.0
        return float(reached[0] * sample_rate / frame_length)

    def jitter(self, samples: np.ndarray, sample_rate: int, pitch: float) -> float:
        """Mean absolute period-to-period variation normalized by mean period"""
        periods, _ = self._segment_periods(samples, sample_rate, pitch)
        return self._relative_variation(periods)

    def shimmer(self, samples: np.ndarray, sample_rate: int, pitch: float) -> float:
        """Mean absolute peak-to-peak amplitude variation normalized by mean peak"""
        _, peaks = self._segment_periods(samples, sample_rate, pitch)
        return self._relative_variation(peaks)

    def _segment_periods(
        self,
        samples: np.ndarray,
        sample_rate: int,
        pitch: float
    ) -> Tuple[np.ndarray, np.ndarray]:
        """Split the signal at zero crossings into period segments.

        Segments start at sample 0 and at each following zero crossing, and
        are collected while the segment start plus the expected period stays
        inside the buffer.

        Returns:
            Tuple of (segment lengths, segment peak absolute amplitudes)
        """
        n = samples.shape[0]
        empty = np.zeros(0)
        if pitch <= 0:
            return empty, empty
        period = int(sample_rate / pitch)
        if period <= 0 or period >= n / 2:
            return empty, empty

        signs = samples >= 0
        crossings = np.nonzero(signs[1:] != signs[:-1])[0] + 1
        bounds = np.concatenate(([0], crossings)).astype(np.int64)
        if bounds.shape[0] < 2:
            return empty, empty

        starts = bounds[:-1]
        usable = int(np.count_nonzero(starts + period < n))
        lengths = np.diff(bounds)[:usable].astype(np.float64)
        peaks = np.maximum.reduceat(np.abs(samples), bounds)[:usable]
        return lengths, peaks

    @staticmethod
    def _relative_variation(values: np.ndarray) -> float:
        if values.shape[0] <= 2:
            return 0.0
        mean = float(np.mean(values))
        if mean <= 0:
            return 0.0
        return float(np.mean(np.abs(np.diff(values)))) / mean

    def formants(
        self,
        magnitudes: np.ndarray,
        frame_length: int,
        sample_rate: int
    ) -> Tuple[float, float, float]:
        """Pick up to three formant frequencies from the magnitude spectrum.

        The spectrum is smoothed with a centred moving average, local maxima
        above 30% of the smoothed peak are ranked by magnitude, the three
        largest are kept and those outside the speech band are dropped.

        Returns:
            Exactly three frequencies in Hz, ordered by descending magnitude
            and zero-padded
        """
        num_bins = magnitudes.shape[0]
        if num_bins < 3:
            return (0.0, 0.0, 0.0)

        half = FORMANT_SMOOTHING_WINDOW // 2
        cumulative = np.concatenate(([0.0], np.cumsum(magnitudes)))
        index = np.arange(num_bins)
        low = np.maximum(0, index - half)
        high = np.minimum(num_bins, index + half + 1)
        smoothed = (cumulative[high] - cumulative[low]) / (high - low)

        threshold = FORMANT_PEAK_RATIO * float(np.max(smoothed))
        inner = smoothed[1:-1]
        is_peak = (inner > smoothed[:-2]) & (inner > smoothed[2:]) & (inner > threshold)
        peak_bins = np.nonzero(is_peak)[0] + 1

        ranked = peak_bins[np.argsort(-smoothed[peak_bins], kind='stable')][:NUM_FORMANTS]
        band_low, band_high = self.formant_band
        frequencies = [
            float(b * sample_rate / frame_length)
            for b in ranked
            if band_low <= b * sample_rate / frame_length <= band_high
        ]
        frequencies += [0.0] * (NUM_FORMANTS - len(frequencies))
        return tuple(frequencies)

    @staticmethod
    def harmonic_to_noise_ratio(
        magnitudes: np.ndarray,
        frame_length: int,
        sample_rate: int,
        pitch: float
    ) -> float:
        """Harmonic-to-noise ratio in dB.

        Harmonic energy is the squared magnitude within two bins of the
        fundamental and its first five harmonics that fall inside the
        spectrum; everything else is noise.
        Returns 0 when either energy is not positive.
        """
        num_bins = magnitudes.shape[0]
        if num_bins == 0 or pitch <= 0:
            return 0.0

        power = np.square(magnitudes)
        harmonic_energy = 0.0
        for harmonic in range(1, NUM_HARMONICS + 1):
            center = int(pitch * harmonic * frame_length / sample_rate)
            if center >= num_bins:
                continue
            low = max(0, center - HARMONIC_HALF_WIDTH)
            high = min(num_bins - 1, center + HARMONIC_HALF_WIDTH)
            if low <= high:
                harmonic_energy += float(np.sum(power[low:high + 1]))

        noise_energy = float(np.sum(power)) - harmonic_energy
        if noise_energy <= 0 or harmonic_energy <= 0:
            return 0.0
        return float(10.0 * np.log10(harmonic_energy / noise_energy))

    def voice_onset_time(self, samples: np.ndarray, sample_rate: int) -> float:
        """Start time of the first energetic window followed by a voiced window.

        Slides a 25 ms window with a 10 ms hop. A window qualifies when its
        normalized energy exceeds the onset threshold and the next window's
        pitch is above the minimum pitch.

        Returns:
            Onset time in seconds, 0 if no onset is found
        """
        window = int(self.onset_window * sample_rate)
        hop = max(1, int(self.onset_hop * sample_rate))
        n = samples.shape[0]
        if window <= 0 or n <= window:
            return 0.0

        frames = librosa.util.frame(
            np.ascontiguousarray(samples), frame_length=window, hop_length=hop, axis=0
        )
        for index, frame in enumerate(frames):
            start = index * hop
            if start >= n - window:
                break
            if self.compute_energy(frame) <= self.onset_energy_threshold:
                continue
            following = samples[start + window:start + 2 * window]
            if following.shape[0] == 0:
                continue
            if self.estimate_pitch(following, sample_rate) > self.min_pitch:
                return start / sample_rate

        return 0.0
