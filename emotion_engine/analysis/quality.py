"""Audio Quality Assessment

Scores a PCM buffer on RMS level, peak level, an SNR approximation and
zero-crossing plausibility, and maps the points to an AudioQuality level.
"""

import logging
from dataclasses import dataclass
import numpy as np

from emotion_engine.models.enums import AudioQuality


logger = logging.getLogger(__name__)


NOISE_FLOOR = 0.001


@dataclass(frozen=True)
class QualityReport:
    """Measured statistics behind a quality decision

    Attributes:
        rms: Root-mean-square amplitude
        peak: Peak absolute amplitude
        snr: Mean of the loudest 10% over mean of the quietest 10% of |x|
        zero_crossing_rate: Sign changes per sample
        points: Total quality points (0-8)
        quality: Resulting quality level
    """
    rms: float
    peak: float
    snr: float
    zero_crossing_rate: float
    points: int
    quality: AudioQuality


class QualityAssessor:
    """Deterministic composite signal-quality scoring"""

    def assess(self, samples: np.ndarray) -> AudioQuality:
        """Return the quality level of a buffer"""
        return self.report(samples).quality

    def report(self, samples: np.ndarray) -> QualityReport:
        """Measure a buffer and award quality points.

        Points: RMS 3/2/1 above 0.1/0.05/0.02, peak 2/1 above 0.3/0.2,
        SNR 2/1 above 10/5, plus 1 when the zero-crossing rate is within
        [0.1, 0.3].
        """
        samples = np.asarray(samples, dtype=np.float64)
        n = samples.shape[0]
        if n == 0:
            return QualityReport(0.0, 0.0, 0.0, 0.0, 0, AudioQuality.POOR)

        magnitudes = np.abs(samples)
        rms = float(np.sqrt(np.mean(np.square(samples))))
        peak = float(np.max(magnitudes))
        snr = self._estimate_snr(magnitudes)
        signs = samples >= 0
        zcr = float(np.count_nonzero(signs[1:] != signs[:-1])) / (n - 1) if n > 1 else 0.0

        points = 0
        if rms > 0.1:
            points += 3
        elif rms > 0.05:
            points += 2
        elif rms > 0.02:
            points += 1

        if peak > 0.3:
            points += 2
        elif peak > 0.2:
            points += 1

        if snr > 10:
            points += 2
        elif snr > 5:
            points += 1

        if 0.1 <= zcr <= 0.3:
            points += 1

        quality = AudioQuality.from_points(points)
        logger.debug(f"Audio quality {quality.value}: rms={rms:.4f}, peak={peak:.4f}, "
                     f"snr={snr:.2f}, zcr={zcr:.4f}, points={points}")
        return QualityReport(rms, peak, snr, zcr, points, quality)

    @staticmethod
    def _estimate_snr(magnitudes: np.ndarray) -> float:
        ordered = np.sort(magnitudes)[::-1]
        count = max(1, ordered.shape[0] // 10)
        signal = float(np.mean(ordered[:count]))
        noise = float(np.mean(ordered[-count:]))
        return signal / max(noise, NOISE_FLOOR)
