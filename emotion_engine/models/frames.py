"""Data model for an audio buffer submitted for analysis"""

from dataclasses import dataclass
import numpy as np


@dataclass(frozen=True, eq=False)
class AudioBuffer:
    """A mono PCM recording supplied by the capture layer

    Attributes:
        samples: Mono float PCM samples as a 1-D numpy array
        sample_rate: Sample rate in Hz (e.g., 16000)
        duration: Source recording duration in seconds
    """
    samples: np.ndarray
    sample_rate: int
    duration: float

    def __post_init__(self):
        """Validate buffer integrity.

        Raises:
            AssertionError: If any validation check fails
        """
        assert isinstance(self.samples, np.ndarray), "Samples must be numpy array"
        assert self.samples.ndim == 1, "Samples must be mono (1-D)"
        assert self.sample_rate > 0, "Sample rate must be positive"
        assert self.duration > 0, "Duration must be positive"

    @property
    def num_samples(self) -> int:
        return self.samples.shape[0]
