"""Emotion Analysis Pipeline

Explicitly constructed entry point that wires feature extraction, acoustic
scoring, transcript scoring and fusion into one analysis call.

    raw samples -> AcousticAnalyzer -> feature vector -> EmotionScorer
    transcript  -> LinguisticEmotionScorer
    both        -> FusionEngine -> AnalysisResult

Every collaborator can be injected; defaults are built from configuration.
The only state shared between calls is read-only (tables, cached model).
"""

import asyncio
import functools
import logging
import math
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import Callable, Optional
import numpy as np

from emotion_engine.analysis.acoustic import AcousticAnalyzer
from emotion_engine.analysis.linguistic import LinguisticEmotionScorer
from emotion_engine.analysis.model_scorer import build_scorer
from emotion_engine.analysis.profiles import EmotionProfiles, load_emotion_profiles
from emotion_engine.analysis.scoring import (
    calculate_confidence,
    primary_emotion,
    resolve_sub_emotion,
    voice_confidence,
)
from emotion_engine.config.config_loader import config as default_config
from emotion_engine.fusion.fusion_engine import FusionEngine
from emotion_engine.models.enums import EmotionIntensity
from emotion_engine.models.errors import (
    AudioTooLongError,
    AudioTooShortError,
    EmotionAnalysisError,
    InvalidAudioFormatError,
    ServiceUnavailableError,
)
from emotion_engine.models.frames import AudioBuffer
from emotion_engine.models.interfaces import EmotionScorer
from emotion_engine.models.results import AnalysisResult, LinguisticResult


logger = logging.getLogger(__name__)


class EmotionAnalysisPipeline:
    """Classifies emotion from a voice recording and optional transcript.

    Attributes:
        min_duration: Shortest accepted recording in seconds (inclusive)
        max_duration: Longest accepted recording in seconds (inclusive)
        acoustic_analyzer: Feature extraction and quality assessment
        scorer: Heuristic or model-backed acoustic scorer
        linguistic_scorer: Transcript scorer
        fusion_engine: Channel combination policy
        clock: Source of result timestamps
    """

    def __init__(
        self,
        config=None,
        profiles: Optional[EmotionProfiles] = None,
        acoustic_analyzer: Optional[AcousticAnalyzer] = None,
        scorer: Optional[EmotionScorer] = None,
        linguistic_scorer: Optional[LinguisticEmotionScorer] = None,
        fusion_engine: Optional[FusionEngine] = None,
        clock: Callable[[], datetime] = datetime.now
    ):
        config = config or default_config
        self.min_duration = config.get('audio.min_duration', 1.0)
        self.max_duration = config.get('audio.max_duration', 120.0)
        self.profiles = profiles or load_emotion_profiles()
        self.acoustic_analyzer = acoustic_analyzer or AcousticAnalyzer(config, self.profiles)
        self.scorer = scorer or build_scorer(config, self.profiles)
        self.linguistic_scorer = linguistic_scorer or LinguisticEmotionScorer(config)
        self.fusion_engine = fusion_engine or FusionEngine(config)
        self.clock = clock

        self._executor = ThreadPoolExecutor(
            max_workers=config.get('performance.max_workers', 4),
            thread_name_prefix="emotion-analysis"
        )
        self._closed = False

        logger.info(f"EmotionAnalysisPipeline initialized with scorer {type(self.scorer).__name__}")

    def analyze(
        self,
        samples: np.ndarray,
        sample_rate: int,
        duration: float,
        transcript: Optional[str] = None
    ) -> AnalysisResult:
        """Analyze one recording.

        Args:
            samples: Mono float PCM samples
            sample_rate: Sample rate of the samples in Hz
            duration: Source recording duration in seconds
            transcript: Optional transcript of the recording

        Returns:
            AnalysisResult for the recording

        Raises:
            AudioTooShortError: If duration is below the minimum
            AudioTooLongError: If duration is above the maximum
            InvalidAudioFormatError: If samples are not a finite 1-D numeric array
            AudioProcessingFailedError: If feature extraction fails
            InvalidFeatureVectorError: If the feature vector has the wrong length
            InvalidFeatureValuesError: If the feature vector is not finite
            ServiceUnavailableError: If the pipeline has been closed
        """
        if self._closed:
            raise ServiceUnavailableError()

        buffer = self._validate_input(samples, sample_rate, duration)

        acoustic = self.acoustic_analyzer.analyze(buffer)
        scoring = self.scorer.score(acoustic.feature_vector)
        linguistic = self._analyze_transcript(transcript)

        fusion = self.fusion_engine.fuse(
            scoring.scores,
            voice_confidence(scoring.scores),
            linguistic
        )

        # Confidence and intensity are judged on the evidence behind any rejection
        evidence = fusion.emotion_scores
        if scoring.rejected:
            evidence = self.fusion_engine.fuse(
                scoring.distribution, fusion.acoustic_confidence, linguistic
            ).emotion_scores

        primary, _ = primary_emotion(fusion.emotion_scores)
        sub_emotion, sub_emotion_scores = resolve_sub_emotion(
            fusion.emotion_scores, primary, self.profiles
        )
        quality = acoustic.quality.quality
        confidence = calculate_confidence(evidence, quality, duration, scoring.raw_total)

        result = AnalysisResult(
            timestamp=self.clock(),
            primary_emotion=primary,
            sub_emotion=sub_emotion,
            intensity=EmotionIntensity.from_score(evidence.get(primary, 0.0)),
            confidence=confidence,
            emotion_scores=fusion.emotion_scores,
            sub_emotion_scores=sub_emotion_scores,
            audio_quality=quality,
            session_duration=float(duration),
            acoustic_features=acoustic.features,
            fusion_policy=fusion.policy,
            low_confidence=fusion.low_confidence,
            transcript=linguistic.transcript if linguistic else None,
        )
        logger.info(f"Analysis complete: {primary.value}/{sub_emotion.value} "
                    f"confidence={result.confidence_percentage}% quality={quality.value} "
                    f"policy={fusion.policy.value}")
        return result

    async def analyze_async(
        self,
        samples: np.ndarray,
        sample_rate: int,
        duration: float,
        transcript: Optional[str] = None
    ) -> AnalysisResult:
        """Run analyze() on the pipeline's worker pool.

        Cancelling the awaiting task abandons the result; the worker finishes
        its current call and the result is discarded.
        """
        if self._closed:
            raise ServiceUnavailableError()
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            self._executor,
            functools.partial(self.analyze, samples, sample_rate, duration, transcript)
        )

    def close(self) -> None:
        """Shut down the worker pool; later calls raise ServiceUnavailableError."""
        if not self._closed:
            self._closed = True
            self._executor.shutdown(wait=True)
            logger.info("EmotionAnalysisPipeline closed")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def _validate_input(self, samples, sample_rate: int, duration: float) -> AudioBuffer:
        """Check the input contract before any feature work.

        Raises:
            AudioTooShortError, AudioTooLongError, InvalidAudioFormatError
        """
        if duration is None or not math.isfinite(duration):
            raise InvalidAudioFormatError(f"Invalid recording duration: {duration}")
        if duration < self.min_duration:
            raise AudioTooShortError()
        if duration > self.max_duration:
            raise AudioTooLongError()

        samples = np.asarray(samples)
        if samples.ndim != 1 or samples.shape[0] == 0:
            raise InvalidAudioFormatError(
                f"Expected non-empty mono samples, got shape {samples.shape}"
            )
        if not np.issubdtype(samples.dtype, np.number) or np.iscomplexobj(samples):
            raise InvalidAudioFormatError(f"Unsupported sample type: {samples.dtype}")
        if not np.all(np.isfinite(samples)):
            raise InvalidAudioFormatError("Samples contain NaN or infinite values")
        if sample_rate is None or sample_rate <= 0:
            raise InvalidAudioFormatError(f"Invalid sample rate: {sample_rate}")

        return AudioBuffer(
            samples=samples.astype(np.float32, copy=False),
            sample_rate=int(sample_rate),
            duration=float(duration)
        )

    def _analyze_transcript(self, transcript: Optional[str]) -> Optional[LinguisticResult]:
        if transcript is None:
            return None
        try:
            return self.linguistic_scorer.analyze(transcript)
        except EmotionAnalysisError as e:
            logger.warning(f"Linguistic analysis unavailable ({type(e).__name__}: {e.message}), "
                           f"using acoustic scores only")
            return None
