"""Command Line Entry Point

Analyzes one recording and prints the result as JSON:

    emotion-engine recording.wav --transcript "I can't believe we won the game"

The recording is decoded with librosa, downmixed to mono and resampled to the
configured analysis rate before it reaches the pipeline.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
import librosa

from emotion_engine.config.config_loader import Config, config as default_config
from emotion_engine.models.errors import EmotionAnalysisError
from emotion_engine.pipeline import EmotionAnalysisPipeline


logger = logging.getLogger(__name__)


def configure_logging(config) -> None:
    """Configure root logging from the logging section of the config.

    Log output goes to stderr so stdout carries only the JSON result.
    """
    logging.basicConfig(
        level=config.get('logging.level', 'INFO'),
        format=config.get('logging.format', '%(asctime)s - %(name)s - %(levelname)s - %(message)s'),
        handlers=[logging.StreamHandler(sys.stderr)]
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="emotion-engine",
        description="Classify the emotion expressed in a voice recording."
    )
    parser.add_argument("audio", type=Path, help="Path to the audio file")
    parser.add_argument("--transcript", help="Transcript of the recording")
    parser.add_argument("--config", type=Path, help="Path to a config YAML file")
    return parser


def run(args: argparse.Namespace) -> int:
    """Analyze the recording named by the parsed arguments.

    Returns:
        Process exit code
    """
    config = Config(str(args.config)) if args.config else default_config
    configure_logging(config)

    if not args.audio.exists():
        logger.error(f"Audio file not found: {args.audio}")
        return 2

    sample_rate = config.get('audio.sample_rate', 16000)
    samples, sample_rate = librosa.load(str(args.audio), sr=sample_rate, mono=True)
    duration = len(samples) / sample_rate
    logger.info(f"Loaded {args.audio} ({duration:.2f}s at {sample_rate} Hz)")

    with EmotionAnalysisPipeline(config) as pipeline:
        try:
            result = pipeline.analyze(samples, sample_rate, duration, args.transcript)
        except EmotionAnalysisError as e:
            logger.error(f"Analysis failed: {e.message}")
            logger.info(f"Suggestion: {e.recovery_suggestion}")
            return 1

    if not result.is_high_confidence:
        logger.warning(f"Low confidence result ({result.confidence_percentage}%), "
                       f"treat {result.primary_emotion.value} as tentative")
    print(json.dumps(result.to_dict(), indent=2))
    return 0


def main(argv=None):
    """Main entry point."""
    args = build_parser().parse_args(argv)
    try:
        sys.exit(run(args))
    except KeyboardInterrupt:
        logger.info("Analysis interrupted by user")
        sys.exit(130)
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
