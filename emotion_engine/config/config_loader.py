"""Configuration loader for the voice emotion engine"""

import yaml
from pathlib import Path
from typing import Any, Dict
import os


CONFIG_DIR = Path(__file__).parent


class Config:
    """Configuration manager for the voice emotion engine"""

    def __init__(self, config_path: str = None):
        if config_path is None:
            config_path = os.getenv('EMOTION_ENGINE_CONFIG')
        if config_path is None:
            env = os.getenv('EMOTION_ENGINE_ENV', 'development')
            # Try environment-specific config first, fall back to default
            env_config = CONFIG_DIR / f"config.{env}.yaml"
            if env_config.exists():
                config_path = str(env_config)
            else:
                config_path = str(CONFIG_DIR / "config.yaml")

        self.config_path = Path(config_path)
        self._config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from YAML file"""
        if not self.config_path.exists():
            raise FileNotFoundError(f"Config file not found: {self.config_path}")

        with open(self.config_path, 'r') as f:
            return yaml.safe_load(f) or {}

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value using dot notation

        Args:
            key: Configuration key in dot notation (e.g., 'fusion.linguistic_threshold')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        keys = key.split('.')
        value = self._config

        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
            else:
                return default

        return value if value is not None else default

    def __getitem__(self, key: str) -> Any:
        """Allow dictionary-style access"""
        return self.get(key)

    def validate(self) -> None:
        """Validate configuration values"""
        sample_rate = self.get('audio.sample_rate')
        if sample_rate is not None and sample_rate <= 0:
            raise ValueError(f"Invalid sample_rate: {sample_rate}, must be positive")

        min_duration = self.get('audio.min_duration', 1.0)
        max_duration = self.get('audio.max_duration', 120.0)
        if not 0 < min_duration <= max_duration:
            raise ValueError(
                f"Invalid duration bounds: [{min_duration}, {max_duration}]"
            )

        frame_size = self.get('audio.frame_size', 1024)
        if frame_size <= 0 or frame_size & (frame_size - 1):
            raise ValueError(f"Invalid frame_size: {frame_size}, must be a power of two")

        for key in ('fusion.linguistic_threshold', 'fusion.acoustic_threshold',
                    'fusion.combination_threshold', 'scoring.rejection_threshold',
                    'scoring.min_voice_energy'):
            value = self.get(key)
            if value is not None and not 0 <= value <= 1:
                raise ValueError(f"Invalid {key}: {value}, must be in [0, 1]")


def load_data_table(name: str) -> Dict[str, Any]:
    """Load one of the packaged YAML data tables (e.g. 'emotion_profiles.yaml')."""
    path = CONFIG_DIR / name
    if not path.exists():
        raise FileNotFoundError(f"Data table not found: {path}")

    with open(path, 'r') as f:
        return yaml.safe_load(f)


# Global config instance (read-only)
config = Config()
