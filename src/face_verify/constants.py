"""Centralized constants and configuration loader.

This module provides access to configuration values and sensible defaults
for the recognition pipeline. Values are loaded from config/config.yaml when
available, otherwise defaults are used.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

logger = logging.getLogger(__name__)

# Path to the default configuration file
DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / "config" / "config.yaml"

# Default directory for downloaded model files
DEFAULT_MODEL_DIR = Path(__file__).parent.parent.parent / "data" / "models"


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """Load configuration from YAML file.

    Args:
        config_path: Path to config file. Uses default if None.

    Returns:
        Configuration dictionary.
    """
    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH

    try:
        if path.exists():
            with open(path, "r") as f:
                return yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Failed to load config from {path}: {e}")

    return {}


def _get_nested(config: Dict, *keys: str, default: Any = None) -> Any:
    """Get nested config value with default fallback."""
    value = config
    for key in keys:
        if isinstance(value, dict):
            value = value.get(key)
        else:
            return default
        if value is None:
            return default
    return value


# ============================================================
# Recognition Constants
# ============================================================

@dataclass
class RecognitionConfig:
    """Recognition pipeline constants."""
    # Maximum accepted distance (strict upper bound)
    threshold: float = 0.8
    # Fixed mounting angle of the camera sensor
    sensor_orientation: int = 0
    # Device rotation composed with sensor orientation for NV21 frames
    rotation_compensation: int = 0

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "RecognitionConfig":
        """Create from config dictionary."""
        rc = _get_nested(config, "recognition") or {}

        return cls(
            threshold=float(rc.get("threshold", 0.8)),
            sensor_orientation=int(rc.get("sensor_orientation", 0)),
            rotation_compensation=int(rc.get("rotation_compensation", 0)),
        )


# ============================================================
# Frame Decoding Constants
# ============================================================

@dataclass
class DecoderConfig:
    """Raw frame decoding constants."""
    # Leading bytes before pixel data in packed BGRA frames
    bgra_header_offset: int = 28

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "DecoderConfig":
        """Create from config dictionary."""
        dc = _get_nested(config, "decoder") or {}

        return cls(
            bgra_header_offset=int(dc.get("bgra_header_offset", 28)),
        )


# ============================================================
# Frame Sampling Constants
# ============================================================

@dataclass
class SamplerConfig:
    """Frame sampling constants."""
    # Process one out of every N frames
    frame_skip_count: int = 10

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "SamplerConfig":
        """Create from config dictionary."""
        sc = _get_nested(config, "sampler") or {}

        return cls(
            frame_skip_count=int(sc.get("frame_skip_count", 10)),
        )


# ============================================================
# Embedding Constants
# ============================================================

@dataclass
class EmbeddingConfig:
    """Embedding backend constants."""
    backend: str = "openface"
    model_path: Optional[str] = None
    # Input size for OpenFace network
    input_size: Tuple[int, int] = (96, 96)

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "EmbeddingConfig":
        """Create from config dictionary."""
        ec = _get_nested(config, "embedding") or {}
        input_size = ec.get("input_size", [96, 96])

        return cls(
            backend=ec.get("backend", "openface"),
            model_path=ec.get("model_path"),
            input_size=tuple(input_size),
        )


# ============================================================
# Haar Detection Constants
# ============================================================

@dataclass
class DetectionConfig:
    """Haar cascade detection constants."""
    scale_factor: float = 1.1
    min_neighbors: int = 5
    min_size: Tuple[int, int] = (30, 30)

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "DetectionConfig":
        """Create from config dictionary."""
        dc = _get_nested(config, "detection") or {}
        min_size = dc.get("min_size", [30, 30])

        return cls(
            scale_factor=float(dc.get("scale_factor", 1.1)),
            min_neighbors=int(dc.get("min_neighbors", 5)),
            min_size=tuple(min_size),
        )


# ============================================================
# Global Config Instance (lazy loaded)
# ============================================================

class Config:
    """Global configuration singleton."""

    _instance: Optional["Config"] = None
    _config: Dict[str, Any] = {}

    def __new__(cls) -> "Config":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._load()
        return cls._instance

    def _load(self, config_path: Optional[Path] = None) -> None:
        """Load configuration from file."""
        self._config = load_config(config_path)
        self._recognition: Optional[RecognitionConfig] = None
        self._decoder: Optional[DecoderConfig] = None
        self._sampler: Optional[SamplerConfig] = None
        self._embedding: Optional[EmbeddingConfig] = None
        self._detection: Optional[DetectionConfig] = None

    def reload(self, config_path: Optional[Path] = None) -> None:
        """Reload configuration from file and reset cached sections."""
        self._load(config_path)

    @property
    def recognition(self) -> RecognitionConfig:
        """Get recognition config."""
        if self._recognition is None:
            self._recognition = RecognitionConfig.from_config(self._config)
        return self._recognition

    @property
    def decoder(self) -> DecoderConfig:
        """Get decoder config."""
        if self._decoder is None:
            self._decoder = DecoderConfig.from_config(self._config)
        return self._decoder

    @property
    def sampler(self) -> SamplerConfig:
        """Get sampler config."""
        if self._sampler is None:
            self._sampler = SamplerConfig.from_config(self._config)
        return self._sampler

    @property
    def embedding(self) -> EmbeddingConfig:
        """Get embedding config."""
        if self._embedding is None:
            self._embedding = EmbeddingConfig.from_config(self._config)
        return self._embedding

    @property
    def detection(self) -> DetectionConfig:
        """Get detection config."""
        if self._detection is None:
            self._detection = DetectionConfig.from_config(self._config)
        return self._detection

    def get(self, *keys: str, default: Any = None) -> Any:
        """Get a config value by key path."""
        return _get_nested(self._config, *keys, default=default)


def get_config() -> Config:
    """Get the global configuration instance."""
    return Config()


# Convenience accessors
def get_recognition_config() -> RecognitionConfig:
    """Get recognition configuration."""
    return get_config().recognition


def get_decoder_config() -> DecoderConfig:
    """Get frame decoder configuration."""
    return get_config().decoder


def get_sampler_config() -> SamplerConfig:
    """Get frame sampler configuration."""
    return get_config().sampler


def get_embedding_config() -> EmbeddingConfig:
    """Get embedding backend configuration."""
    return get_config().embedding


def get_detection_config() -> DetectionConfig:
    """Get Haar detection configuration."""
    return get_config().detection


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging from the ``logging.level`` config key.

    Args:
        level: Explicit level name, overrides the configured one
    """
    level_name = level or get_config().get("logging", "level", default="INFO")
    logging.basicConfig(
        level=getattr(logging, str(level_name).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
