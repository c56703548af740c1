"""
Configuration management for the focus scoring engine.
"""

import os
from dataclasses import dataclass, asdict
from typing import Dict, Any, List, Optional
import json
import logging

# The logger module imports this one, so config reports through plain logging.
_log = logging.getLogger("focus_engine.config")


class ConfigError(ValueError):
    """Raised when a configuration fails validation in strict mode."""


@dataclass
class AttentionConfig:
    """Attention scoring and smoothing settings."""
    focus_threshold: float = 0.54
    smoothing_window: int = 10
    focus_box_size: float = 0.6       # fraction of frame width/height
    distance_decay: float = 1.5       # exp(-decay * normalized distance)
    rotation_penalty_score: float = 0.1
    motion_center_bonus: float = 0.3
    no_face_confidence: float = 0.1
    adaptive_threshold: bool = True
    min_threshold: float = 0.4
    max_threshold: float = 0.7
    threshold_step: float = 0.02
    adaptation_min_frames: int = 100
    adaptation_interval: int = 100    # frames between threshold adjustments
    high_focus_ratio: float = 0.9
    low_focus_ratio: float = 0.1


@dataclass
class HeadRotationConfig:
    """Head rotation tolerances and estimator scaling (degrees)."""
    straight_yaw_tolerance: float = 15.0
    straight_pitch_tolerance: float = 10.0
    distraction_yaw_threshold: float = 20.0
    distraction_pitch_threshold: float = 15.0
    yaw_scale: float = 40.0
    pitch_scale: float = 30.0
    max_yaw: float = 50.0
    max_pitch: float = 30.0
    calibration_max_yaw: float = 25.0
    calibration_max_pitch: float = 20.0


@dataclass
class DetectionConfig:
    """Pixel block and motion detection settings."""
    block_size: int = 25
    confidence_floor: float = 0.3
    skin_weight: float = 0.5
    edge_weight: float = 0.3
    brightness_bonus: float = 0.2
    min_brightness: float = 50.0
    max_brightness: float = 200.0
    edge_threshold: float = 25.0
    motion_threshold: float = 30.0
    center_motion_ratio: float = 0.3


@dataclass
class PerformanceConfig:
    """Performance tracking settings."""
    processing_fps: int = 10
    max_processing_times: int = 100
    performance_warning_ms: float = 50.0


@dataclass
class AssessmentConfig:
    """Focus percentage cut-offs for the session assessment."""
    excellent: float = 90.0
    good: float = 80.0
    moderate: float = 70.0
    below_average: float = 60.0
    low_visibility_ratio: float = 0.2


@dataclass
class LoggingConfig:
    """Logging settings."""
    log_to_file: bool = False
    log_dir: str = "logs"
    console_level: str = "ERROR"
    file_level: str = "DEBUG"


class EngineConfig:
    """Main configuration class for the focus scoring engine."""

    SECTIONS = ('attention', 'rotation', 'detection', 'performance', 'assessment', 'logging')

    def __init__(self, config_file: Optional[str] = None):
        """Initialize configuration with optional config file."""
        self.attention = AttentionConfig()
        self.rotation = HeadRotationConfig()
        self.detection = DetectionConfig()
        self.performance = PerformanceConfig()
        self.assessment = AssessmentConfig()
        self.logging = LoggingConfig()

        if config_file and os.path.exists(config_file):
            self.load_from_file(config_file)

    def load_from_file(self, config_file: str) -> None:
        """Load configuration from JSON file."""
        try:
            with open(config_file, 'r') as f:
                config_data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            _log.warning(f"Could not load config file {config_file}: {e}")
            return

        self.update(config_data)

    def update(self, config_data: Dict[str, Any]) -> None:
        """Apply a nested {section: {key: value}} mapping."""
        for section_name, section_data in config_data.items():
            if section_name not in self.SECTIONS or not isinstance(section_data, dict):
                _log.warning(f"Ignoring unknown config section: {section_name}")
                continue

            section = getattr(self, section_name)
            for key, value in section_data.items():
                if hasattr(section, key):
                    setattr(section, key, value)
                else:
                    _log.warning(f"Ignoring unknown config key: {section_name}.{key}")

    def to_dict(self) -> Dict[str, Any]:
        return {name: asdict(getattr(self, name)) for name in self.SECTIONS}

    def save_to_file(self, config_file: str) -> None:
        """Save current configuration to JSON file."""
        directory = os.path.dirname(config_file)
        if directory:
            os.makedirs(directory, exist_ok=True)

        with open(config_file, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    def validation_errors(self) -> List[str]:
        """Collect human-readable validation errors."""
        errors = []
        attention = self.attention

        if not 0.0 <= attention.focus_threshold <= 1.0:
            errors.append("Focus threshold must be between 0 and 1")

        if not attention.min_threshold <= attention.max_threshold:
            errors.append("Minimum threshold must not exceed maximum threshold")

        if attention.smoothing_window <= 0:
            errors.append("Smoothing window must be positive")

        if attention.adaptation_interval <= 0:
            errors.append("Threshold adaptation interval must be positive")

        if not 0.0 < attention.focus_box_size <= 1.0:
            errors.append("Focus box size must be in (0, 1]")

        if self.detection.block_size <= 0:
            errors.append("Block size must be positive")

        if self.detection.motion_threshold < 0:
            errors.append("Motion threshold must not be negative")

        if self.rotation.straight_yaw_tolerance < 0 or self.rotation.straight_pitch_tolerance < 0:
            errors.append("Rotation tolerances must not be negative")

        if self.rotation.max_yaw <= 0 or self.rotation.max_pitch <= 0:
            errors.append("Rotation bounds must be positive")

        if self.performance.processing_fps <= 0:
            errors.append("Processing FPS must be positive")

        if self.performance.max_processing_times <= 0:
            errors.append("Processing time buffer must be positive")

        return errors

    def validate(self, strict: bool = False) -> bool:
        """Validate configuration settings."""
        errors = self.validation_errors()

        if errors:
            if strict:
                raise ConfigError("; ".join(errors))
            _log.error("Configuration validation errors:")
            for error in errors:
                _log.error(f"  - {error}")
            return False

        return True


# Default configuration file path
DEFAULT_CONFIG_FILE = os.environ.get("FOCUS_ENGINE_CONFIG", "data/configs/default_config.json")

# Global configuration instance
config = EngineConfig(DEFAULT_CONFIG_FILE)
