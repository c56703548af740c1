"""
Logging utilities for the focus scoring engine.
"""

import logging
import sys
import time
import traceback
from datetime import datetime
from functools import wraps
from pathlib import Path
from typing import Optional

from .config import config


class EngineLogger:
    """Custom logger for the focus scoring engine."""

    def __init__(self, name: str = "focus_engine", log_file: Optional[str] = None):
        """Initialize the logger."""
        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.DEBUG)

        # Prevent duplicate handlers
        if self.logger.handlers:
            return

        detailed_formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'
        )
        simple_formatter = logging.Formatter(
            '%(asctime)s - %(levelname)s - %(message)s'
        )

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(config.logging.console_level)
        console_handler.setFormatter(simple_formatter)
        self.logger.addHandler(console_handler)

        if config.logging.log_to_file or log_file is not None:
            if log_file is None:
                logs_dir = Path(config.logging.log_dir)
                logs_dir.mkdir(parents=True, exist_ok=True)

                timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
                log_file = logs_dir / f"focus_engine_{timestamp}.log"

            file_handler = logging.FileHandler(log_file)
            file_handler.setLevel(config.logging.file_level)
            file_handler.setFormatter(detailed_formatter)
            self.logger.addHandler(file_handler)

        # Handlers live on each named logger; don't double-print through the root.
        self.logger.propagate = False

    def set_console_level(self, level: int) -> None:
        """Change the level of the console handler(s)."""
        for handler in self.logger.handlers:
            if isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler):
                handler.setLevel(level)

    def debug(self, message: str) -> None:
        self.logger.debug(message)

    def info(self, message: str) -> None:
        self.logger.info(message)

    def warning(self, message: str) -> None:
        self.logger.warning(message)

    def error(self, message: str) -> None:
        self.logger.error(message)

    def critical(self, message: str) -> None:
        self.logger.critical(message)

    def log_face_candidate(self, center_x: float, center_y: float, confidence: float,
                           yaw: float, pitch: float) -> None:
        """Log face locator results."""
        self.debug(f"Face Candidate - Center: ({center_x:.3f}, {center_y:.3f}), "
                   f"Confidence: {confidence:.3f}, Yaw: {yaw:.1f}°, Pitch: {pitch:.1f}°")

    def log_motion(self, motion_level: float, is_in_center: bool) -> None:
        """Log motion fallback results."""
        self.debug(f"Motion - Level: {motion_level:.2f}%, In Center: {is_in_center}")

    def log_attention_score(self, raw_score: float, smoothed_score: float, focused: bool) -> None:
        """Log attention scoring details."""
        self.debug(f"Attention Score: raw {raw_score:.3f}, smoothed {smoothed_score:.3f}, "
                   f"focused: {focused}")

    def log_threshold_change(self, old: float, new: float, focus_ratio: float) -> None:
        self.info(f"Focus threshold adjusted {old:.2f} -> {new:.2f} (focus ratio {focus_ratio:.3f})")

    def log_error_with_context(self, error: Exception, context: str) -> None:
        """Log error with additional context."""
        self.error(f"Error in {context}: {str(error)}")
        if error.__traceback__ is not None:
            self.debug(f"Traceback: {''.join(traceback.format_tb(error.__traceback__))}")

    def log_system_info(self, engine_config=None) -> None:
        """Log runtime and configuration information."""
        cfg = engine_config or config
        import cv2
        import numpy as np

        self.info("=== System Information ===")
        self.info(f"Python Version: {sys.version}")
        self.info(f"NumPy Version: {np.__version__}")
        self.info(f"OpenCV Version: {cv2.__version__}")

        self.info("=== Configuration ===")
        self.info(f"Focus threshold: {cfg.attention.focus_threshold} "
                  f"(adaptive: {cfg.attention.adaptive_threshold})")
        self.info(f"Smoothing window: {cfg.attention.smoothing_window}")
        self.info(f"Block size: {cfg.detection.block_size}px")
        self.info(f"Processing rate: {cfg.performance.processing_fps}fps")


# Global logger instance
logger = EngineLogger()


def get_logger(name: str = "focus_engine") -> EngineLogger:
    """Get a logger instance."""
    return EngineLogger(name)


def log_performance_metrics(func):
    """Decorator to log how long a call took."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        start_time = time.perf_counter()
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            logger.log_error_with_context(e, func.__name__)
            raise
        processing_time = (time.perf_counter() - start_time) * 1000
        logger.debug(f"{func.__name__} took {processing_time:.2f}ms")
        return result
    return wrapper
