"""
Motion Detection Module

Fallback signal used when no face block clears the confidence floor.
Compares each frame's brightness against the previous frame.
"""

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .frame import brightness
from ..utils.config import config
from ..utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class MotionSignal:
    """Frame-to-frame motion summary."""
    motion_level: float          # percentage of moving pixels, 0..100
    is_in_center: bool
    has_reference: bool = True   # False when there was no previous frame


class MotionDetector:
    """Brightness-delta motion detector owning a single previous-frame snapshot."""

    def __init__(self, motion_threshold: Optional[float] = None,
                 focus_box_size: Optional[float] = None,
                 center_motion_ratio: Optional[float] = None):
        """
        Initialize motion detector.

        Args:
            motion_threshold: Brightness delta above which a pixel is moving
            focus_box_size: Center rectangle size as a fraction of the frame
            center_motion_ratio: Share of moving pixels that must be central
        """
        self.motion_threshold = (config.detection.motion_threshold
                                 if motion_threshold is None else motion_threshold)
        self.focus_box_size = (config.attention.focus_box_size
                               if focus_box_size is None else focus_box_size)
        self.center_motion_ratio = (config.detection.center_motion_ratio
                                    if center_motion_ratio is None else center_motion_ratio)
        self.previous_gray: Optional[np.ndarray] = None

    def center_region(self, width: int, height: int) -> tuple:
        """Pixel bounds (x0, y0, x1, y1) of the center rectangle, end-exclusive."""
        offset = (1.0 - self.focus_box_size) / 2.0
        x0 = math.floor(width * offset)
        y0 = math.floor(height * offset)
        x1 = x0 + math.floor(width * self.focus_box_size)
        y1 = y0 + math.floor(height * self.focus_box_size)
        return x0, y0, x1, y1

    def detect(self, rgb: np.ndarray) -> MotionSignal:
        """Compare a validated RGB frame with the stored snapshot, then replace it."""
        gray = brightness(rgb)
        previous = self.previous_gray
        self.previous_gray = gray.copy()

        if previous is None or previous.shape != gray.shape:
            return MotionSignal(motion_level=0.0, is_in_center=True, has_reference=False)

        moving = np.abs(gray - previous) > self.motion_threshold
        moving_pixels = int(np.count_nonzero(moving))

        height, width = gray.shape
        x0, y0, x1, y1 = self.center_region(width, height)
        center_pixels = int(np.count_nonzero(moving[y0:y1, x0:x1]))

        signal = MotionSignal(
            motion_level=100.0 * moving_pixels / gray.size,
            is_in_center=center_pixels > moving_pixels * self.center_motion_ratio,
        )
        logger.log_motion(signal.motion_level, signal.is_in_center)
        return signal

    def reset(self) -> None:
        self.previous_gray = None
