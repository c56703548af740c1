"""
Head Rotation Estimation Module

Estimates yaw and pitch from brightness asymmetry across the borders of a
face block. A lit face turned sideways or tilted shows one border brighter
than the opposite one; the relative difference is scaled to degrees.

This is an approximation. The estimate grows monotonically with the
asymmetry but is not a metrically accurate head pose.
"""

from typing import Tuple, Optional

import numpy as np

from .frame import clamp
from ..utils.config import config, EngineConfig


class RotationEstimator:
    """Brightness-asymmetry yaw/pitch estimator."""

    def __init__(self, yaw_scale: Optional[float] = None, pitch_scale: Optional[float] = None,
                 max_yaw: Optional[float] = None, max_pitch: Optional[float] = None):
        """
        Initialize rotation estimator.

        Args:
            yaw_scale: Degrees per unit of left/right asymmetry
            pitch_scale: Degrees per unit of top/bottom asymmetry
            max_yaw: Yaw is clamped to [-max_yaw, max_yaw]
            max_pitch: Pitch is clamped to [-max_pitch, max_pitch]
        """
        rotation = config.rotation
        self.yaw_scale = rotation.yaw_scale if yaw_scale is None else yaw_scale
        self.pitch_scale = rotation.pitch_scale if pitch_scale is None else pitch_scale
        self.max_yaw = rotation.max_yaw if max_yaw is None else max_yaw
        self.max_pitch = rotation.max_pitch if max_pitch is None else max_pitch

    def estimate(self, top_avg: float, bottom_avg: float,
                 left_avg: float, right_avg: float) -> Tuple[float, float]:
        """
        Estimate head rotation from border brightness means.

        Returns:
            (yaw, pitch) in degrees. Positive yaw means the right border is
            brighter, positive pitch means the top border is brighter.
        """
        pitch_indicator = (top_avg - bottom_avg) / max(top_avg, bottom_avg, 1.0)
        yaw_indicator = (right_avg - left_avg) / max(left_avg, right_avg, 1.0)

        yaw = clamp(yaw_indicator * self.yaw_scale, -self.max_yaw, self.max_yaw)
        pitch = clamp(pitch_indicator * self.pitch_scale, -self.max_pitch, self.max_pitch)
        return yaw, pitch

    def estimate_from_block(self, gray_block: np.ndarray) -> Tuple[float, float]:
        """Estimate rotation from a 2-D brightness block."""
        return self.estimate(
            float(gray_block[0, :].mean()),
            float(gray_block[-1, :].mean()),
            float(gray_block[:, 0].mean()),
            float(gray_block[:, -1].mean()),
        )


def is_looking_straight(yaw: float, pitch: float,
                        yaw_tolerance: Optional[float] = None,
                        pitch_tolerance: Optional[float] = None) -> bool:
    """True when both angles are within the straight-ahead tolerances."""
    if yaw_tolerance is None:
        yaw_tolerance = config.rotation.straight_yaw_tolerance
    if pitch_tolerance is None:
        pitch_tolerance = config.rotation.straight_pitch_tolerance

    return abs(yaw) <= yaw_tolerance and abs(pitch) <= pitch_tolerance


def rotation_status(yaw: float, pitch: float, engine_config: Optional[EngineConfig] = None) -> str:
    """Human-readable head direction for status lines."""
    rotation = (engine_config or config).rotation
    if is_looking_straight(yaw, pitch, rotation.straight_yaw_tolerance,
                           rotation.straight_pitch_tolerance):
        return "Looking Straight"

    direction = ""
    if abs(yaw) > rotation.distraction_yaw_threshold:
        direction += "Right " if yaw > 0 else "Left "
    if abs(pitch) > rotation.distraction_pitch_threshold:
        direction += "Down" if pitch > 0 else "Up"

    return direction.strip() or "Slightly Off-Center"
