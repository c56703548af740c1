"""
Attention Scoring Module

Turns one frame's detection into a focus score in [0, 1]:
- Face candidate: straight-ahead gate, then exponential decay with distance
  from the frame center
- Motion signal: stillness plus a bonus for centered motion
- No face: zero
"""

import math
from dataclasses import dataclass
from typing import Optional, Union

from .face_locator import FaceCandidate
from .frame import clamp, clamp01
from .motion import MotionSignal
from .rotation import is_looking_straight
from ..utils.config import config, EngineConfig
from ..utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class NoFace:
    """Nothing usable in the frame."""


Detection = Union[FaceCandidate, MotionSignal, NoFace]


@dataclass(frozen=True)
class AttentionSample:
    """Per-frame attention estimate."""
    score: float
    is_looking_straight: bool
    yaw: float = 0.0
    pitch: float = 0.0


NO_FACE_SAMPLE = AttentionSample(score=0.0, is_looking_straight=False)


class AttentionScorer:
    """Scores detections and remembers the latest head rotation."""

    def __init__(self, focus_box_size: Optional[float] = None,
                 distance_decay: Optional[float] = None,
                 yaw_tolerance: Optional[float] = None,
                 pitch_tolerance: Optional[float] = None,
                 engine_config: Optional[EngineConfig] = None):
        """
        Initialize attention scorer.

        Args:
            focus_box_size: Focus box size as a fraction of the frame
            distance_decay: Decay rate applied to the normalized center distance
            yaw_tolerance: Max |yaw| still counted as looking straight
            pitch_tolerance: Max |pitch| still counted as looking straight
            engine_config: Source of the remaining constants (defaults to global config)
        """
        cfg = engine_config or config
        attention = cfg.attention
        rotation = cfg.rotation
        self.focus_box_size = attention.focus_box_size if focus_box_size is None else focus_box_size
        self.distance_decay = attention.distance_decay if distance_decay is None else distance_decay
        self.yaw_tolerance = rotation.straight_yaw_tolerance if yaw_tolerance is None else yaw_tolerance
        self.pitch_tolerance = (rotation.straight_pitch_tolerance
                                if pitch_tolerance is None else pitch_tolerance)
        self.max_yaw = rotation.max_yaw
        self.max_pitch = rotation.max_pitch
        self.rotation_penalty_score = attention.rotation_penalty_score
        self.motion_center_bonus = attention.motion_center_bonus

        self.current_yaw = 0.0
        self.current_pitch = 0.0

    def score(self, detection: Detection) -> AttentionSample:
        """Score a detection."""
        if isinstance(detection, FaceCandidate):
            return self._score_face(detection)
        if isinstance(detection, MotionSignal):
            return self._score_motion(detection)
        if isinstance(detection, NoFace):
            return NO_FACE_SAMPLE
        raise TypeError(f"Unsupported detection: {type(detection).__name__}")

    def _score_face(self, face: FaceCandidate) -> AttentionSample:
        yaw = clamp(face.yaw, -self.max_yaw, self.max_yaw)
        pitch = clamp(face.pitch, -self.max_pitch, self.max_pitch)
        self.current_yaw = yaw
        self.current_pitch = pitch

        straight = is_looking_straight(yaw, pitch, self.yaw_tolerance, self.pitch_tolerance)
        if not straight:
            # Rotation overrides position
            return AttentionSample(clamp01(self.rotation_penalty_score), False, yaw, pitch)

        distance = math.hypot(face.center_x - 0.5, face.center_y - 0.5)
        max_distance = math.hypot(self.focus_box_size / 2.0, self.focus_box_size / 2.0)
        normalized = min(distance / max_distance, 1.0)

        score = math.exp(-self.distance_decay * normalized)
        return AttentionSample(clamp01(score), True, yaw, pitch)

    def _score_motion(self, motion: MotionSignal) -> AttentionSample:
        stillness = max(0.0, 1.0 - motion.motion_level / 100.0)
        bonus = self.motion_center_bonus if motion.is_in_center else 0.0
        score = min(1.0, stillness + bonus)
        # Motion carries no rotation estimate; report the last one seen
        return AttentionSample(clamp01(score), True, self.current_yaw, self.current_pitch)

    def reset(self) -> None:
        self.current_yaw = 0.0
        self.current_pitch = 0.0


def is_focused(sample: AttentionSample, threshold: float) -> bool:
    """Focused only when the score clears the threshold and the head is straight."""
    return sample.score >= threshold and sample.is_looking_straight
