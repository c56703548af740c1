"""
Attention Engine

Single owner of all per-session detector state: the previous-frame
snapshot, the score history, the focus threshold and the session
statistics. Hosts create one engine per session and call it once per
frame; the engine itself never schedules, sleeps or blocks.
"""

import time
from collections import deque
from dataclasses import dataclass, asdict
from typing import Dict, Any, Optional

import numpy as np

from .attention_scoring import (AttentionScorer, AttentionSample, Detection, NoFace,
                                NO_FACE_SAMPLE, is_focused)
from .block_analysis import PixelBlockAnalyzer
from .face_locator import FaceCandidate, FaceLocator
from .frame import validate_frame
from .motion import MotionDetector
from .rotation import RotationEstimator, rotation_status
from .session import (FocusState, SessionAggregator, SessionReport, SessionStats, build_report,
                      detection_rate, max_focus_streak, session_quality, tracking_confidence)
from .smoothing import TemporalSmoother
from ..utils.config import config, EngineConfig
from ..utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class PerformanceMetrics:
    """On-demand snapshot of detector health and recent-window quality."""
    avg_processing_time: float     # ms
    current_threshold: float
    max_focus_streak: int
    detection_rate: float          # percent of the history window
    session_quality_score: float
    tracking_confidence: float
    current_yaw: float
    current_pitch: float
    history_length: int
    focus_box_size: float
    max_yaw: float
    max_pitch: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class FrameResult:
    """Outcome of one process_frame() call."""
    detection: Detection
    raw: AttentionSample
    smoothed: AttentionSample
    state: FocusState
    processing_time_ms: float
    rotation_status: str

    @property
    def is_focused(self) -> bool:
        return self.state is FocusState.FOCUSED


class AttentionEngine:
    """Per-frame focus scoring pipeline."""

    def __init__(self, engine_config: Optional[EngineConfig] = None):
        """
        Initialize attention engine.

        Args:
            engine_config: Configuration to validate and read limits from
                (defaults to the global configuration)
        """
        self.config = engine_config or config
        self.config.validate(strict=True)

        attention = self.config.attention
        rotation = self.config.rotation
        detection = self.config.detection

        estimator = RotationEstimator(rotation.yaw_scale, rotation.pitch_scale,
                                      rotation.max_yaw, rotation.max_pitch)
        self.locator = FaceLocator(PixelBlockAnalyzer(detection.block_size, estimator, self.config),
                                   detection.confidence_floor)
        self.motion_detector = MotionDetector(detection.motion_threshold,
                                              attention.focus_box_size,
                                              detection.center_motion_ratio)
        self.scorer = AttentionScorer(attention.focus_box_size, attention.distance_decay,
                                      rotation.straight_yaw_tolerance,
                                      rotation.straight_pitch_tolerance, self.config)
        self.smoother = TemporalSmoother(attention.smoothing_window)
        self.session = SessionAggregator(attention.focus_threshold, attention.adaptive_threshold,
                                         self.config)

        self.no_face_confidence = attention.no_face_confidence
        self.max_yaw = rotation.calibration_max_yaw
        self.max_pitch = rotation.calibration_max_pitch

        self.processing_times = deque(maxlen=self.config.performance.max_processing_times)
        self.last_detection: Detection = NoFace()

        logger.info(f"Attention engine initialized (threshold: {self.session.focus_threshold}, "
                    f"window: {self.smoother.window})")

    @property
    def focus_threshold(self) -> float:
        return self.session.focus_threshold

    @property
    def stats(self) -> SessionStats:
        return self.session.stats

    def detect(self, frame: np.ndarray) -> Detection:
        """Locate a face, falling back to motion. Raises InvalidFrame."""
        rgb = validate_frame(frame)
        candidate = self.locator.locate(rgb)

        if candidate is not None:
            return candidate

        motion = self.motion_detector.detect(rgb)
        if not motion.has_reference:
            return NoFace()
        return motion

    def locate_and_score(self, frame: np.ndarray) -> AttentionSample:
        """Score one frame. The detection is kept as last_detection."""
        self.last_detection = self.detect(frame)
        return self.scorer.score(self.last_detection)

    def smooth(self, sample: AttentionSample) -> AttentionSample:
        return self.smoother.smooth(sample)

    def classify(self, smoothed: AttentionSample) -> FocusState:
        if is_focused(smoothed, self.session.focus_threshold):
            return FocusState.FOCUSED
        return FocusState.DISTRACTED

    def record(self, state: FocusState, now: Optional[float] = None) -> SessionStats:
        """Count one processed frame. Call once per frame."""
        return self.session.record(state, now)

    def is_no_face(self, detection: Detection) -> bool:
        if isinstance(detection, NoFace):
            return True
        if isinstance(detection, FaceCandidate):
            return detection.confidence <= self.no_face_confidence
        return False

    def process_frame(self, frame: np.ndarray, now: Optional[float] = None) -> FrameResult:
        """Run the full pipeline on one frame: locate, score, smooth, classify, record."""
        start_time = time.perf_counter()

        raw = self.locate_and_score(frame)
        detection = self.last_detection

        if self.is_no_face(detection):
            raw = smoothed = NO_FACE_SAMPLE
            state = FocusState.NO_FACE
            status = "No Face"
        else:
            smoothed = self.smooth(raw)
            state = self.classify(smoothed)
            status = rotation_status(smoothed.yaw, smoothed.pitch, self.config)

        self.record(state, now)

        processing_time = (time.perf_counter() - start_time) * 1000
        self.processing_times.append(processing_time)
        if processing_time > self.config.performance.performance_warning_ms:
            logger.warning(f"Slow frame: {processing_time:.1f}ms")

        logger.log_attention_score(raw.score, smoothed.score, state is FocusState.FOCUSED)

        return FrameResult(detection, raw, smoothed, state, processing_time, status)

    def metrics(self) -> PerformanceMetrics:
        """Snapshot of current metrics. Reads state only."""
        scores = self.smoother.scores()
        threshold = self.session.focus_threshold
        avg_time = float(np.mean(self.processing_times)) if self.processing_times else 0.0

        return PerformanceMetrics(
            avg_processing_time=avg_time,
            current_threshold=threshold,
            max_focus_streak=max_focus_streak(scores, threshold),
            detection_rate=detection_rate(scores, threshold),
            session_quality_score=session_quality(scores),
            tracking_confidence=tracking_confidence(scores),
            current_yaw=self.scorer.current_yaw,
            current_pitch=self.scorer.current_pitch,
            history_length=len(scores),
            focus_box_size=self.scorer.focus_box_size,
            max_yaw=self.max_yaw,
            max_pitch=self.max_pitch,
        )

    def session_report(self, now: Optional[float] = None) -> SessionReport:
        metrics = self.metrics()
        detector_metrics = {
            'avg_processing_time': round(metrics.avg_processing_time, 2),
            'max_focus_streak': metrics.max_focus_streak,
            'detection_rate': round(metrics.detection_rate, 1),
            'session_quality': round(metrics.session_quality_score * 100.0, 1),
        }
        return build_report(self.session.stats, detector_metrics, now, self.config)

    def update_calibration(self, max_yaw: float = 25.0, max_pitch: float = 20.0) -> None:
        self.max_yaw = max_yaw
        self.max_pitch = max_pitch
        logger.info(f"Calibration updated: max yaw {max_yaw}°, max pitch {max_pitch}°")

    def reset(self) -> None:
        """Clear history, motion snapshot and rotation; restore the default threshold."""
        self.smoother.clear()
        self.motion_detector.reset()
        self.scorer.reset()
        self.processing_times.clear()
        self.session.reset_threshold()
        self.last_detection = NoFace()
        logger.info("Attention engine reset")

    def reset_session(self) -> None:
        """reset() plus fresh session statistics."""
        self.reset()
        self.session.reset()
