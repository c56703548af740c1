"""
Session Aggregation Module

Accumulates per-frame focus classifications into session statistics,
tunes the focus threshold to the observed focus ratio, and derives
window-level quality metrics from the recent score history.
"""

import time
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Dict, Any, List, Optional, Sequence

import numpy as np

from ..utils.config import config, EngineConfig
from ..utils.logger import get_logger

logger = get_logger(__name__)


class FocusState(Enum):
    FOCUSED = "focused"
    DISTRACTED = "distracted"
    NO_FACE = "noFace"


@dataclass(frozen=True)
class FocusPeriod:
    """A closed run of one state: duration in seconds, closing timestamp."""
    duration: float
    timestamp: float


@dataclass
class SessionStats:
    """Running session counters and state periods."""
    total_frames: int = 0
    focused_frames: int = 0
    distracted_frames: int = 0
    no_face_frames: int = 0
    session_start: Optional[float] = None
    focus_periods: List[FocusPeriod] = field(default_factory=list)
    distraction_periods: List[FocusPeriod] = field(default_factory=list)
    current_state: Optional[FocusState] = None
    state_start_time: Optional[float] = None

    @property
    def focus_ratio(self) -> float:
        if self.total_frames == 0:
            return 0.0
        return self.focused_frames / self.total_frames

    def percentage(self, count: int) -> float:
        if self.total_frames == 0:
            return 0.0
        return count / self.total_frames * 100.0


class SessionAggregator:
    """Owns the session statistics and the adaptive focus threshold."""

    def __init__(self, focus_threshold: Optional[float] = None, adaptive: Optional[bool] = None,
                 engine_config: Optional[EngineConfig] = None):
        """
        Initialize session aggregator.

        Args:
            focus_threshold: Starting focus threshold
            adaptive: Whether record() nudges the threshold
            engine_config: Source of the adaptation limits (defaults to global config)
        """
        attention = (engine_config or config).attention
        self.settings = attention
        self.default_threshold = attention.focus_threshold if focus_threshold is None else focus_threshold
        self.adaptive = attention.adaptive_threshold if adaptive is None else adaptive
        self.focus_threshold = self.default_threshold
        self.stats = SessionStats()

    def record(self, state: FocusState, now: Optional[float] = None) -> SessionStats:
        """Count one classified frame and close the previous period on a state change."""
        if not isinstance(state, FocusState):
            raise TypeError(f"Expected FocusState, got {type(state).__name__}")

        now = time.time() if now is None else now
        stats = self.stats

        stats.total_frames += 1
        if state is FocusState.FOCUSED:
            stats.focused_frames += 1
        elif state is FocusState.DISTRACTED:
            stats.distracted_frames += 1
        else:
            stats.no_face_frames += 1

        if stats.current_state is not state:
            if stats.current_state is not None and stats.state_start_time is not None:
                period = FocusPeriod(duration=now - stats.state_start_time, timestamp=now)
                # No-face runs are counted, not kept as periods
                if stats.current_state is FocusState.FOCUSED:
                    stats.focus_periods.append(period)
                elif stats.current_state is FocusState.DISTRACTED:
                    stats.distraction_periods.append(period)

            stats.current_state = state
            stats.state_start_time = now

        if stats.session_start is None:
            stats.session_start = now

        if self.adaptive:
            self.adjust_threshold()

        return stats

    def adjust_threshold(self) -> float:
        """
        Nudge the threshold toward the observed focus ratio.

        Runs at frame adaptation_min_frames and then every
        adaptation_interval frames; other calls leave it unchanged.
        """
        attention = self.settings
        stats = self.stats

        elapsed = stats.total_frames - attention.adaptation_min_frames
        if elapsed < 0 or elapsed % attention.adaptation_interval != 0:
            return self.focus_threshold

        ratio = stats.focus_ratio
        old = self.focus_threshold

        if ratio > attention.high_focus_ratio:
            self.focus_threshold = min(attention.max_threshold, old + attention.threshold_step)
        elif ratio < attention.low_focus_ratio:
            self.focus_threshold = max(attention.min_threshold, old - attention.threshold_step)

        if self.focus_threshold != old:
            logger.log_threshold_change(old, self.focus_threshold, ratio)

        return self.focus_threshold

    def reset_threshold(self) -> None:
        self.focus_threshold = self.default_threshold

    def reset(self) -> None:
        """Start a new session."""
        self.stats = SessionStats()
        self.reset_threshold()


def max_focus_streak(scores: Sequence[float], threshold: float) -> int:
    """Longest run of consecutive scores at or above the threshold."""
    best = current = 0
    for score in scores:
        if score >= threshold:
            current += 1
            best = max(best, current)
        else:
            current = 0
    return best


def detection_rate(scores: Sequence[float], threshold: float) -> float:
    """Percentage of scores at or above the threshold."""
    if len(scores) == 0:
        return 0.0
    above = sum(1 for score in scores if score >= threshold)
    return above / len(scores) * 100.0


def session_quality(scores: Sequence[float]) -> float:
    """Mean score."""
    if len(scores) == 0:
        return 0.0
    return float(np.mean(scores))


def tracking_confidence(scores: Sequence[float]) -> float:
    """One minus the population variance of the scores, floored at zero."""
    if len(scores) == 0:
        return 0.0
    return max(0.0, 1.0 - float(np.var(scores)))


@dataclass(frozen=True)
class SessionReport:
    """End-of-session summary handed to the host."""
    duration_minutes: float
    total_frames: int
    focused_frames: int
    distracted_frames: int
    no_face_frames: int
    focus_percentage: Optional[float]
    distracted_percentage: float
    no_face_percentage: float
    assessment: str
    assessment_category: str
    peak_focus_period: float
    total_distractions: int
    low_visibility: bool
    detector_metrics: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


ASSESSMENTS = (
    ('EXCELLENT', 'Excellent session'),
    ('GOOD', 'Good session'),
    ('MODERATE', 'Moderate session'),
    ('BELOW_AVERAGE', 'Below average session'),
)


def assess(focus_percentage: float, engine_config: Optional[EngineConfig] = None) -> tuple:
    """Map a focus percentage to (category, label)."""
    cutoffs = (engine_config or config).assessment
    for (category, label), cutoff in zip(ASSESSMENTS, (cutoffs.excellent, cutoffs.good,
                                                       cutoffs.moderate, cutoffs.below_average)):
        if focus_percentage >= cutoff:
            return category, label
    return 'POOR', 'Poor session'


def build_report(stats: SessionStats, detector_metrics: Optional[Dict[str, Any]] = None,
                 now: Optional[float] = None,
                 engine_config: Optional[EngineConfig] = None) -> SessionReport:
    """Summarize a session."""
    cfg = engine_config or config
    now = time.time() if now is None else now
    duration = (now - stats.session_start) / 60.0 if stats.session_start is not None else 0.0

    if stats.total_frames > 0:
        focus_percentage = round(stats.percentage(stats.focused_frames), 1)
        category, assessment = assess(focus_percentage, cfg)
    else:
        focus_percentage = None
        category, assessment = 'MODERATE', 'Session completed'

    low_visibility = stats.no_face_frames > stats.total_frames * cfg.assessment.low_visibility_ratio

    return SessionReport(
        duration_minutes=round(duration, 1),
        total_frames=stats.total_frames,
        focused_frames=stats.focused_frames,
        distracted_frames=stats.distracted_frames,
        no_face_frames=stats.no_face_frames,
        focus_percentage=focus_percentage,
        distracted_percentage=round(stats.percentage(stats.distracted_frames), 1),
        no_face_percentage=round(stats.percentage(stats.no_face_frames), 1),
        assessment=assessment,
        assessment_category=category,
        peak_focus_period=max((p.duration for p in stats.focus_periods), default=0.0),
        total_distractions=len(stats.distraction_periods),
        low_visibility=low_visibility,
        detector_metrics=dict(detector_metrics or {}),
    )
