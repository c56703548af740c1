"""
Focus Engine

Real-time attention scoring from raw video frames using deterministic
pixel heuristics: skin/edge block scanning, brightness-asymmetry head
rotation, motion fallback, temporal smoothing and session analytics.
"""

__version__ = "1.0.0"
__author__ = "Focus Engine Team"
__description__ = "Heuristic real-time focus scoring from video frames"

from .core.engine import AttentionEngine, FrameResult, PerformanceMetrics
from .core.frame import InvalidFrame
from .core.session import FocusState, SessionStats, SessionReport

__all__ = [
    "AttentionEngine",
    "FrameResult",
    "PerformanceMetrics",
    "InvalidFrame",
    "FocusState",
    "SessionStats",
    "SessionReport",
]
