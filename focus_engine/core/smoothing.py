"""
Temporal smoothing of raw attention scores.
"""

import math
from collections import deque
from typing import List, Optional

from .attention_scoring import AttentionSample
from ..utils.config import config


class TemporalSmoother:
    """
    Exponentially weighted average over a bounded score history.

    With k scores in the window, the i-th (0 = oldest) gets weight
    exp((i - k + 1) / k). The decay is scaled by the current window length,
    so weighting sharpens as the window fills.
    """

    def __init__(self, window: Optional[int] = None):
        self.window = config.attention.smoothing_window if window is None else window
        self.history = deque(maxlen=self.window)

    def smooth(self, sample: AttentionSample) -> AttentionSample:
        """Add a raw sample and return it with the smoothed score."""
        self.history.append(sample.score)

        k = len(self.history)
        weights = [math.exp((i - k + 1) / k) for i in range(k)]
        smoothed = sum(w * s for w, s in zip(weights, self.history)) / sum(weights)

        return AttentionSample(
            score=max(0.0, min(1.0, smoothed)),
            is_looking_straight=sample.is_looking_straight,
            yaw=sample.yaw,
            pitch=sample.pitch,
        )

    def scores(self) -> List[float]:
        """Raw scores in the window, oldest first."""
        return list(self.history)

    def clear(self) -> None:
        self.history.clear()

    def __len__(self) -> int:
        return len(self.history)
