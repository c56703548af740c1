"""
Unit tests for temporal smoothing.
"""

import math
import unittest

from focus_engine.core.attention_scoring import AttentionSample
from focus_engine.core.smoothing import TemporalSmoother


class TestTemporalSmoother(unittest.TestCase):
    """Test cases for the weighted score window."""

    def setUp(self):
        """Set up test fixtures."""
        self.smoother = TemporalSmoother(window=10)

    def test_single_score_passes_through(self):
        sample = self.smoother.smooth(AttentionSample(0.7, True, yaw=3.0, pitch=-2.0))

        self.assertAlmostEqual(sample.score, 0.7)
        self.assertTrue(sample.is_looking_straight)
        self.assertEqual(sample.yaw, 3.0)
        self.assertEqual(sample.pitch, -2.0)

    def test_newest_score_weighs_most(self):
        self.smoother.smooth(AttentionSample(0.0, True))
        sample = self.smoother.smooth(AttentionSample(1.0, True))

        # Weights e^-0.5 and 1
        self.assertAlmostEqual(sample.score, 1.0 / (1.0 + math.exp(-0.5)))

    def test_constant_scores_stay_constant(self):
        for _ in range(25):
            sample = self.smoother.smooth(AttentionSample(0.4, True))
        self.assertAlmostEqual(sample.score, 0.4)

    def test_window_keeps_most_recent(self):
        for i in range(13):
            self.smoother.smooth(AttentionSample(i / 20.0, True))

        self.assertEqual(len(self.smoother), 10)
        self.assertEqual(self.smoother.scores(), [i / 20.0 for i in range(3, 13)])

    def test_looking_straight_is_not_smoothed(self):
        self.smoother.smooth(AttentionSample(0.9, True))
        sample = self.smoother.smooth(AttentionSample(0.1, False))
        self.assertFalse(sample.is_looking_straight)

    def test_clear(self):
        self.smoother.smooth(AttentionSample(0.5, True))
        self.smoother.clear()
        self.assertEqual(self.smoother.scores(), [])


if __name__ == "__main__":
    unittest.main()
