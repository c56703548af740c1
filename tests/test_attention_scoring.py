"""
Unit tests for attention scoring.
"""

import math
import unittest

from focus_engine.core.attention_scoring import (AttentionSample, AttentionScorer, NoFace,
                                                 NO_FACE_SAMPLE, is_focused)
from focus_engine.core.face_locator import FaceCandidate
from focus_engine.core.motion import MotionSignal


class TestFaceScoring(unittest.TestCase):
    """Face candidate path."""

    def setUp(self):
        """Set up test fixtures."""
        self.scorer = AttentionScorer(focus_box_size=0.6, distance_decay=1.5,
                                      yaw_tolerance=15.0, pitch_tolerance=10.0)

    def test_centered_face_scores_one(self):
        sample = self.scorer.score(FaceCandidate(0.5, 0.5, 0.8))

        self.assertAlmostEqual(sample.score, 1.0)
        self.assertTrue(sample.is_looking_straight)

    def test_score_decays_with_distance(self):
        near = self.scorer.score(FaceCandidate(0.55, 0.5, 0.8))
        far = self.scorer.score(FaceCandidate(0.7, 0.5, 0.8))

        self.assertLess(far.score, near.score)
        normalized = 0.2 / math.hypot(0.3, 0.3)
        self.assertAlmostEqual(far.score, math.exp(-1.5 * normalized))

    def test_distance_saturates_at_box_corner(self):
        corner = self.scorer.score(FaceCandidate(0.8, 0.8, 0.8))
        outside = self.scorer.score(FaceCandidate(1.0, 0.0, 0.8))

        self.assertAlmostEqual(corner.score, math.exp(-1.5))
        self.assertAlmostEqual(outside.score, math.exp(-1.5))

    def test_turned_head_overrides_position(self):
        sample = self.scorer.score(FaceCandidate(0.5, 0.5, 0.8, yaw=30.0))

        self.assertAlmostEqual(sample.score, 0.1)
        self.assertFalse(sample.is_looking_straight)
        self.assertEqual(sample.yaw, 30.0)
        self.assertEqual(self.scorer.current_yaw, 30.0)

    def test_pitch_tolerance(self):
        self.assertTrue(self.scorer.score(FaceCandidate(0.5, 0.5, 0.8, pitch=-10.0)).is_looking_straight)
        self.assertFalse(self.scorer.score(FaceCandidate(0.5, 0.5, 0.8, pitch=12.0)).is_looking_straight)

    def test_rotation_is_clamped(self):
        sample = self.scorer.score(FaceCandidate(0.5, 0.5, 0.8, yaw=80.0, pitch=-45.0))

        self.assertEqual(sample.yaw, 50.0)
        self.assertEqual(sample.pitch, -30.0)
        self.assertEqual(self.scorer.current_pitch, -30.0)

    def test_reset_clears_rotation(self):
        self.scorer.score(FaceCandidate(0.5, 0.5, 0.8, yaw=20.0, pitch=5.0))
        self.scorer.reset()

        self.assertEqual(self.scorer.current_yaw, 0.0)
        self.assertEqual(self.scorer.current_pitch, 0.0)


class TestMotionAndNoFaceScoring(unittest.TestCase):
    """Motion fallback and empty frames."""

    def setUp(self):
        """Set up test fixtures."""
        self.scorer = AttentionScorer(focus_box_size=0.6, distance_decay=1.5,
                                      yaw_tolerance=15.0, pitch_tolerance=10.0)

    def test_still_centered_motion_caps_at_one(self):
        sample = self.scorer.score(MotionSignal(motion_level=4.0, is_in_center=True))

        self.assertAlmostEqual(sample.score, 1.0)
        self.assertTrue(sample.is_looking_straight)

    def test_motion_level_lowers_score(self):
        off_center = self.scorer.score(MotionSignal(motion_level=50.0, is_in_center=False))
        busy_center = self.scorer.score(MotionSignal(motion_level=100.0, is_in_center=True))

        self.assertAlmostEqual(off_center.score, 0.5)
        self.assertAlmostEqual(busy_center.score, 0.3)

    def test_motion_reports_last_rotation(self):
        self.scorer.score(FaceCandidate(0.5, 0.5, 0.8, yaw=12.0, pitch=-4.0))
        sample = self.scorer.score(MotionSignal(motion_level=0.0, is_in_center=True))

        self.assertEqual(sample.yaw, 12.0)
        self.assertEqual(sample.pitch, -4.0)

    def test_no_face_scores_zero(self):
        sample = self.scorer.score(NoFace())

        self.assertEqual(sample, NO_FACE_SAMPLE)
        self.assertEqual(sample.score, 0.0)
        self.assertFalse(sample.is_looking_straight)

    def test_unknown_detection_rejected(self):
        with self.assertRaises(TypeError):
            self.scorer.score("face")


class TestFocusDecision(unittest.TestCase):
    """Threshold and gaze gate."""

    def test_threshold_is_inclusive(self):
        self.assertTrue(is_focused(AttentionSample(0.54, True), 0.54))
        self.assertFalse(is_focused(AttentionSample(0.53, True), 0.54))

    def test_requires_looking_straight(self):
        self.assertFalse(is_focused(AttentionSample(0.95, False), 0.54))


if __name__ == "__main__":
    unittest.main()
