"""
Unit tests for the motion fallback detector.
"""

import unittest

from focus_engine.core.frame import validate_frame
from focus_engine.core.motion import MotionDetector
from tests.frames import blank_frame, paint


class TestMotionDetector(unittest.TestCase):
    """Test cases for frame-to-frame motion."""

    def setUp(self):
        """Set up test fixtures."""
        self.detector = MotionDetector(motion_threshold=30.0, focus_box_size=0.6,
                                       center_motion_ratio=0.3)
        self.still = validate_frame(blank_frame(100, 100))

    def test_first_frame_has_no_reference(self):
        signal = self.detector.detect(self.still)

        self.assertEqual(signal.motion_level, 0.0)
        self.assertTrue(signal.is_in_center)
        self.assertFalse(signal.has_reference)
        self.assertIsNotNone(self.detector.previous_gray)

    def test_identical_frames_have_no_motion(self):
        self.detector.detect(self.still)
        signal = self.detector.detect(self.still)

        self.assertTrue(signal.has_reference)
        self.assertEqual(signal.motion_level, 0.0)
        # Zero moving pixels cannot be central
        self.assertFalse(signal.is_in_center)

    def test_central_motion(self):
        self.detector.detect(self.still)
        moved = validate_frame(paint(blank_frame(100, 100), 40, 40, 20, (255, 255, 255)))
        signal = self.detector.detect(moved)

        self.assertAlmostEqual(signal.motion_level, 4.0)
        self.assertTrue(signal.is_in_center)

    def test_corner_motion_is_not_central(self):
        self.detector.detect(self.still)
        moved = validate_frame(paint(blank_frame(100, 100), 0, 0, 20, (255, 255, 255)))
        signal = self.detector.detect(moved)

        self.assertAlmostEqual(signal.motion_level, 4.0)
        self.assertFalse(signal.is_in_center)

    def test_small_brightness_change_is_ignored(self):
        self.detector.detect(self.still)
        signal = self.detector.detect(validate_frame(blank_frame(100, 100, value=30)))
        # Delta must exceed the threshold
        self.assertEqual(signal.motion_level, 0.0)

        signal = self.detector.detect(validate_frame(blank_frame(100, 100, value=61)))
        self.assertAlmostEqual(signal.motion_level, 100.0)
        self.assertTrue(signal.is_in_center)

    def test_snapshot_always_replaced(self):
        self.detector.detect(self.still)
        bright = validate_frame(blank_frame(100, 100, value=255))
        self.detector.detect(bright)
        signal = self.detector.detect(bright)
        self.assertEqual(signal.motion_level, 0.0)

    def test_shape_change_restarts_reference(self):
        self.detector.detect(self.still)
        signal = self.detector.detect(validate_frame(blank_frame(50, 80)))

        self.assertFalse(signal.has_reference)
        self.assertEqual(self.detector.previous_gray.shape, (50, 80))

    def test_reset_drops_snapshot(self):
        self.detector.detect(self.still)
        self.detector.reset()

        self.assertIsNone(self.detector.previous_gray)
        self.assertFalse(self.detector.detect(self.still).has_reference)

    def test_center_region_uses_floor(self):
        self.assertEqual(self.detector.center_region(100, 100), (20, 20, 80, 80))
        self.assertEqual(self.detector.center_region(125, 75), (25, 15, 100, 60))


if __name__ == "__main__":
    unittest.main()
