"""
Tests for ball selection from per-frame detections
"""

import unittest
from unittest.mock import Mock

from ball_tracking.core.detection_filter import DetectionFilter, detect_ball
from ball_tracking.models import BoundingBox, Detection


def make_detection(class_name, score, x=0.0, y=0.0, width=10.0, height=10.0):
    return Detection(class_name, score, BoundingBox(x, y, width, height))


class TestFirstMatchSelection(unittest.TestCase):
    """Test default first-match selection."""

    def test_first_qualifying_wins_over_higher_score(self):
        """Regression: the second entry is chosen, not the highest score."""
        detections = [
            make_detection("dog", 0.9, x=0, y=0),
            make_detection("sports ball", 0.66, x=100, y=200, width=20, height=40),
            make_detection("sports ball", 0.95, x=10, y=10),
        ]
        detection_filter = DetectionFilter(confidence_threshold=0.65)

        self.assertIs(detection_filter.select(detections), detections[1])
        self.assertEqual(detection_filter.locate(detections), (110.0, 220.0))

    def test_threshold_is_strict(self):
        """Test a score equal to the threshold does not qualify."""
        detection_filter = DetectionFilter(confidence_threshold=0.65)
        self.assertIsNone(detection_filter.select([make_detection("ball", 0.65)]))

    def test_accepted_classes(self):
        """Test both default ball labels are accepted and others are not."""
        detection_filter = DetectionFilter()

        self.assertIsNotNone(detection_filter.select([make_detection("ball", 0.9)]))
        self.assertIsNotNone(
            detection_filter.select([make_detection("sports ball", 0.9)])
        )
        self.assertIsNone(detection_filter.select([make_detection("frisbee", 0.99)]))

    def test_custom_classes(self):
        detection_filter = DetectionFilter(accepted_classes=["tennis ball"])
        self.assertIsNone(detection_filter.select([make_detection("ball", 0.9)]))
        self.assertIsNotNone(
            detection_filter.select([make_detection("tennis ball", 0.9)])
        )

    def test_empty_and_missing_input(self):
        """Test no detections means no ball, not an error."""
        detection_filter = DetectionFilter()

        self.assertIsNone(detection_filter.select([]))
        self.assertIsNone(detection_filter.select(None))
        self.assertIsNone(detection_filter.locate(None))

    def test_malformed_detection_skipped(self):
        """Test a detection with an invalid bbox is passed over."""
        detections = [
            make_detection("ball", 0.9, width=-5),
            make_detection("ball", 0.8, x=20, y=20),
        ]

        self.assertIs(DetectionFilter().select(detections), detections[1])

    def test_non_detection_items_skipped(self):
        detections = [{"class": "ball"}, make_detection("ball", 0.8)]
        self.assertIs(DetectionFilter().select(detections), detections[1])


class TestBestScoreSelection(unittest.TestCase):
    """Test best-score selection policy."""

    def test_highest_score_wins(self):
        detections = [
            make_detection("sports ball", 0.66),
            make_detection("sports ball", 0.95),
            make_detection("dog", 0.99),
        ]
        detection_filter = DetectionFilter(selection="best_score")

        self.assertIs(detection_filter.select(detections), detections[1])

    def test_tie_keeps_earlier(self):
        detections = [make_detection("ball", 0.8, x=1), make_detection("ball", 0.8, x=2)]
        detection_filter = DetectionFilter(selection="best_score")

        self.assertIs(detection_filter.select(detections), detections[0])


class TestFilterConfiguration(unittest.TestCase):
    """Test filter construction."""

    def test_invalid_threshold(self):
        with self.assertRaises(ValueError):
            DetectionFilter(confidence_threshold=1.5)

    def test_invalid_selection(self):
        with self.assertRaises(ValueError):
            DetectionFilter(selection="closest")

    def test_from_config_thresholds(self):
        """Test tracking and helper thresholds come from separate keys."""
        config = {
            "detection": {
                "confidence_threshold": 0.65,
                "helper_confidence_threshold": 0.7,
                "accepted_classes": ["ball"],
                "selection": "best_score",
            }
        }

        tracking = DetectionFilter.from_config(config)
        helper = DetectionFilter.from_config(config, helper=True)

        self.assertEqual(tracking.confidence_threshold, 0.65)
        self.assertEqual(helper.confidence_threshold, 0.7)
        self.assertEqual(tracking.accepted_classes, frozenset({"ball"}))
        self.assertEqual(tracking.selection, "best_score")

    def test_from_config_defaults(self):
        detection_filter = DetectionFilter.from_config({})
        self.assertEqual(detection_filter.confidence_threshold, 0.65)
        self.assertEqual(detection_filter.selection, "first_match")


class TestDetectBall(unittest.TestCase):
    """Test the one-shot detect_ball helper."""

    def test_uses_helper_threshold(self):
        """Test the default helper threshold of 0.70 is applied."""
        detector = Mock()
        detector.detect.return_value = [
            make_detection("sports ball", 0.68),
            make_detection("sports ball", 0.72, x=5),
        ]

        result = detect_ball(detector, frame="frame")

        self.assertEqual(result.score, 0.72)
        detector.detect.assert_called_once_with("frame")

    def test_detector_error_returns_none(self):
        """Test detector failures are reported as no detection."""
        detector = Mock()
        detector.detect.side_effect = RuntimeError("model crashed")

        with self.assertLogs("ball_tracking.core.detection_filter", level="ERROR"):
            self.assertIsNone(detect_ball(detector, frame="frame"))

    def test_missing_detector_or_frame(self):
        self.assertIsNone(detect_ball(None, frame="frame"))
        self.assertIsNone(detect_ball(Mock(), frame=None))


if __name__ == "__main__":
    unittest.main()
