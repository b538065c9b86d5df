"""
Detection Filter - Reduces a frame's detections to at most one ball.

Selection is first-match by default: the first detection with an accepted
label and a score above the threshold wins, even if a later one scores
higher. 'best_score' picks the highest-scoring qualifying detection instead.
"""

import logging
from collections.abc import Iterable, Sequence
from typing import Any

from ..models import Detection, Detector
from ..utils.constants import (
    DEFAULT_BALL_CLASSES,
    DEFAULT_CONFIDENCE_THRESHOLD,
    DEFAULT_HELPER_CONFIDENCE_THRESHOLD,
    SELECTION_BEST_SCORE,
    SELECTION_FIRST_MATCH,
    SELECTION_POLICIES,
)

logger = logging.getLogger(__name__)


class DetectionFilter:
    """Selects the ball candidate from one frame's detections."""

    def __init__(
        self,
        confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD,
        accepted_classes: Iterable[str] = DEFAULT_BALL_CLASSES,
        selection: str = SELECTION_FIRST_MATCH,
    ):
        """
        Args:
            confidence_threshold: Scores must be strictly greater than this
            accepted_classes: Class labels that count as a ball
            selection: 'first_match' or 'best_score'
        """
        if not 0.0 <= confidence_threshold <= 1.0:
            raise ValueError(
                f"confidence_threshold must be between 0.0 and 1.0, got {confidence_threshold}"
            )
        if selection not in SELECTION_POLICIES:
            raise ValueError(
                f"selection must be one of {SELECTION_POLICIES}, got '{selection}'"
            )

        self.confidence_threshold = confidence_threshold
        self.accepted_classes = frozenset(accepted_classes)
        self.selection = selection

    def _qualifies(self, detection: Any) -> bool:
        if not isinstance(detection, Detection):
            logger.debug(f"Skipping non-detection input: {detection!r}")
            return False
        if not detection.bbox.is_valid():
            logger.debug(f"Skipping detection with malformed bbox: {detection.bbox}")
            return False
        return (
            detection.class_name in self.accepted_classes
            and detection.score > self.confidence_threshold
        )

    def select(self, detections: Sequence[Detection] | None) -> Detection | None:
        """
        Pick the ball detection for this frame.

        Args:
            detections: Frame detections in detector order (None = detector unavailable)

        Returns:
            The selected detection, or None if nothing qualifies
        """
        best = None
        for detection in detections or ():
            if not self._qualifies(detection):
                continue
            if self.selection == SELECTION_FIRST_MATCH:
                return detection
            # Strict comparison keeps the earlier detection on equal scores
            if best is None or detection.score > best.score:
                best = detection
        return best

    def locate(
        self, detections: Sequence[Detection] | None
    ) -> tuple[float, float] | None:
        """Center of the selected detection in detector coordinates, or None."""
        detection = self.select(detections)
        if detection is None:
            return None
        return detection.bbox.center

    @classmethod
    def from_config(cls, config: dict, helper: bool = False) -> "DetectionFilter":
        """
        Build a filter from the 'detection' config section.

        Args:
            config: Full config dict
            helper: Use the helper threshold instead of the tracking threshold
        """
        detection = config.get("detection", {})
        if helper:
            threshold = detection.get(
                "helper_confidence_threshold", DEFAULT_HELPER_CONFIDENCE_THRESHOLD
            )
        else:
            threshold = detection.get(
                "confidence_threshold", DEFAULT_CONFIDENCE_THRESHOLD
            )
        return cls(
            confidence_threshold=threshold,
            accepted_classes=detection.get("accepted_classes", DEFAULT_BALL_CLASSES),
            selection=detection.get("selection", SELECTION_FIRST_MATCH),
        )


def detect_ball(
    detector: Detector | None,
    frame: Any,
    detection_filter: DetectionFilter | None = None,
) -> Detection | None:
    """
    Run a detector on one frame and return the ball detection.

    Detector failures are logged and reported as no detection.

    Args:
        detector: Detection backend (None = not loaded yet)
        frame: Frame to run detection on
        detection_filter: Filter to apply (defaults to the 0.70 helper threshold)

    Returns:
        The selected ball detection, or None
    """
    if detector is None or frame is None:
        return None

    if detection_filter is None:
        detection_filter = DetectionFilter(
            confidence_threshold=DEFAULT_HELPER_CONFIDENCE_THRESHOLD
        )

    try:
        detections = detector.detect(frame)
    except Exception as e:
        logger.error(f"Error detecting ball: {e}", exc_info=True)
        return None

    return detection_filter.select(detections)


__all__ = [
    "SELECTION_BEST_SCORE",
    "SELECTION_FIRST_MATCH",
    "DetectionFilter",
    "detect_ball",
]
