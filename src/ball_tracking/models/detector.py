"""
Detector Protocol - Common interface for all detection backends.

Any model (YOLO, COCO-SSD via a bridge, recorded replays) can implement
this protocol to feed the tracking session without touching the trail or
zone logic.
"""

from typing import Any, Protocol, runtime_checkable

from .detection import Detection


@runtime_checkable
class Detector(Protocol):
    """
    Protocol for detection backends.

    Example:
        detector: Detector = YoloDetector("yolo11n.pt")
        detections = detector.detect(frame)
        result = session.process_frame(detections, now)
    """

    def detect(self, frame: Any) -> list[Detection]:
        """
        Run detection on a single frame.

        Args:
            frame: Frame in whatever form the backend consumes (BGR array for YOLO)

        Returns:
            Detections for this frame, in detector order
        """
        ...
