"""
Detection data models - raw detector output for a single frame.
"""

import logging
import math
from dataclasses import dataclass
from typing import Any

from .errors import MalformedDetectionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BoundingBox:
    """
    Axis-aligned box in detector (source frame) coordinates.

    (x, y) is the top-left corner, matching the COCO-SSD bbox layout.
    """

    x: float
    y: float
    width: float
    height: float

    def is_valid(self) -> bool:
        """True if all values are finite numbers and the size is non-negative."""
        values = (self.x, self.y, self.width, self.height)
        if not all(
            isinstance(v, (int, float)) and not isinstance(v, bool) for v in values
        ):
            return False
        if not all(math.isfinite(v) for v in values):
            return False
        return self.width >= 0 and self.height >= 0

    @property
    def center(self) -> tuple[float, float]:
        return (self.x + self.width / 2, self.y + self.height / 2)


@dataclass(frozen=True)
class Detection:
    """
    One candidate object reported by the detector for a single frame.

    Attributes:
        class_name: Detector class label (e.g. 'sports ball')
        score: Confidence in [0, 1]
        bbox: Bounding box in detector coordinates
    """

    class_name: str
    score: float
    bbox: BoundingBox

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Detection":
        """
        Build a detection from a raw dict.

        Accepts the COCO-SSD shape ``{"class", "score", "bbox": [x, y, w, h]}``
        and the long form ``{"class_name", "score", "bbox": {"x", "y",
        "width", "height"}}``.

        Raises:
            MalformedDetectionError: If a field is missing or invalid
        """
        if not isinstance(data, dict):
            raise MalformedDetectionError(f"Detection must be a dict, got {type(data).__name__}")

        class_name = data.get("class_name", data.get("class"))
        if not isinstance(class_name, str) or not class_name:
            raise MalformedDetectionError("Detection is missing a class label")

        score = data.get("score")
        if isinstance(score, bool) or not isinstance(score, (int, float)):
            raise MalformedDetectionError(f"Detection '{class_name}' has no numeric score")

        raw_bbox = data.get("bbox")
        try:
            if isinstance(raw_bbox, dict):
                bbox = BoundingBox(
                    x=raw_bbox["x"],
                    y=raw_bbox["y"],
                    width=raw_bbox["width"],
                    height=raw_bbox["height"],
                )
            elif isinstance(raw_bbox, (list, tuple)) and len(raw_bbox) == 4:
                bbox = BoundingBox(*raw_bbox)
            else:
                raise MalformedDetectionError(
                    f"Detection '{class_name}' has no usable bbox: {raw_bbox!r}"
                )
        except KeyError as e:
            raise MalformedDetectionError(
                f"Detection '{class_name}' bbox is missing {e}"
            ) from e

        if not bbox.is_valid():
            raise MalformedDetectionError(
                f"Detection '{class_name}' has an invalid bbox: {raw_bbox!r}"
            )

        return cls(class_name=class_name, score=float(score), bbox=bbox)

    def to_dict(self) -> dict[str, Any]:
        """Serialize in the COCO-SSD shape."""
        return {
            "class": self.class_name,
            "score": self.score,
            "bbox": [self.bbox.x, self.bbox.y, self.bbox.width, self.bbox.height],
        }


def parse_detections(raw_detections: list | None) -> list[Detection]:
    """
    Parse a frame's raw detections, skipping malformed entries.

    Args:
        raw_detections: List of raw detection dicts (None means no detector output)

    Returns:
        List of well-formed Detection objects, in input order
    """
    detections = []
    for i, raw in enumerate(raw_detections or []):
        try:
            detections.append(Detection.from_dict(raw))
        except MalformedDetectionError as e:
            logger.debug(f"Skipping detection {i}: {e}")
    return detections
