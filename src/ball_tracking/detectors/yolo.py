"""
YOLO Detector - ultralytics backend for the Detector protocol.
"""

import logging

import numpy as np
import torch
from ultralytics import YOLO

from ..models import BoundingBox, Detection
from ..utils.constants import DEFAULT_BALL_CLASSES, DEFAULT_CONFIDENCE_THRESHOLD

logger = logging.getLogger(__name__)


class YoloDetector:
    """Runs a YOLO model on BGR frames and reports ball candidates."""

    def __init__(
        self,
        model_file: str,
        confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD,
        accepted_classes=DEFAULT_BALL_CLASSES,
        device: str | None = None,
    ):
        """
        Args:
            model_file: YOLO model file path (.pt)
            confidence_threshold: Minimum score passed to the model
            accepted_classes: Class names to keep (others are dropped by the model)
            device: Torch device; defaults to CUDA when available
        """
        self.device = device or ("cuda" if torch.cuda.is_available() else "cpu")
        self.confidence_threshold = confidence_threshold

        self.model = YOLO(model_file)
        self.model.to(self.device)
        self.class_names: dict[int, str] = dict(self.model.names)

        accepted = set(accepted_classes)
        self.class_ids = sorted(
            class_id for class_id, name in self.class_names.items() if name in accepted
        )

        logger.info(f"Model initialized: {model_file}")
        logger.info(f"Device: {self.device}")
        if self.device == "cuda":
            logger.info(f"GPU: {torch.cuda.get_device_name(0)}")
        else:
            logger.warning("Running on CPU - performance will be slow")

        if not self.class_ids:
            logger.warning(
                f"None of {sorted(accepted)} are model classes - reporting all detections"
            )

    @classmethod
    def from_config(cls, config: dict) -> "YoloDetector":
        detection = config["detection"]
        return cls(
            model_file=detection["model_file"],
            confidence_threshold=detection.get(
                "confidence_threshold", DEFAULT_CONFIDENCE_THRESHOLD
            ),
            accepted_classes=detection.get("accepted_classes", DEFAULT_BALL_CLASSES),
        )

    def detect(self, frame: np.ndarray) -> list[Detection]:
        """Run inference on one frame and convert boxes to detections."""
        results = self.model.predict(
            source=frame,
            conf=self.confidence_threshold,
            classes=self.class_ids or None,
            device=self.device,
            verbose=False,
        )

        boxes = results[0].boxes
        if boxes is None or len(boxes) == 0:
            return []

        xyxy = boxes.xyxy.cpu().numpy()
        scores = boxes.conf.cpu().tolist()
        classes = boxes.cls.int().cpu().tolist()

        detections = []
        for (x1, y1, x2, y2), score, class_id in zip(xyxy, scores, classes):
            detections.append(
                Detection(
                    class_name=self.class_names.get(class_id, str(class_id)),
                    score=float(score),
                    bbox=BoundingBox(
                        x=float(x1),
                        y=float(y1),
                        width=float(x2 - x1),
                        height=float(y2 - y1),
                    ),
                )
            )
        return detections
