"""
Consolidated data models for ball tracking.

This package contains all core data structures used across the application.
"""

from .detection import BoundingBox, Detection, parse_detections
from .detector import Detector
from .errors import ConfigValidationError, MalformedDetectionError
from .tracking import FrameResult, Position, TrailPoint, Zone, ZoneMap

__all__ = [
    # Detection models
    "BoundingBox",
    # Errors
    "ConfigValidationError",
    "Detection",
    # Protocols
    "Detector",
    "FrameResult",
    "MalformedDetectionError",
    # Tracking models
    "Position",
    "TrailPoint",
    "Zone",
    "ZoneMap",
    "parse_detections",
]
