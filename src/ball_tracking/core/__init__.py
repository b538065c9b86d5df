"""
Core tracking components.

Camera, overlay, and the live runner depend on OpenCV and are imported
from their modules directly (core.runner, core.overlay, core.camera).
"""

from .detection_filter import DetectionFilter, detect_ball
from .session import TrackingSession
from .ticker import FrameTicker
from .trail import TrailBuffer
from .zones import ZoneMapper, contains, normalize

__all__ = [
    "DetectionFilter",
    "FrameTicker",
    "TrackingSession",
    "TrailBuffer",
    "ZoneMapper",
    "contains",
    "detect_ball",
    "normalize",
]
