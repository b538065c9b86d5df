"""
Ball Tracking System

Tracks a ball on a training mat from per-frame detections: keeps a fading
trail of recent positions and reports which circular mat zone holds the ball.

Package structure:
  core/       - Detection filter, trail buffer, zone mapper, session, ticker
  detectors/  - Detection backends (YOLO, recorded replays)
  config/     - Configuration loading and validation
  models/     - Data models and the Detector protocol
  utils/      - Constants
"""

__version__ = "0.3.0"

# Configuration
from .config import (
    ConfigPlan,
    ConfigValidationError,
    ValidationResult,
    build_plan,
    load_config_with_env,
    validate_config_full,
)

# Core tracking
from .core import (
    DetectionFilter,
    FrameTicker,
    TrackingSession,
    TrailBuffer,
    ZoneMapper,
    detect_ball,
)
from .models import (
    BoundingBox,
    Detection,
    Detector,
    FrameResult,
    MalformedDetectionError,
    Position,
    TrailPoint,
    Zone,
    ZoneMap,
)

__all__ = [
    "BoundingBox",
    "ConfigPlan",
    # Config
    "ConfigValidationError",
    "Detection",
    # Core
    "DetectionFilter",
    "Detector",
    "FrameResult",
    "FrameTicker",
    "MalformedDetectionError",
    # Models
    "Position",
    "TrackingSession",
    "TrailBuffer",
    "TrailPoint",
    "ValidationResult",
    "Zone",
    "ZoneMap",
    "ZoneMapper",
    "build_plan",
    "detect_ball",
    "load_config_with_env",
    "validate_config_full",
]
