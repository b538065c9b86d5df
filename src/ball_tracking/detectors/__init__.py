"""
Detection backends implementing the Detector protocol.

YoloDetector lives in detectors.yolo and is imported lazily, since it
pulls in torch and ultralytics.
"""

from .replay import Replay, ReplayDetector, ReplayFrame, load_replay, parse_replay

__all__ = [
    "Replay",
    "ReplayDetector",
    "ReplayFrame",
    "load_replay",
    "parse_replay",
]
