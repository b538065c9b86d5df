"""
Utility modules for constants.
"""

from .constants import (
    DEFAULT_FADE_WINDOW_MS,
    DEFAULT_SAMPLE_EVERY_N,
    DEFAULT_TRAIL_CAPACITY,
    DEFAULT_ZONES,
    ENV_CAMERA_URL,
    ENV_MODEL_FILE,
)

__all__ = [
    "DEFAULT_FADE_WINDOW_MS",
    "DEFAULT_SAMPLE_EVERY_N",
    "DEFAULT_TRAIL_CAPACITY",
    "DEFAULT_ZONES",
    "ENV_CAMERA_URL",
    "ENV_MODEL_FILE",
]
