"""
Video source opening - phone/USB camera, network stream, or recorded video file.
"""

import logging
import time
from pathlib import Path

import cv2

from ..utils.constants import CAMERA_RECONNECT_DELAY, MAX_CAMERA_RECONNECT_ATTEMPTS

logger = logging.getLogger(__name__)


def describe_source(source: int | str) -> str:
    """Human-readable label for a video source."""
    if isinstance(source, int):
        return f"camera device {source}"
    if "://" in source:
        return f"stream {source}"
    return f"video file {source}"


def initialize_camera(
    source: int | str,
    attempts: int = MAX_CAMERA_RECONNECT_ATTEMPTS + 1,
    retry_delay: float = CAMERA_RECONNECT_DELAY,
) -> cv2.VideoCapture:
    """
    Open a video source, retrying devices and streams.

    Video files are opened once: a missing or unreadable file will not
    appear by waiting.

    Args:
        source: Device index, stream URL, or video file path
        attempts: Total open attempts for devices and streams
        retry_delay: Seconds between attempts

    Returns:
        Opened OpenCV VideoCapture

    Raises:
        FileNotFoundError: If a video file path does not exist
        RuntimeError: If the source cannot be opened
    """
    label = describe_source(source)
    is_file = isinstance(source, str) and "://" not in source

    if is_file:
        if not Path(source).exists():
            raise FileNotFoundError(f"Video file not found: {source}")
        attempts = 1

    for attempt in range(1, attempts + 1):
        logger.info(f"Opening {label} (attempt {attempt}/{attempts})")
        cap = cv2.VideoCapture(source)

        if cap.isOpened():
            width = int(cap.get(cv2.CAP_PROP_FRAME_WIDTH))
            height = int(cap.get(cv2.CAP_PROP_FRAME_HEIGHT))
            logger.info(f"Opened {label}: {width}x{height}")
            return cap

        cap.release()
        if attempt < attempts:
            logger.warning(f"Could not open {label}, retrying in {retry_delay}s...")
            time.sleep(retry_delay)

    logger.error(f"Failed to open {label} after {attempts} attempt(s)")
    raise RuntimeError(f"Cannot open {label}")
