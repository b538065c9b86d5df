"""
Replay Detector - plays back recorded detection frames.

Replay files are JSON, either a bare list of frames or an object:

    {
      "source": {"width": 300, "height": 300},
      "frames": [
        {"timestamp": 0, "detections": [{"class": "sports ball", "score": 0.9,
                                         "bbox": [140, 230, 20, 20]}]},
        {"timestamp": 33, "detections": []}
      ]
    }

Frames without a timestamp are spaced at the camera frame interval.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..models import Detection, parse_detections
from ..utils.constants import DEFAULT_CAMERA_FPS

logger = logging.getLogger(__name__)


@dataclass
class ReplayFrame:
    """One recorded frame."""

    timestamp: int
    detections: list[Detection] = field(default_factory=list)


@dataclass
class Replay:
    """A recorded detection session."""

    frames: list[ReplayFrame]
    source_dims: tuple[int, int] | None = None


def parse_replay(data: Any, fps: float = DEFAULT_CAMERA_FPS) -> Replay:
    """
    Parse replay data (already decoded from JSON).

    Malformed detections are skipped; a malformed frame list is an error.

    Raises:
        ValueError: If the frame list or source size is unusable
    """
    source_dims = None
    if isinstance(data, dict):
        source = data.get("source")
        if source:
            try:
                source_dims = (int(source["width"]), int(source["height"]))
            except (KeyError, TypeError, ValueError) as e:
                raise ValueError(f"Invalid replay source size: {source!r}") from e
            if source_dims[0] <= 0 or source_dims[1] <= 0:
                raise ValueError(f"Replay source size must be positive, got {source_dims}")
        raw_frames = data.get("frames")
    else:
        raw_frames = data

    if not isinstance(raw_frames, list):
        raise ValueError("Replay must contain a list of frames")

    interval_ms = 1000.0 / fps
    frames = []
    last_timestamp = None
    for i, raw in enumerate(raw_frames):
        if isinstance(raw, list):
            raw = {"detections": raw}
        elif not isinstance(raw, dict):
            raise ValueError(f"Replay frame {i} must be an object or a list of detections")

        timestamp = raw.get("timestamp")
        if timestamp is None:
            timestamp = round(i * interval_ms)
        try:
            timestamp = int(timestamp)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Replay frame {i} has an invalid timestamp: {timestamp!r}") from e

        if last_timestamp is not None and timestamp < last_timestamp:
            raise ValueError(
                f"Replay frame {i} timestamp {timestamp} is earlier than {last_timestamp}"
            )
        last_timestamp = timestamp

        raw_detections = raw.get("detections")
        if raw_detections is not None and not isinstance(raw_detections, list):
            raise ValueError(f"Replay frame {i} detections must be a list")

        frames.append(
            ReplayFrame(
                timestamp=timestamp,
                detections=parse_detections(raw_detections),
            )
        )

    return Replay(frames=frames, source_dims=source_dims)


def load_replay(path: str | Path, fps: float = DEFAULT_CAMERA_FPS) -> Replay:
    """
    Load a replay file.

    Raises:
        FileNotFoundError: If the file does not exist
        json.JSONDecodeError: If the file is not valid JSON
        ValueError: If the content is not a valid replay
    """
    with open(path, encoding="utf-8") as f:
        data = json.load(f)

    replay = parse_replay(data, fps)
    logger.info(f"Loaded {len(replay.frames)} replay frames from {path}")
    return replay


class ReplayDetector:
    """Detector that returns recorded frames in order, then nothing."""

    def __init__(self, replay: Replay):
        self.replay = replay
        self._position = 0

    @property
    def exhausted(self) -> bool:
        return self._position >= len(self.replay.frames)

    def detect(self, _frame: Any = None) -> list[Detection]:
        """Next recorded frame's detections (empty once exhausted)."""
        if self.exhausted:
            return []
        frame = self.replay.frames[self._position]
        self._position += 1
        return list(frame.detections)
