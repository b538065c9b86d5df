"""
Tracking data models - trail positions, zones, and per-frame results.
"""

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from .errors import ConfigValidationError


@dataclass(frozen=True)
class Position:
    """
    A ball position on the trail.

    Attributes:
        x: Horizontal position in display pixels
        y: Vertical position in display pixels
        timestamp: Milliseconds since an arbitrary epoch
    """

    x: float
    y: float
    timestamp: int


@dataclass(frozen=True)
class TrailPoint:
    """A trail position with its decay value (0 = fresh, 1 = fully faded)."""

    x: float
    y: float
    opacity: float


@dataclass(frozen=True)
class Zone:
    """
    Circular mat zone. Center and radius are fractions (0-1) of the
    frame's width/height.
    """

    id: int
    center_x: float
    center_y: float
    radius: float
    description: str = ""


class ZoneMap(Mapping):
    """
    Immutable mapping of zone id -> Zone, iterated in ascending id order.

    Raises:
        ConfigValidationError: If no zones are given or an id repeats
    """

    def __init__(self, zones: Iterable[Zone]):
        by_id: dict[int, Zone] = {}
        for zone in zones:
            if zone.id in by_id:
                raise ConfigValidationError(f"Duplicate zone id: {zone.id}")
            by_id[zone.id] = zone

        if not by_id:
            raise ConfigValidationError("Zone map must contain at least one zone")

        self._zones = {zone_id: by_id[zone_id] for zone_id in sorted(by_id)}

    def __getitem__(self, zone_id: int) -> Zone:
        return self._zones[zone_id]

    def __iter__(self) -> Iterator[int]:
        return iter(self._zones)

    def __len__(self) -> int:
        return len(self._zones)

    def __repr__(self) -> str:
        return f"ZoneMap({list(self._zones.values())!r})"


@dataclass(frozen=True)
class FrameResult:
    """
    Outcome of processing one frame, consumed by the rendering layer.

    Attributes:
        frame_index: Zero-based index of this frame in the session
        sampled: Whether this frame went through detection filtering
        appended: Whether a new position was added to the trail
        current_zone: Zone id containing the latest position, or None
        trail: Trail snapshot, oldest first
        ball_detected: True if the latest position is recent
        is_tracking: Tracking flag in effect for this frame
        is_calibrated: Mat calibration flag after this frame
    """

    frame_index: int
    sampled: bool
    appended: bool
    current_zone: int | None
    trail: list[TrailPoint] = field(default_factory=list)
    ball_detected: bool = False
    is_tracking: bool = False
    is_calibrated: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "frame_index": self.frame_index,
            "sampled": self.sampled,
            "appended": self.appended,
            "current_zone": self.current_zone,
            "trail": [
                {"x": p.x, "y": p.y, "opacity": p.opacity} for p in self.trail
            ],
            "ball_detected": self.ball_detected,
            "is_tracking": self.is_tracking,
            "is_calibrated": self.is_calibrated,
        }
