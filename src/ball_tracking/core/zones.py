"""
Zone Mapper - Finds the mat zone containing a ball position.

Zones are circles in normalized (0-1) frame space, checked in ascending
id order. With 'last_match' resolution, a later containing zone replaces
an earlier one, so overlaps resolve to the highest id. 'nearest' picks
the zone whose center is closest, ties going to the later zone.
"""

import math

from ..models import Position, Zone, ZoneMap
from ..utils.constants import (
    RESOLUTION_LAST_MATCH,
    RESOLUTION_NEAREST,
    ZONE_RESOLUTIONS,
)


def zone_distance(zone: Zone, x: float, y: float) -> float:
    """Euclidean distance from a normalized point to the zone center."""
    return math.hypot(x - zone.center_x, y - zone.center_y)


def contains(zone: Zone, x: float, y: float) -> bool:
    """True if the normalized point lies strictly inside the zone."""
    return zone_distance(zone, x, y) < zone.radius


def normalize(
    position: Position, frame_dims: tuple[float, float]
) -> tuple[float, float]:
    """
    Convert display-pixel coordinates to fractions of the frame.

    Args:
        position: Position in display pixels
        frame_dims: (width, height) of the display frame
    """
    width, height = frame_dims
    if width <= 0 or height <= 0:
        raise ValueError(f"Frame dimensions must be positive, got {frame_dims}")
    return position.x / width, position.y / height


class ZoneMapper:
    """Maps normalized positions onto a static ZoneMap."""

    def __init__(self, zones: ZoneMap, resolution: str = RESOLUTION_LAST_MATCH):
        if resolution not in ZONE_RESOLUTIONS:
            raise ValueError(
                f"resolution must be one of {ZONE_RESOLUTIONS}, got '{resolution}'"
            )
        self.zones = zones
        self.resolution = resolution

    def zone_at(self, x: float, y: float) -> int | None:
        """
        Zone id containing the normalized point (x, y), or None.
        """
        matched: int | None = None
        matched_distance = math.inf

        for zone_id, zone in self.zones.items():
            distance = zone_distance(zone, x, y)
            if distance >= zone.radius:
                continue

            if self.resolution == RESOLUTION_NEAREST:
                if distance <= matched_distance:
                    matched = zone_id
                    matched_distance = distance
            else:
                matched = zone_id

        return matched

    def locate(
        self, position: Position | None, frame_dims: tuple[float, float]
    ) -> int | None:
        """Zone id for a display-pixel position, or None."""
        if position is None:
            return None
        x, y = normalize(position, frame_dims)
        return self.zone_at(x, y)


__all__ = [
    "RESOLUTION_LAST_MATCH",
    "RESOLUTION_NEAREST",
    "ZoneMapper",
    "contains",
    "normalize",
    "zone_distance",
]
