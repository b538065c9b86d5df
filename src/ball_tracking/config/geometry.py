"""
Geometry Configuration Parsing - Zone layout for the training mat.

Single source of truth for turning raw zone config into a ZoneMap.
Used by the tracking session, the planner and the overlay.
"""

from ..models import ConfigValidationError, Zone, ZoneMap
from ..utils.constants import DEFAULT_ZONES


def build_zone_map(raw_zones: list[dict]) -> ZoneMap:
    """
    Build a ZoneMap from raw zone dicts.

    Each zone has 'x', 'y', 'radius' (fractions of the frame) and optional
    'id' (defaults to its 1-based position) and 'description'.

    Raises:
        ConfigValidationError: If a zone is incomplete, ids repeat, or no zones are given
    """
    if not isinstance(raw_zones, list):
        raise ConfigValidationError("'zones' must be a list")

    zones = []
    for i, zone_config in enumerate(raw_zones, 1):
        if not isinstance(zone_config, dict):
            raise ConfigValidationError(f"zones[{i - 1}] must be a mapping")
        try:
            zones.append(
                Zone(
                    id=int(zone_config.get("id", i)),
                    center_x=float(zone_config["x"]),
                    center_y=float(zone_config["y"]),
                    radius=float(zone_config["radius"]),
                    description=zone_config.get("description", ""),
                )
            )
        except KeyError as e:
            raise ConfigValidationError(f"zones[{i - 1}] is missing {e}") from e
        except (TypeError, ValueError) as e:
            raise ConfigValidationError(f"zones[{i - 1}] is invalid: {e}") from e

    return ZoneMap(zones)


def parse_zones(config: dict) -> ZoneMap:
    """
    Parse the zone layout from a full config dict.

    Falls back to the default six-zone mat when 'zones' is absent; an
    explicitly empty list is an error.

    Args:
        config: Full configuration dictionary

    Returns:
        ZoneMap ordered by zone id
    """
    if "zones" not in config or config["zones"] is None:
        return build_zone_map(DEFAULT_ZONES)
    return build_zone_map(config["zones"])


def find_overlapping_zones(zones: ZoneMap) -> list[tuple[int, int]]:
    """
    Find zone pairs whose circles overlap in normalized space.

    Returns:
        List of (lower_id, higher_id) pairs
    """
    overlaps = []
    items = list(zones.values())
    for i, first in enumerate(items):
        for second in items[i + 1 :]:
            distance = (
                (first.center_x - second.center_x) ** 2
                + (first.center_y - second.center_y) ** 2
            ) ** 0.5
            if distance < first.radius + second.radius:
                overlaps.append((first.id, second.id))
    return overlaps


__all__ = [
    "build_zone_map",
    "find_overlapping_zones",
    "parse_zones",
]
