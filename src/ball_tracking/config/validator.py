"""
Configuration Validator - Validates config syntax and semantic correctness.

Provides comprehensive validation with detailed error messages.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..models import ConfigValidationError
from ..utils.constants import SELECTION_POLICIES, ZONE_RESOLUTIONS
from .geometry import build_zone_map, find_overlapping_zones

logger = logging.getLogger(__name__)

CONFIG_SECTIONS = ("detection", "trail", "tracking", "source", "display", "camera", "runtime")


@dataclass
class ValidationResult:
    """Result of config validation."""

    valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    derived: dict[str, Any] = field(default_factory=dict)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_config_full(config: dict) -> ValidationResult:
    """
    Comprehensive config validation with detailed error messages.

    All sections are optional; missing values fall back to defaults.

    Args:
        config: Configuration dictionary to validate

    Returns:
        ValidationResult with errors, warnings, and derived configuration.
    """
    result = ValidationResult(valid=True)

    if not isinstance(config, dict):
        result.errors.append("Configuration must be a mapping")
        result.valid = False
        return result

    invalid_sections = _validate_section_types(config, result)

    if "detection" not in invalid_sections:
        _validate_detection_settings(config, result)
    if "trail" not in invalid_sections:
        _validate_trail(config, result)
    if "tracking" not in invalid_sections:
        _validate_tracking(config, result)
    for section in ("source", "display"):
        if section not in invalid_sections:
            _validate_dimensions(config, section, result)
    if "camera" not in invalid_sections:
        _validate_camera(config, result)
    _validate_zones(config, result)

    if result.errors:
        result.valid = False

    return result


def _validate_section_types(config: dict, result: ValidationResult) -> set[str]:
    """Report sections that are present but not mappings."""
    invalid = set()
    for section in CONFIG_SECTIONS:
        value = config.get(section)
        if value is not None and not isinstance(value, dict):
            result.errors.append(f"'{section}' must be a mapping")
            invalid.add(section)
    return invalid


def _validate_detection_settings(config: dict, result: ValidationResult) -> None:
    """Validate detection configuration."""
    detection = config.get("detection") or {}

    model_file = detection.get("model_file")
    if model_file is not None:
        if not isinstance(model_file, str) or not model_file.endswith(".pt"):
            result.errors.append(f"Model file must be .pt format: {model_file}")
        elif not Path(model_file).exists():
            result.warnings.append(
                f"Model file not found: {model_file} (will be downloaded if valid)"
            )

    for key in ("confidence_threshold", "helper_confidence_threshold"):
        conf = detection.get(key)
        if conf is not None and (not _is_number(conf) or not 0.0 <= conf <= 1.0):
            result.errors.append(f"detection.{key} must be between 0.0 and 1.0")

    classes = detection.get("accepted_classes")
    if classes is not None:
        if (
            not isinstance(classes, list)
            or not classes
            or not all(isinstance(c, str) and c for c in classes)
        ):
            result.errors.append(
                "detection.accepted_classes must be a non-empty list of class names"
            )

    selection = detection.get("selection")
    if selection is not None and selection not in SELECTION_POLICIES:
        result.errors.append(
            f"detection.selection must be one of {', '.join(SELECTION_POLICIES)}"
        )


def _validate_trail(config: dict, result: ValidationResult) -> None:
    """Validate trail buffer settings."""
    trail = config.get("trail") or {}

    capacity = trail.get("capacity")
    if capacity is not None and (not _is_int(capacity) or capacity < 1):
        result.errors.append("trail.capacity must be a positive integer")

    fade = trail.get("fade_window_ms")
    if fade is not None and (not _is_number(fade) or fade <= 0):
        result.errors.append("trail.fade_window_ms must be positive")


def _validate_tracking(config: dict, result: ValidationResult) -> None:
    """Validate sampling and zone resolution settings."""
    tracking = config.get("tracking") or {}

    every_n = tracking.get("sample_every_n")
    if every_n is not None and (not _is_int(every_n) or every_n < 1):
        result.errors.append("tracking.sample_every_n must be a positive integer")

    resolution = tracking.get("zone_resolution")
    if resolution is not None and resolution not in ZONE_RESOLUTIONS:
        result.errors.append(
            f"tracking.zone_resolution must be one of {', '.join(ZONE_RESOLUTIONS)}"
        )

    auto_calibrate = tracking.get("auto_calibrate_after_frames")
    if auto_calibrate is not None and (
        not _is_int(auto_calibrate) or auto_calibrate < 0
    ):
        result.errors.append(
            "tracking.auto_calibrate_after_frames must be a non-negative integer or null"
        )


def _validate_dimensions(config: dict, section: str, result: ValidationResult) -> None:
    """Validate a width/height section."""
    dims = config.get(section) or {}
    width, height = dims.get("width"), dims.get("height")

    if (width is None) != (height is None):
        result.errors.append(f"{section}.width and {section}.height must be set together")
        return

    for key, value in (("width", width), ("height", height)):
        if value is not None and (not _is_int(value) or value <= 0):
            result.errors.append(f"{section}.{key} must be a positive integer")


def _validate_camera(config: dict, result: ValidationResult) -> None:
    """Validate camera settings."""
    camera = config.get("camera") or {}

    fps = camera.get("fps")
    if fps is not None and (not _is_number(fps) or fps <= 0):
        result.errors.append("camera.fps must be positive")


def _validate_zones(config: dict, result: ValidationResult) -> None:
    """Validate zone definitions and report overlaps."""
    if "zones" not in config or config["zones"] is None:
        result.derived["zone_ids"] = []
        result.warnings.append("No zones configured - using default mat layout")
        return

    zones = config["zones"]
    if not isinstance(zones, list):
        result.errors.append("'zones' must be a list")
        return

    if not zones:
        result.errors.append("At least one zone is required")
        return

    error_count = len(result.errors)
    ids = set()
    for i, zone in enumerate(zones):
        zone_ref = f"zones[{i}]"
        if not isinstance(zone, dict):
            result.errors.append(f"{zone_ref} must be a mapping")
            continue

        zone_id = zone.get("id", i + 1)
        if not _is_int(zone_id):
            result.errors.append(f"{zone_ref}.id must be an integer")
        elif zone_id in ids:
            result.errors.append(f"{zone_ref}: duplicate zone id {zone_id}")
        else:
            ids.add(zone_id)

        for coord in ("x", "y"):
            val = zone.get(coord)
            if val is None:
                result.errors.append(f"{zone_ref}.{coord} is required")
            elif not _is_number(val) or not 0 <= val <= 1:
                result.errors.append(f"{zone_ref}.{coord} must be 0-1")

        radius = zone.get("radius")
        if radius is None:
            result.errors.append(f"{zone_ref}.radius is required")
        elif not _is_number(radius) or not 0 < radius <= 1:
            result.errors.append(f"{zone_ref}.radius must be greater than 0 and at most 1")

    result.derived["zone_ids"] = sorted(ids)

    if len(result.errors) > error_count:
        return

    try:
        zone_map = build_zone_map(zones)
    except ConfigValidationError as e:
        result.errors.append(str(e))
        return

    for first, second in find_overlapping_zones(zone_map):
        result.warnings.append(
            f"Zones {first} and {second} overlap - "
            f"{_overlap_winner(config, first, second)}"
        )


def _overlap_winner(config: dict, first: int, second: int) -> str:
    tracking = config.get("tracking")
    if isinstance(tracking, dict) and tracking.get("zone_resolution") == "nearest":
        return "the nearer center wins inside the overlap"
    return f"zone {second} wins inside the overlap"
