"""
Configuration Planner - validate and plan features.

Provides:
- load_config_with_env: Fill defaults and apply environment variable overrides
- plan: Show the resolved zone layout and tracking tunables
"""

import copy
import logging
import os
import sys
from dataclasses import dataclass
from typing import Any

from ..utils.constants import (
    DEFAULT_AUTO_CALIBRATE_FRAMES,
    DEFAULT_BALL_CLASSES,
    DEFAULT_CAMERA_FPS,
    DEFAULT_CONFIDENCE_THRESHOLD,
    DEFAULT_FADE_WINDOW_MS,
    DEFAULT_HELPER_CONFIDENCE_THRESHOLD,
    DEFAULT_MODEL_FILE,
    DEFAULT_SAMPLE_EVERY_N,
    DEFAULT_SOURCE_HEIGHT,
    DEFAULT_SOURCE_WIDTH,
    DEFAULT_TRAIL_CAPACITY,
    ENV_CAMERA_URL,
    ENV_MODEL_FILE,
    RESOLUTION_LAST_MATCH,
    SELECTION_FIRST_MATCH,
    STATUS_REPORT_INTERVAL,
)
from .geometry import find_overlapping_zones, parse_zones
from .validator import ValidationResult

logger = logging.getLogger(__name__)

DEFAULT_SECTIONS: dict[str, dict[str, Any]] = {
    "detection": {
        "model_file": DEFAULT_MODEL_FILE,
        "confidence_threshold": DEFAULT_CONFIDENCE_THRESHOLD,
        "helper_confidence_threshold": DEFAULT_HELPER_CONFIDENCE_THRESHOLD,
        "accepted_classes": list(DEFAULT_BALL_CLASSES),
        "selection": SELECTION_FIRST_MATCH,
    },
    "trail": {
        "capacity": DEFAULT_TRAIL_CAPACITY,
        "fade_window_ms": DEFAULT_FADE_WINDOW_MS,
    },
    "tracking": {
        "sample_every_n": DEFAULT_SAMPLE_EVERY_N,
        "zone_resolution": RESOLUTION_LAST_MATCH,
        "auto_calibrate_after_frames": DEFAULT_AUTO_CALIBRATE_FRAMES,
    },
    "source": {"width": DEFAULT_SOURCE_WIDTH, "height": DEFAULT_SOURCE_HEIGHT},
    "display": {"width": None, "height": None},
    "camera": {"url": 0, "fps": DEFAULT_CAMERA_FPS},
    "runtime": {
        "default_duration_hours": 1.0,
        "start_tracking": False,
        "show_preview": False,
        "status_interval_frames": STATUS_REPORT_INTERVAL,
    },
}


# ANSI color codes for terminal output
class Colors:
    GREEN = "\033[92m"
    RED = "\033[91m"
    YELLOW = "\033[93m"
    CYAN = "\033[96m"
    GRAY = "\033[90m"
    BOLD = "\033[1m"
    RESET = "\033[0m"

    @classmethod
    def disable(cls):
        """Disable colors for non-TTY output."""
        cls.GREEN = cls.RED = cls.YELLOW = ""
        cls.CYAN = cls.GRAY = cls.BOLD = cls.RESET = ""


# Disable colors if not a TTY
if not sys.stdout.isatty():
    Colors.disable()


@dataclass
class ConfigPlan:
    """Resolved tracking plan."""

    zones: list[dict[str, Any]]
    overlaps: list[tuple[int, int]]
    detection: dict[str, Any]
    trail: dict[str, Any]
    tracking: dict[str, Any]
    frame_dims: dict[str, Any]


def load_config_with_env(config: dict | None) -> dict:
    """
    Fill missing sections with defaults and apply environment overrides.

    Args:
        config: Base configuration dictionary (None = empty config)

    Returns:
        Configuration with defaults and environment variables applied
    """
    config = config or {}

    for section, defaults in DEFAULT_SECTIONS.items():
        current = config.get(section)
        if current is None:
            config[section] = copy.deepcopy(defaults)
        elif isinstance(current, dict):
            for key, value in defaults.items():
                current.setdefault(key, copy.deepcopy(value))

    # Override camera URL from environment if set
    if ENV_CAMERA_URL in os.environ and isinstance(config["camera"], dict):
        camera_url = os.environ[ENV_CAMERA_URL]
        logger.info(f"Using camera URL from environment: {ENV_CAMERA_URL}")
        config["camera"]["url"] = int(camera_url) if camera_url.isdigit() else camera_url

    if ENV_MODEL_FILE in os.environ and isinstance(config["detection"], dict):
        logger.info(f"Using model file from environment: {ENV_MODEL_FILE}")
        config["detection"]["model_file"] = os.environ[ENV_MODEL_FILE]

    return config


def build_plan(config: dict) -> ConfigPlan:
    """
    Build the tracking plan from a validated config.

    Args:
        config: Configuration dictionary (defaults already filled)

    Returns:
        ConfigPlan describing zones and tunables
    """
    zone_map = parse_zones(config)
    zones = [
        {
            "id": zone.id,
            "x": zone.center_x,
            "y": zone.center_y,
            "radius": zone.radius,
            "description": zone.description,
        }
        for zone in zone_map.values()
    ]

    return ConfigPlan(
        zones=zones,
        overlaps=find_overlapping_zones(zone_map),
        detection=dict(config.get("detection", {})),
        trail=dict(config.get("trail", {})),
        tracking=dict(config.get("tracking", {})),
        frame_dims={
            "source": dict(config.get("source", {})),
            "display": dict(config.get("display", {})),
        },
    )


def print_validation_result(result: ValidationResult) -> None:
    """Print validation result with colors."""
    print()
    if result.valid:
        print(f"{Colors.GREEN}{Colors.BOLD}Configuration valid{Colors.RESET}")
    else:
        print(f"{Colors.RED}{Colors.BOLD}Configuration invalid{Colors.RESET}")

    if result.errors:
        print(f"\n{Colors.RED}Errors:{Colors.RESET}")
        for error in result.errors:
            print(f"  {Colors.RED}x{Colors.RESET} {error}")

    if result.warnings:
        print(f"\n{Colors.YELLOW}Warnings:{Colors.RESET}")
        for warning in result.warnings:
            print(f"  {Colors.YELLOW}!{Colors.RESET} {warning}")

    zone_ids = result.derived.get("zone_ids")
    if zone_ids:
        print(f"\n{Colors.CYAN}Zones:{Colors.RESET} {', '.join(str(z) for z in zone_ids)}")
    print()


def print_plan(plan: ConfigPlan) -> None:
    """Print the tracking plan."""
    print()
    print(f"{Colors.BOLD}Tracking Plan{Colors.RESET}")
    print("=" * 60)

    detection = plan.detection
    print(f"\n{Colors.CYAN}Detection{Colors.RESET}")
    print(f"  Model: {detection.get('model_file')}")
    print(f"  Classes: {', '.join(detection.get('accepted_classes', []))}")
    print(
        f"  Threshold: > {detection.get('confidence_threshold')} "
        f"(helper > {detection.get('helper_confidence_threshold')})"
    )
    print(f"  Selection: {detection.get('selection')}")

    print(f"\n{Colors.CYAN}Trail{Colors.RESET}")
    print(f"  Capacity: {plan.trail.get('capacity')} positions")
    print(f"  Fade window: {plan.trail.get('fade_window_ms')} ms")

    tracking = plan.tracking
    print(f"\n{Colors.CYAN}Sampling{Colors.RESET}")
    print(f"  Every {tracking.get('sample_every_n')} frame(s)")
    auto_calibrate = tracking.get("auto_calibrate_after_frames")
    if auto_calibrate is None:
        print("  Auto calibration: off")
    else:
        print(f"  Auto calibration: after {auto_calibrate} frames")

    source = plan.frame_dims["source"]
    display = plan.frame_dims["display"]
    print(f"\n{Colors.CYAN}Frames{Colors.RESET}")
    print(f"  Detector: {source.get('width')}x{source.get('height')}")
    if display.get("width"):
        print(f"  Display: {display.get('width')}x{display.get('height')}")
    else:
        print("  Display: same as detector")

    print(f"\n{Colors.CYAN}Zones{Colors.RESET} ({tracking.get('zone_resolution')} resolution)")
    for zone in plan.zones:
        label = f" {Colors.GRAY}({zone['description']}){Colors.RESET}" if zone["description"] else ""
        print(
            f"  {zone['id']}: center=({zone['x']:.2f}, {zone['y']:.2f}) "
            f"r={zone['radius']:.3f}{label}"
        )

    if plan.overlaps:
        print(f"\n{Colors.YELLOW}Overlapping zones:{Colors.RESET}")
        for first, second in plan.overlaps:
            print(f"  {first} <-> {second}")

    print()
