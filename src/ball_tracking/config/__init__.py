"""
Configuration loading, validation, and planning.

- validate_config_full: Comprehensive validation with errors/warnings
- build_plan: Show the resolved zone layout and tunables
- load_config_with_env: Fill defaults and apply environment variable overrides

Pydantic schemas available for type-safe validation:
- Config: Complete configuration schema
- validate_config_pydantic: Validate and parse config to Pydantic model
"""

from ..models import ConfigValidationError
from .geometry import build_zone_map, find_overlapping_zones, parse_zones
from .planner import (
    DEFAULT_SECTIONS,
    ConfigPlan,
    # Planning
    build_plan,
    # Config loading
    load_config_with_env,
    print_plan,
    # Display
    print_validation_result,
)
from .schemas import (
    Config,
    # Sub-schemas for type hints
    DetectionConfig,
    TrackingConfig,
    TrailConfig,
    ZoneConfig,
    validate_config_pydantic,
)
from .validator import (
    ValidationResult,
    validate_config_full,
)

__all__ = [
    "DEFAULT_SECTIONS",
    # Pydantic validation
    "Config",
    "ConfigPlan",
    # Exception
    "ConfigValidationError",
    "DetectionConfig",
    "TrackingConfig",
    "TrailConfig",
    "ValidationResult",
    "ZoneConfig",
    # Planning
    "build_plan",
    # Geometry
    "build_zone_map",
    "find_overlapping_zones",
    # Config loading
    "load_config_with_env",
    "parse_zones",
    "print_plan",
    # Display
    "print_validation_result",
    # Validation
    "validate_config_full",
    "validate_config_pydantic",
]
