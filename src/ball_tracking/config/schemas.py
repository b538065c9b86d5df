"""
Pydantic schemas for configuration validation.

Provides type-safe, declarative validation with clear error messages.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

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
    DEFAULT_ZONES,
    STATUS_REPORT_INTERVAL,
)


class StrictModel(BaseModel):
    """Base model that rejects unknown fields."""

    model_config = ConfigDict(extra="forbid")


class DetectionConfig(StrictModel):
    """Detection settings."""

    model_file: str = Field(default=DEFAULT_MODEL_FILE, description="YOLO model file path (.pt)")
    confidence_threshold: float = Field(
        default=DEFAULT_CONFIDENCE_THRESHOLD,
        ge=0.0,
        le=1.0,
        description="Score a ball must exceed to be tracked",
    )
    helper_confidence_threshold: float = Field(
        default=DEFAULT_HELPER_CONFIDENCE_THRESHOLD, ge=0.0, le=1.0
    )
    accepted_classes: list[str] = Field(
        default_factory=lambda: list(DEFAULT_BALL_CLASSES), min_length=1
    )
    selection: Literal["first_match", "best_score"] = "first_match"

    @field_validator("model_file")
    @classmethod
    def validate_model_file(cls, v: str) -> str:
        if not v.endswith(".pt"):
            raise ValueError("Model file must be .pt format")
        return v


class TrailConfig(StrictModel):
    """Trail buffer settings."""

    capacity: int = Field(default=DEFAULT_TRAIL_CAPACITY, ge=1)
    fade_window_ms: float = Field(default=DEFAULT_FADE_WINDOW_MS, gt=0)


class TrackingConfig(StrictModel):
    """Frame sampling and zone resolution."""

    sample_every_n: int = Field(default=DEFAULT_SAMPLE_EVERY_N, ge=1)
    zone_resolution: Literal["last_match", "nearest"] = "last_match"
    auto_calibrate_after_frames: int | None = Field(
        default=DEFAULT_AUTO_CALIBRATE_FRAMES, ge=0
    )


class ZoneConfig(StrictModel):
    """Circular mat zone, as fractions of the frame."""

    id: int
    x: float = Field(..., ge=0, le=1)
    y: float = Field(..., ge=0, le=1)
    radius: float = Field(..., gt=0, le=1)
    description: str = ""


class DimensionsConfig(StrictModel):
    """Frame size in pixels."""

    width: int | None = Field(default=None, gt=0)
    height: int | None = Field(default=None, gt=0)

    @model_validator(mode="after")
    def validate_pair(self):
        if (self.width is None) != (self.height is None):
            raise ValueError("width and height must be set together")
        return self


class CameraConfig(StrictModel):
    """Camera configuration."""

    url: int | str = 0
    fps: float = Field(default=DEFAULT_CAMERA_FPS, gt=0)


class RuntimeConfig(StrictModel):
    """Runtime configuration."""

    default_duration_hours: float = Field(default=1.0, gt=0)
    start_tracking: bool = False
    show_preview: bool = False
    status_interval_frames: int = Field(default=STATUS_REPORT_INTERVAL, gt=0)


class Config(StrictModel):
    """Complete configuration schema."""

    detection: DetectionConfig = Field(default_factory=DetectionConfig)
    trail: TrailConfig = Field(default_factory=TrailConfig)
    tracking: TrackingConfig = Field(default_factory=TrackingConfig)
    zones: list[ZoneConfig] = Field(
        default_factory=lambda: [ZoneConfig(**zone) for zone in DEFAULT_ZONES]
    )
    source: DimensionsConfig = Field(
        default_factory=lambda: DimensionsConfig(
            width=DEFAULT_SOURCE_WIDTH, height=DEFAULT_SOURCE_HEIGHT
        )
    )
    display: DimensionsConfig = Field(default_factory=DimensionsConfig)
    camera: CameraConfig = Field(default_factory=CameraConfig)
    runtime: RuntimeConfig = Field(default_factory=RuntimeConfig)

    @model_validator(mode="after")
    def validate_zones(self):
        """Zone ids must be present and unique."""
        if not self.zones:
            raise ValueError("At least one zone is required")
        seen = set()
        for zone in self.zones:
            if zone.id in seen:
                raise ValueError(f"Duplicate zone id: {zone.id}")
            seen.add(zone.id)
        return self


def validate_config_pydantic(config: dict) -> Config:
    """
    Validate configuration using Pydantic.

    Args:
        config: Raw configuration dictionary

    Returns:
        Validated Config object

    Raises:
        pydantic.ValidationError: If validation fails
    """
    return Config(**config)
