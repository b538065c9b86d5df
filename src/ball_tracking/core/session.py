"""
Tracking Session - Per-frame pipeline tying filter, trail, and zones together.

Holds all per-session state explicitly (frame counter, tracking and
calibration flags) so the frame loop has no shared globals. Not thread-safe:
frames must be processed one at a time.
"""

import logging
from collections.abc import Sequence

from ..config.geometry import build_zone_map, parse_zones
from ..models import Detection, FrameResult, Position
from ..utils.constants import (
    BALL_VISIBLE_WINDOW_MS,
    DEFAULT_AUTO_CALIBRATE_FRAMES,
    DEFAULT_FADE_WINDOW_MS,
    DEFAULT_SAMPLE_EVERY_N,
    DEFAULT_SOURCE_HEIGHT,
    DEFAULT_SOURCE_WIDTH,
    DEFAULT_TRAIL_CAPACITY,
    DEFAULT_ZONES,
    RESOLUTION_LAST_MATCH,
)
from .detection_filter import DetectionFilter
from .trail import TrailBuffer
from .zones import ZoneMapper

logger = logging.getLogger(__name__)


class TrackingSession:
    """
    Single-ball tracking session.

    Detections arrive in detector (source) coordinates, are scaled to
    display coordinates for the trail, and normalized by the display size
    for zone lookup.
    """

    def __init__(
        self,
        zone_mapper: ZoneMapper | None = None,
        trail: TrailBuffer | None = None,
        detection_filter: DetectionFilter | None = None,
        sample_every_n: int = DEFAULT_SAMPLE_EVERY_N,
        source_dims: tuple[int, int] = (DEFAULT_SOURCE_WIDTH, DEFAULT_SOURCE_HEIGHT),
        display_dims: tuple[int, int] | None = None,
        auto_calibrate_after_frames: int | None = DEFAULT_AUTO_CALIBRATE_FRAMES,
        is_tracking: bool = False,
        is_calibrated: bool = False,
    ):
        if sample_every_n < 1:
            raise ValueError(f"sample_every_n must be at least 1, got {sample_every_n}")

        self.zone_mapper = zone_mapper or ZoneMapper(build_zone_map(DEFAULT_ZONES))
        self.trail = trail or TrailBuffer()
        self.detection_filter = detection_filter or DetectionFilter()
        self.sample_every_n = sample_every_n
        self.auto_calibrate_after_frames = auto_calibrate_after_frames

        self.source_dims = source_dims
        self._display_dims = display_dims

        self.frame_count = 0
        self.is_tracking = is_tracking
        self.is_calibrated = is_calibrated
        self.current_zone: int | None = None

    @classmethod
    def from_config(cls, config: dict) -> "TrackingSession":
        """Build a session from a (defaults-filled) config dict."""
        trail_cfg = config.get("trail", {})
        tracking_cfg = config.get("tracking", {})
        source_cfg = config.get("source", {})
        display_cfg = config.get("display", {})
        runtime_cfg = config.get("runtime", {})

        display_dims = None
        if display_cfg.get("width") and display_cfg.get("height"):
            display_dims = (display_cfg["width"], display_cfg["height"])

        return cls(
            zone_mapper=ZoneMapper(
                parse_zones(config),
                resolution=tracking_cfg.get("zone_resolution", RESOLUTION_LAST_MATCH),
            ),
            trail=TrailBuffer(
                capacity=trail_cfg.get("capacity", DEFAULT_TRAIL_CAPACITY),
                fade_window_ms=trail_cfg.get("fade_window_ms", DEFAULT_FADE_WINDOW_MS),
            ),
            detection_filter=DetectionFilter.from_config(config),
            sample_every_n=tracking_cfg.get("sample_every_n", DEFAULT_SAMPLE_EVERY_N),
            source_dims=(
                source_cfg.get("width", DEFAULT_SOURCE_WIDTH),
                source_cfg.get("height", DEFAULT_SOURCE_HEIGHT),
            ),
            display_dims=display_dims,
            auto_calibrate_after_frames=tracking_cfg.get(
                "auto_calibrate_after_frames", DEFAULT_AUTO_CALIBRATE_FRAMES
            ),
            is_tracking=runtime_cfg.get("start_tracking", False),
        )

    @property
    def display_dims(self) -> tuple[int, int]:
        """Display size; falls back to the source size when not configured."""
        return self._display_dims or self.source_dims

    def set_source_dims(self, width: int, height: int) -> None:
        """Record the detector's frame size (taken from the first camera frame)."""
        if width <= 0 or height <= 0:
            raise ValueError(f"Source dimensions must be positive, got {(width, height)}")
        self.source_dims = (width, height)

    def will_sample(self, tracking_enabled: bool | None = None) -> bool:
        """
        True if the next processed frame will run detection filtering.

        Args:
            tracking_enabled: Same override that will be passed to process_frame
        """
        tracking = self.is_tracking if tracking_enabled is None else tracking_enabled
        return tracking and self.frame_count % self.sample_every_n == 0

    def process_frame(
        self,
        detections: Sequence[Detection] | None,
        now: int,
        tracking_enabled: bool | None = None,
    ) -> FrameResult:
        """
        Process one frame's detections.

        Args:
            detections: Frame detections in detector coordinates (None = no detector output)
            now: Current time in milliseconds, non-decreasing across calls
            tracking_enabled: Override for the session's tracking flag

        Returns:
            FrameResult with trail snapshot and current zone

        Raises:
            ValueError: If `now` is earlier than the latest trail timestamp
        """
        latest = self.trail.most_recent()
        if latest is not None and now < latest.timestamp:
            raise ValueError(
                f"Frame time {now} is earlier than last trail timestamp {latest.timestamp}"
            )

        index = self.frame_count
        self.frame_count += 1
        sampled = index % self.sample_every_n == 0
        tracking = self.is_tracking if tracking_enabled is None else tracking_enabled

        if (
            self.auto_calibrate_after_frames is not None
            and index == self.auto_calibrate_after_frames
            and not self.is_calibrated
        ):
            logger.info(f"Mat marked calibrated after {index} frames")
            self.is_calibrated = True

        appended = False
        if tracking and sampled:
            center = self.detection_filter.locate(detections)
            if center is not None:
                self.trail.append(self._to_display(center, now))
                appended = True

        self._update_zone()

        return FrameResult(
            frame_index=index,
            sampled=sampled,
            appended=appended,
            current_zone=self.current_zone,
            trail=list(self.trail.snapshot(now)),
            ball_detected=self.trail.is_recent(now, BALL_VISIBLE_WINDOW_MS),
            is_tracking=tracking,
            is_calibrated=self.is_calibrated,
        )

    def _to_display(self, center: tuple[float, float], now: int) -> Position:
        """Scale a detector-space center to display pixels."""
        center_x, center_y = center
        source_w, source_h = self.source_dims
        display_w, display_h = self.display_dims
        return Position(
            x=center_x / source_w * display_w,
            y=center_y / source_h * display_h,
            timestamp=now,
        )

    def _update_zone(self) -> None:
        zone = self.zone_mapper.locate(self.trail.most_recent(), self.display_dims)
        if zone != self.current_zone:
            if zone is None:
                logger.info(f"Ball left zone {self.current_zone}")
            else:
                logger.info(f"Ball in zone: {zone}")
            self.current_zone = zone

    def reset(self) -> None:
        """Clear the trail and current zone."""
        self.trail.clear()
        self.current_zone = None

    def set_tracking_enabled(self, enabled: bool) -> None:
        """Enable/disable tracking. Enabling starts a fresh trail."""
        if enabled and not self.is_tracking:
            self.reset()
        self.is_tracking = enabled
        logger.info(f"Tracking {'started' if enabled else 'stopped'}")

    def toggle_tracking(self) -> bool:
        self.set_tracking_enabled(not self.is_tracking)
        return self.is_tracking

    def set_calibrated(self, calibrated: bool) -> None:
        self.is_calibrated = calibrated

    def toggle_calibration(self) -> bool:
        self.is_calibrated = not self.is_calibrated
        return self.is_calibrated
