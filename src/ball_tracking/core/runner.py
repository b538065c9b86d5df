"""
Ball Tracking - Live loop.

Reads camera frames at a fixed rate, runs the detector only on sampled
frames, and feeds results through the tracking session. Optionally shows
an annotated preview window with keyboard controls.
"""

import logging
import time
from collections import Counter
from dataclasses import dataclass, field

import cv2

from ..models import Detection, Detector
from .camera import initialize_camera
from .detection_filter import DetectionFilter, detect_ball
from .overlay import draw_overlay
from .session import TrackingSession
from .ticker import FrameTicker

logger = logging.getLogger(__name__)

PREVIEW_WINDOW = "Ball Tracking"

# Preview keyboard controls
KEY_TOGGLE_TRACKING = ord("t")
KEY_TOGGLE_CALIBRATION = ord("c")
KEY_RESET = ord("r")
KEY_QUIT = ord("q")


@dataclass
class RunStats:
    """Counters collected over a tracking run."""

    frames: int = 0
    detector_calls: int = 0
    detector_errors: int = 0
    positions: int = 0
    zone_entries: Counter = field(default_factory=Counter)
    start_time: float = field(default_factory=time.time)


def _now_ms() -> int:
    """Monotonic milliseconds, so trail timestamps never go backwards."""
    return int(time.monotonic() * 1000)


def handle_key(session: TrackingSession, key: int) -> bool:
    """
    Apply a preview keypress to the session.

    Returns:
        False if the key requests quitting, True otherwise
    """
    if key == KEY_QUIT:
        return False
    if key == KEY_TOGGLE_TRACKING:
        session.toggle_tracking()
    elif key == KEY_TOGGLE_CALIBRATION:
        calibrated = session.toggle_calibration()
        logger.info(f"Mat calibrated: {'yes' if calibrated else 'no'}")
    elif key == KEY_RESET:
        session.reset()
        logger.info("Trail reset")
    return True


def check_ball(config: dict, detector: Detector) -> Detection | None:
    """
    Grab one frame and look for the ball with the helper threshold.

    Used to check camera placement and lighting before a session.

    Returns:
        The detected ball, or None
    """
    cap = initialize_camera(config["camera"]["url"])
    try:
        ret, frame = cap.read()
    finally:
        cap.release()

    if not ret:
        raise RuntimeError("Failed to read a frame from the camera")

    return detect_ball(
        detector, frame, DetectionFilter.from_config(config, helper=True)
    )


def run_tracking(
    config: dict,
    detector: Detector,
    shutdown_event=None,
    duration_seconds: float | None = None,
    show_preview: bool | None = None,
) -> RunStats:
    """
    Main tracking loop.

    Args:
        config: Configuration dictionary (defaults filled)
        detector: Detection backend
        shutdown_event: Event to signal graceful shutdown
        duration_seconds: Stop after this many seconds (None = until stopped)
        show_preview: Show an annotated window (None = use config)

    Returns:
        RunStats for the run
    """
    if show_preview is None:
        show_preview = config["runtime"].get("show_preview", False)

    cap = None
    try:
        cap = initialize_camera(config["camera"]["url"])
        ret, first_frame = cap.read()
        if not ret:
            raise RuntimeError("Failed to read first frame from camera")

        session = TrackingSession.from_config(config)
        frame_height, frame_width = first_frame.shape[:2]
        session.set_source_dims(frame_width, frame_height)
        logger.info(
            f"Frame size {frame_width}x{frame_height}, display {session.display_dims[0]}x{session.display_dims[1]}"
        )

        return _tracking_loop(
            cap,
            detector,
            session,
            config,
            first_frame,
            shutdown_event,
            duration_seconds,
            show_preview,
        )

    except Exception as e:
        logger.error(f"Fatal error in tracking: {e}", exc_info=True)
        raise
    finally:
        if cap is not None:
            cap.release()
        if show_preview:
            cv2.destroyAllWindows()


def _tracking_loop(
    cap: cv2.VideoCapture,
    detector: Detector,
    session: TrackingSession,
    config: dict,
    first_frame,
    shutdown_event,
    duration_seconds: float | None,
    show_preview: bool,
) -> RunStats:
    """Drive the session from the camera with a fixed-rate ticker."""
    stats = RunStats()
    status_interval = config["runtime"].get("status_interval_frames", 100)
    ticker: FrameTicker | None = None

    def on_tick(_tick: int) -> None:
        nonlocal first_frame
        if first_frame is not None:
            frame, first_frame = first_frame, None
        else:
            ret, frame = cap.read()
            if not ret:
                logger.warning("Failed to read frame")
                ticker.stop()
                return

        stats.frames += 1
        now = _now_ms()

        detections = []
        if session.will_sample():
            stats.detector_calls += 1
            try:
                detections = detector.detect(frame)
            except Exception as e:
                # Failed detection counts as no detection for this frame
                stats.detector_errors += 1
                logger.error(f"Error processing frame: {e}", exc_info=True)

        previous_zone = session.current_zone
        result = session.process_frame(detections, now)

        if result.appended:
            stats.positions += 1
        if result.current_zone is not None and result.current_zone != previous_zone:
            stats.zone_entries[result.current_zone] += 1

        if show_preview:
            annotated = draw_overlay(
                frame, result, session.zone_mapper.zones, session.display_dims
            )
            cv2.imshow(PREVIEW_WINDOW, annotated)
            key = cv2.waitKey(1) & 0xFF
            if key != 0xFF and not handle_key(session, key):
                logger.info("Quit requested from preview")
                ticker.stop()

        if stats.frames % status_interval == 0:
            _log_status(stats, session)

        if (
            duration_seconds is not None
            and time.time() - stats.start_time >= duration_seconds
        ):
            logger.info("Duration reached")
            ticker.stop()

    ticker = FrameTicker.from_fps(
        config["camera"]["fps"], on_tick, shutdown_event=shutdown_event
    )

    logger.info("Tracking loop started")
    try:
        ticker.run()
    except KeyboardInterrupt:
        logger.info("Tracking stopped by user")
    finally:
        _log_final_stats(stats)

    return stats


def _log_status(stats: RunStats, session: TrackingSession) -> None:
    """Log periodic status."""
    elapsed = time.time() - stats.start_time
    fps = stats.frames / elapsed if elapsed > 0 else 0
    logger.info(
        f"[{elapsed / 60:.1f}min] Frame {stats.frames} | FPS: {fps:.1f} | "
        f"Trail: {len(session.trail)} | Zone: {session.current_zone or '-'}"
    )


def _log_final_stats(stats: RunStats) -> None:
    """Log final statistics."""
    elapsed = time.time() - stats.start_time

    logger.info("Tracking complete")
    logger.info(f"Runtime: {elapsed / 60:.1f} minutes")
    logger.info(f"Frames: {stats.frames}")
    logger.info(f"Detector calls: {stats.detector_calls} ({stats.detector_errors} errors)")
    logger.info(f"Positions: {stats.positions}")
    if stats.zone_entries:
        visits = ", ".join(
            f"{zone}: {count}" for zone, count in sorted(stats.zone_entries.items())
        )
        logger.info(f"Zone entries: {visits}")
