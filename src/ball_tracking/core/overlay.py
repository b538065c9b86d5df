"""
Overlay rendering - draws the ball trail, mat zones, and status on a frame.
"""

import cv2
import numpy as np

from ..models import FrameResult, ZoneMap

# BGR colors
TRAIL_COLOR = (208, 224, 64)  # turquoise, matches the mat
BALL_OUTLINE_COLOR = (0, 69, 255)  # orange red
WHITE = (255, 255, 255)
BLACK = (0, 0, 0)

UNCALIBRATED_MESSAGE = "Place the phone camera over the training mat to begin"


def _to_frame(x: float, y: float, display_dims, frame_dims) -> tuple[int, int]:
    """Map display-pixel coordinates onto the frame being drawn."""
    display_w, display_h = display_dims
    frame_w, frame_h = frame_dims
    return int(round(x / display_w * frame_w)), int(round(y / display_h * frame_h))


def draw_trail(frame: np.ndarray, result: FrameResult, display_dims) -> None:
    """Draw the trail path, fading dots, and the current ball marker in place."""
    if not result.trail:
        return

    height, width = frame.shape[:2]
    points = [
        _to_frame(p.x, p.y, display_dims, (width, height)) for p in result.trail
    ]

    if len(points) >= 2:
        cv2.polylines(
            frame,
            [np.array(points, dtype=np.int32)],
            isClosed=False,
            color=TRAIL_COLOR,
            thickness=3,
            lineType=cv2.LINE_AA,
        )

    # Older points fade out: alpha = 1 - decay
    for point, trail_point in zip(points[:-1], result.trail[:-1]):
        alpha = 1.0 - trail_point.opacity
        if alpha <= 0:
            continue
        layer = frame.copy()
        cv2.circle(layer, point, 4, TRAIL_COLOR, -1, cv2.LINE_AA)
        cv2.addWeighted(layer, alpha, frame, 1 - alpha, 0, dst=frame)

    current = points[-1]
    cv2.circle(frame, current, 12, WHITE, -1, cv2.LINE_AA)
    cv2.circle(frame, current, 12, BALL_OUTLINE_COLOR, 3, cv2.LINE_AA)


def draw_zones(frame: np.ndarray, zones: ZoneMap, current_zone: int | None) -> None:
    """Draw zone markers, highlighting the zone holding the ball."""
    height, width = frame.shape[:2]

    for zone_id, zone in zones.items():
        center = (int(zone.center_x * width), int(zone.center_y * height))
        axes = (max(1, int(zone.radius * width)), max(1, int(zone.radius * height)))

        layer = frame.copy()
        cv2.ellipse(layer, center, axes, 0, 0, 360, TRAIL_COLOR if zone_id == current_zone else WHITE, -1)
        alpha = 0.5 if zone_id == current_zone else 0.2
        cv2.addWeighted(layer, alpha, frame, 1 - alpha, 0, dst=frame)

        cv2.ellipse(frame, center, axes, 0, 0, 360, TRAIL_COLOR, 2, cv2.LINE_AA)
        cv2.putText(
            frame,
            str(zone_id),
            (center[0] - 6, center[1] + 6),
            cv2.FONT_HERSHEY_SIMPLEX,
            0.6,
            WHITE,
            2,
        )

    if current_zone is not None:
        _draw_label(frame, f"Ball in zone: {current_zone}", (10, height - 15))


def _draw_label(frame: np.ndarray, text: str, origin: tuple[int, int]) -> None:
    """White text on a dark box."""
    (text_w, text_h), baseline = cv2.getTextSize(text, cv2.FONT_HERSHEY_SIMPLEX, 0.5, 1)
    x, y = origin
    cv2.rectangle(frame, (x - 4, y - text_h - 6), (x + text_w + 4, y + baseline + 2), BLACK, -1)
    cv2.putText(frame, text, (x, y), cv2.FONT_HERSHEY_SIMPLEX, 0.5, WHITE, 1)


def status_lines(result: FrameResult, model_ready: bool = True) -> list[str]:
    """Status text shown under the preview."""
    if not model_ready:
        status = "Loading Model..."
    else:
        status = "Tracking Active" if result.is_tracking else "Ready"
    return [
        f"Status: {status}",
        f"Ball Detected: {'Yes' if result.ball_detected else 'No'}",
        f"Mat Calibrated: {'Yes' if result.is_calibrated else 'No'}",
    ]


def draw_overlay(
    frame: np.ndarray,
    result: FrameResult,
    zones: ZoneMap,
    display_dims: tuple[int, int],
) -> np.ndarray:
    """
    Render the full overlay on a copy of the frame.

    Args:
        frame: BGR camera frame
        result: Latest frame result
        zones: Zone layout to draw
        display_dims: (width, height) of the coordinate space used by the trail

    Returns:
        Annotated copy of the frame
    """
    annotated = frame.copy()
    height = annotated.shape[0]

    if result.is_tracking:
        draw_trail(annotated, result, display_dims)

    if result.is_calibrated:
        draw_zones(annotated, zones, result.current_zone)
    else:
        _draw_label(annotated, UNCALIBRATED_MESSAGE, (10, height - 50))

    for i, line in enumerate(status_lines(result)):
        _draw_label(annotated, line, (10, 25 + i * 22))

    return annotated
