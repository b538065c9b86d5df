"""
Constants used throughout the ball tracking system
"""

# Detection
DEFAULT_MODEL_FILE = "yolo11n.pt"
DEFAULT_CONFIDENCE_THRESHOLD = 0.65  # Threshold used by the tracking loop
DEFAULT_HELPER_CONFIDENCE_THRESHOLD = 0.70  # Threshold used by detect_ball()
DEFAULT_BALL_CLASSES = ("sports ball", "ball")

SELECTION_FIRST_MATCH = "first_match"
SELECTION_BEST_SCORE = "best_score"
SELECTION_POLICIES = (SELECTION_FIRST_MATCH, SELECTION_BEST_SCORE)

# Trail
DEFAULT_TRAIL_CAPACITY = 30
DEFAULT_FADE_WINDOW_MS = 1000
BALL_VISIBLE_WINDOW_MS = 1000  # Latest position younger than this = "ball detected"

# Sampling and calibration
DEFAULT_SAMPLE_EVERY_N = 3  # Only every Nth frame goes through the detector
DEFAULT_AUTO_CALIBRATE_FRAMES = 10

# Zones
RESOLUTION_LAST_MATCH = "last_match"
RESOLUTION_NEAREST = "nearest"
ZONE_RESOLUTIONS = (RESOLUTION_LAST_MATCH, RESOLUTION_NEAREST)

DEFAULT_ZONE_RADIUS = 0.05
DEFAULT_ZONES = [
    {"id": 1, "x": 0.5, "y": 0.8, "radius": DEFAULT_ZONE_RADIUS, "description": "bottom middle"},
    {"id": 2, "x": 0.2, "y": 0.8, "radius": DEFAULT_ZONE_RADIUS, "description": "bottom left"},
    {"id": 3, "x": 0.2, "y": 0.2, "radius": DEFAULT_ZONE_RADIUS, "description": "top left"},
    {"id": 4, "x": 0.5, "y": 0.2, "radius": DEFAULT_ZONE_RADIUS, "description": "top middle"},
    {"id": 5, "x": 0.8, "y": 0.2, "radius": DEFAULT_ZONE_RADIUS, "description": "top right"},
    {"id": 6, "x": 0.8, "y": 0.8, "radius": DEFAULT_ZONE_RADIUS, "description": "bottom right"},
]

# Detector input size (resized camera frames)
DEFAULT_SOURCE_WIDTH = 300
DEFAULT_SOURCE_HEIGHT = 300

# Performance and monitoring
STATUS_REPORT_INTERVAL = 100  # Log status every N frames
DEFAULT_CAMERA_FPS = 30

# Camera reconnection
MAX_CAMERA_RECONNECT_ATTEMPTS = 2
CAMERA_RECONNECT_DELAY = 2.0  # Seconds between reconnection attempts

# Environment variables
ENV_CAMERA_URL = "CAMERA_URL"
ENV_MODEL_FILE = "BALL_TRACKING_MODEL"
