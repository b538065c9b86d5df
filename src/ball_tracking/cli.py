"""
Ball Tracking System CLI
Main entry point for running the tracker.

Commands:
  --validate  Check configuration validity
  --plan      Show zone layout and tracking tunables
  --replay    Run recorded detections through the tracker
  --check     One-frame ball visibility check
"""

import argparse
import json
import logging
import signal
import sys
from pathlib import Path
from threading import Event as ThreadEvent

import yaml

from .config import (
    build_plan,
    load_config_with_env,
    print_plan,
    print_validation_result,
    validate_config_full,
)
from .detectors import load_replay
from .replay import print_replay_summary, run_replay

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = "config.yaml"

# Module-level shutdown signal for SIGTERM/SIGINT handling
_shutdown_signal = ThreadEvent()


def _handle_shutdown_signal(signum, _frame):
    """Handle SIGTERM/SIGINT for graceful shutdown."""
    signal_name = "SIGTERM" if signum == signal.SIGTERM else "SIGINT"
    # Note: print is safer than logger in signal handlers
    print(f"\nReceived {signal_name}, initiating graceful shutdown...")
    _shutdown_signal.set()


def _setup_signal_handlers():
    """Register signal handlers for graceful shutdown."""
    signal.signal(signal.SIGTERM, _handle_shutdown_signal)
    signal.signal(signal.SIGINT, _handle_shutdown_signal)


def find_config_file(config_path: str) -> Path | None:
    """
    Find config file in standard locations.

    Search order:
    1. Specified path (if provided and not default)
    2. Current directory (config.yaml)
    3. ~/.config/ball-tracking/config.yaml

    Args:
        config_path: User-specified config path

    Returns:
        Path to config file, or None to run with defaults

    Raises:
        SystemExit: If an explicitly specified file does not exist
    """
    if config_path != DEFAULT_CONFIG_NAME:
        specified = Path(config_path)
        if specified.exists():
            return specified
        logger.error(f"Specified config file not found: {config_path}")
        sys.exit(1)

    search_paths = [
        Path.cwd() / DEFAULT_CONFIG_NAME,
        Path.home() / ".config" / "ball-tracking" / DEFAULT_CONFIG_NAME,
    ]

    for path in search_paths:
        if path.exists():
            logger.info(f"Using config: {path}")
            return path

    logger.info("No config file found - using built-in defaults")
    return None


def load_config(config_path: str = DEFAULT_CONFIG_NAME, skip_validation: bool = False) -> dict:
    """
    Load and optionally validate configuration file.

    Supports pointer files: if config only contains `use: path/to/config.yaml`,
    that file is loaded instead.

    Args:
        config_path: Path to config.yaml
        skip_validation: If True, skip validation (for --validate mode)

    Returns:
        Configuration dictionary with defaults filled

    Raises:
        SystemExit: If config cannot be loaded or is invalid
    """
    config_file = find_config_file(config_path)
    config: dict = {}

    if config_file is not None:
        try:
            with open(config_file, encoding="utf-8") as f:
                config = yaml.safe_load(f) or {}

            # Support pointer files: { use: "path/to/actual/config.yaml" }
            if isinstance(config, dict) and list(config.keys()) == ["use"]:
                pointer_path = Path(config_file).parent / config["use"]
                logger.info(f"Config pointer: {config_file} -> {config['use']}")
                with open(pointer_path, encoding="utf-8") as f:
                    config = yaml.safe_load(f) or {}
                config_file = pointer_path

            logger.info(f"Configuration loaded from {config_file}")

        except yaml.YAMLError as e:
            logger.error(f"Invalid YAML in {config_file}: {e}")
            sys.exit(1)
        except OSError as e:
            logger.error(f"Cannot read config {config_file}: {e}")
            sys.exit(1)

    if not isinstance(config, dict):
        logger.error(f"Config {config_file} must be a mapping")
        sys.exit(1)

    config = load_config_with_env(config)

    if not skip_validation:
        result = validate_config_full(config)
        if not result.valid:
            print_validation_result(result)
            sys.exit(1)
        logger.info("Configuration validated")

    return config


def setup_logging(quiet: bool = False) -> None:
    """
    Setup logging configuration.

    Args:
        quiet: If True, only show warnings and errors
    """
    level = logging.WARNING if quiet else logging.INFO

    # Custom formatter with shorter module names
    class ShortNameFormatter(logging.Formatter):
        def format(self, record):
            record.name = record.name.replace("ball_tracking.", "bt.")
            return super().format(record)

    handler = logging.StreamHandler()
    handler.setFormatter(
        ShortNameFormatter(
            fmt="%(asctime)s %(name)s %(levelname)s %(message)s", datefmt="%H:%M:%S"
        )
    )
    logging.root.addHandler(handler)
    logging.root.setLevel(level)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Ball Tracking System - Follow a ball across training mat zones",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m ball_tracking 0.5 --track      # Track for 30 minutes
  python -m ball_tracking --preview        # Live window (t=track, c=calibrate, r=reset, q=quit)

Commands:
  python -m ball_tracking --validate       # Check config validity
  python -m ball_tracking --plan           # Show zone layout and tunables
  python -m ball_tracking --replay rec.json         # Run recorded detections
  python -m ball_tracking --replay rec.json --json  # ...with per-frame JSON output
  python -m ball_tracking --check          # One-frame ball visibility check

Environment Variables:
  CAMERA_URL          - Override camera URL from config
  BALL_TRACKING_MODEL - Override detection model file
        """,
    )

    parser.add_argument(
        "duration",
        type=float,
        nargs="?",
        help="Duration in hours (default: from config.yaml)",
    )

    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Quiet mode - only show warnings and errors",
    )

    parser.add_argument(
        "-c",
        "--config",
        default=DEFAULT_CONFIG_NAME,
        help="Path to config file (default: config.yaml)",
    )

    parser.add_argument(
        "--validate",
        action="store_true",
        help="Validate configuration and show derived settings",
    )

    parser.add_argument(
        "--plan", action="store_true", help="Show zone layout and tunables without running"
    )

    parser.add_argument(
        "--replay",
        metavar="REPLAY_FILE",
        help="Run recorded detections (JSON) through the tracker",
    )

    parser.add_argument(
        "--json",
        action="store_true",
        help="Print replay results as JSON",
    )

    parser.add_argument(
        "--check",
        action="store_true",
        help="Grab one camera frame and report whether the ball is visible",
    )

    parser.add_argument(
        "--track",
        action="store_true",
        help="Start with tracking enabled",
    )

    parser.add_argument(
        "--preview",
        action="store_true",
        help="Show annotated preview window",
    )

    return parser.parse_args(argv)


def parse_duration(duration_arg: float | None, config: dict) -> float:
    """
    Parse duration from command line argument or config.

    Raises:
        SystemExit: If duration is invalid
    """
    if duration_arg is not None:
        if duration_arg <= 0:
            logger.error(f"Invalid duration '{duration_arg}' - must be positive")
            logger.error("Usage: python -m ball_tracking [hours]")
            sys.exit(1)
        return duration_arg
    return config["runtime"]["default_duration_hours"]


def print_banner(config: dict, duration_hours: float) -> None:
    """Print system startup banner."""
    print("\n" + "=" * 70)
    print("BALL TRACKING SYSTEM")
    print("=" * 70)

    detection = config["detection"]
    print(f"\nModel: {detection['model_file']}")
    print(f"Ball classes: {', '.join(detection['accepted_classes'])}")
    zones = config.get("zones")
    print(f"Zones: {len(zones)} configured" if zones else "Zones: default mat layout")
    print(f"Sampling: every {config['tracking']['sample_every_n']} frame(s)")

    print("\nRuntime:")
    print(f"  Duration: {duration_hours} hour(s) ({duration_hours * 60:.0f} minutes)")
    print(f"  Camera: {config['camera']['url']}")
    print(f"  Tracking: {'on' if config['runtime']['start_tracking'] else 'off (press t in preview)'}")
    print("  Press Ctrl+C to stop early")
    print("=" * 70)
    print()


def run_validate(config_path: str) -> None:
    """Run validation mode."""
    config = load_config(config_path, skip_validation=True)
    result = validate_config_full(config)
    print_validation_result(result)
    sys.exit(0 if result.valid else 1)


def run_plan(config_path: str) -> None:
    """Run plan mode."""
    config = load_config(config_path, skip_validation=True)

    result = validate_config_full(config)
    if not result.valid:
        print_validation_result(result)
        sys.exit(1)

    print_plan(build_plan(config))
    sys.exit(0)


def run_replay_mode(config_path: str, replay_file: str, as_json: bool) -> None:
    """Run recorded detections through the tracker."""
    config = load_config(config_path)

    try:
        replay = load_replay(replay_file, fps=config["camera"]["fps"])
    except FileNotFoundError:
        print(f"Error: Replay file not found: {replay_file}")
        sys.exit(1)
    except (json.JSONDecodeError, ValueError) as e:
        print(f"Error: Invalid replay file: {e}")
        sys.exit(1)

    summary = run_replay(config, replay)
    print_replay_summary(summary, as_json=as_json)
    sys.exit(0)


def run_check(config_path: str) -> None:
    """Run one-frame ball check mode."""
    config = load_config(config_path)

    from .core.runner import check_ball
    from .detectors.yolo import YoloDetector

    try:
        detector = YoloDetector.from_config(config)
    except Exception as e:
        logger.error(f"Failed to load model: {e}")
        sys.exit(1)

    try:
        ball = check_ball(config, detector)
    except (FileNotFoundError, RuntimeError) as e:
        print(f"Error: {e}")
        sys.exit(1)

    if ball is None:
        threshold = config["detection"]["helper_confidence_threshold"]
        print(f"No ball found above {threshold} confidence")
        sys.exit(1)

    x, y = ball.bbox.center
    print(f"Ball found: {ball.class_name} ({ball.score:.2f}) at ({x:.0f}, {y:.0f})")
    sys.exit(0)


def main(argv: list[str] | None = None) -> None:
    """Main orchestrator function."""
    args = parse_args(argv)

    is_command_mode = args.validate or args.plan or bool(args.replay)
    setup_logging(quiet=args.quiet or is_command_mode)

    if args.validate:
        run_validate(args.config)
        return

    if args.plan:
        run_plan(args.config)
        return

    if args.replay:
        run_replay_mode(args.config, args.replay, args.json)
        return

    if args.check:
        run_check(args.config)
        return

    # Normal execution mode
    config = load_config(args.config)
    if args.track:
        config["runtime"]["start_tracking"] = True

    duration_hours = parse_duration(args.duration, config)
    print_banner(config, duration_hours)

    _setup_signal_handlers()

    # Heavy imports (torch, ultralytics, OpenCV) only for live tracking
    from .core.runner import run_tracking
    from .detectors.yolo import YoloDetector

    try:
        detector = YoloDetector.from_config(config)
    except Exception as e:
        logger.error(f"Failed to load model: {e}")
        sys.exit(1)

    stats = run_tracking(
        config,
        detector,
        shutdown_event=_shutdown_signal,
        duration_seconds=duration_hours * 3600,
        show_preview=args.preview or config["runtime"]["show_preview"],
    )

    print(f"\n{'=' * 70}")
    print("TRACKING COMPLETE")
    print("=" * 70)
    print(f"  Frames: {stats.frames}")
    print(f"  Positions: {stats.positions}")
    for zone, count in sorted(stats.zone_entries.items()):
        print(f"  Zone {zone}: {count} entr{'y' if count == 1 else 'ies'}")
    print(f"{'=' * 70}\n")


if __name__ == "__main__":
    main()
