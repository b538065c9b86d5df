"""
Replay - feed recorded detections through a tracking session offline.

Used by `--replay` to check a zone layout and thresholds against a
recording without a camera or model.
"""

import json
import logging
from collections import Counter
from dataclasses import dataclass, field

from .config.planner import Colors
from .core import TrackingSession
from .detectors import Replay
from .models import FrameResult

logger = logging.getLogger(__name__)


@dataclass
class ReplaySummary:
    """Outcome of a replay run."""

    frames: int = 0
    sampled: int = 0
    appended: int = 0
    zone_entries: Counter = field(default_factory=Counter)
    final_zone: int | None = None
    results: list[FrameResult] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "frames": self.frames,
            "sampled": self.sampled,
            "appended": self.appended,
            "zone_entries": {str(k): v for k, v in sorted(self.zone_entries.items())},
            "final_zone": self.final_zone,
            "results": [r.to_dict() for r in self.results],
        }


def run_replay(config: dict, replay: Replay) -> ReplaySummary:
    """
    Run every recorded frame through a fresh session with tracking enabled.

    Args:
        config: Configuration dictionary (defaults filled)
        replay: Recorded frames

    Returns:
        ReplaySummary with per-frame results
    """
    session = TrackingSession.from_config(config)
    if replay.source_dims:
        session.set_source_dims(*replay.source_dims)
    session.set_tracking_enabled(True)

    summary = ReplaySummary()
    previous_zone = None
    for frame in replay.frames:
        result = session.process_frame(frame.detections, frame.timestamp)
        summary.results.append(result)
        summary.frames += 1
        if result.sampled:
            summary.sampled += 1
        if result.appended:
            summary.appended += 1
        if result.current_zone is not None and result.current_zone != previous_zone:
            summary.zone_entries[result.current_zone] += 1
        previous_zone = result.current_zone

    summary.final_zone = session.current_zone
    logger.info(
        f"Replayed {summary.frames} frames: {summary.appended} positions, "
        f"{sum(summary.zone_entries.values())} zone entries"
    )
    return summary


def print_replay_summary(summary: ReplaySummary, as_json: bool = False) -> None:
    """Print replay results as a table or JSON."""
    if as_json:
        print(json.dumps(summary.to_dict(), indent=2))
        return

    print()
    print(f"{Colors.BOLD}Replay{Colors.RESET}")
    print("=" * 60)
    print(f"  Frames: {summary.frames} ({summary.sampled} sampled)")
    print(f"  Positions added: {summary.appended}")

    print(f"\n{Colors.CYAN}Zone timeline{Colors.RESET}")
    previous = None
    for result in summary.results:
        if result.current_zone != previous:
            zone = result.current_zone if result.current_zone is not None else "-"
            print(f"  frame {result.frame_index:>5}: zone {zone}")
            previous = result.current_zone

    if summary.zone_entries:
        print(f"\n{Colors.CYAN}Zone entries{Colors.RESET}")
        for zone, count in sorted(summary.zone_entries.items()):
            print(f"  {zone}: {count}")
    else:
        print(f"\n{Colors.GRAY}Ball never entered a zone{Colors.RESET}")
    print()
