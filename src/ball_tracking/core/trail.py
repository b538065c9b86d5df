"""
Trail Buffer - Bounded history of recent ball positions.

Positions are kept oldest first; once capacity is reached the oldest
entry is dropped on every append. Snapshots attach a decay value that
grows from 0 (just seen) to 1 (older than the fade window).
"""

from collections import deque
from collections.abc import Iterator

from ..models import Position, TrailPoint
from ..utils.constants import DEFAULT_FADE_WINDOW_MS, DEFAULT_TRAIL_CAPACITY


class TrailBuffer:
    """Fixed-capacity FIFO of ball positions."""

    def __init__(
        self,
        capacity: int = DEFAULT_TRAIL_CAPACITY,
        fade_window_ms: float = DEFAULT_FADE_WINDOW_MS,
    ):
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")
        if fade_window_ms <= 0:
            raise ValueError(f"fade_window_ms must be positive, got {fade_window_ms}")

        self._positions: deque[Position] = deque(maxlen=capacity)
        self.fade_window_ms = fade_window_ms

    @property
    def capacity(self) -> int:
        return self._positions.maxlen

    def __len__(self) -> int:
        return len(self._positions)

    def __iter__(self) -> Iterator[Position]:
        return iter(self._positions)

    def append(self, position: Position) -> None:
        """
        Add a position, evicting the oldest entries beyond capacity.

        Raises:
            ValueError: If the timestamp is earlier than the most recent one
        """
        if self._positions and position.timestamp < self._positions[-1].timestamp:
            raise ValueError(
                f"Timestamp {position.timestamp} is earlier than last "
                f"trail timestamp {self._positions[-1].timestamp}"
            )
        self._positions.append(position)

    def opacity(self, position: Position, now: int) -> float:
        """Decay of a position at time `now`, clamped to [0, 1]."""
        age = (now - position.timestamp) / self.fade_window_ms
        return min(1.0, max(0.0, age))

    def snapshot(self, now: int) -> Iterator[TrailPoint]:
        """
        Lazily yield trail points, oldest first.

        Does not mutate the buffer; do not append while iterating.
        """
        for position in self._positions:
            yield TrailPoint(
                x=position.x, y=position.y, opacity=self.opacity(position, now)
            )

    def clear(self) -> None:
        self._positions.clear()

    def most_recent(self) -> Position | None:
        """Last appended position, or None if the trail is empty."""
        return self._positions[-1] if self._positions else None

    def is_recent(self, now: int, window_ms: float) -> bool:
        """True if the most recent position is younger than window_ms."""
        latest = self.most_recent()
        return latest is not None and now - latest.timestamp < window_ms
