"""
Frame Ticker - Fixed-rate driver for the per-frame callback.

Ticks run one after another on the calling thread, so a tick never starts
while the previous one is still in progress. stop() may be called from any
thread (or from inside the callback); the tick in progress finishes first.
"""

import logging
import threading
import time
from collections.abc import Callable

logger = logging.getLogger(__name__)


class FrameTicker:
    """Invokes a callback at a fixed rate until stopped."""

    def __init__(
        self,
        interval: float,
        callback: Callable[[int], None],
        shutdown_event=None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            interval: Seconds between tick starts (0 = as fast as possible)
            callback: Called with the zero-based tick index
            shutdown_event: Optional external event that also stops the ticker
            clock: Monotonic clock in seconds
        """
        if interval < 0:
            raise ValueError(f"interval must be non-negative, got {interval}")

        self.interval = interval
        self._callback = callback
        self._shutdown_event = shutdown_event
        self._clock = clock
        self._stop = threading.Event()
        self.ticks = 0

    @classmethod
    def from_fps(cls, fps: float, callback: Callable[[int], None], **kwargs) -> "FrameTicker":
        if fps <= 0:
            raise ValueError(f"fps must be positive, got {fps}")
        return cls(1.0 / fps, callback, **kwargs)

    def stop(self) -> None:
        """Request the ticker to stop after the current tick."""
        self._stop.set()

    @property
    def stopped(self) -> bool:
        return self._stop.is_set() or bool(
            self._shutdown_event is not None and self._shutdown_event.is_set()
        )

    def run(self, max_ticks: int | None = None) -> int:
        """
        Run ticks until stopped.

        Args:
            max_ticks: Optional upper bound on the number of ticks

        Returns:
            Number of ticks executed
        """
        next_tick = self._clock()

        try:
            while not self.stopped:
                if max_ticks is not None and self.ticks >= max_ticks:
                    break

                self._callback(self.ticks)
                self.ticks += 1

                next_tick += self.interval
                delay = next_tick - self._clock()
                if delay > 0:
                    if self._stop.wait(delay):
                        break
                else:
                    # Running late: re-anchor instead of bursting to catch up
                    next_tick = self._clock()
        finally:
            self._stop.set()

        logger.debug(f"Ticker stopped after {self.ticks} ticks")
        return self.ticks
