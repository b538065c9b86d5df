"""
Tests for the fixed-rate frame ticker
"""

import threading
import unittest

from ball_tracking.core import FrameTicker


class TestFrameTicker(unittest.TestCase):
    """Test ticker start/stop behaviour."""

    def test_max_ticks(self):
        calls = []
        ticker = FrameTicker(0, calls.append)

        self.assertEqual(ticker.run(max_ticks=3), 3)
        self.assertEqual(calls, [0, 1, 2])

    def test_stop_from_callback(self):
        """Test stop() inside a tick ends the loop after that tick."""
        calls = []

        def on_tick(index):
            calls.append(index)
            if index == 4:
                ticker.stop()

        ticker = FrameTicker(0, on_tick)

        self.assertEqual(ticker.run(), 5)
        self.assertEqual(calls, [0, 1, 2, 3, 4])
        self.assertTrue(ticker.stopped)

    def test_stop_from_other_thread(self):
        ticks_seen = threading.Event()

        def on_tick(index):
            if index >= 2:
                ticks_seen.set()

        ticker = FrameTicker(0.005, on_tick)
        thread = threading.Thread(target=ticker.run)
        thread.start()

        self.assertTrue(ticks_seen.wait(5))
        ticker.stop()
        thread.join(5)

        self.assertFalse(thread.is_alive())
        self.assertGreaterEqual(ticker.ticks, 3)

    def test_shutdown_event(self):
        """Test a set shutdown event prevents any tick."""
        shutdown_event = threading.Event()
        shutdown_event.set()
        calls = []

        ticker = FrameTicker(0, calls.append, shutdown_event=shutdown_event)

        self.assertEqual(ticker.run(), 0)
        self.assertEqual(calls, [])

    def test_single_use(self):
        """Test a finished ticker does not run again."""
        ticker = FrameTicker(0, lambda index: None)
        ticker.run(max_ticks=2)

        self.assertEqual(ticker.run(max_ticks=5), 2)

    def test_late_ticks_do_not_wait(self):
        """Test ticks that overrun the interval re-anchor instead of sleeping."""
        now = [0.0]

        def clock():
            now[0] += 1.0
            return now[0]

        ticker = FrameTicker(0.5, lambda index: None, clock=clock)

        self.assertEqual(ticker.run(max_ticks=4), 4)

    def test_callback_error_stops_ticker(self):
        def on_tick(index):
            raise RuntimeError("boom")

        ticker = FrameTicker(0, on_tick)

        with self.assertRaises(RuntimeError):
            ticker.run()
        self.assertTrue(ticker.stopped)

    def test_invalid_interval(self):
        with self.assertRaises(ValueError):
            FrameTicker(-1, lambda index: None)

    def test_from_fps(self):
        ticker = FrameTicker.from_fps(20, lambda index: None)
        self.assertAlmostEqual(ticker.interval, 0.05)

        with self.assertRaises(ValueError):
            FrameTicker.from_fps(0, lambda index: None)


if __name__ == "__main__":
    unittest.main()
