"""
Tests for the throttled progress reporter.
"""
from unittest.mock import MagicMock
from threading import Thread
import sys
import os

# Add src to path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))

from photogps.progress import ProgressReporter, format_progress


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


class TestFormatProgress:
    def test_with_total(self):
        assert format_progress(1, 4, "Processed") == "Processed 1 of 4 (25%)..."

    def test_without_total(self):
        assert format_progress(12, None, "Found") == "Found 12 files..."

    def test_zero_total_does_not_divide(self):
        assert format_progress(0, 0, "Processed") == "Processed 0 of 0 (100%)..."


class TestProgressReporter:
    def test_first_advance_reports(self):
        callback = MagicMock()
        reporter = ProgressReporter(total=10, callback=callback, clock=FakeClock())

        reporter.advance()

        callback.assert_called_once_with(1, 10, "Processed 1 of 10 (10%)...")

    def test_reports_are_throttled(self):
        """At most one report per interval, the count keeps growing."""
        clock = FakeClock()
        callback = MagicMock()
        reporter = ProgressReporter(total=10, interval=0.5, callback=callback, clock=clock)

        reporter.advance()
        clock.now += 0.1
        reporter.advance()
        clock.now += 0.1
        reporter.advance()
        assert callback.call_count == 1

        clock.now += 0.5
        reporter.advance()
        assert callback.call_count == 2
        assert callback.call_args[0][0] == 4
        assert reporter.count == 4

    def test_finish_always_reports(self):
        clock = FakeClock()
        callback = MagicMock()
        reporter = ProgressReporter(total=2, interval=10.0, callback=callback, clock=clock)

        reporter.advance()
        reporter.advance()
        reporter.finish()

        assert callback.call_count == 2
        assert callback.call_args[0] == (2, 2, "Processed 2 of 2 (100%)...")

    def test_finish_with_zero_total(self):
        callback = MagicMock()
        reporter = ProgressReporter(total=0, callback=callback, clock=FakeClock())

        reporter.finish()

        callback.assert_called_once_with(0, 0, "Processed 0 of 0 (100%)...")

    def test_without_callback_only_counts(self):
        reporter = ProgressReporter(total=3)
        reporter.advance()
        reporter.advance(2)
        reporter.finish()
        assert reporter.count == 3

    def test_concurrent_advances_are_all_counted(self):
        reporter = ProgressReporter(total=8000, callback=MagicMock())

        def work():
            for _ in range(1000):
                reporter.advance()

        threads = [Thread(target=work) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert reporter.count == 8000
