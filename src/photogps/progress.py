"""
Throttled progress reporting shared by the discovery and extraction phases.

Workers call ``advance()`` after each unit of work. The counter is updated
under a lock; the callback is only invoked when the throttle interval has
elapsed, and always outside the lock.
"""

import sys
import time
from threading import Lock
from typing import Callable, Optional

ProgressCallback = Callable[[int, Optional[int], str], None]


def format_progress(current: int, total: Optional[int], label: str) -> str:
    """Build the one-line progress text for a counter."""
    if total is None:
        return f"{label} {current} files..."
    percent = (current * 100 // total) if total > 0 else 100
    return f"{label} {current} of {total} ({percent}%)..."


def console_progress(current: int, total: Optional[int], message: str) -> None:
    """Default callback: overwrite the current console line."""
    sys.stdout.write(f"\r{message}")
    sys.stdout.flush()


class ProgressReporter:
    """Counts completed items and reports at most once per ``interval`` seconds.

    Attributes:
        total: Expected number of items, or None when unknown (discovery).
        label: Verb shown before the count ("Processed", "Found").
        interval: Minimum number of seconds between two callback calls.
    """

    def __init__(
        self,
        total: Optional[int] = None,
        label: str = "Processed",
        interval: float = 0.5,
        callback: Optional[ProgressCallback] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.total = total
        self.label = label
        self.interval = interval
        self._callback = callback
        self._clock = clock
        self._lock = Lock()
        self._count = 0
        self._last_report: Optional[float] = None

    @property
    def count(self) -> int:
        return self._count

    def advance(self, step: int = 1) -> int:
        """Increment the counter and report if the throttle allows it."""
        with self._lock:
            self._count += step
            current = self._count
            now = self._clock()
            if self._last_report is not None and now - self._last_report < self.interval:
                return current
            self._last_report = now
        self._emit(current)
        return current

    def finish(self, message: Optional[str] = None) -> None:
        """Report the final count regardless of the throttle."""
        with self._lock:
            current = self._count
            self._last_report = self._clock()
        self._emit(current, message)

    def _emit(self, current: int, message: Optional[str] = None) -> None:
        if self._callback is None:
            return
        text = message or format_progress(current, self.total, self.label)
        self._callback(current, self.total, text)
