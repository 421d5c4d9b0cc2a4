import threading
import time
from collections import deque
from typing import Optional

from metrics_registry.core.config import settings
from .base import Instrument, InstrumentKind


class Meter(Instrument):
    """Counts events and reports their throughput.

    ``mean_rate`` covers the meter's whole lifetime, ``window_rate`` only the
    trailing ``window_s`` seconds.
    """

    kind = InstrumentKind.METER

    def __init__(self, window_s: Optional[float] = None):
        self._window_s = settings.METER_WINDOW_S if window_s is None else window_s
        if self._window_s <= 0:
            raise ValueError("Meter window must be positive")
        self._lock = threading.Lock()
        self._count = 0
        self._start_ts = time.monotonic()
        self._events: deque = deque()  # (ts, n) tuples inside the window

    def mark(self, n: int = 1) -> None:
        now = time.monotonic()
        with self._lock:
            self._count += n
            self._events.append((now, n))
            self._prune(now)

    def _prune(self, now: float) -> None:
        cutoff = now - self._window_s
        while self._events and self._events[0][0] < cutoff:
            self._events.popleft()

    @property
    def count(self) -> int:
        return self._count

    @property
    def mean_rate(self) -> float:
        """Events per second since creation."""
        elapsed = time.monotonic() - self._start_ts
        if elapsed <= 0:
            return 0.0
        return self._count / elapsed

    @property
    def window_rate(self) -> float:
        """Events per second over the trailing window."""
        now = time.monotonic()
        with self._lock:
            self._prune(now)
            total = sum(n for _, n in self._events)
        span = min(self._window_s, now - self._start_ts)
        if span <= 0:
            return 0.0
        return total / span

    def __repr__(self):
        return f"Meter(count={self._count})"
