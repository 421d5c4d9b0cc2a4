import threading

from .base import Instrument, InstrumentKind


class Counter(Instrument):
    """Thread-safe integer that can be incremented and decremented."""

    kind = InstrumentKind.COUNTER

    def __init__(self):
        self._lock = threading.Lock()
        self._count = 0

    def inc(self, n: int = 1) -> None:
        with self._lock:
            self._count += n

    def dec(self, n: int = 1) -> None:
        with self._lock:
            self._count -= n

    @property
    def count(self) -> int:
        return self._count

    def __repr__(self):
        return f"Counter(count={self._count})"
