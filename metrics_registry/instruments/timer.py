import time
from contextlib import contextmanager
from typing import Iterator, Optional

from .base import Instrument, InstrumentKind
from .histogram import Histogram, Snapshot
from .meter import Meter


class Timer(Instrument):
    """Rate of timed events plus the distribution of their durations.

    Composes a Meter and a Histogram instead of subclassing either, so a Timer
    is never mistaken for one of them. Durations are recorded in seconds.
    """

    kind = InstrumentKind.TIMER

    def __init__(self, meter: Optional[Meter] = None, histogram: Optional[Histogram] = None):
        self._meter = meter if meter is not None else Meter()
        self._histogram = histogram if histogram is not None else Histogram()

    def update(self, duration_s: float) -> None:
        if duration_s < 0:
            return
        self._histogram.update(duration_s)
        self._meter.mark()

    @contextmanager
    def time(self) -> Iterator[None]:
        """Time the enclosed block.

        Usage example:
        ```python
        with registry.timer("db.query").time():
            run_query()
        ```
        """
        t0 = time.monotonic_ns()
        try:
            yield
        finally:
            self.update((time.monotonic_ns() - t0) / 1_000_000_000.0)

    @property
    def count(self) -> int:
        return self._histogram.count

    @property
    def mean_rate(self) -> float:
        return self._meter.mean_rate

    @property
    def window_rate(self) -> float:
        return self._meter.window_rate

    def snapshot(self) -> Snapshot:
        return self._histogram.snapshot()

    def __repr__(self):
        return f"Timer(count={self.count})"
