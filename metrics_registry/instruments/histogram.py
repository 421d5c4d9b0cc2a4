"""Histogram instrument backed by a bounded sample reservoir.

Statistics are computed on demand from an immutable Snapshot of the reservoir
contents, using numpy.
"""

import threading
from collections import deque
from typing import Iterable, Optional

import numpy as np

from metrics_registry.core.config import settings
from .base import Instrument, InstrumentKind


class Snapshot:
    """Immutable view of sampled values."""

    def __init__(self, values: Iterable[float]):
        self._values = np.sort(np.asarray(list(values), dtype=float))

    @property
    def values(self) -> np.ndarray:
        return self._values.copy()

    @property
    def size(self) -> int:
        return int(self._values.size)

    @property
    def min(self) -> float:
        return float(self._values[0]) if self._values.size else 0.0

    @property
    def max(self) -> float:
        return float(self._values[-1]) if self._values.size else 0.0

    @property
    def mean(self) -> float:
        return float(self._values.mean()) if self._values.size else 0.0

    @property
    def stddev(self) -> float:
        # Sample standard deviation; a single value has no spread
        if self._values.size < 2:
            return 0.0
        return float(self._values.std(ddof=1))

    @property
    def median(self) -> float:
        return self.percentile(0.5)

    def percentile(self, quantile: float) -> float:
        """Value at the given quantile in [0, 1]."""
        if not 0.0 <= quantile <= 1.0:
            raise ValueError(f"{quantile} is not in [0..1]")
        if not self._values.size:
            return 0.0
        return float(np.quantile(self._values, quantile))


class SlidingWindowReservoir:
    """Keeps the most recent ``size`` values."""

    def __init__(self, size: Optional[int] = None):
        size = settings.RESERVOIR_SIZE if size is None else size
        if size <= 0:
            raise ValueError("Reservoir size must be positive")
        self._lock = threading.Lock()
        self._values: deque = deque(maxlen=size)

    def update(self, value: float) -> None:
        with self._lock:
            self._values.append(value)

    def size(self) -> int:
        return len(self._values)

    def snapshot(self) -> Snapshot:
        with self._lock:
            values = list(self._values)
        return Snapshot(values)


class Histogram(Instrument):
    """Records a distribution of values."""

    kind = InstrumentKind.HISTOGRAM

    def __init__(self, reservoir: Optional[SlidingWindowReservoir] = None):
        self._reservoir = reservoir if reservoir is not None else SlidingWindowReservoir()
        self._lock = threading.Lock()
        self._count = 0

    def update(self, value: float) -> None:
        with self._lock:
            self._count += 1
        self._reservoir.update(value)

    @property
    def count(self) -> int:
        return self._count

    def snapshot(self) -> Snapshot:
        return self._reservoir.snapshot()

    def __repr__(self):
        return f"Histogram(count={self._count})"
