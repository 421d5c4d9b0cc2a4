"""Instrument variants stored by MetricRegistry.

The registry treats every instrument as an opaque value tagged with an
InstrumentKind; the statistics implemented here are intentionally simple.
"""

from .base import Instrument, InstrumentKind
from .counter import Counter
from .gauge import Gauge
from .histogram import Histogram, SlidingWindowReservoir, Snapshot
from .meter import Meter
from .timer import Timer

__all__ = [
    "Instrument",
    "InstrumentKind",
    "Counter",
    "Gauge",
    "Histogram",
    "SlidingWindowReservoir",
    "Snapshot",
    "Meter",
    "Timer",
]
