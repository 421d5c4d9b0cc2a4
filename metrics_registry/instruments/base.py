"""Closed set of instrument kinds and the capability contract the registry relies on."""

from enum import Enum
from typing import ClassVar


class InstrumentKind(str, Enum):
    """Variant tag carried by every instrument class."""
    GAUGE = "gauge"
    COUNTER = "counter"
    HISTOGRAM = "histogram"
    METER = "meter"
    TIMER = "timer"


class Instrument:
    """Base class for everything a MetricRegistry stores.

    Each concrete variant sets ``kind`` once and never subclasses another
    variant, so an instance belongs to exactly one kind for its lifetime.
    """

    kind: ClassVar[InstrumentKind]

    @classmethod
    def create_default(cls) -> "Instrument":
        """Construct a fresh instance with default settings."""
        return cls()
