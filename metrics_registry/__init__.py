"""metrics_registry - thread-safe registry of named measurement instruments.

Application threads obtain counters, histograms, meters, timers and gauges by
name from a MetricRegistry; listeners hear about instruments as they come and go.
"""

from .instruments import (
    Counter,
    Gauge,
    Histogram,
    Instrument,
    InstrumentKind,
    Meter,
    SlidingWindowReservoir,
    Snapshot,
    Timer,
)
from .registry import (
    ALL,
    BaseRegistryListener,
    DuplicateNameError,
    InstrumentSet,
    LoggingRegistryListener,
    MetricFilter,
    MetricRegistry,
    Name,
    RegistryError,
    RegistryInventoryModel,
    RegistryListener,
    StaticInstrumentSet,
    UnknownVariantError,
    WrongKindError,
    get_default_registry,
    reset_default_registry,
    set_default_registry,
)

__version__ = "0.1.0"

__all__ = [
    "Counter",
    "Gauge",
    "Histogram",
    "Instrument",
    "InstrumentKind",
    "Meter",
    "SlidingWindowReservoir",
    "Snapshot",
    "Timer",
    "ALL",
    "BaseRegistryListener",
    "DuplicateNameError",
    "InstrumentSet",
    "LoggingRegistryListener",
    "MetricFilter",
    "MetricRegistry",
    "Name",
    "RegistryError",
    "RegistryInventoryModel",
    "RegistryListener",
    "StaticInstrumentSet",
    "UnknownVariantError",
    "WrongKindError",
    "get_default_registry",
    "reset_default_registry",
    "set_default_registry",
]
