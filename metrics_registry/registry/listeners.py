"""RegistryListener protocol, its no-op base, and kind dispatch.

Listeners are notified synchronously on the thread that mutated the registry.
A slow listener therefore slows down that caller; keep callbacks cheap.
"""

import logging
from functools import partial
from typing import Callable, Protocol

from metrics_registry.core.logging_config import get_logger
from metrics_registry.instruments import (
    Counter, Gauge, Histogram, Instrument, InstrumentKind, Meter, Timer
)
from .errors import UnknownVariantError
from .name import Name


class RegistryListener(Protocol):
    """Observer of instruments being added to and removed from a registry."""

    def on_gauge_added(self, name: Name, gauge: Gauge) -> None:
        ...

    def on_gauge_removed(self, name: Name) -> None:
        ...

    def on_counter_added(self, name: Name, counter: Counter) -> None:
        ...

    def on_counter_removed(self, name: Name) -> None:
        ...

    def on_histogram_added(self, name: Name, histogram: Histogram) -> None:
        ...

    def on_histogram_removed(self, name: Name) -> None:
        ...

    def on_meter_added(self, name: Name, meter: Meter) -> None:
        ...

    def on_meter_removed(self, name: Name) -> None:
        ...

    def on_timer_added(self, name: Name, timer: Timer) -> None:
        ...

    def on_timer_removed(self, name: Name) -> None:
        ...


class BaseRegistryListener:
    """No-op listener; subclass and override only the callbacks you need."""

    def on_gauge_added(self, name: Name, gauge: Gauge) -> None:
        pass

    def on_gauge_removed(self, name: Name) -> None:
        pass

    def on_counter_added(self, name: Name, counter: Counter) -> None:
        pass

    def on_counter_removed(self, name: Name) -> None:
        pass

    def on_histogram_added(self, name: Name, histogram: Histogram) -> None:
        pass

    def on_histogram_removed(self, name: Name) -> None:
        pass

    def on_meter_added(self, name: Name, meter: Meter) -> None:
        pass

    def on_meter_removed(self, name: Name) -> None:
        pass

    def on_timer_added(self, name: Name, timer: Timer) -> None:
        pass

    def on_timer_removed(self, name: Name) -> None:
        pass


class LoggingRegistryListener(BaseRegistryListener):
    """Logs every addition and removal."""

    def __init__(self, level: int = logging.INFO, logger_name: str = __name__):
        self._level = level
        self._logger = get_logger(logger_name)

    def _added(self, kind: str, name: Name) -> None:
        self._logger.log(self._level, f"{kind} added: {name}")

    def _removed(self, kind: str, name: Name) -> None:
        self._logger.log(self._level, f"{kind} removed: {name}")

    def on_gauge_added(self, name, gauge):
        self._added("gauge", name)

    def on_gauge_removed(self, name):
        self._removed("gauge", name)

    def on_counter_added(self, name, counter):
        self._added("counter", name)

    def on_counter_removed(self, name):
        self._removed("counter", name)

    def on_histogram_added(self, name, histogram):
        self._added("histogram", name)

    def on_histogram_removed(self, name):
        self._removed("histogram", name)

    def on_meter_added(self, name, meter):
        self._added("meter", name)

    def on_meter_removed(self, name):
        self._removed("meter", name)

    def on_timer_added(self, name, timer):
        self._added("timer", name)

    def on_timer_removed(self, name):
        self._removed("timer", name)


def kind_of(instrument: object) -> InstrumentKind:
    """Return the variant tag of a closed-set instrument.

    Raises:
        UnknownVariantError: if the object is not one of the known instrument kinds
    """
    if isinstance(instrument, Instrument):
        kind = getattr(type(instrument), "kind", None)
        if isinstance(kind, InstrumentKind):
            return kind
    raise UnknownVariantError(instrument)


def added_callback(listener: RegistryListener, name: Name, instrument: Instrument) -> Callable[[], None]:
    """Resolve the kind-specific 'added' callback of listener without calling it."""
    kind = kind_of(instrument)
    if kind is InstrumentKind.GAUGE:
        callback = listener.on_gauge_added
    elif kind is InstrumentKind.COUNTER:
        callback = listener.on_counter_added
    elif kind is InstrumentKind.HISTOGRAM:
        callback = listener.on_histogram_added
    elif kind is InstrumentKind.METER:
        callback = listener.on_meter_added
    elif kind is InstrumentKind.TIMER:
        callback = listener.on_timer_added
    else:
        raise UnknownVariantError(instrument)
    return partial(callback, name, instrument)


def removed_callback(listener: RegistryListener, name: Name, instrument: Instrument) -> Callable[[], None]:
    """Resolve the kind-specific 'removed' callback of listener without calling it."""
    kind = kind_of(instrument)
    if kind is InstrumentKind.GAUGE:
        callback = listener.on_gauge_removed
    elif kind is InstrumentKind.COUNTER:
        callback = listener.on_counter_removed
    elif kind is InstrumentKind.HISTOGRAM:
        callback = listener.on_histogram_removed
    elif kind is InstrumentKind.METER:
        callback = listener.on_meter_removed
    elif kind is InstrumentKind.TIMER:
        callback = listener.on_timer_removed
    else:
        raise UnknownVariantError(instrument)
    return partial(callback, name)


def notify_added(listener: RegistryListener, name: Name, instrument: Instrument) -> None:
    added_callback(listener, name, instrument)()


def notify_removed(listener: RegistryListener, name: Name, instrument: Instrument) -> None:
    removed_callback(listener, name, instrument)()
