from typing import Any, Callable, Optional

from .base import Instrument, InstrumentKind


class Gauge(Instrument):
    """Read-only value source supplied by the application.

    Either pass a zero-argument callable or subclass and override get_value().
    The registry never calls the source; only readers of the gauge do.
    """

    kind = InstrumentKind.GAUGE

    def __init__(self, value_fn: Optional[Callable[[], Any]] = None):
        self._value_fn = value_fn

    def get_value(self) -> Any:
        if self._value_fn is None:
            raise NotImplementedError("Gauge needs a value_fn or a get_value() override")
        return self._value_fn()

    @property
    def value(self) -> Any:
        return self.get_value()

    @classmethod
    def create_default(cls) -> "Gauge":
        raise TypeError("Gauges wrap a caller-supplied value source and have no default instance")
