"""Exceptions raised by MetricRegistry operations.

DuplicateNameError and WrongKindError are recoverable and always surface to the
direct caller. UnknownVariantError marks a broken construction contract and is
intentionally outside the RegistryError hierarchy.
"""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from metrics_registry.instruments import InstrumentKind
    from .name import Name


class RegistryError(Exception):
    """Base class for recoverable registry errors."""


class DuplicateNameError(RegistryError, ValueError):
    """A different instrument is already bound to the name."""

    def __init__(self, name: "Name"):
        super().__init__(f"A metric named {name} already exists")
        self.name = name


class WrongKindError(RegistryError, ValueError):
    """The name is bound to an instrument of another kind."""

    def __init__(self, name: "Name", expected: "InstrumentKind", actual: Optional["InstrumentKind"]):
        super().__init__(f"{name} is already used for a different type of metric")
        self.name = name
        self.expected = expected
        self.actual = actual


class UnknownVariantError(TypeError):
    """An object outside the closed instrument set reached kind dispatch."""

    def __init__(self, instrument: object):
        super().__init__(f"Unknown metric type: {type(instrument).__module__}.{type(instrument).__qualname__}")
        self.instrument = instrument
