"""Predicates selecting (name, instrument) pairs for queries and removal."""

from typing import Callable

from metrics_registry.instruments import Instrument, InstrumentKind
from .name import Name

MetricFilter = Callable[[Name, Instrument], bool]


def ALL(name: Name, instrument: Instrument) -> bool:
    """Matches every entry."""
    return True


def starts_with(prefix: str) -> MetricFilter:
    def _filter(name: Name, instrument: Instrument) -> bool:
        return name.key.startswith(prefix)
    return _filter


def ends_with(suffix: str) -> MetricFilter:
    def _filter(name: Name, instrument: Instrument) -> bool:
        return name.key.endswith(suffix)
    return _filter


def contains(text: str) -> MetricFilter:
    def _filter(name: Name, instrument: Instrument) -> bool:
        return text in name.key
    return _filter


def of_kind(*kinds: InstrumentKind) -> MetricFilter:
    wanted = frozenset(kinds)

    def _filter(name: Name, instrument: Instrument) -> bool:
        return getattr(instrument, "kind", None) in wanted
    return _filter


def all_of(*filters: MetricFilter) -> MetricFilter:
    def _filter(name: Name, instrument: Instrument) -> bool:
        return all(f(name, instrument) for f in filters)
    return _filter
