"""Composite groups of instruments registered in one call."""

from abc import ABC, abstractmethod
from typing import Dict, Mapping, Union

from metrics_registry.instruments import Instrument
from .errors import DuplicateNameError
from .name import Name, NameLike, to_name

SetMember = Union[Instrument, "InstrumentSet"]


class InstrumentSet(ABC):
    """A named tree of instruments.

    Children may themselves be InstrumentSets. MetricRegistry flattens the tree
    into individual entries at registration time and keeps no reference to the
    set afterwards.
    """

    @abstractmethod
    def get_instruments(self) -> Mapping[Name, SetMember]:
        """Direct children of this set, keyed by their name relative to the set."""
        ...


class StaticInstrumentSet(InstrumentSet):
    """InstrumentSet over a fixed mapping; keys may be Names or dotted strings.

    Raises:
        DuplicateNameError: if two keys normalise to the same Name
        ValueError: if a key normalises to the empty Name
    """

    def __init__(self, instruments: Mapping[NameLike, SetMember]):
        self._instruments: Dict[Name, SetMember] = {}
        for key, member in instruments.items():
            name = to_name(key)
            if name.is_empty():
                raise ValueError(f"Empty name for set member {member!r}")
            if name in self._instruments:
                raise DuplicateNameError(name)
            self._instruments[name] = member

    def get_instruments(self) -> Mapping[Name, SetMember]:
        return dict(self._instruments)
