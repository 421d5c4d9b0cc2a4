"""Named instrument registry with listener notification.

This package implements the registration and lookup protocol: hierarchical
names, composite instrument sets, filters, listeners and the MetricRegistry
that ties them together.
"""

from .errors import DuplicateNameError, RegistryError, UnknownVariantError, WrongKindError
from .filters import ALL, MetricFilter, all_of, contains, ends_with, of_kind, starts_with
from .instrument_set import InstrumentSet, StaticInstrumentSet
from .listeners import (
    BaseRegistryListener,
    LoggingRegistryListener,
    RegistryListener,
    kind_of,
    notify_added,
    notify_removed,
)
from .models import RegistryInventoryModel
from .name import Name, NameLike, to_name
from .registry import MetricRegistry
from .instance import get_default_registry, set_default_registry, reset_default_registry

__all__ = [
    "DuplicateNameError",
    "RegistryError",
    "UnknownVariantError",
    "WrongKindError",
    "ALL",
    "MetricFilter",
    "all_of",
    "contains",
    "ends_with",
    "of_kind",
    "starts_with",
    "InstrumentSet",
    "StaticInstrumentSet",
    "BaseRegistryListener",
    "LoggingRegistryListener",
    "RegistryListener",
    "kind_of",
    "notify_added",
    "notify_removed",
    "RegistryInventoryModel",
    "Name",
    "NameLike",
    "to_name",
    "MetricRegistry",
    "get_default_registry",
    "set_default_registry",
    "reset_default_registry",
]
