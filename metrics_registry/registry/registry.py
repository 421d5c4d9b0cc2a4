"""MetricRegistry - process-wide store of named instruments.

The registry maps each Name to exactly one Instrument. Registration is an
atomic insert-if-absent, so concurrent callers never overwrite each other, and
listeners are told about every addition and removal in the order they were
attached.

Locking model: one RLock guards both the name map and the listener tuple.
Every mutation captures the listener tuple inside the same critical section
and dispatches after releasing the lock, on the calling thread. Each callback
re-checks that its listener is still attached and is tracked while it runs, so
remove_listener() can wait for callbacks already under way.
"""

import threading
import time
from types import MappingProxyType
from typing import Callable, Dict, List, Mapping, Optional, Tuple, Type, TypeVar, Union

from metrics_registry.core.logging_config import get_logger
from metrics_registry.instruments import (
    Counter, Gauge, Histogram, Instrument, InstrumentKind, Meter, Timer
)
from .errors import DuplicateNameError, WrongKindError
from .filters import ALL, MetricFilter
from .instrument_set import InstrumentSet
from .listeners import RegistryListener, added_callback, removed_callback
from .models import RegistryInventoryModel
from .name import Name, NameLike, to_name

logger = get_logger(__name__)

T = TypeVar("T", bound=Instrument)


def _kind_or_none(instrument: object) -> Optional[InstrumentKind]:
    if isinstance(instrument, Instrument):
        kind = getattr(type(instrument), "kind", None)
        if isinstance(kind, InstrumentKind):
            return kind
    return None


class MetricRegistry(InstrumentSet):
    """A registry of instrument instances.

    Usage example:
    ```python
    registry = MetricRegistry()
    registry.counter("jobs.processed").inc()
    with registry.timer("jobs", "duration").time():
        process()
    ```
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._metrics: Dict[Name, Instrument] = {}
        # Copy-on-write: replaced wholesale under the lock, read without it
        self._listeners: Tuple[RegistryListener, ...] = ()
        # Signalled whenever a listener callback returns
        self._idle = threading.Condition(self._lock)
        # id(listener) -> idents of threads currently inside one of its callbacks
        self._delivering: Dict[int, List[int]] = {}

    @staticmethod
    def name(first: Union[type, str], *names: str) -> Name:
        """Shorthand for building names from a class or string plus segments."""
        if isinstance(first, type):
            return Name.for_class(first, *names)
        return Name.build(first, *names)

    # --- Registration ---

    def register(self, name: NameLike, instrument: Union[T, InstrumentSet]) -> Union[T, InstrumentSet]:
        """Register an instrument, or every leaf of an InstrumentSet, under name.

        Args:
            name: Name of the instrument, or prefix when registering a set
            instrument: The instrument or InstrumentSet to register

        Returns:
            The instrument that was passed in

        Raises:
            DuplicateNameError: if the name is already bound
        """
        name = to_name(name)
        if instrument is None:
            raise TypeError(f"Cannot register None under {name}")
        if isinstance(instrument, InstrumentSet):
            self.register_all(instrument, prefix=name)
        elif not self._put_if_absent(name, instrument):
            raise DuplicateNameError(name)
        return instrument

    def register_all(self, instrument_set: InstrumentSet, prefix: Optional[NameLike] = None) -> None:
        """Flatten an InstrumentSet into individual entries.

        Nested sets extend the prefix with their own name. Entries are visited
        depth-first in the sets' own iteration order. A conflict stops the walk;
        anything registered before it stays registered.

        Raises:
            DuplicateNameError: if a leaf name is already bound
            ValueError: if a set contains itself, directly or through nested sets
        """
        root = Name.EMPTY if prefix is None else to_name(prefix)
        # ids of the sets currently being walked, to detect cycles
        active = {id(instrument_set)}
        stack = [(root, id(instrument_set), iter(instrument_set.get_instruments().items()))]
        while stack:
            current_prefix, set_id, children = stack[-1]
            entry = next(children, None)
            if entry is None:
                stack.pop()
                active.discard(set_id)
                continue
            child_name, member = entry
            full_name = Name.join(current_prefix, to_name(child_name))
            if isinstance(member, InstrumentSet):
                if id(member) in active:
                    raise ValueError(f"InstrumentSet at {full_name} contains itself")
                active.add(id(member))
                stack.append((full_name, id(member), iter(member.get_instruments().items())))
            else:
                self.register(full_name, member)

    def _put_if_absent(self, name: Name, instrument: Instrument) -> bool:
        """Bind name to instrument unless already bound; notify listeners on success."""
        with self._lock:
            if name in self._metrics:
                return False
            self._metrics[name] = instrument
            listeners = self._listeners
        logger.debug(f"Registered {type(instrument).__name__} {name}")
        self._dispatch(listeners, added_callback, name, instrument)
        return True

    # --- Get-or-create ---

    def counter(self, *name: Union[Name, str]) -> Counter:
        """Return the Counter registered under name, creating it if absent."""
        return self._get_or_add(self._coerce(name), Counter, Counter.create_default)

    def histogram(self, *name: Union[Name, str]) -> Histogram:
        """Return the Histogram registered under name, creating it if absent."""
        return self._get_or_add(self._coerce(name), Histogram, Histogram.create_default)

    def meter(self, *name: Union[Name, str]) -> Meter:
        """Return the Meter registered under name, creating it if absent."""
        return self._get_or_add(self._coerce(name), Meter, Meter.create_default)

    def timer(self, *name: Union[Name, str]) -> Timer:
        """Return the Timer registered under name, creating it if absent."""
        return self._get_or_add(self._coerce(name), Timer, Timer.create_default)

    def gauge(self, name: NameLike, value_fn: Callable[[], object]) -> Gauge:
        """Return the Gauge registered under name, wrapping value_fn if absent.

        value_fn is ignored when a gauge is already registered under the name.
        """
        return self._get_or_add(to_name(name), Gauge, lambda: Gauge(value_fn))

    @staticmethod
    def _coerce(parts: Tuple[Union[Name, str], ...]) -> Name:
        if not parts:
            raise TypeError("A metric name is required")
        if len(parts) == 1:
            return to_name(parts[0])
        return to_name(parts)

    def _get_or_add(self, name: Name, variant: Type[T], factory: Callable[[], T]) -> T:
        kind = variant.kind
        existing = self.get(name)
        if existing is None:
            created = factory()
            if self._put_if_absent(name, created):
                return created
            # Lost the race to a concurrent creator: re-read the winner
            existing = self.get(name)
            logger.debug(f"Concurrent creation of {name}, re-read {type(existing).__name__}")
        actual = _kind_or_none(existing)
        if actual is kind:
            return existing
        raise WrongKindError(name, kind, actual)

    # --- Removal ---

    def remove(self, name: NameLike) -> bool:
        """Remove the instrument bound to name.

        Returns:
            Whether an instrument was removed
        """
        return self._remove(to_name(name))

    def _remove(self, name: Name, expected: Optional[Instrument] = None) -> bool:
        with self._lock:
            instrument = self._metrics.get(name)
            if instrument is None or (expected is not None and instrument is not expected):
                return False
            del self._metrics[name]
            listeners = self._listeners
        logger.debug(f"Removed {type(instrument).__name__} {name}")
        self._dispatch(listeners, removed_callback, name, instrument)
        return True

    def remove_matching(self, metric_filter: MetricFilter) -> None:
        """Remove every instrument for which metric_filter returns True.

        Works on a snapshot: entries registered during the scan may or may not
        be seen, and an entry rebound during the scan is left alone.
        """
        for name, instrument in self._entries():
            if metric_filter(name, instrument):
                self._remove(name, expected=instrument)

    def remove_all(self) -> None:
        self.remove_matching(ALL)

    # --- Listeners ---

    def add_listener(self, listener: RegistryListener) -> None:
        """Attach a listener and replay an 'added' event for every current instrument.

        Listeners are notified in the order in which they were added. Instruments
        registered while the replay runs are delivered exactly once, either by
        the replay or live.
        """
        with self._lock:
            self._listeners = self._listeners + (listener,)
            entries = list(self._metrics.items())
        logger.debug(f"Listener {type(listener).__name__} added, replaying {len(entries)} instruments")
        for name, instrument in entries:
            if not self._deliver(listener, added_callback(listener, name, instrument)):
                break

    def remove_listener(self, listener: RegistryListener) -> None:
        """Detach a listener; it receives no further notifications.

        Blocks until callbacks to the listener already running on other threads
        have returned. A callback must not wait on a thread that is inside
        remove_listener() for the same listener.
        """
        current = threading.get_ident()
        with self._lock:
            listeners = list(self._listeners)
            try:
                removed = listeners.pop(listeners.index(listener))
            except ValueError:
                return
            self._listeners = tuple(listeners)
            self._idle.wait_for(
                lambda: all(ident == current for ident in self._delivering.get(id(removed), ()))
            )
        logger.debug(f"Listener {type(listener).__name__} removed")

    def _dispatch(self, listeners, resolve, name: Name, instrument: Instrument) -> None:
        for listener in listeners:
            self._deliver(listener, resolve(listener, name, instrument))

    def _deliver(self, listener: RegistryListener, callback: Callable[[], None]) -> bool:
        """Run callback if listener is still attached; return whether it ran.

        The membership check and the in-flight mark happen under the lock, so
        remove_listener() either wins and the callback is skipped, or waits for
        it to finish.
        """
        key = id(listener)
        current = threading.get_ident()
        with self._lock:
            if listener not in self._listeners:
                return False
            self._delivering.setdefault(key, []).append(current)
        try:
            callback()
        finally:
            with self._lock:
                threads = self._delivering[key]
                threads.remove(current)
                if not threads:
                    del self._delivering[key]
                self._idle.notify_all()
        return True

    # --- Queries ---

    def _entries(self) -> List[Tuple[Name, Instrument]]:
        with self._lock:
            return list(self._metrics.items())

    def get(self, name: NameLike) -> Optional[Instrument]:
        """Return the instrument bound to name, or None."""
        name = to_name(name)
        with self._lock:
            return self._metrics.get(name)

    def get_names(self) -> Tuple[Name, ...]:
        """Sorted names of all registered instruments."""
        with self._lock:
            names = list(self._metrics.keys())
        return tuple(sorted(names))

    def get_gauges(self, metric_filter: MetricFilter = ALL) -> Mapping[Name, Gauge]:
        return self._get_instruments(InstrumentKind.GAUGE, metric_filter)

    def get_counters(self, metric_filter: MetricFilter = ALL) -> Mapping[Name, Counter]:
        return self._get_instruments(InstrumentKind.COUNTER, metric_filter)

    def get_histograms(self, metric_filter: MetricFilter = ALL) -> Mapping[Name, Histogram]:
        return self._get_instruments(InstrumentKind.HISTOGRAM, metric_filter)

    def get_meters(self, metric_filter: MetricFilter = ALL) -> Mapping[Name, Meter]:
        return self._get_instruments(InstrumentKind.METER, metric_filter)

    def get_timers(self, metric_filter: MetricFilter = ALL) -> Mapping[Name, Timer]:
        return self._get_instruments(InstrumentKind.TIMER, metric_filter)

    def _get_instruments(self, kind: InstrumentKind, metric_filter: MetricFilter) -> Mapping[Name, Instrument]:
        selected = [
            (name, instrument)
            for name, instrument in self._entries()
            if _kind_or_none(instrument) is kind and metric_filter(name, instrument)
        ]
        selected.sort(key=lambda entry: entry[0])
        return MappingProxyType(dict(selected))

    def get_all(self) -> Mapping[Name, Instrument]:
        """Immutable snapshot of the whole name -> instrument mapping."""
        return MappingProxyType(dict(self._entries()))

    def get_instruments(self) -> Mapping[Name, Instrument]:
        return self.get_all()

    def inventory(self) -> RegistryInventoryModel:
        """Describe what is registered, grouped by kind, as a Pydantic model."""
        grouped: Dict[InstrumentKind, List[str]] = {kind: [] for kind in InstrumentKind}
        entries = sorted(self._entries(), key=lambda entry: entry[0])
        for name, instrument in entries:
            kind = _kind_or_none(instrument)
            if kind is not None:
                grouped[kind].append(name.key)

        return RegistryInventoryModel(
            timestamp=time.time(),
            total=len(entries),
            gauges=grouped[InstrumentKind.GAUGE],
            counters=grouped[InstrumentKind.COUNTER],
            histograms=grouped[InstrumentKind.HISTOGRAM],
            meters=grouped[InstrumentKind.METER],
            timers=grouped[InstrumentKind.TIMER],
        )

    def __len__(self):
        with self._lock:
            return len(self._metrics)

    def __contains__(self, name):
        return self.get(name) is not None

    def __repr__(self):
        return f"MetricRegistry(instruments={len(self)}, listeners={len(self._listeners)})"
