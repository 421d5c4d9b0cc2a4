"""
Tests for listener attachment, backfill and kind dispatch.
"""

import logging
import threading

import pytest

import metrics_registry.registry.listeners as listener_module

from metrics_registry.instruments import Counter, Gauge, Histogram, Instrument, Meter, Timer
from metrics_registry.registry import (
    BaseRegistryListener,
    DuplicateNameError,
    LoggingRegistryListener,
    Name,
    UnknownVariantError,
    kind_of,
    notify_added,
    starts_with,
)


def test_each_kind_dispatches_to_its_own_callback(registry, make_listener):
    """Test that exactly one kind-specific callback fires per added/removed instrument."""
    listener = make_listener()
    registry.add_listener(listener)

    registry.register("g", Gauge(lambda: 1))
    registry.counter("c")
    registry.histogram("h")
    registry.meter("m")
    registry.timer("t")
    for key in ["g", "c", "h", "m", "t"]:
        registry.remove(key)

    assert listener.events == [
        ("gauge_added", "g"),
        ("counter_added", "c"),
        ("histogram_added", "h"),
        ("meter_added", "m"),
        ("timer_added", "t"),
        ("gauge_removed", "g"),
        ("counter_removed", "c"),
        ("histogram_removed", "h"),
        ("meter_removed", "m"),
        ("timer_removed", "t"),
    ]


def test_add_listener_backfills_existing_instruments_first(registry, make_listener):
    """Test the backfill law: existing entries replay before new live events."""
    registry.counter("m1")
    registry.meter("m2")
    listener = make_listener()

    registry.add_listener(listener)
    registry.timer("m3")

    assert sorted(listener.events[:2]) == [("counter_added", "m1"), ("meter_added", "m2")]
    assert listener.events[2:] == [("timer_added", "m3")]


def test_removed_listener_gets_no_further_events(registry, make_listener):
    """Test that remove_listener() stops all notifications."""
    listener = make_listener()
    registry.add_listener(listener)
    registry.counter("a")

    registry.remove_listener(listener)
    registry.counter("b")
    registry.remove("a")

    assert listener.events == [("counter_added", "a")]


def test_remove_unknown_listener_is_a_no_op(registry, make_listener):
    """Test that removing a listener that was never added does nothing."""
    registry.remove_listener(make_listener())


def test_listener_removed_during_dispatch_is_skipped(registry, make_listener):
    """Test that an in-flight dispatch does not reach a listener detached mid-way."""
    late = make_listener()

    class Detacher(BaseRegistryListener):
        def on_counter_added(self, name, counter):
            registry.remove_listener(late)

    registry.add_listener(Detacher())
    registry.add_listener(late)

    registry.counter("a")

    assert late.events == []


def test_listeners_are_notified_in_attachment_order(registry):
    """Test that all listeners see events in the order they were added."""
    calls = []

    class Named(BaseRegistryListener):
        def __init__(self, label):
            self.label = label

        def on_counter_added(self, name, counter):
            calls.append(self.label)

    for label in ["first", "second", "third"]:
        registry.add_listener(Named(label))

    registry.counter("x")

    assert calls == ["first", "second", "third"]


def test_remove_matching_notifies_each_listener_once(registry, make_listener):
    """Test the concrete scenario from get-or-create through filtered removal."""
    listeners = [make_listener(), make_listener()]
    counter = registry.counter("a.b")
    assert registry.counter("a.b") is counter

    with pytest.raises(DuplicateNameError):
        registry.register(Name.build("a", "b"), Counter())

    for listener in listeners:
        registry.add_listener(listener)

    registry.remove_matching(starts_with("a"))

    for listener in listeners:
        assert listener.events == [("counter_added", "a.b"), ("counter_removed", "a.b")]
    assert len(registry) == 0


def test_unknown_variant_is_fatal_at_dispatch(registry, make_listener):
    """Test that a value outside the closed instrument set raises UnknownVariantError."""
    registry.add_listener(make_listener())

    with pytest.raises(UnknownVariantError):
        registry.register("weird", object())


def test_instrument_subclass_without_kind_is_unknown():
    """Test that kind_of() rejects Instrument subclasses that never set a kind."""

    class Homemade(Instrument):
        pass

    with pytest.raises(UnknownVariantError):
        kind_of(Homemade())
    with pytest.raises(UnknownVariantError):
        notify_added(BaseRegistryListener(), Name.build("x"), Homemade())
    assert not isinstance(UnknownVariantError(object()), ValueError)


def test_subclassed_variants_keep_their_kind(registry, make_listener):
    """Test that subclasses of a variant dispatch as that variant."""

    class RequestCounter(Counter):
        pass

    listener = make_listener()
    registry.add_listener(listener)
    registry.register("requests", RequestCounter())

    assert registry.counter("requests").__class__ is RequestCounter
    assert listener.events == [("counter_added", "requests")]


def test_logging_listener_logs_additions_and_removals(registry, caplog):
    """Test that LoggingRegistryListener writes one record per event."""
    caplog.set_level(logging.INFO, logger="metrics_registry")
    registry.add_listener(LoggingRegistryListener())

    registry.timer("db.query")
    registry.remove("db.query")

    messages = [record.getMessage() for record in caplog.records]
    assert "timer added: db.query" in messages
    assert "timer removed: db.query" in messages


def test_listener_exceptions_propagate_to_caller(registry):
    """Test that a failing listener surfaces its error after the entry is stored."""

    class Broken(BaseRegistryListener):
        def on_histogram_added(self, name, histogram):
            raise RuntimeError("listener failed")

    registry.add_listener(Broken())

    with pytest.raises(RuntimeError):
        registry.register("h", Histogram())
    assert isinstance(registry.get("h"), Histogram)


def test_backfill_uses_registry_contents(registry, make_listener):
    """Test that backfill covers sets registered earlier, leaf by leaf."""
    from metrics_registry.registry import StaticInstrumentSet

    registry.register("pool", StaticInstrumentSet({"size": Gauge(lambda: 3), "wait": Timer()}))
    listener = make_listener()
    registry.add_listener(listener)

    assert sorted(listener.events) == [("gauge_added", "pool.size"), ("timer_added", "pool.wait")]


def test_meter_listener_callback_receives_instrument(registry):
    """Test that added callbacks receive the registered instance itself."""
    received = {}

    class Capture(BaseRegistryListener):
        def on_meter_added(self, name, meter):
            received[name] = meter

    registry.add_listener(Capture())
    meter = registry.meter("events")

    assert received == {Name.build("events"): meter}
    assert isinstance(meter, Meter)


def test_listener_removed_while_its_event_is_resolved_is_skipped(registry, make_listener, monkeypatch):
    """Test that a removal finishing on another thread before delivery wins."""
    late = make_listener()
    registry.add_listener(late)
    real_kind_of = listener_module.kind_of

    def remove_then_resolve(instrument):
        remover = threading.Thread(target=registry.remove_listener, args=(late,))
        remover.start()
        remover.join(timeout=5)
        assert not remover.is_alive()
        return real_kind_of(instrument)

    monkeypatch.setattr(listener_module, "kind_of", remove_then_resolve)

    registry.counter("a")

    assert late.events == []
    assert "a" in registry


def test_remove_listener_waits_for_running_callback(registry):
    """Test that remove_listener() returns only after an in-progress callback finishes."""
    entered = threading.Event()
    release = threading.Event()
    removed = threading.Event()
    seen = []

    class Slow(BaseRegistryListener):
        def on_counter_added(self, name, counter):
            seen.append(name.key)
            entered.set()
            release.wait(timeout=5)

    slow = Slow()
    registry.add_listener(slow)

    producer = threading.Thread(target=registry.counter, args=("a",))
    producer.start()
    assert entered.wait(timeout=5)

    def detach():
        registry.remove_listener(slow)
        removed.set()

    remover = threading.Thread(target=detach)
    remover.start()

    assert not removed.wait(timeout=0.2)
    release.set()
    producer.join(timeout=5)
    remover.join(timeout=5)

    assert removed.is_set()
    registry.counter("b")
    assert seen == ["a"]


def test_listener_can_remove_itself_from_its_callback(registry):
    """Test that self-removal inside a callback does not block and stops later events."""
    seen = []

    class OneShot(BaseRegistryListener):
        def on_counter_added(self, name, counter):
            seen.append(name.key)
            registry.remove_listener(self)

    registry.add_listener(OneShot())

    registry.counter("a")
    registry.counter("b")

    assert seen == ["a"]
