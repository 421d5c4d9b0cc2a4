import logging
from typing import List, Tuple

import pytest

from metrics_registry.registry import BaseRegistryListener, MetricRegistry, reset_default_registry


class RecordingListener(BaseRegistryListener):
    """Listener that records every callback as (event, dotted name)."""

    def __init__(self):
        self.events: List[Tuple[str, str]] = []

    def on_gauge_added(self, name, gauge):
        self.events.append(("gauge_added", name.key))

    def on_gauge_removed(self, name):
        self.events.append(("gauge_removed", name.key))

    def on_counter_added(self, name, counter):
        self.events.append(("counter_added", name.key))

    def on_counter_removed(self, name):
        self.events.append(("counter_removed", name.key))

    def on_histogram_added(self, name, histogram):
        self.events.append(("histogram_added", name.key))

    def on_histogram_removed(self, name):
        self.events.append(("histogram_removed", name.key))

    def on_meter_added(self, name, meter):
        self.events.append(("meter_added", name.key))

    def on_meter_removed(self, name):
        self.events.append(("meter_removed", name.key))

    def on_timer_added(self, name, timer):
        self.events.append(("timer_added", name.key))

    def on_timer_removed(self, name):
        self.events.append(("timer_removed", name.key))


@pytest.fixture
def registry():
    """Fresh MetricRegistry per test."""
    return MetricRegistry()


@pytest.fixture
def make_listener():
    """Factory for RecordingListener instances."""
    return RecordingListener


@pytest.fixture(autouse=True)
def _reset_package_logging():
    """Keep handlers/levels set by one test from leaking into the next."""
    logger = logging.getLogger("metrics_registry")
    handlers = list(logger.handlers)
    level = logger.level
    yield
    for handler in list(logger.handlers):
        if handler not in handlers:
            logger.removeHandler(handler)
            handler.close()
    logger.setLevel(level)
    reset_default_registry()
