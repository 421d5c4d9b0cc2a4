"""Gauges describing the current process and host.

Values are read from psutil each time a gauge is read, so registering the set
costs nothing until somebody looks at it.
"""

import threading
from typing import Dict, Mapping, Optional

import psutil

from metrics_registry.core.logging_config import get_logger
from metrics_registry.instruments import Gauge
from metrics_registry.registry import InstrumentSet, Name

logger = get_logger(__name__)

_MB = 1024 * 1024


class ProcessInstrumentSet(InstrumentSet):
    """CPU, memory and thread gauges for one process (the current one by default).

    Usage example:
    ```python
    registry.register("process", ProcessInstrumentSet())
    registry.get_gauges()[Name.build("process", "cpu", "percent")].value
    ```
    """

    def __init__(self, pid: Optional[int] = None):
        self._process = psutil.Process(pid)

    def _cpu_percent(self) -> float:
        # First call after creation returns 0.0; psutil needs a previous sample
        return self._process.cpu_percent(interval=None)

    def _rss_mb(self) -> float:
        return self._process.memory_info().rss / _MB

    def _memory_percent(self) -> float:
        return self._process.memory_percent()

    def _system_memory_percent(self) -> float:
        return psutil.virtual_memory().percent

    def _thread_count(self) -> int:
        try:
            return self._process.num_threads()
        except psutil.AccessDenied:
            logger.debug(f"Thread count of pid {self._process.pid} not readable, using threading.active_count()")
            return threading.active_count()

    def get_instruments(self) -> Mapping[Name, Gauge]:
        gauges: Dict[Name, Gauge] = {
            Name.build("cpu", "percent"): Gauge(self._cpu_percent),
            Name.build("memory", "rss_mb"): Gauge(self._rss_mb),
            Name.build("memory", "percent"): Gauge(self._memory_percent),
            Name.build("system", "memory_percent"): Gauge(self._system_memory_percent),
            Name.build("threads", "count"): Gauge(self._thread_count),
        }
        return gauges
