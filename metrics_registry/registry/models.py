"""Pydantic V2 models describing registry contents.

These models list what is registered; they carry names only, never values.
"""

from typing import List
from pydantic import BaseModel, ConfigDict


class RegistryInventoryModel(BaseModel):
    """Registered instrument names grouped by kind, each list sorted by Name."""
    model_config = ConfigDict(from_attributes=True)

    timestamp: float
    total: int
    gauges: List[str]
    counters: List[str]
    histograms: List[str]
    meters: List[str]
    timers: List[str]
