"""
HackeyeBot - Baseline Package
=============================

Per-guild EWMA activity baselines.
"""

from .constants import EWMA_ALPHA, MIN_SAMPLE_INTERVAL
from .engine import BaselineEngine, ewma_update
from .models import (
    BaselineRecord,
    BaselineSnapshot,
    MetricType,
    RateState,
    RateTracker,
)

__all__ = [
    "BaselineEngine",
    "ewma_update",
    "BaselineRecord",
    "BaselineSnapshot",
    "MetricType",
    "RateState",
    "RateTracker",
    "EWMA_ALPHA",
    "MIN_SAMPLE_INTERVAL",
]
