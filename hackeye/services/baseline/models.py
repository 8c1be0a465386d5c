"""
Baseline Data Models
====================

Metric types, baseline records, snapshots and per-guild rate state.
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from .constants import MIN_SAMPLE_INTERVAL, RATE_UNIT_SECONDS, SEED_SAMPLE_RATE


class MetricType(str, Enum):
    """Activity metrics with a learned baseline. Values are the stored keys."""
    JOINS = "joins_per_minute"
    MESSAGES = "messages_per_minute"
    LINKS = "links_per_minute"
    PERMISSION_CHANGES = "perm_changes_per_minute"

    @classmethod
    def parse(cls, value: Any) -> Optional["MetricType"]:
        """Return the matching member, or None for anything unknown."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


@dataclass(frozen=True)
class BaselineRecord:
    """EWMA baseline for one (guild, metric type) pair, in events/minute."""
    baseline: float
    std_dev: float
    sample_size: int
    last_updated: float

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "BaselineRecord":
        return cls(
            baseline=float(row["baseline"]),
            std_dev=float(row["std_dev"]),
            sample_size=int(row["sample_size"]),
            last_updated=float(row["last_updated"]),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "baseline": self.baseline,
            "std_dev": self.std_dev,
            "sample_size": self.sample_size,
            "last_updated": self.last_updated,
        }


@dataclass(frozen=True)
class BaselineSnapshot:
    """Read-only view of every baseline stored for a guild."""
    guild_id: Optional[int]
    metrics: Dict[MetricType, BaselineRecord] = field(default_factory=dict)

    def get(self, metric_type: MetricType) -> Optional[BaselineRecord]:
        return self.metrics.get(metric_type)

    @property
    def join_rate(self) -> float:
        """Learned join baseline, 0 when the guild has no join history."""
        record = self.metrics.get(MetricType.JOINS)
        return record.baseline if record else 0.0

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        """Plain mapping keyed by stored metric name, for incident payloads."""
        return {metric.value: record.to_dict() for metric, record in self.metrics.items()}


@dataclass
class RateState:
    """Inter-arrival timing for one metric. Never persisted."""
    last_event_at: Optional[float] = None
    last_sample_rate: Optional[float] = None


class RateTracker:
    """
    Converts discrete events into per-minute sample rates for one guild.

    DESIGN:
        Each event implies a rate from the gap since the previous event of
        the same metric. Gaps under MIN_SAMPLE_INTERVAL reuse the previous
        rate so near-simultaneous events cannot produce a rate spike.
    """

    def __init__(self) -> None:
        self._states: Dict[MetricType, RateState] = {}

    def state(self, metric_type: MetricType) -> RateState:
        state = self._states.get(metric_type)
        if state is None:
            state = RateState()
            self._states[metric_type] = state
        return state

    def sample(self, metric_type: MetricType, now: Optional[float] = None) -> float:
        """
        Record an event and return the sample rate it implies.

        Args:
            metric_type: Metric the event belongs to.
            now: Event time in epoch seconds (defaults to time.time()).

        Returns:
            Events per minute implied by this event.
        """
        now = time.time() if now is None else now
        state = self.state(metric_type)
        last = state.last_event_at

        sample_rate = SEED_SAMPLE_RATE
        if last is not None:
            gap = now - last
            if gap >= MIN_SAMPLE_INTERVAL:
                sample_rate = RATE_UNIT_SECONDS / gap
            else:
                sample_rate = state.last_sample_rate or SEED_SAMPLE_RATE

        state.last_event_at = now
        state.last_sample_rate = sample_rate
        return sample_rate

    def __len__(self) -> int:
        return len(self._states)


__all__ = [
    "MetricType",
    "BaselineRecord",
    "BaselineSnapshot",
    "RateState",
    "RateTracker",
]
