"""
HackeyeBot - Baseline Engine
============================

Learns what "normal" activity looks like for each guild.

DESIGN:
    Every event becomes a sample rate (events per minute implied by the
    gap since the previous event of the same metric). The stored baseline
    is a one-pass EWMA mean/variance tracker over those rates, so the
    standard deviation measures how much each new rate surprises the
    running baseline.

    The engine holds no per-guild state of its own: the caller passes the
    guild's RateTracker, owned by that guild's worker.
"""

import math
import time
from typing import TYPE_CHECKING, Any, Optional

from hackeye.core.logger import logger

from .constants import EWMA_ALPHA
from .models import BaselineRecord, BaselineSnapshot, MetricType, RateTracker

if TYPE_CHECKING:
    from hackeye.core.database import DatabaseManager


def ewma_update(
    previous: Optional[BaselineRecord],
    sample_rate: float,
    now: float,
    alpha: float = EWMA_ALPHA,
) -> BaselineRecord:
    """
    Fold one sample rate into a baseline.

    A fresh baseline is seeded with the sample itself, zero deviation and a
    sample size of one.
    """
    if previous is None:
        return BaselineRecord(baseline=sample_rate, std_dev=0.0, sample_size=1, last_updated=now)

    delta = sample_rate - previous.baseline
    baseline = previous.baseline + alpha * delta
    variance = (1 - alpha) * previous.std_dev ** 2 + alpha * delta ** 2

    return BaselineRecord(
        baseline=baseline,
        std_dev=math.sqrt(variance),
        sample_size=previous.sample_size + 1,
        last_updated=now,
    )


class BaselineEngine:
    """Converts raw events into sample rates and updates stored baselines."""

    def __init__(self, db: "DatabaseManager") -> None:
        self.db = db

    # =========================================================================
    # Recording
    # =========================================================================

    def record_event(
        self,
        guild_id: Optional[int],
        metric_type: Any,
        tracker: RateTracker,
        now: Optional[float] = None,
    ) -> Optional[BaselineRecord]:
        """
        Record one event and update the guild's baseline for that metric.

        Args:
            guild_id: Guild the event happened in.
            metric_type: A MetricType (or its stored value).
            tracker: The guild's rate tracker.
            now: Event time in epoch seconds.

        Returns:
            The updated baseline, or None for invalid input.

        Raises:
            sqlite3.Error: If the store read or write fails. The tracker has
                already recorded the event and is not rolled back.
        """
        metric = MetricType.parse(metric_type)
        if not guild_id or metric is None or tracker is None:
            return None

        now = time.time() if now is None else now
        sample_rate = tracker.sample(metric, now)

        row = self.db.get_baseline_metric(guild_id, metric.value)
        previous = BaselineRecord.from_row(row) if row else None
        updated = ewma_update(previous, sample_rate, now)

        written = self.db.upsert_baseline_metric(
            guild_id,
            metric.value,
            updated.baseline,
            updated.std_dev,
            updated.sample_size,
            updated.last_updated,
        )
        if not written:
            logger.debug("Baseline Write Superseded", [
                ("Guild ID", str(guild_id)),
                ("Metric", metric.value),
                ("Sample Size", str(updated.sample_size)),
            ])

        return updated

    def record_join(self, guild_id: Optional[int], tracker: RateTracker, now: Optional[float] = None) -> Optional[BaselineRecord]:
        return self.record_event(guild_id, MetricType.JOINS, tracker, now)

    def record_message(
        self,
        guild_id: Optional[int],
        tracker: RateTracker,
        contains_link: bool = False,
        now: Optional[float] = None,
    ) -> Optional[BaselineRecord]:
        """Record a message, and a link event too when it carries a link."""
        result = self.record_event(guild_id, MetricType.MESSAGES, tracker, now)
        if contains_link:
            self.record_event(guild_id, MetricType.LINKS, tracker, now)
        return result

    def record_permission_change(
        self,
        guild_id: Optional[int],
        tracker: RateTracker,
        now: Optional[float] = None,
    ) -> Optional[BaselineRecord]:
        return self.record_event(guild_id, MetricType.PERMISSION_CHANGES, tracker, now)

    # =========================================================================
    # Snapshots
    # =========================================================================

    def get_snapshot(self, guild_id: Optional[int]) -> BaselineSnapshot:
        """
        Read every stored baseline for a guild.

        Unknown metric names in the store are skipped.
        """
        if not guild_id:
            return BaselineSnapshot(guild_id=None)

        metrics = {}
        for row in self.db.get_guild_baselines(guild_id):
            metric = MetricType.parse(row["metric_type"])
            if metric is not None:
                metrics[metric] = BaselineRecord.from_row(row)

        return BaselineSnapshot(guild_id=guild_id, metrics=metrics)


__all__ = ["BaselineEngine", "ewma_update"]
