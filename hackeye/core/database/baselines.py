"""
HackeyeBot - Baseline Metrics Mixin
===================================

Persistence for per-(guild, metric type) EWMA baselines.
"""

from typing import TYPE_CHECKING, List, Optional

from hackeye.core.database.models import BaselineMetricRecord

if TYPE_CHECKING:
    from .manager import DatabaseManager


class BaselinesMixin:
    """Mixin for baseline metric operations."""

    def get_baseline_metric(
        self: "DatabaseManager",
        guild_id: int,
        metric_type: str,
    ) -> Optional[BaselineMetricRecord]:
        """Get the stored baseline for one metric, or None if never observed."""
        row = self.fetchone(
            """SELECT guild_id, metric_type, baseline, std_dev, sample_size, last_updated
               FROM baseline_metrics WHERE guild_id = ? AND metric_type = ?""",
            (guild_id, metric_type)
        )
        return dict(row) if row else None

    def get_guild_baselines(self: "DatabaseManager", guild_id: int) -> List[BaselineMetricRecord]:
        """Get every stored baseline for a guild."""
        rows = self.fetchall(
            """SELECT guild_id, metric_type, baseline, std_dev, sample_size, last_updated
               FROM baseline_metrics WHERE guild_id = ?""",
            (guild_id,)
        )
        return [dict(row) for row in rows]

    def upsert_baseline_metric(
        self: "DatabaseManager",
        guild_id: int,
        metric_type: str,
        baseline: float,
        std_dev: float,
        sample_size: int,
        last_updated: float,
    ) -> bool:
        """
        Insert or update a baseline record.

        DESIGN: Conflicting writes for the same key resolve last-writer-wins
        on (sample_size, last_updated). A write carrying a smaller sample
        size than the stored one is discarded; equal sample sizes keep the
        newer timestamp.

        Returns:
            True if the row was written, False if a newer record won.
        """
        cursor = self.execute(
            """INSERT INTO baseline_metrics
               (guild_id, metric_type, baseline, std_dev, sample_size, last_updated)
               VALUES (?, ?, ?, ?, ?, ?)
               ON CONFLICT(guild_id, metric_type) DO UPDATE SET
                   baseline = excluded.baseline,
                   std_dev = excluded.std_dev,
                   sample_size = excluded.sample_size,
                   last_updated = excluded.last_updated
               WHERE excluded.sample_size > baseline_metrics.sample_size
                  OR (excluded.sample_size = baseline_metrics.sample_size
                      AND excluded.last_updated >= baseline_metrics.last_updated)""",
            (guild_id, metric_type, baseline, std_dev, sample_size, last_updated)
        )
        return cursor.rowcount > 0


__all__ = ["BaselinesMixin"]
