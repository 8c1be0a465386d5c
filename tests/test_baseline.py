"""
HackeyeBot - Baseline Engine Tests
==================================

Tests for sample rates, EWMA updates and stored baselines.
"""

import math
import sqlite3
from unittest.mock import MagicMock

import pytest

from hackeye.services.baseline import (
    BaselineEngine,
    BaselineRecord,
    MetricType,
    RateTracker,
    ewma_update,
)


T0 = 1_700_000_000.0


class TestRateTracker:
    """Tests for per-metric sample rate computation."""

    def test_first_event_seeds_rate_one(self):
        tracker = RateTracker()
        assert tracker.sample(MetricType.JOINS, T0) == 1.0

    def test_gap_converts_to_events_per_minute(self):
        tracker = RateTracker()
        tracker.sample(MetricType.JOINS, T0)
        assert tracker.sample(MetricType.JOINS, T0 + 30) == pytest.approx(2.0)
        assert tracker.sample(MetricType.JOINS, T0 + 150) == pytest.approx(0.5)

    def test_fast_retrigger_reuses_last_rate(self):
        tracker = RateTracker()
        tracker.sample(MetricType.JOINS, T0)
        tracker.sample(MetricType.JOINS, T0 + 4)  # 15/min
        assert tracker.sample(MetricType.JOINS, T0 + 4.5) == pytest.approx(15.0)
        assert tracker.sample(MetricType.JOINS, T0 + 4.5) == pytest.approx(15.0)

    def test_fast_retrigger_after_seed_stays_at_one(self):
        tracker = RateTracker()
        tracker.sample(MetricType.MESSAGES, T0)
        assert tracker.sample(MetricType.MESSAGES, T0 + 0.2) == 1.0

    def test_metrics_are_tracked_independently(self):
        tracker = RateTracker()
        tracker.sample(MetricType.JOINS, T0)
        assert tracker.sample(MetricType.MESSAGES, T0 + 10) == 1.0
        assert len(tracker) == 2


class TestEwmaUpdate:
    """Tests for the pure EWMA update."""

    @pytest.mark.parametrize("rate", [0.25, 1.0, 2.0, 60.0, 600.0])
    def test_fresh_baseline_equals_sample(self, rate):
        record = ewma_update(None, rate, T0)
        assert record.baseline == rate
        assert record.std_dev == 0.0
        assert record.sample_size == 1
        assert record.last_updated == T0

    def test_update_formula(self):
        previous = BaselineRecord(baseline=1.0, std_dev=0.0, sample_size=1, last_updated=T0)
        record = ewma_update(previous, 2.0, T0 + 30)
        assert record.baseline == pytest.approx(1.3)
        assert record.std_dev == pytest.approx(math.sqrt(0.3))
        assert record.sample_size == 2

    def test_sample_size_grows_by_one_per_update(self):
        record = None
        for i, rate in enumerate([1.0, 4.0, 0.5, 12.0, 3.0, 3.0, 60.0]):
            updated = ewma_update(record, rate, T0 + i)
            expected = 1 if record is None else record.sample_size + 1
            assert updated.sample_size == expected
            record = updated

    def test_constant_rate_keeps_baseline_and_decays_deviation(self):
        record = ewma_update(None, 5.0, T0)
        record = ewma_update(record, 10.0, T0 + 1)
        spread = record.std_dev
        for i in range(20):
            record = ewma_update(record, record.baseline, T0 + 2 + i)
        assert record.std_dev < spread


class TestBaselineEngine:
    """Tests for recording events into the store."""

    def test_first_join_creates_record(self, test_db):
        engine = BaselineEngine(test_db)
        record = engine.record_join(4242, RateTracker(), T0)

        assert record == BaselineRecord(baseline=1.0, std_dev=0.0, sample_size=1, last_updated=T0)
        stored = test_db.get_baseline_metric(4242, "joins_per_minute")
        assert stored["baseline"] == 1.0
        assert stored["sample_size"] == 1

    def test_second_join_updates_record(self, test_db):
        engine = BaselineEngine(test_db)
        tracker = RateTracker()
        engine.record_join(4242, tracker, T0)
        record = engine.record_join(4242, tracker, T0 + 30)

        assert record.baseline == pytest.approx(1.3)
        assert record.sample_size == 2
        assert test_db.get_baseline_metric(4242, "joins_per_minute")["sample_size"] == 2

    def test_message_with_link_updates_both_metrics(self, test_db):
        engine = BaselineEngine(test_db)
        engine.record_message(4242, RateTracker(), contains_link=True, now=T0)

        snapshot = engine.get_snapshot(4242)
        assert set(snapshot.metrics) == {MetricType.MESSAGES, MetricType.LINKS}

    def test_message_without_link_only_updates_messages(self, test_db):
        engine = BaselineEngine(test_db)
        engine.record_message(4242, RateTracker(), contains_link=False, now=T0)

        assert set(engine.get_snapshot(4242).metrics) == {MetricType.MESSAGES}

    def test_permission_change_metric(self, test_db):
        engine = BaselineEngine(test_db)
        engine.record_permission_change(4242, RateTracker(), T0)

        assert test_db.get_baseline_metric(4242, "perm_changes_per_minute") is not None

    def test_accepts_stored_metric_name(self, test_db):
        engine = BaselineEngine(test_db)
        record = engine.record_event(4242, "links_per_minute", RateTracker(), T0)
        assert record is not None

    @pytest.mark.parametrize("guild_id,metric", [
        (None, MetricType.JOINS),
        (0, MetricType.JOINS),
        (4242, "bogus_metric"),
        (4242, None),
    ])
    def test_invalid_input_is_a_no_op(self, guild_id, metric):
        db = MagicMock()
        engine = BaselineEngine(db)
        tracker = RateTracker()

        assert engine.record_event(guild_id, metric, tracker, T0) is None
        assert db.method_calls == []
        assert len(tracker) == 0

    def test_store_error_propagates_and_keeps_rate_state(self):
        db = MagicMock()
        db.get_baseline_metric.return_value = None
        db.upsert_baseline_metric.side_effect = sqlite3.OperationalError("database is locked")
        engine = BaselineEngine(db)
        tracker = RateTracker()

        with pytest.raises(sqlite3.OperationalError):
            engine.record_join(4242, tracker, T0)

        assert tracker.state(MetricType.JOINS).last_event_at == T0

    def test_snapshot_of_unknown_guild_is_empty(self, test_db):
        snapshot = BaselineEngine(test_db).get_snapshot(999)
        assert snapshot.metrics == {}
        assert snapshot.join_rate == 0.0

    def test_snapshot_to_dict_uses_stored_names(self, test_db):
        engine = BaselineEngine(test_db)
        engine.record_join(4242, RateTracker(), T0)

        data = engine.get_snapshot(4242).to_dict()
        assert data["joins_per_minute"]["baseline"] == 1.0
