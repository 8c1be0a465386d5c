"""
HackeyeBot - Join History Tests
===============================

Tests for the sliding join window and account age conversion.
"""

from datetime import datetime, timezone

import pytest

from hackeye.services.raid_predictor import JoinHistory, account_age_days


T0 = 1_700_000_000.0
DAY = 86400.0


class TestAccountAge:
    """Tests for account age conversion."""

    def test_epoch_seconds(self):
        assert account_age_days(T0 - 2 * DAY, T0) == pytest.approx(2.0)

    def test_aware_datetime(self):
        created = datetime.fromtimestamp(T0 - 400 * DAY, tz=timezone.utc)
        assert account_age_days(created, T0) == pytest.approx(400.0)

    def test_missing_creation_time_is_brand_new(self):
        assert account_age_days(None, T0) == 0.0

    def test_future_creation_time_clamps_to_zero(self):
        assert account_age_days(T0 + 60, T0) == 0.0


class TestJoinHistory:
    """Tests for recording and pruning joins."""

    def test_record_returns_window_ending_with_new_join(self):
        history = JoinHistory()
        history.record(400.0, "moonlight", T0)
        window = history.record(2.0, "nightbot7", T0 + 30)

        assert [e.username for e in window] == ["moonlight", "nightbot7"]
        assert window[-1].timestamp == T0 + 30

    def test_record_prunes_old_joins(self):
        history = JoinHistory()
        history.record(1.0, "old", T0)
        window = history.record(1.0, "new", T0 + 601)

        assert [e.username for e in window] == ["new"]

    def test_join_exactly_at_window_edge_is_kept(self):
        history = JoinHistory()
        history.record(1.0, "edge", T0)
        window = history.record(1.0, "new", T0 + 600)

        assert len(window) == 2

    def test_returned_window_is_a_copy(self):
        history = JoinHistory()
        window = history.record(1.0, "a", T0)
        window.clear()
        assert len(history) == 1

    def test_missing_username_stored_as_empty(self):
        history = JoinHistory()
        window = history.record(1.0, None, T0)
        assert window[0].username == ""

    @pytest.mark.parametrize("offsets,now", [
        ([0, 100, 200, 650, 700], T0 + 1200),
        ([0, 1, 2, 3], T0 + 3),
        ([0, 300, 599, 600, 601], T0 + 1201),
        ([], T0),
    ])
    def test_prune_is_idempotent_and_bounded(self, offsets, now):
        history = JoinHistory()
        for offset in offsets:
            history.record(10.0, f"user{offset}", T0 + offset)

        history.prune(now)
        once = history.events
        removed = history.prune(now)

        assert removed == 0
        assert history.events == once
        assert all(now - e.timestamp <= 600 for e in once)
