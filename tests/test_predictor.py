"""
HackeyeBot - Raid Predictor Tests
=================================

Tests for feature extraction, scoring and level mapping.
"""

import random
from dataclasses import replace

import pytest

from hackeye.services.baseline import BaselineRecord, BaselineSnapshot, MetricType
from hackeye.services.raid_predictor import (
    AssessmentStatus,
    JoinEvent,
    JoinHistory,
    RaidLevel,
    RaidPredictor,
    map_risk_to_level,
    username_similarity,
)


T0 = 1_700_000_000.0
GUILD_ID = 4242


def empty_snapshot():
    return BaselineSnapshot(guild_id=GUILD_ID)


def snapshot_with_join_rate(rate):
    record = BaselineRecord(baseline=rate, std_dev=0.0, sample_size=3, last_updated=T0)
    return BaselineSnapshot(guild_id=GUILD_ID, metrics={MetricType.JOINS: record})


class TestUsernameSimilarity:
    """Tests for character-set Jaccard similarity."""

    def test_known_value(self):
        # {n,i,g,h,t,b,o,7} vs {m,o,n,l,i,g,h,t}: 6 shared of 10
        assert username_similarity("nightbot7", "moonlight") == pytest.approx(0.6)

    def test_case_insensitive(self):
        assert username_similarity("RAIDER", "raider") == 1.0

    @pytest.mark.parametrize("a,b", [("", "abc"), (None, "abc"), ("abc", None), ("", ""), (None, None)])
    def test_empty_names_score_zero(self, a, b):
        assert username_similarity(a, b) == 0.0

    @pytest.mark.parametrize("a,b", [
        ("moonlight", "nightbot7"),
        ("raider1", "raider22"),
        ("Alice", "bob"),
        ("x", "xyz"),
        ("", "abc"),
    ])
    def test_symmetric(self, a, b):
        assert username_similarity(a, b) == username_similarity(b, a)

    @pytest.mark.parametrize("name", ["a", "moonlight", "user_123", "ÄÖÜ"])
    def test_identity_is_one(self, name):
        assert username_similarity(name, name) == 1.0


class TestLevelMapping:
    """Tests for risk to level mapping."""

    @pytest.mark.parametrize("score,level", [
        (0.0, RaidLevel.NONE),
        (0.2999, RaidLevel.NONE),
        (0.3, RaidLevel.LOW),
        (0.4999, RaidLevel.LOW),
        (0.5, RaidLevel.MEDIUM),
        (0.7499, RaidLevel.MEDIUM),
        (0.75, RaidLevel.HIGH),
        (0.8999, RaidLevel.HIGH),
        (0.9, RaidLevel.CRITICAL),
        (1.0, RaidLevel.CRITICAL),
    ])
    def test_thresholds(self, score, level):
        assert map_risk_to_level(score) is level


class TestEvaluate:
    """Tests for the full assessment."""

    def test_degenerate_input_is_tagged(self):
        predictor = RaidPredictor()
        joining = JoinEvent(timestamp=T0, account_age_days=1.0, username="x")

        for guild_id, event in [(None, joining), (0, joining), (GUILD_ID, None)]:
            result = predictor.evaluate(guild_id, event, [joining], empty_snapshot())
            assert result.status is AssessmentStatus.DEGENERATE
            assert result.is_degenerate
            assert result.risk_score == 0.0
            assert result.level is RaidLevel.NONE
            assert result.features_dict() == {}

    def test_exact_score_with_empty_baseline(self):
        """One prior established member, then a two-day-old account 30s later."""
        history = JoinHistory()
        history.record(400.0, "moonlight", T0)
        window = history.record(2.0, "nightbot7", T0 + 30)

        result = RaidPredictor().evaluate(GUILD_ID, window[-1], window, empty_snapshot())

        # velocity: 2 joins / baseline 1 -> 2/3; young 1/2; similarity 0.6
        # 0.5 * 0.6667 + 0.3 * 0.5 + 0.2 * 0.6 = 0.603
        assert result.status is AssessmentStatus.SCORED
        assert round(result.risk_score, 3) == 0.603
        assert result.level is RaidLevel.MEDIUM

        features = result.features
        assert features.joins_last_10s == 1
        assert features.joins_last_30s == 2
        assert features.joins_last_60s == 2
        assert features.joins_last_5m == 2
        assert features.baseline_join_rate == 0.0
        assert features.velocity_ratio == pytest.approx(2.0)
        assert features.young_ratio == pytest.approx(0.5)
        assert features.username_similarity == pytest.approx(0.6)
        assert features.max_username_similarity == pytest.approx(0.6)
        assert features.account_age_days == 2.0

    def test_exact_score_with_learned_baseline(self):
        history = JoinHistory()
        history.record(400.0, "moonlight", T0)
        window = history.record(2.0, "nightbot7", T0 + 30)

        result = RaidPredictor().evaluate(GUILD_ID, window[-1], window, snapshot_with_join_rate(1.3))

        # 0.5 * (2 / 1.3 / 3) + 0.15 + 0.12 = 0.52641
        assert round(result.risk_score, 3) == 0.526
        assert result.level is RaidLevel.MEDIUM

    def test_component_scores_explain_the_risk(self):
        history = JoinHistory()
        history.record(400.0, "moonlight", T0)
        window = history.record(2.0, "nightbot7", T0 + 30)

        result = RaidPredictor().evaluate(GUILD_ID, window[-1], window, snapshot_with_join_rate(1.3))
        features = result.features

        assert features.effective_baseline == pytest.approx(1.3)
        assert features.join_velocity_score == pytest.approx(2 / 1.3 / 3)
        assert features.young_score == pytest.approx(0.5)
        assert features.username_score == pytest.approx(0.6)
        assert result.risk_score == pytest.approx(
            0.5 * features.join_velocity_score
            + 0.3 * features.young_score
            + 0.2 * features.username_score
        )

        stored = result.features_dict()
        for key in ("effective_baseline", "join_velocity_score", "young_score", "username_score"):
            assert key in stored

    def test_velocity_score_caps_and_empty_baseline_defaults_to_one(self):
        history = JoinHistory()
        window = []
        for i in range(4):
            window = history.record(400.0, f"user{i}", T0 + i * 12)

        features = RaidPredictor().evaluate(GUILD_ID, window[-1], window, empty_snapshot()).features

        assert features.effective_baseline == 1.0
        assert features.velocity_ratio == pytest.approx(4.0)
        assert features.join_velocity_score == 1.0

    def test_single_join_on_quiet_guild(self):
        history = JoinHistory()
        window = history.record(400.0, "moonlight", T0)

        result = RaidPredictor().evaluate(GUILD_ID, window[-1], window, empty_snapshot())

        assert round(result.risk_score, 3) == 0.167
        assert result.level is RaidLevel.NONE
        assert result.features.username_similarity == 0.0

    def test_zero_similarities_are_left_out_of_the_mean(self):
        history = JoinHistory()
        history.record(400.0, "abc", T0)
        history.record(400.0, "xyz", T0 + 1)
        window = history.record(400.0, "abd", T0 + 2)

        features = RaidPredictor().evaluate(GUILD_ID, window[-1], window, empty_snapshot()).features

        # "abd" vs "abc" = 2/4, vs "xyz" = 0 (ignored)
        assert features.username_similarity == pytest.approx(0.5)
        assert features.max_username_similarity == pytest.approx(0.5)

    def test_burst_bonus_applied(self):
        """Six joins inside eight seconds add the burst bonus."""
        history = JoinHistory()
        names = ["a1", "b2", "c3", "d4", "e5"]
        for i, name in enumerate(names):
            history.record(30.0, name, T0 + i * 1.5)
        window = history.record(30.0, "zzz", T0 + 8)

        predictor = RaidPredictor()
        result = predictor.evaluate(GUILD_ID, window[-1], window, empty_snapshot())
        pre_bonus = predictor.score(replace(result.features, joins_last_10s=0))

        assert result.features.joins_last_10s == 6
        assert pre_bonus == pytest.approx(0.5)
        assert result.risk_score == pytest.approx(min(1.0, pre_bonus + 0.1))
        assert round(result.risk_score, 3) == 0.6

    def test_burst_bonus_clamped_to_one(self):
        history = JoinHistory()
        for i in range(1, 6):
            history.record(1.0, f"raider{i}", T0 + i)
        window = history.record(1.0, "raider6", T0 + 7)

        predictor = RaidPredictor()
        result = predictor.evaluate(GUILD_ID, window[-1], window, empty_snapshot())
        pre_bonus = predictor.score(replace(result.features, joins_last_10s=0))

        assert pre_bonus > 0.9
        assert result.risk_score == 1.0
        assert result.level is RaidLevel.CRITICAL

    def test_four_fast_joins_get_no_bonus(self):
        history = JoinHistory()
        for i in range(3):
            history.record(30.0, f"q{i}", T0 + i)
        window = history.record(30.0, "zzz", T0 + 3)

        predictor = RaidPredictor()
        result = predictor.evaluate(GUILD_ID, window[-1], window, empty_snapshot())

        assert result.features.joins_last_10s == 4
        assert result.risk_score == predictor.score(replace(result.features, joins_last_10s=0))

    def test_score_always_within_unit_interval(self):
        rng = random.Random(1337)
        predictor = RaidPredictor()
        alphabet = "abcdefghij0123456789"

        for _ in range(300):
            history = JoinHistory()
            window = []
            t = T0
            for _ in range(rng.randint(1, 40)):
                t += rng.choice([0.0, 0.2, 1.0, 5.0, 45.0, 200.0])
                name = "".join(rng.choice(alphabet) for _ in range(rng.randint(0, 8)))
                window = history.record(rng.uniform(0, 2000), name, t)
            snapshot = snapshot_with_join_rate(rng.choice([0.0, 0.01, 1.0, 25.0, 500.0]))

            result = predictor.evaluate(GUILD_ID, window[-1], window, snapshot)
            assert 0.0 <= result.risk_score <= 1.0
