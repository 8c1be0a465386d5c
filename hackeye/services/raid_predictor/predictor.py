"""
HackeyeBot - Raid Risk Predictor
================================

Scores a join against the guild's recent join window and learned baseline.

DESIGN:
    Three signals are fused into one score in [0, 1]:
    - Join velocity: joins in the last minute relative to the learned
      join rate, saturating at VELOCITY_SATURATION times normal.
    - Young accounts: share of windowed joins with accounts a week old
      or less.
    - Username similarity: mean character-set Jaccard similarity between
      the new name and every other name in the window.

    A burst of BURST_JOIN_COUNT joins inside ten seconds adds a flat bonus.
    The predictor is pure; the window is supplied by the caller.
"""

import time
from typing import Optional, Sequence, Tuple

from hackeye.services.baseline import BaselineSnapshot

from .constants import (
    BURST_BONUS,
    BURST_JOIN_COUNT,
    HORIZON_10S,
    HORIZON_30S,
    HORIZON_5M,
    HORIZON_60S,
    LEVEL_THRESHOLDS,
    USERNAME_WEIGHT,
    VELOCITY_SATURATION,
    VELOCITY_WEIGHT,
    YOUNG_ACCOUNT_DAYS,
    YOUNG_WEIGHT,
)
from .models import AssessmentStatus, JoinEvent, RaidAssessment, RaidFeatures, RaidLevel
from .similarity import username_similarity


def component_scores(
    velocity_ratio: float,
    young_ratio: float,
    similarity: float,
) -> Tuple[float, float, float]:
    """Velocity, young-account and username scores, each capped at 1."""
    return (
        min(1.0, velocity_ratio / VELOCITY_SATURATION),
        min(1.0, young_ratio),
        min(1.0, similarity),
    )


def map_risk_to_level(score: float) -> RaidLevel:
    """Map a risk score to its level using exclusive ascending bounds."""
    for upper, level in LEVEL_THRESHOLDS:
        if score < upper:
            return RaidLevel(level)
    return RaidLevel.CRITICAL


class RaidPredictor:
    """Extracts window features and computes the raid risk score."""

    def evaluate(
        self,
        guild_id: Optional[int],
        joining: Optional[JoinEvent],
        window: Sequence[JoinEvent],
        snapshot: Optional[BaselineSnapshot],
        now: Optional[float] = None,
    ) -> RaidAssessment:
        """
        Assess raid risk for a join.

        Args:
            guild_id: Guild being joined.
            joining: The join just recorded.
            window: Pruned join window, including `joining`.
            snapshot: Baselines for the guild (may be empty).
            now: Evaluation time, defaults to the join's timestamp.

        Returns:
            A scored assessment, or the neutral result for unusable input.
        """
        if not guild_id or joining is None:
            return RaidAssessment.neutral()

        now = joining.timestamp if now is None else now
        features = self.extract_features(joining, window, snapshot, now)
        score = self.score(features)

        return RaidAssessment(
            status=AssessmentStatus.SCORED,
            risk_score=score,
            level=map_risk_to_level(score),
            features=features,
        )

    # =========================================================================
    # Features
    # =========================================================================

    def extract_features(
        self,
        joining: JoinEvent,
        window: Sequence[JoinEvent],
        snapshot: Optional[BaselineSnapshot],
        now: float,
    ) -> RaidFeatures:
        events = list(window) or [joining]

        joins_10s = joins_30s = joins_60s = joins_5m = 0
        young = 0
        for event in events:
            age = now - event.timestamp
            if age <= HORIZON_10S:
                joins_10s += 1
            if age <= HORIZON_30S:
                joins_30s += 1
            if age <= HORIZON_60S:
                joins_60s += 1
            if age <= HORIZON_5M:
                joins_5m += 1
            if event.account_age_days <= YOUNG_ACCOUNT_DAYS:
                young += 1

        # Zero similarities (no shared characters) are left out of the mean
        similarities = [
            sim for sim in (
                username_similarity(joining.username, other.username)
                for other in events if other is not joining
            )
            if sim > 0
        ]
        mean_sim = sum(similarities) / len(similarities) if similarities else 0.0

        baseline_rate = snapshot.join_rate if snapshot else 0.0
        effective_baseline = baseline_rate if baseline_rate > 0 else 1.0
        velocity_ratio = joins_60s / effective_baseline
        young_ratio = young / len(events)
        velocity_score, young_score, username_score = component_scores(
            velocity_ratio, young_ratio, mean_sim,
        )

        return RaidFeatures(
            joins_last_10s=joins_10s,
            joins_last_30s=joins_30s,
            joins_last_60s=joins_60s,
            joins_last_5m=joins_5m,
            baseline_join_rate=baseline_rate,
            velocity_ratio=velocity_ratio,
            young_ratio=young_ratio,
            username_similarity=mean_sim,
            max_username_similarity=max(similarities, default=0.0),
            account_age_days=joining.account_age_days,
            effective_baseline=effective_baseline,
            join_velocity_score=velocity_score,
            young_score=young_score,
            username_score=username_score,
        )

    # =========================================================================
    # Scoring
    # =========================================================================

    def score(self, features: RaidFeatures) -> float:
        velocity_score, young_score, username_score = component_scores(
            features.velocity_ratio, features.young_ratio, features.username_similarity,
        )

        risk = (
            VELOCITY_WEIGHT * velocity_score
            + YOUNG_WEIGHT * young_score
            + USERNAME_WEIGHT * username_score
        )
        if features.joins_last_10s >= BURST_JOIN_COUNT:
            risk += BURST_BONUS

        return max(0.0, min(1.0, risk))


__all__ = ["RaidPredictor", "component_scores", "map_risk_to_level"]
