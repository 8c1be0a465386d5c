"""
Raid Predictor Constants
========================

Window sizes, feature horizons, weights and level thresholds for join raid
scoring. Values are heuristic and uncalibrated; tune them here.
"""

from typing import Tuple


# =============================================================================
# Join Window
# =============================================================================

WINDOW_SECONDS = 600  # joins older than 10 minutes leave the window

HORIZON_10S = 10
HORIZON_30S = 30
HORIZON_60S = 60
HORIZON_5M = 300


# =============================================================================
# Features
# =============================================================================

YOUNG_ACCOUNT_DAYS = 7  # accounts this old or younger count as young
VELOCITY_SATURATION = 3.0  # velocity ratio at which the velocity score caps


# =============================================================================
# Scoring
# =============================================================================

VELOCITY_WEIGHT = 0.5
YOUNG_WEIGHT = 0.3
USERNAME_WEIGHT = 0.2

BURST_JOIN_COUNT = 5  # joins within 10s that trigger the burst bonus
BURST_BONUS = 0.1


# =============================================================================
# Levels
# =============================================================================

# (upper bound exclusive, level name), checked in order
LEVEL_THRESHOLDS: Tuple[Tuple[float, str], ...] = (
    (0.3, "NONE"),
    (0.5, "LOW"),
    (0.75, "MEDIUM"),
    (0.9, "HIGH"),
)


__all__ = [
    "WINDOW_SECONDS",
    "HORIZON_10S",
    "HORIZON_30S",
    "HORIZON_60S",
    "HORIZON_5M",
    "YOUNG_ACCOUNT_DAYS",
    "VELOCITY_SATURATION",
    "VELOCITY_WEIGHT",
    "YOUNG_WEIGHT",
    "USERNAME_WEIGHT",
    "BURST_JOIN_COUNT",
    "BURST_BONUS",
    "LEVEL_THRESHOLDS",
]
