"""
HackeyeBot - Raid Predictor Package
===================================

Join window tracking and raid risk scoring.
"""

from .history import JoinHistory, account_age_days
from .models import (
    AssessmentStatus,
    JoinEvent,
    RaidAssessment,
    RaidFeatures,
    RaidLevel,
)
from .predictor import RaidPredictor, map_risk_to_level
from .similarity import username_similarity

__all__ = [
    "JoinHistory",
    "account_age_days",
    "AssessmentStatus",
    "JoinEvent",
    "RaidAssessment",
    "RaidFeatures",
    "RaidLevel",
    "RaidPredictor",
    "map_risk_to_level",
    "username_similarity",
]
