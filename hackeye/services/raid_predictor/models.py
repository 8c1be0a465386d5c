"""
Raid Predictor Data Models
==========================

Join events, extracted features and tagged assessment results.
"""

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, Optional


class RaidLevel(str, Enum):
    NONE = "NONE"
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class AssessmentStatus(str, Enum):
    """Whether an assessment was scored or came from unusable input."""
    SCORED = "SCORED"
    DEGENERATE = "DEGENERATE"


@dataclass(frozen=True)
class JoinEvent:
    """One join inside a guild's sliding window. Never persisted."""
    timestamp: float
    account_age_days: float
    username: str = ""


@dataclass(frozen=True)
class RaidFeatures:
    """Signals extracted from the join window for one joining member."""
    joins_last_10s: int
    joins_last_30s: int
    joins_last_60s: int
    joins_last_5m: int
    baseline_join_rate: float
    velocity_ratio: float
    young_ratio: float
    username_similarity: float
    max_username_similarity: float
    account_age_days: float
    effective_baseline: float = 1.0
    join_velocity_score: float = 0.0
    young_score: float = 0.0
    username_score: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class RaidAssessment:
    """
    Result of scoring one join.

    DESIGN: Degenerate input yields a tagged neutral result rather than a
    low score, so callers can tell "nothing to score" from "benign".
    """
    status: AssessmentStatus
    risk_score: float
    level: RaidLevel
    features: Optional[RaidFeatures] = None

    @classmethod
    def neutral(cls) -> "RaidAssessment":
        return cls(status=AssessmentStatus.DEGENERATE, risk_score=0.0, level=RaidLevel.NONE)

    @property
    def is_degenerate(self) -> bool:
        return self.status is AssessmentStatus.DEGENERATE

    def features_dict(self) -> Dict[str, Any]:
        """Features as a plain mapping, empty for degenerate results."""
        return self.features.to_dict() if self.features else {}


__all__ = [
    "RaidLevel",
    "AssessmentStatus",
    "JoinEvent",
    "RaidFeatures",
    "RaidAssessment",
]
