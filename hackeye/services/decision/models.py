"""
Decision Data Models
====================

Action tiers and decision results.
"""

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from hackeye.services.raid_predictor import RaidLevel


class RaidAction(str, Enum):
    """Recommended response, in ascending severity. Advisory only."""
    NONE = "NONE"
    LOG_ONLY = "LOG_ONLY"
    FLAG = "FLAG"
    ISOLATE = "ISOLATE"
    LOCKDOWN = "LOCKDOWN"

    @property
    def severity(self) -> int:
        return _SEVERITY[self]


_SEVERITY = {action: rank for rank, action in enumerate(RaidAction)}


@dataclass(frozen=True)
class DecisionResult:
    """
    What the decision engine recorded for one assessment.

    `notification` is the background delivery task, or None when nothing
    was sent. It resolves to True once the line reached a guild channel.
    """
    incident_id: str
    action: RaidAction
    risk_score: float
    level: RaidLevel
    threshold: float
    message: str
    notification: Optional["asyncio.Task"] = field(default=None, compare=False, repr=False)


__all__ = ["RaidAction", "DecisionResult"]
