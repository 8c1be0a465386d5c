"""
HackeyeBot - Decision Package
=============================

Advisory escalation policy for raid assessments.
"""

from .engine import (
    DecisionEngine,
    determine_action,
    format_notification,
    generate_incident_id,
)
from .models import DecisionResult, RaidAction

__all__ = [
    "DecisionEngine",
    "DecisionResult",
    "RaidAction",
    "determine_action",
    "format_notification",
    "generate_incident_id",
]
