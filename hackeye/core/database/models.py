"""
HackeyeBot - Database Type Definitions
======================================

TypedDict definitions for database records.
"""

from typing import Any, Dict, Optional, TypedDict


class BaselineMetricRecord(TypedDict, total=False):
    """Type for baseline metric rows."""
    guild_id: int
    metric_type: str
    baseline: float
    std_dev: float
    sample_size: int
    last_updated: float


class GuildSettingsRecord(TypedDict, total=False):
    """Type for guild settings rows."""
    guild_id: int
    risk_threshold: float
    created_at: float


class IncidentRecord(TypedDict, total=False):
    """Type for incident rows (risk_factors decoded from JSON)."""
    id: int
    incident_id: str
    guild_id: int
    type: str
    severity: float
    description: Optional[str]
    risk_factors: Dict[str, Any]
    action_taken: str
    resolved: bool
    created_at: float


__all__ = [
    "BaselineMetricRecord",
    "GuildSettingsRecord",
    "IncidentRecord",
]
