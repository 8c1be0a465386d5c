"""
Decision Engine Constants
=========================

Escalation tiers and incident parameters. Heuristic; tune here.
"""

# =============================================================================
# Escalation
# =============================================================================

SHORT_CIRCUIT_SCORE = 0.25  # below this nothing is looked up, stored or sent
NONE_FACTOR = 0.6  # score < threshold * NONE_FACTOR -> NONE
FLAG_MARGIN = 0.1  # score < threshold + FLAG_MARGIN -> FLAG
LOCKDOWN_SCORE = 0.95  # score >= this -> LOCKDOWN


# =============================================================================
# Incidents
# =============================================================================

INCIDENT_TYPE = "RAID_PREDICTION"
INCIDENT_PREFIX = "RAID"
ADVISORY_NOTE = "(advisory, no automatic enforcement)"


__all__ = [
    "SHORT_CIRCUIT_SCORE",
    "NONE_FACTOR",
    "FLAG_MARGIN",
    "LOCKDOWN_SCORE",
    "INCIDENT_TYPE",
    "INCIDENT_PREFIX",
    "ADVISORY_NOTE",
]
