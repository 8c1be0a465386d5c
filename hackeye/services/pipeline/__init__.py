"""
HackeyeBot - Pipeline Package
=============================

Per-guild workers and the event assessment pipeline.
"""

from .service import JoinOutcome, RaidAssessmentPipeline
from .state import GuildState
from .workers import GuildWorker, GuildWorkerPool

__all__ = [
    "GuildState",
    "GuildWorker",
    "GuildWorkerPool",
    "JoinOutcome",
    "RaidAssessmentPipeline",
]
