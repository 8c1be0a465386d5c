"""
Guild State
===========

Transient per-guild state owned by exactly one guild worker.
"""

import time
from dataclasses import dataclass, field
from typing import Optional

from hackeye.services.baseline import RateTracker
from hackeye.services.raid_predictor import JoinHistory


@dataclass
class GuildState:
    """
    Rate timing and join window for one guild.

    Only the owning worker touches this object, so no lock is needed.
    Lost when the worker is reaped or the process restarts.
    """
    guild_id: int
    rates: RateTracker = field(default_factory=RateTracker)
    joins: JoinHistory = field(default_factory=JoinHistory)
    created_at: float = field(default_factory=time.time)
    events_seen: int = 0
    last_event_at: Optional[float] = None

    def touch(self, now: float) -> None:
        self.events_seen += 1
        self.last_event_at = now


__all__ = ["GuildState"]
