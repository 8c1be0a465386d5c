"""
HackeyeBot - Join History
=========================

Per-guild sliding window of recent joins.

DESIGN:
    One JoinHistory belongs to one guild worker, so append, prune and the
    feature read that follows all happen on a single task. Nothing here
    is persisted; a restart or worker reap starts from an empty window.
"""

import time
from datetime import datetime
from typing import List, Optional, Union

from hackeye.core.constants import SECONDS_PER_DAY

from .constants import WINDOW_SECONDS
from .models import JoinEvent


def account_age_days(
    created_at: Optional[Union[datetime, float]],
    now: float,
) -> float:
    """
    Convert an account creation time to fractional days at `now`.

    Accepts an aware datetime or epoch seconds. A missing creation time
    counts as a brand new account; ages never go negative.
    """
    if created_at is None:
        return 0.0
    if isinstance(created_at, datetime):
        created_at = created_at.timestamp()
    return max(0.0, now - float(created_at)) / SECONDS_PER_DAY


class JoinHistory:
    """Recent joins for one guild, oldest first."""

    def __init__(self, window_seconds: float = WINDOW_SECONDS) -> None:
        self.window_seconds = window_seconds
        self._events: List[JoinEvent] = []

    def record(
        self,
        account_age: float,
        username: Optional[str],
        now: Optional[float] = None,
    ) -> List[JoinEvent]:
        """
        Append a join, prune the window and return a copy of it.

        The returned list ends with the event just recorded.
        """
        now = time.time() if now is None else now
        self._events.append(JoinEvent(
            timestamp=now,
            account_age_days=account_age,
            username=username or "",
        ))
        self.prune(now)
        return list(self._events)

    def prune(self, now: Optional[float] = None) -> int:
        """
        Drop events older than the window.

        Returns:
            Number of events removed.
        """
        now = time.time() if now is None else now
        before = len(self._events)
        self._events = [e for e in self._events if now - e.timestamp <= self.window_seconds]
        return before - len(self._events)

    @property
    def events(self) -> List[JoinEvent]:
        return list(self._events)

    def __len__(self) -> int:
        return len(self._events)


__all__ = ["JoinHistory", "account_age_days"]
