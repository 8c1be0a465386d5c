"""
HackeyeBot - Decision Engine
============================

Turns a raid assessment into a recommended action, an incident record and
a guild notification.

DESIGN:
    Actions are advisory. The engine records what it would do and tells
    moderators; it never touches guild permissions.

    Order of side effects: settings, incident, notification. Store errors
    propagate to the caller before anything is sent. The notification is
    started as a background task and never awaited by decide(), so a slow
    or rate-limited channel cannot hold up the guild's next event. A failed
    notification is logged and the incident stays recorded.
"""

import asyncio
import time
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Callable, Optional, Set

from hackeye.core.constants import DEFAULT_RISK_THRESHOLD, MS_PER_SECOND, SHUTDOWN_TIMEOUT
from hackeye.core.logger import logger
from hackeye.services.baseline import BaselineSnapshot
from hackeye.services.guild_logs.categories import LogCategory
from hackeye.services.raid_predictor import RaidAssessment
from hackeye.utils.async_utils import create_safe_task

from .constants import (
    ADVISORY_NOTE,
    FLAG_MARGIN,
    INCIDENT_PREFIX,
    INCIDENT_TYPE,
    LOCKDOWN_SCORE,
    NONE_FACTOR,
    SHORT_CIRCUIT_SCORE,
)
from .models import DecisionResult, RaidAction

if TYPE_CHECKING:
    from hackeye.core.database import DatabaseManager


_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


# =============================================================================
# Pure Helpers
# =============================================================================

def determine_action(risk_score: float, threshold: Any = DEFAULT_RISK_THRESHOLD) -> RaidAction:
    """
    Map a risk score to an action tier.

    A non-numeric threshold falls back to the default.
    """
    if isinstance(threshold, bool) or not isinstance(threshold, (int, float)):
        threshold = DEFAULT_RISK_THRESHOLD

    if risk_score < threshold * NONE_FACTOR:
        return RaidAction.NONE
    if risk_score < threshold:
        return RaidAction.LOG_ONLY
    if risk_score < threshold + FLAG_MARGIN:
        return RaidAction.FLAG
    if risk_score < LOCKDOWN_SCORE:
        return RaidAction.ISOLATE
    return RaidAction.LOCKDOWN


def to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def generate_incident_id(
    guild_id: int,
    now: float,
    exists: Optional[Callable[[str], bool]] = None,
) -> str:
    """
    Build `RAID_<guild>_<base36 epoch ms>`.

    When `exists` reports the id as taken, a numeric suffix is appended.
    """
    base = f"{INCIDENT_PREFIX}_{guild_id}_{to_base36(int(now * MS_PER_SECOND))}"
    if exists is None or not exists(base):
        return base

    suffix = 2
    while exists(f"{base}_{suffix}"):
        suffix += 1
    return f"{base}_{suffix}"


def format_notification(incident_id: str, assessment: RaidAssessment, action: RaidAction) -> str:
    """One-line summary posted to the security incidents channel."""
    features = assessment.features_dict()
    parts = [
        f"[{INCIDENT_TYPE}] Incident {incident_id}",
        f"Level: {assessment.level.value}",
        f"Risk: {assessment.risk_score * 100:.1f}%",
        f"Joins10s: {features.get('joins_last_10s', 0)}",
        f"Joins60s: {features.get('joins_last_60s', 0)}",
        f"BaselineJoinRate: {features.get('baseline_join_rate', 0.0):.2f}",
        f"YoungRatio: {features.get('young_ratio', 0.0):.2f}",
        f"UsernameSim: {features.get('username_similarity', 0.0):.2f}",
        f"Action: {action.value} {ADVISORY_NOTE}",
    ]
    return " | ".join(parts)


# =============================================================================
# Decision Engine
# =============================================================================

class DecisionEngine:
    """
    Applies the escalation policy to raid assessments.

    `notifier` is anything with an async `notify(guild_id, category, text)`,
    normally the GuildLogService.
    """

    def __init__(self, db: "DatabaseManager", notifier: Any = None) -> None:
        self.db = db
        self.notifier = notifier
        self._notifications: Set[asyncio.Task] = set()

    @property
    def pending_notifications(self) -> int:
        return len(self._notifications)

    async def decide(
        self,
        guild_id: Optional[int],
        assessment: Optional[RaidAssessment],
        snapshot: Optional[BaselineSnapshot] = None,
        guild_name: Optional[str] = None,
        member_label: Optional[str] = None,
        now: Optional[float] = None,
    ) -> Optional[DecisionResult]:
        """
        Record and announce a raid assessment.

        Returns as soon as the incident is stored; delivery continues in
        the background on `DecisionResult.notification`.

        Returns:
            The decision, or None when the assessment was degenerate or too
            low to act on. In that case nothing is read, stored or sent.

        Raises:
            sqlite3.Error: If the settings lookup or incident write fails.
        """
        if not guild_id or assessment is None or assessment.is_degenerate:
            return None
        if assessment.risk_score < SHORT_CIRCUIT_SCORE:
            return None

        now = time.time() if now is None else now

        settings = self.db.ensure_guild_settings(guild_id)
        threshold = settings.get("risk_threshold")
        if isinstance(threshold, bool) or not isinstance(threshold, (int, float)):
            threshold = DEFAULT_RISK_THRESHOLD
        action = determine_action(assessment.risk_score, threshold)

        incident_id = generate_incident_id(guild_id, now, self.db.incident_exists)
        description = (
            f"Raid prediction {assessment.level.value} ({assessment.risk_score * 100:.1f}%) "
            f"for guild {guild_name or guild_id}, user {member_label or 'unknown'}"
        )
        risk_factors = {
            "level": assessment.level.value,
            "features": assessment.features_dict(),
            "action": action.value,
            "baselines": snapshot.to_dict() if snapshot else {},
            "timestamp": datetime.fromtimestamp(now, tz=timezone.utc).isoformat(),
        }

        self.db.create_incident(
            incident_id=incident_id,
            guild_id=guild_id,
            incident_type=INCIDENT_TYPE,
            severity=assessment.risk_score,
            description=description,
            risk_factors=risk_factors,
            action_taken=action.value,
            created_at=now,
        )

        logger.tree("Raid Incident Recorded", [
            ("Incident", incident_id),
            ("Guild", guild_name or str(guild_id)),
            ("Member", member_label or "unknown"),
            ("Level", assessment.level.value),
            ("Risk", f"{assessment.risk_score * 100:.1f}%"),
            ("Action", action.value),
        ], emoji="🚨")

        message = format_notification(incident_id, assessment, action)

        return DecisionResult(
            incident_id=incident_id,
            action=action,
            risk_score=assessment.risk_score,
            level=assessment.level,
            threshold=float(threshold),
            message=message,
            notification=self._dispatch(guild_id, incident_id, message),
        )

    async def drain(self, timeout: float = SHUTDOWN_TIMEOUT) -> int:
        """
        Wait for in-flight notifications, cancelling any that overrun.

        Returns:
            Number of notifications cancelled.
        """
        tasks = list(self._notifications)
        if not tasks:
            return 0

        _, pending = await asyncio.wait(tasks, timeout=timeout)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
            logger.warning("Raid Notifications Cancelled", [
                ("Notifications", str(len(pending))),
                ("Reason", "Shutdown timeout"),
            ])
        return len(pending)

    # =========================================================================
    # Notification
    # =========================================================================

    def _dispatch(self, guild_id: int, incident_id: str, message: str) -> Optional[asyncio.Task]:
        if self.notifier is None:
            logger.info("Raid Notification (No Sink)", [
                ("Guild ID", str(guild_id)),
                ("Message", message[:200]),
            ])
            return None

        task = create_safe_task(self._notify(guild_id, message), f"Raid Notification {incident_id}")
        self._notifications.add(task)
        task.add_done_callback(self._notifications.discard)
        return task

    async def _notify(self, guild_id: int, message: str) -> bool:
        try:
            return bool(await self.notifier.notify(guild_id, LogCategory.SECURITY_INCIDENT, message))
        except Exception as e:
            logger.error("Raid Notification Failed", [
                ("Guild ID", str(guild_id)),
                ("Error Type", type(e).__name__),
                ("Error", str(e)[:100]),
            ])
            return False


__all__ = [
    "DecisionEngine",
    "determine_action",
    "generate_incident_id",
    "format_notification",
    "to_base36",
]
