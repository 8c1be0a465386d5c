"""
HackeyeBot - Raid Assessment Pipeline
=====================================

Entry point for gateway events. Routes each event to its guild's worker
and runs the assessment chain there.

DESIGN:
    Joins: update the JOINS baseline, record the join in the window,
    score it, then hand the assessment to the decision engine.

    A store failure while updating the baseline still leaves the join in
    the window (it really happened) but skips scoring for that event. A
    store failure in the decision engine is logged and the assessment is
    still returned. Transient state is never rolled back.
"""

import sqlite3
import time
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any, Optional, Union

from hackeye.core.constants import LOG_TRUNCATE_MEDIUM, WORKER_IDLE_TIMEOUT
from hackeye.core.logger import logger
from hackeye.services.baseline import BaselineEngine, BaselineRecord
from hackeye.services.decision import DecisionEngine, DecisionResult
from hackeye.services.raid_predictor import (
    RaidAssessment,
    RaidLevel,
    RaidPredictor,
    account_age_days,
)

from .state import GuildState
from .workers import GuildWorkerPool

if TYPE_CHECKING:
    from hackeye.core.database import DatabaseManager


@dataclass(frozen=True)
class JoinOutcome:
    """Everything the pipeline produced for one join."""
    guild_id: int
    baseline: Optional[BaselineRecord]
    assessment: Optional[RaidAssessment]
    decision: Optional[DecisionResult]
    window_size: int
    error: Optional[str] = None

    @property
    def scored(self) -> bool:
        return self.assessment is not None and not self.assessment.is_degenerate


class RaidAssessmentPipeline:
    """
    Per-guild serialized event processing.

    Attributes:
        db: Durable store shared by the engines.
        pool: Guild worker pool owning transient state.
        baseline: Baseline engine.
        predictor: Raid risk predictor.
        decision: Decision engine.
    """

    def __init__(
        self,
        db: "DatabaseManager",
        notifier: Any = None,
        idle_timeout: float = WORKER_IDLE_TIMEOUT,
    ) -> None:
        self.db = db
        self.pool = GuildWorkerPool(idle_timeout=idle_timeout)
        self.baseline = BaselineEngine(db)
        self.predictor = RaidPredictor()
        self.decision = DecisionEngine(db, notifier)

    @property
    def active_workers(self) -> int:
        return self.pool.active_count

    async def shutdown(self) -> int:
        """
        Stop the guild workers, then let raid notifications they started
        finish. Returns the number of workers cancelled.
        """
        cancelled = await self.pool.shutdown()
        await self.decision.drain()
        return cancelled

    # =========================================================================
    # Event Ingestion
    # =========================================================================

    async def on_join(
        self,
        guild_id: Optional[int],
        account_created_at: Optional[Union[datetime, float]],
        username: Optional[str],
        guild_name: Optional[str] = None,
        member_label: Optional[str] = None,
        now: Optional[float] = None,
    ) -> Optional[JoinOutcome]:
        """
        Process a member join.

        Returns:
            The outcome, or None if the guild id is missing.
        """
        if not guild_id:
            return None
        now = time.time() if now is None else now

        async def job(state: GuildState) -> JoinOutcome:
            return await self._process_join(
                state, account_created_at, username, guild_name, member_label, now,
            )

        return await self.pool.submit(guild_id, job)

    async def on_message(
        self,
        guild_id: Optional[int],
        contains_link: bool = False,
        now: Optional[float] = None,
    ) -> Optional[BaselineRecord]:
        """Process a message. Returns the updated MESSAGES baseline."""
        if not guild_id:
            return None
        now = time.time() if now is None else now

        async def job(state: GuildState) -> Optional[BaselineRecord]:
            state.touch(now)
            try:
                return self.baseline.record_message(guild_id, state.rates, contains_link, now)
            except sqlite3.Error as e:
                self._log_store_failure("Message Baseline Update Failed", guild_id, e)
                return None

        return await self.pool.submit(guild_id, job)

    async def on_permission_change(
        self,
        guild_id: Optional[int],
        now: Optional[float] = None,
    ) -> Optional[BaselineRecord]:
        """Process a role or overwrite change. Returns the updated baseline."""
        if not guild_id:
            return None
        now = time.time() if now is None else now

        async def job(state: GuildState) -> Optional[BaselineRecord]:
            state.touch(now)
            try:
                return self.baseline.record_permission_change(guild_id, state.rates, now)
            except sqlite3.Error as e:
                self._log_store_failure("Permission Baseline Update Failed", guild_id, e)
                return None

        return await self.pool.submit(guild_id, job)

    # =========================================================================
    # Join Chain
    # =========================================================================

    async def _process_join(
        self,
        state: GuildState,
        account_created_at: Optional[Union[datetime, float]],
        username: Optional[str],
        guild_name: Optional[str],
        member_label: Optional[str],
        now: float,
    ) -> JoinOutcome:
        guild_id = state.guild_id
        state.touch(now)

        baseline_error: Optional[sqlite3.Error] = None
        baseline = None
        snapshot = None
        try:
            baseline = self.baseline.record_join(guild_id, state.rates, now)
            snapshot = self.baseline.get_snapshot(guild_id)
        except sqlite3.Error as e:
            baseline_error = e
            self._log_store_failure("Join Baseline Update Failed", guild_id, e)

        window = state.joins.record(account_age_days(account_created_at, now), username, now)

        if baseline_error is not None:
            return JoinOutcome(
                guild_id=guild_id,
                baseline=None,
                assessment=None,
                decision=None,
                window_size=len(window),
                error=f"baseline: {baseline_error}",
            )

        assessment = self.predictor.evaluate(guild_id, window[-1], window, snapshot, now)

        decision = None
        error = None
        try:
            decision = await self.decision.decide(
                guild_id,
                assessment,
                snapshot,
                guild_name=guild_name,
                member_label=member_label,
                now=now,
            )
        except sqlite3.Error as e:
            error = f"decision: {e}"
            self._log_store_failure("Raid Decision Failed", guild_id, e, [
                ("Risk", f"{assessment.risk_score * 100:.1f}%"),
                ("Level", assessment.level.value),
            ])

        if assessment.level is not RaidLevel.NONE:
            logger.tree("Raid Risk Assessed", [
                ("Guild", guild_name or str(guild_id)),
                ("Member", member_label or (username or "unknown")),
                ("Risk", f"{assessment.risk_score * 100:.1f}%"),
                ("Level", assessment.level.value),
                ("Window", str(len(window))),
                ("Action", decision.action.value if decision else "-"),
            ], emoji="🛡️")

        return JoinOutcome(
            guild_id=guild_id,
            baseline=baseline,
            assessment=assessment,
            decision=decision,
            window_size=len(window),
            error=error,
        )

    def _log_store_failure(self, title: str, guild_id: int, error: Exception, extra=None) -> None:
        details = [
            ("Guild ID", str(guild_id)),
            ("Error Type", type(error).__name__),
            ("Error", str(error)[:LOG_TRUNCATE_MEDIUM]),
        ]
        if extra:
            details.extend(extra)
        logger.error(title, details)


__all__ = ["RaidAssessmentPipeline", "JoinOutcome"]
