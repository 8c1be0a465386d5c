"""
HackeyeBot - Incidents Mixin
============================

Append-only incident log for raid predictions.
"""

import json
import time
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from hackeye.core.database.models import IncidentRecord
from hackeye.core.logger import logger

if TYPE_CHECKING:
    from .manager import DatabaseManager


def _row_to_incident(row) -> IncidentRecord:
    record = dict(row)
    record["resolved"] = bool(record["resolved"])
    try:
        record["risk_factors"] = json.loads(record["risk_factors"]) if record["risk_factors"] else {}
    except (json.JSONDecodeError, ValueError):
        logger.warning("Corrupted Incident Risk Factors", [
            ("Incident", record.get("incident_id", "?")),
        ])
        record["risk_factors"] = {}
    return record


class IncidentsMixin:
    """Mixin for incident operations."""

    def create_incident(
        self: "DatabaseManager",
        incident_id: str,
        guild_id: int,
        incident_type: str,
        severity: float,
        description: str,
        risk_factors: Dict[str, Any],
        action_taken: str,
        created_at: Optional[float] = None,
    ) -> int:
        """
        Record a new incident.

        Returns:
            Row ID of the inserted incident.

        Raises:
            sqlite3.IntegrityError: If incident_id already exists.
        """
        cursor = self.execute(
            """INSERT INTO incidents
               (incident_id, guild_id, type, severity, description,
                risk_factors, action_taken, resolved, created_at)
               VALUES (?, ?, ?, ?, ?, ?, ?, 0, ?)""",
            (
                incident_id,
                guild_id,
                incident_type,
                severity,
                description,
                json.dumps(risk_factors, default=str),
                action_taken,
                created_at if created_at is not None else time.time(),
            )
        )
        return cursor.lastrowid

    def incident_exists(self: "DatabaseManager", incident_id: str) -> bool:
        row = self.fetchone("SELECT 1 FROM incidents WHERE incident_id = ?", (incident_id,))
        return row is not None

    def get_incident(self: "DatabaseManager", incident_id: str) -> Optional[IncidentRecord]:
        """Get one incident by its public ID."""
        row = self.fetchone("SELECT * FROM incidents WHERE incident_id = ?", (incident_id,))
        return _row_to_incident(row) if row else None

    def get_guild_incidents(
        self: "DatabaseManager",
        guild_id: int,
        limit: int = 25,
    ) -> List[IncidentRecord]:
        """Get the most recent incidents for a guild, newest first."""
        rows = self.fetchall(
            """SELECT * FROM incidents WHERE guild_id = ?
               ORDER BY created_at DESC, id DESC LIMIT ?""",
            (guild_id, limit)
        )
        return [_row_to_incident(row) for row in rows]

    def count_incidents(self: "DatabaseManager", guild_id: int) -> int:
        row = self.fetchone("SELECT COUNT(*) AS total FROM incidents WHERE guild_id = ?", (guild_id,))
        return row["total"] if row else 0


__all__ = ["IncidentsMixin"]
