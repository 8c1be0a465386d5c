"""
Database Schema Module
======================

Table definitions. Tables are created if missing, so restarts are safe.
"""

from typing import TYPE_CHECKING, Dict

if TYPE_CHECKING:
    from hackeye.core.database.manager import DatabaseManager


class SchemaMixin:
    """Mixin for database schema initialization."""

    TABLES: Dict[str, str] = {
        # Display names for guilds the bot has posted into
        "guilds": """
            CREATE TABLE IF NOT EXISTS guilds (
                guild_id INTEGER PRIMARY KEY,
                name TEXT,
                updated_at REAL NOT NULL
            )
        """,
        # One EWMA record per (guild, metric type)
        "baseline_metrics": """
            CREATE TABLE IF NOT EXISTS baseline_metrics (
                guild_id INTEGER NOT NULL,
                metric_type TEXT NOT NULL,
                baseline REAL NOT NULL,
                std_dev REAL NOT NULL DEFAULT 0,
                sample_size INTEGER NOT NULL,
                last_updated REAL NOT NULL,
                PRIMARY KEY (guild_id, metric_type)
            )
        """,
        "guild_settings": """
            CREATE TABLE IF NOT EXISTS guild_settings (
                guild_id INTEGER PRIMARY KEY,
                risk_threshold REAL NOT NULL DEFAULT 0.75,
                created_at REAL NOT NULL
            )
        """,
        # Append-only; resolving an incident is an operator action
        "incidents": """
            CREATE TABLE IF NOT EXISTS incidents (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                incident_id TEXT NOT NULL UNIQUE,
                guild_id INTEGER NOT NULL,
                type TEXT NOT NULL,
                severity REAL NOT NULL,
                description TEXT,
                risk_factors TEXT,
                action_taken TEXT NOT NULL,
                resolved INTEGER NOT NULL DEFAULT 0,
                created_at REAL NOT NULL
            )
        """,
        # Channel created per notification category
        "log_channels": """
            CREATE TABLE IF NOT EXISTS log_channels (
                guild_id INTEGER NOT NULL,
                category TEXT NOT NULL,
                channel_id INTEGER NOT NULL,
                PRIMARY KEY (guild_id, category)
            )
        """,
    }

    INDEXES = (
        "CREATE INDEX IF NOT EXISTS idx_incidents_guild_time ON incidents(guild_id, created_at DESC)",
    )

    def _init_tables(self: "DatabaseManager") -> None:
        conn = self._ensure_connection()
        for ddl in self.TABLES.values():
            conn.execute(ddl)
        for ddl in self.INDEXES:
            conn.execute(ddl)
        conn.commit()


__all__ = ["SchemaMixin"]
