"""
HackeyeBot - Database Module
============================

SQLite store for baselines, guild settings, incidents and log channels.
"""

from hackeye.core.database.manager import (
    DatabaseManager,
    StoreTransaction,
    get_db,
    DATA_DIR,
    DB_PATH,
)

from hackeye.core.database.models import (
    BaselineMetricRecord,
    GuildSettingsRecord,
    IncidentRecord,
)

__all__ = [
    "DatabaseManager",
    "StoreTransaction",
    "get_db",
    "DATA_DIR",
    "DB_PATH",
    "BaselineMetricRecord",
    "GuildSettingsRecord",
    "IncidentRecord",
]
