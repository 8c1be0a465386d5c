"""
HackeyeBot - Guild Settings Mixin
=================================

Read-or-default access to per-guild raid settings.
"""

import time
from typing import TYPE_CHECKING, Optional

from hackeye.core.constants import DEFAULT_RISK_THRESHOLD
from hackeye.core.database.models import GuildSettingsRecord
from hackeye.core.logger import logger

if TYPE_CHECKING:
    from .manager import DatabaseManager


class SettingsMixin:
    """Mixin for guild settings operations."""

    def get_guild_settings(self: "DatabaseManager", guild_id: int) -> Optional[GuildSettingsRecord]:
        """Get settings for a guild without creating them."""
        row = self.fetchone(
            "SELECT guild_id, risk_threshold, created_at FROM guild_settings WHERE guild_id = ?",
            (guild_id,)
        )
        return dict(row) if row else None

    def ensure_guild_settings(self: "DatabaseManager", guild_id: int) -> GuildSettingsRecord:
        """
        Fetch settings for a guild, creating the default row if absent.

        DESIGN: Insert and read happen in one transaction so a concurrent
        first lookup from another thread sees the same row.
        """
        with self.transaction() as tx:
            tx.execute(
                """INSERT OR IGNORE INTO guild_settings (guild_id, risk_threshold, created_at)
                   VALUES (?, ?, ?)""",
                (guild_id, DEFAULT_RISK_THRESHOLD, time.time())
            )
            created = tx.rowcount > 0
            tx.execute(
                "SELECT guild_id, risk_threshold, created_at FROM guild_settings WHERE guild_id = ?",
                (guild_id,)
            )
            row = tx.fetchone()

        if created:
            logger.tree("Guild Settings Created", [
                ("Guild ID", str(guild_id)),
                ("Risk Threshold", f"{DEFAULT_RISK_THRESHOLD:.2f}"),
            ], emoji="⚙️")

        return dict(row)


__all__ = ["SettingsMixin"]
