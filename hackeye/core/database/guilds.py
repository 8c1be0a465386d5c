"""
HackeyeBot - Guilds Mixin
=========================

Guild display names and remembered log channels.
"""

import time
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .manager import DatabaseManager


class GuildsMixin:
    """Mixin for guild and log channel operations."""

    # =========================================================================
    # Guild Records
    # =========================================================================

    def upsert_guild(self: "DatabaseManager", guild_id: int, name: Optional[str] = None) -> None:
        """Create or refresh the guild row."""
        self.execute(
            """INSERT INTO guilds (guild_id, name, updated_at) VALUES (?, ?, ?)
               ON CONFLICT(guild_id) DO UPDATE SET
                   name = excluded.name,
                   updated_at = excluded.updated_at""",
            (guild_id, name, time.time())
        )

    def get_guild_name(self: "DatabaseManager", guild_id: int) -> Optional[str]:
        row = self.fetchone("SELECT name FROM guilds WHERE guild_id = ?", (guild_id,))
        return row["name"] if row else None

    # =========================================================================
    # Log Channels
    # =========================================================================

    def get_log_channel_id(self: "DatabaseManager", guild_id: int, category: str) -> Optional[int]:
        """Get the channel previously created for a log category."""
        row = self.fetchone(
            "SELECT channel_id FROM log_channels WHERE guild_id = ? AND category = ?",
            (guild_id, category)
        )
        return row["channel_id"] if row else None

    def set_log_channel_id(
        self: "DatabaseManager",
        guild_id: int,
        category: str,
        channel_id: int,
    ) -> None:
        self.execute(
            """INSERT INTO log_channels (guild_id, category, channel_id) VALUES (?, ?, ?)
               ON CONFLICT(guild_id, category) DO UPDATE SET channel_id = excluded.channel_id""",
            (guild_id, category, channel_id)
        )


__all__ = ["GuildsMixin"]
