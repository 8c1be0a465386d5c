"""
HackeyeBot - Guild Log Service
==============================

Posts human-readable log lines into per-category text channels.

DESIGN:
    Each (guild, category) pair gets one text channel, created on first use
    and remembered in the database so restarts reuse it. A per-pair lock
    stops two concurrent notifications from creating the same channel
    twice.

    notify() never raises. When no channel can be resolved (missing guild,
    missing permissions, store error) the line goes to the tree logger.
"""

import asyncio
from typing import TYPE_CHECKING, Dict, Optional, Tuple

import discord

from hackeye.core.constants import LOG_TRUNCATE_MEDIUM
from hackeye.core.logger import logger

from .categories import LogCategory, channel_name_for

if TYPE_CHECKING:
    from hackeye.core.database import DatabaseManager


MESSAGE_LIMIT = 2000
CHANNEL_REASON = "HackeyeBot logging channel"


class GuildLogService:
    """
    Guild notification sink.

    Attributes:
        bot: Client used to look up guilds and create channels.
        db: Store remembering created channels.
        _channels: Resolved channels by (guild_id, category).
    """

    def __init__(self, bot: discord.Client, db: "DatabaseManager") -> None:
        self.bot = bot
        self.db = db
        self._channels: Dict[Tuple[int, LogCategory], discord.abc.Messageable] = {}
        self._locks: Dict[Tuple[int, LogCategory], asyncio.Lock] = {}

    # =========================================================================
    # Public API
    # =========================================================================

    async def notify(self, guild_id: Optional[int], category: LogCategory, text: str) -> bool:
        """
        Send a line to the guild's channel for a category.

        Returns:
            True if the line reached a guild channel, False if it was only
            written to the local log.
        """
        content = str(text)
        if len(content) > MESSAGE_LIMIT:
            content = content[:MESSAGE_LIMIT - 3] + "..."

        guild = self.bot.get_guild(guild_id) if guild_id else None
        if guild is not None:
            try:
                channel = await self._get_or_create_channel(guild, category)
                if channel is not None:
                    await channel.send(content=content, allowed_mentions=discord.AllowedMentions.none())
                    return True
            except Exception as e:
                logger.warning("Guild Log Delivery Failed", [
                    ("Guild ID", str(guild_id)),
                    ("Category", category.value),
                    ("Error Type", type(e).__name__),
                    ("Error", str(e)[:LOG_TRUNCATE_MEDIUM]),
                ])

        self._log_locally(guild_id, category, content)
        return False

    async def log_system(self, text: str) -> int:
        """
        Broadcast a SYSTEM line to every guild the bot is in.

        Returns:
            Number of guilds where the line reached a channel.
        """
        guilds = list(self.bot.guilds)
        if not guilds:
            self._log_locally(None, LogCategory.SYSTEM, text)
            return 0

        results = await asyncio.gather(
            *(self.notify(guild.id, LogCategory.SYSTEM, text) for guild in guilds)
        )
        return sum(1 for delivered in results if delivered)

    def forget_guild(self, guild_id: int) -> None:
        """Drop cached channels for a guild the bot left."""
        for key in [k for k in self._channels if k[0] == guild_id]:
            self._channels.pop(key, None)
            self._locks.pop(key, None)

    # =========================================================================
    # Channel Resolution
    # =========================================================================

    async def _get_or_create_channel(
        self,
        guild: discord.Guild,
        category: LogCategory,
    ) -> Optional[discord.abc.Messageable]:
        key = (guild.id, category)
        cached = self._channels.get(key)
        if cached is not None:
            return cached

        lock = self._locks.setdefault(key, asyncio.Lock())
        async with lock:
            cached = self._channels.get(key)
            if cached is not None:
                return cached

            self.db.upsert_guild(guild.id, guild.name)

            channel = await self._fetch_remembered_channel(guild, category)
            if channel is None:
                channel = await guild.create_text_channel(
                    name=channel_name_for(category),
                    reason=CHANNEL_REASON,
                )
                self.db.set_log_channel_id(guild.id, category.value, channel.id)
                logger.tree("Log Channel Created", [
                    ("Guild", guild.name),
                    ("Category", category.value),
                    ("Channel", f"#{channel.name}"),
                ], emoji="📁")

            self._channels[key] = channel
            return channel

    async def _fetch_remembered_channel(
        self,
        guild: discord.Guild,
        category: LogCategory,
    ) -> Optional[discord.abc.Messageable]:
        channel_id = self.db.get_log_channel_id(guild.id, category.value)
        if not channel_id:
            return None

        channel = guild.get_channel(channel_id)
        if channel is not None:
            return channel

        try:
            return await guild.fetch_channel(channel_id)
        except (discord.NotFound, discord.Forbidden):
            logger.debug("Remembered Log Channel Gone", [
                ("Guild ID", str(guild.id)),
                ("Category", category.value),
                ("Channel ID", str(channel_id)),
            ])
            return None

    # =========================================================================
    # Fallback
    # =========================================================================

    def _log_locally(self, guild_id: Optional[int], category: LogCategory, text: str) -> None:
        logger.info(f"[{category.value}] [{guild_id or 'no-guild'}] {text}")


__all__ = ["GuildLogService", "MESSAGE_LIMIT"]
