"""
HackeyeBot - Permission Events
==============================

Feeds role and channel permission changes into the permission baseline.

DESIGN:
    Role creates and deletes always count. Role and channel updates count
    only when permissions or overwrites actually changed, so renames and
    colour edits do not inflate the baseline.
"""

from typing import TYPE_CHECKING

import discord
from discord.ext import commands

from hackeye.core.logger import logger
from hackeye.utils.error_handler import ErrorHandler

if TYPE_CHECKING:
    from hackeye.bot import HackeyeBot


class ChannelEvents(commands.Cog):
    """Role and channel permission event handlers."""

    def __init__(self, bot: "HackeyeBot") -> None:
        self.bot = bot

    async def _record(self, guild: discord.Guild, location: str) -> None:
        pipeline = self.bot.pipeline
        if pipeline is None or guild is None:
            return

        try:
            await pipeline.on_permission_change(guild.id)
        except Exception as e:
            ErrorHandler.handle(e, location, guild_id=guild.id)

    # =========================================================================
    # Roles
    # =========================================================================

    @commands.Cog.listener()
    async def on_guild_role_create(self, role: discord.Role) -> None:
        await self._record(role.guild, "ChannelEvents.on_guild_role_create")

    @commands.Cog.listener()
    async def on_guild_role_delete(self, role: discord.Role) -> None:
        await self._record(role.guild, "ChannelEvents.on_guild_role_delete")

    @commands.Cog.listener()
    async def on_guild_role_update(self, before: discord.Role, after: discord.Role) -> None:
        if before.permissions == after.permissions:
            return
        await self._record(after.guild, "ChannelEvents.on_guild_role_update")

    # =========================================================================
    # Channels
    # =========================================================================

    @commands.Cog.listener()
    async def on_guild_channel_update(
        self,
        before: discord.abc.GuildChannel,
        after: discord.abc.GuildChannel,
    ) -> None:
        if before.overwrites == after.overwrites:
            return
        await self._record(after.guild, "ChannelEvents.on_guild_channel_update")


async def setup(bot: "HackeyeBot") -> None:
    """Add the channel events cog to the bot."""
    await bot.add_cog(ChannelEvents(bot))
    logger.debug("Channel Events Loaded")


__all__ = ["ChannelEvents", "setup"]
