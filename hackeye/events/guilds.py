"""
HackeyeBot - Guild Events
=========================

Announces the bot in new guilds and tidies up after removal.
"""

from typing import TYPE_CHECKING

import discord
from discord.ext import commands

from hackeye.core.logger import logger
from hackeye.services.guild_logs import LogCategory

if TYPE_CHECKING:
    from hackeye.bot import HackeyeBot


class GuildEvents(commands.Cog):
    """Guild membership event handlers."""

    def __init__(self, bot: "HackeyeBot") -> None:
        self.bot = bot

    @commands.Cog.listener()
    async def on_guild_join(self, guild: discord.Guild) -> None:
        logger.tree("Guild Joined", [
            ("Guild", guild.name),
            ("Guild ID", str(guild.id)),
            ("Members", str(guild.member_count or 0)),
        ], emoji="📥")

        if self.bot.guild_logs is not None:
            await self.bot.guild_logs.notify(guild.id, LogCategory.SYSTEM, "HackeyeBot added to guild")

    @commands.Cog.listener()
    async def on_guild_remove(self, guild: discord.Guild) -> None:
        logger.tree("Guild Removed", [
            ("Guild", guild.name),
            ("Guild ID", str(guild.id)),
        ], emoji="📤")

        if self.bot.guild_logs is not None:
            self.bot.guild_logs.forget_guild(guild.id)


async def setup(bot: "HackeyeBot") -> None:
    """Add the guild events cog to the bot."""
    await bot.add_cog(GuildEvents(bot))
    logger.debug("Guild Events Loaded")


__all__ = ["GuildEvents", "setup"]
