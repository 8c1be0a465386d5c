"""
HackeyeBot - Member Events
==========================

Feeds member joins into the raid assessment pipeline.
"""

from typing import TYPE_CHECKING

import discord
from discord.ext import commands

from hackeye.core.logger import logger
from hackeye.utils.error_handler import ErrorHandler

if TYPE_CHECKING:
    from hackeye.bot import HackeyeBot


def member_label(member: discord.Member) -> str:
    """Readable member identity for incident descriptions."""
    return f"{member} ({member.id})"


class MemberEvents(commands.Cog):
    """Member event handlers."""

    def __init__(self, bot: "HackeyeBot") -> None:
        self.bot = bot

    @commands.Cog.listener()
    async def on_member_join(self, member: discord.Member) -> None:
        """
        Score every join, bots included.

        DESIGN: Bot accounts are scored like anyone else; a raid of
        freshly created bot accounts is still a raid.
        """
        pipeline = self.bot.pipeline
        if pipeline is None or member.guild is None:
            return

        try:
            await pipeline.on_join(
                member.guild.id,
                member.created_at,
                member.name,
                guild_name=member.guild.name,
                member_label=member_label(member),
            )
        except Exception as e:
            ErrorHandler.handle(e, "MemberEvents.on_member_join", member=member)


async def setup(bot: "HackeyeBot") -> None:
    """Add the member events cog to the bot."""
    await bot.add_cog(MemberEvents(bot))
    logger.debug("Member Events Loaded")


__all__ = ["MemberEvents", "member_label", "setup"]
