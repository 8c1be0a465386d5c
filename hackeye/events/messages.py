"""
HackeyeBot - Message Events
===========================

Feeds guild message activity into the message and link baselines.
"""

from typing import TYPE_CHECKING, Optional

import discord
from discord.ext import commands

from hackeye.core.logger import logger
from hackeye.utils.error_handler import ErrorHandler

if TYPE_CHECKING:
    from hackeye.bot import HackeyeBot


LINK_MARKERS = ("http://", "https://", "www.")


def contains_link(content: Optional[str]) -> bool:
    if not content:
        return False
    lowered = content.lower()
    return any(marker in lowered for marker in LINK_MARKERS)


class MessageEvents(commands.Cog):
    """Message event handlers."""

    def __init__(self, bot: "HackeyeBot") -> None:
        self.bot = bot

    @commands.Cog.listener()
    async def on_message(self, message: discord.Message) -> None:
        """Record guild messages from non-bot authors."""
        if message.guild is None or message.author.bot:
            return

        pipeline = self.bot.pipeline
        if pipeline is None:
            return

        try:
            await pipeline.on_message(message.guild.id, contains_link(message.content))
        except Exception as e:
            ErrorHandler.handle(e, "MessageEvents.on_message", message=message)


async def setup(bot: "HackeyeBot") -> None:
    """Add the message events cog to the bot."""
    await bot.add_cog(MessageEvents(bot))
    logger.debug("Message Events Loaded")


__all__ = ["MessageEvents", "contains_link", "LINK_MARKERS", "setup"]
