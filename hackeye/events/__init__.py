"""
HackeyeBot - Events Package
===========================

Gateway event cogs feeding the raid assessment pipeline.

DESIGN:
    Each module holds one Cog with @commands.Cog.listener handlers and an
    async setup() for load_extension(). Cogs stay thin: they translate
    discord objects into pipeline calls and log failures.

    Event routing:
    - members.py: member joins
    - messages.py: guild messages and link detection
    - channels.py: role and permission overwrite changes
    - guilds.py: guild join and removal
"""

# =============================================================================
# Event Cog Registry
# =============================================================================

EVENT_COGS = [
    "hackeye.events.members",
    "hackeye.events.messages",
    "hackeye.events.channels",
    "hackeye.events.guilds",
]
"""Module paths the bot passes to load_extension() at startup."""


__all__ = ["EVENT_COGS"]
