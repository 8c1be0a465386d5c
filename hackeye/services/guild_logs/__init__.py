"""
HackeyeBot - Guild Logs Package
===============================

Per-guild log channels used as the notification sink.
"""

from .categories import CHANNEL_NAMES, LogCategory, channel_name_for
from .service import GuildLogService

__all__ = ["CHANNEL_NAMES", "LogCategory", "GuildLogService", "channel_name_for"]
