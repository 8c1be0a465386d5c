"""
HackeyeBot - Log Categories
===========================

Guild log categories and the text channel each one is posted to.
"""

from enum import Enum


class LogCategory(Enum):
    """Log category enum. Values are the stored category keys."""
    SYSTEM = "SYSTEM"
    SECURITY_INCIDENT = "SECURITY_INCIDENT"
    USER_INTEL = "USER_INTEL"
    PERMISSION_WATCH = "PERMISSION_WATCH"
    CONTENT_INTEL = "CONTENT_INTEL"
    VOICE_SECURITY = "VOICE_SECURITY"
    AUDIT_TRAIL = "AUDIT_TRAIL"


# Channel created in each guild for a category
CHANNEL_NAMES = {
    LogCategory.SYSTEM: "bot-system-logs",
    LogCategory.SECURITY_INCIDENT: "security-incidents",
    LogCategory.USER_INTEL: "user-intelligence-logs",
    LogCategory.PERMISSION_WATCH: "permission-watch",
    LogCategory.CONTENT_INTEL: "content-intel",
    LogCategory.VOICE_SECURITY: "voice-security",
    LogCategory.AUDIT_TRAIL: "audit-trail",
}

FALLBACK_CHANNEL_NAME = "hackeye-log"


def channel_name_for(category: LogCategory) -> str:
    return CHANNEL_NAMES.get(category, FALLBACK_CHANNEL_NAME)


__all__ = ["LogCategory", "CHANNEL_NAMES", "FALLBACK_CHANNEL_NAME", "channel_name_for"]
