"""
HackeyeBot - Error Handler
==========================

Categorized error logging with recovery hints for gateway handlers.

Features:
- Error categorization (Discord, Database, Network)
- Recovery suggestions per category
- Discord context capture for members and messages
- Critical error context written to logs/errors/
"""

import json
import sqlite3
import sys
import traceback
from datetime import datetime
from typing import Any, Dict

import discord

from hackeye.core.logger import LOGS_DIR, NY_TZ, logger


class ErrorContext:
    """Captures and formats detailed error context"""

    @staticmethod
    def get_full_context(e: Exception, location: str, **kwargs) -> Dict[str, Any]:
        context = {
            'timestamp': datetime.now(NY_TZ).isoformat(),
            'location': location,
            'error_type': type(e).__name__,
            'error_message': str(e),
            'traceback': ''.join(traceback.format_exception(type(e), e, e.__traceback__)),
            'python_version': sys.version,
            'additional_context': {k: str(v)[:100] for k, v in kwargs.items()},
        }

        message = kwargs.get('message')
        if isinstance(message, discord.Message):
            context['discord_context'] = {
                'guild': message.guild.name if message.guild else 'DM',
                'channel': getattr(message.channel, 'name', str(message.channel)),
                'author': str(message.author),
                'author_id': message.author.id,
            }

        member = kwargs.get('member')
        if isinstance(member, discord.Member):
            context['member_context'] = {
                'name': str(member),
                'id': member.id,
                'guild': member.guild.name if member.guild else None,
                'created_at': member.created_at.isoformat() if member.created_at else None,
            }

        return context


class ErrorHandler:
    """Error handling with context and recovery hints"""

    ERROR_CATEGORIES = {
        'discord': (discord.Forbidden, discord.NotFound, discord.HTTPException),
        'database': (sqlite3.Error,),
        'network': (ConnectionError, TimeoutError, OSError),
    }

    RECOVERY_SUGGESTIONS = {
        'discord': {
            discord.Forbidden: "Check bot permissions (Manage Channels, Send Messages)",
            discord.NotFound: "Resource not found - the channel or guild may be gone",
            discord.HTTPException: "Discord API issue - the next event will try again",
        },
        'database': {
            sqlite3.OperationalError: "Database locked or unreadable - check the data directory",
            sqlite3.IntegrityError: "Database constraint violation - check data validity",
            sqlite3.Error: "General database error - check the database file",
        },
        'network': {
            ConnectionError: "Network connection issue - check connectivity",
            TimeoutError: "Request timed out",
            OSError: "System resource issue - check disk space and permissions",
        },
    }

    @classmethod
    def categorize_error(cls, e: Exception) -> str:
        for category, error_types in cls.ERROR_CATEGORIES.items():
            if isinstance(e, error_types):
                return category
        return 'general'

    @classmethod
    def get_recovery_suggestion(cls, e: Exception, category: str) -> str:
        for error_type, suggestion in cls.RECOVERY_SUGGESTIONS.get(category, {}).items():
            if isinstance(e, error_type):
                return suggestion
        return "Unexpected error - check logs for details"

    @classmethod
    def handle(cls, e: Exception, location: str, critical: bool = False, **context) -> str:
        """
        Handle an error with full context.

        Args:
            e: The exception
            location: Where the error occurred
            critical: Whether to store the full context on disk
            **context: Additional context (member, message, guild_id...)

        Returns:
            The error category.
        """
        category = cls.categorize_error(e)
        suggestion = cls.get_recovery_suggestion(e, category)
        full_context = ErrorContext.get_full_context(e, location, **context)

        details = [
            ("Location", location),
            ("Category", category.upper()),
            ("Error Type", full_context['error_type']),
            ("Error", str(e)[:100]),
            ("Recovery", suggestion),
        ]

        if critical:
            logger.error("Critical Error", details)
            cls._store_critical_error(full_context)
        else:
            logger.warning("Handler Error", details)

        return category

    @staticmethod
    def _store_critical_error(context: Dict[str, Any]) -> None:
        try:
            error_dir = LOGS_DIR / 'errors'
            error_dir.mkdir(exist_ok=True, parents=True)

            timestamp = datetime.now(NY_TZ).strftime('%Y%m%d_%H%M%S')
            error_file = error_dir / f"error_{timestamp}.json"

            with open(error_file, 'w', encoding='utf-8') as f:
                json.dump(context, f, indent=2, default=str)

            logger.info("Critical Error Saved", [("File", str(error_file))])
        except OSError as save_error:
            logger.warning("Failed To Save Error Details", [("Error", str(save_error)[:100])])


__all__ = ["ErrorContext", "ErrorHandler"]
