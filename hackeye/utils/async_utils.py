"""
HackeyeBot - Async Utilities
============================

Background task spawning and best-effort awaits for the bot and the
guild worker pool.
"""

import asyncio
from typing import Any, Coroutine, Optional, Set

from hackeye.core.constants import LOG_TRUNCATE_MEDIUM
from hackeye.core.logger import logger


# Strong references to running background tasks; the event loop only keeps weak ones
_background_tasks: Set[asyncio.Task] = set()


def _failure_details(name: str, error: BaseException, guild_id: Optional[int]) -> list:
    details = [("Operation", name)]
    if guild_id is not None:
        details.append(("Guild ID", str(guild_id)))
    details.extend([
        ("Error Type", type(error).__name__),
        ("Error", str(error)[:LOG_TRUNCATE_MEDIUM]),
    ])
    return details


async def safe_async_operation(
    name: str,
    coro: Coroutine[Any, Any, Any],
    default: Any = None,
    log_level: str = "warning",
    guild_id: Optional[int] = None,
) -> Any:
    """
    Await a coroutine whose failure must not reach the caller.

    Args:
        name: Operation name for the log line.
        coro: Coroutine to await.
        default: Returned when the coroutine raises.
        log_level: "debug", "warning" or "error".
        guild_id: Guild the operation concerns, if any.
    """
    try:
        return await coro
    except Exception as e:
        log = getattr(logger, log_level, logger.warning)
        log("Async Operation Failed", _failure_details(name, e, guild_id))
        return default


# =============================================================================
# Background Tasks
# =============================================================================

def create_safe_task(
    coro: Coroutine[Any, Any, Any],
    name: str = "Background Task",
) -> asyncio.Task:
    """
    Schedule a coroutine whose exceptions are logged, not lost.

    Cancellation ends the task quietly.
    """
    async def wrapped():
        try:
            return await coro
        except asyncio.CancelledError:
            return None
        except Exception as e:
            logger.error("Background Task Failed", _failure_details(name, e, None))
            return None

    task = asyncio.create_task(wrapped(), name=name)
    _background_tasks.add(task)
    task.add_done_callback(_background_tasks.discard)
    return task


__all__ = [
    "safe_async_operation",
    "create_safe_task",
]
