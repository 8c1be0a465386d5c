"""
HackeyeBot - Main Bot Class
===========================

Discord client that feeds gateway events into the raid anomaly engine.

Features:
- Per-guild EWMA baselines for joins, messages, links and permission changes
- Join raid risk scoring with advisory escalation
- Per-category guild log channels
- Health check HTTP endpoint
"""

from datetime import datetime
from typing import Optional

import discord
from discord.ext import commands

from hackeye.core.config import Config, get_config
from hackeye.core.database import get_db
from hackeye.core.health import HealthCheckServer
from hackeye.core.logger import NY_TZ, logger
from hackeye.services.guild_logs import GuildLogService
from hackeye.services.pipeline import RaidAssessmentPipeline
from hackeye.utils.async_utils import safe_async_operation


# =============================================================================
# HackeyeBot Class
# =============================================================================

class HackeyeBot(commands.Bot):
    """
    Main Discord bot class.

    DESIGN: Central orchestrator that:
    - Owns the assessment pipeline and the guild log service
    - Loads event cogs that route gateway events into the pipeline
    - Manages lifecycle (startup, shutdown)

    INITIALIZATION ORDER:
    1. __init__: database, guild log service, pipeline
    2. setup_hook: event cog loading
    3. on_ready: error webhook, health server, startup broadcast
    """

    def __init__(self, config: Optional[Config] = None) -> None:
        self.config = config or get_config()

        intents = discord.Intents.default()
        intents.members = True
        intents.message_content = True

        super().__init__(
            command_prefix="!",
            intents=intents,
            help_command=None,
        )

        self.db = get_db(self.config.database_path)
        self.start_time: datetime = datetime.now(NY_TZ)

        self.guild_logs: Optional[GuildLogService] = GuildLogService(self, self.db)
        self.pipeline: Optional[RaidAssessmentPipeline] = RaidAssessmentPipeline(
            self.db,
            notifier=self.guild_logs,
            idle_timeout=self.config.worker_idle_timeout,
        )
        self.health_server: Optional[HealthCheckServer] = None

        self._ready_initialized: bool = False
        self._shutting_down: bool = False

        logger.info("Bot Instance Created")

    # =========================================================================
    # Setup Hook
    # =========================================================================

    async def setup_hook(self) -> None:
        """Load event cogs before on_ready."""
        from hackeye.events import EVENT_COGS
        for cog in EVENT_COGS:
            try:
                await self.load_extension(cog)
                logger.debug(f"Event Cog Loaded: {cog.split('.')[-1]}")
            except commands.ExtensionError as e:
                logger.error("Failed to Load Event Cog", [("Cog", cog), ("Error", str(e))])

    # =========================================================================
    # On Ready
    # =========================================================================

    async def on_ready(self) -> None:
        """Start services once connected."""
        if self._ready_initialized:
            logger.info("Bot Reconnected (skipping re-initialization)")
            return

        self._ready_initialized = True

        if not self.user:
            return

        logger.tree("BOT ONLINE", [
            ("Name", self.user.name),
            ("ID", str(self.user.id)),
            ("Guilds", str(len(self.guilds))),
        ], emoji="🚀")

        if self.config.error_webhook_url:
            logger.set_webhook(self.config.error_webhook_url)

        self.health_server = HealthCheckServer(self, self.config.health_check_port)
        await self.health_server.start()

        tag = f"{self.user} ({self.user.id})"
        delivered = await safe_async_operation(
            "Startup Broadcast",
            self.guild_logs.log_system(f"HackeyeBot started as {tag}"),
            default=0,
        )

        logger.tree("HACKEYE READY", [
            ("Guilds", str(len(self.guilds))),
            ("Startup Notices", f"{delivered}/{len(self.guilds)}"),
            ("Worker Idle Timeout", f"{self.config.worker_idle_timeout}s"),
            ("Health Server", "Running" if self.health_server.runner else "Stopped"),
        ], emoji="🔥")

    # =========================================================================
    # Shutdown
    # =========================================================================

    async def shutdown(self) -> None:
        """Graceful shutdown with proper cleanup."""
        if self._shutting_down:
            return
        self._shutting_down = True

        logger.info("Initiating Graceful Shutdown")

        if self.pipeline:
            await self.pipeline.shutdown()

        if self.health_server:
            await self.health_server.stop()

        self.db.close()
        await super().close()

        logger.tree("SHUTDOWN COMPLETE", [
            ("Uptime", str(datetime.now(NY_TZ) - self.start_time)),
        ], emoji="🛑")

    async def close(self) -> None:
        """Override close to ensure proper shutdown."""
        await self.shutdown()


__all__ = ["HackeyeBot"]
