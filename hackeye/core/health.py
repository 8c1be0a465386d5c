"""
HackeyeBot - Health Check Server
================================

aiohttp endpoint reporting gateway state and guild worker load.

    GET /health  ->  {"status": "healthy" | "starting", "connected": bool,
                      "guilds": int, "active_workers": int,
                      "timestamp": ISO-8601 Eastern}
"""

from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, Optional

from aiohttp import web

from hackeye.core.constants import HEALTH_CHECK_PORT, LOG_TRUNCATE_SHORT
from hackeye.core.logger import NY_TZ, logger

if TYPE_CHECKING:
    from hackeye.bot import HackeyeBot


class HealthCheckServer:
    """
    Health endpoint bound inside the bot's event loop.

    Attributes:
        bot: Bot queried for status.
        port: TCP port to bind.
    """

    def __init__(self, bot: "HackeyeBot", port: int = HEALTH_CHECK_PORT) -> None:
        self.bot = bot
        self.port = port
        self.app = web.Application()
        self.app.add_routes([
            web.get("/", self.health_handler),
            web.get("/health", self.health_handler),
        ])
        self.runner: Optional[web.AppRunner] = None

    def build_status(self) -> Dict[str, Any]:
        connected = self.bot.is_ready()
        pipeline = getattr(self.bot, "pipeline", None)
        return {
            "status": "healthy" if connected else "starting",
            "connected": connected,
            "guilds": len(self.bot.guilds),
            "active_workers": pipeline.active_workers if pipeline is not None else 0,
            "timestamp": datetime.now(NY_TZ).isoformat(),
        }

    async def health_handler(self, request: web.Request) -> web.Response:
        try:
            return web.json_response(self.build_status())
        except Exception as e:
            logger.error("Health Check Error", [
                ("Error Type", type(e).__name__),
                ("Error", str(e)[:LOG_TRUNCATE_SHORT]),
            ])
            return web.json_response({"status": "error", "error": type(e).__name__}, status=500)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def start(self) -> bool:
        """Bind the port. Returns False, and logs, if it is taken."""
        runner = web.AppRunner(self.app, access_log=None)
        await runner.setup()
        try:
            await web.TCPSite(runner, "0.0.0.0", self.port).start()
        except OSError as e:
            await runner.cleanup()
            logger.error("Health Server Startup Failed", [
                ("Port", str(self.port)),
                ("Error", str(e)[:LOG_TRUNCATE_SHORT]),
            ])
            return False

        self.runner = runner
        logger.tree("Health Server Started", [
            ("Endpoint", f"http://0.0.0.0:{self.port}/health"),
        ], emoji="🏥")
        return True

    async def stop(self) -> None:
        if self.runner is not None:
            await self.runner.cleanup()
            self.runner = None
            logger.info("Health Server Stopped")


__all__ = ["HealthCheckServer"]
