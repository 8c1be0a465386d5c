#!/usr/bin/env python3
"""
HackeyeBot - Entry Point
========================

Loads the environment, validates configuration and runs the bot.
"""

import asyncio
import sys

from dotenv import load_dotenv

from hackeye.core.config import ConfigValidationError, validate_and_log_config
from hackeye.core.logger import logger
from hackeye.utils.error_handler import ErrorHandler


async def main() -> None:
    """
    Main entry point.

    Handles the bot lifecycle:
    1. Loads .env into the environment
    2. Validates configuration (DISCORD_TOKEN is required)
    3. Connects to Discord and runs until interrupted

    Raises:
        SystemExit: If configuration is invalid or the bot fails to start
    """
    load_dotenv()

    try:
        config = validate_and_log_config()
    except ConfigValidationError as e:
        logger.error("Invalid Configuration", [("Error", str(e))])
        sys.exit(1)

    logger.tree("HACKEYE STARTING", [
        ("Environment", config.environment),
        ("Database", str(config.database_path)),
    ], emoji="🔥")

    from hackeye.bot import HackeyeBot

    bot = HackeyeBot(config)
    try:
        async with bot:
            await bot.start(config.discord_token)
    except Exception as e:
        ErrorHandler.handle(
            e,
            location="main.main",
            critical=True,
            environment=config.environment,
        )
        sys.exit(1)


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Bot stopped by user (Ctrl+C)")
