"""
Entry point for the dispatch bot.
"""

import asyncio
import sys

import discord

from bot.app_context import create_app
from bot.client import run_bot
from bot.config import Config
from commands.errors import LoadError
from utils.logger import get_logger

logger = get_logger("Main")


def main() -> int:
    """
    Main entry point.

    Returns:
        Process exit code
    """
    try:
        config = Config.from_env()
        config.validate()
    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        return 1

    app = create_app(config)

    try:
        app.load()
    except LoadError as e:
        logger.error(f"Failed to load handlers: {e}")
        return 1

    try:
        logger.info("Starting Dispatch Bot...")
        asyncio.run(run_bot(app))
    except discord.LoginFailure:
        logger.error("Discord rejected the token, check DISCORD_TOKEN")
        return 1
    except KeyboardInterrupt:
        logger.info("Bot stopped by user")
    except Exception as e:
        logger.error(f"Fatal error: {e}")
        return 1

    logger.info("Bot stopped")
    return 0


if __name__ == "__main__":
    sys.exit(main())
