"""
Discord gateway client.

The client owns no command logic. Every gateway event that has registered
handlers is handed to the EventRegistry in its own task.
"""

import asyncio
import signal
from typing import Any, Optional, Set

import discord

from bot.app_context import AppContext
from bot.keep_alive import start_server, stop_server
from utils.logger import get_logger

logger = get_logger("Client")


class BotClient(discord.Client):
    """Discord client that fans gateway events into the application's handlers."""

    def __init__(self, app: AppContext, intents: Optional[discord.Intents] = None, **options: Any):
        if intents is None:
            intents = discord.Intents.default()
            intents.message_content = True

        super().__init__(intents=intents, **options)
        self.app = app
        self.commands_synced = False
        self._event_tasks: Set[asyncio.Task] = set()
        self._shutting_down = False
        app.attach(self)

    async def setup_hook(self):
        """Called once before connecting to the gateway."""
        logger.info("Setting up bot...")
        await self.app.start()
        logger.info("Bot setup complete")

    def dispatch(self, event: str, /, *args: Any, **kwargs: Any) -> None:
        super().dispatch(event, *args, **kwargs)

        if event not in self.app.events:
            return

        self.app.monitoring.record_event()
        task = asyncio.create_task(self.app.events.dispatch(event, *args), name=f"event:{event}")
        self._event_tasks.add(task)
        task.add_done_callback(self._event_tasks.discard)

    async def sync_application_commands(self) -> int:
        """
        Overwrite the bot's application commands with the registry's.

        Syncs to DEV_GUILD_ID when configured (instant), globally otherwise.

        Returns:
            Number of commands synced
        """
        payload = self.app.commands.application_commands()
        guild_id = self.app.config.DEV_GUILD_ID

        if guild_id:
            await self.http.bulk_upsert_guild_commands(self.application_id, guild_id, payload)
            logger.info(f"Synced {len(payload)} application commands to guild {guild_id}")
        else:
            await self.http.bulk_upsert_global_commands(self.application_id, payload)
            logger.info(f"Synced {len(payload)} application commands globally")

        self.commands_synced = True
        return len(payload)

    async def close(self):
        """Clean shutdown."""
        if self._shutting_down:
            return
        self._shutting_down = True

        logger.info("Shutting down bot...")
        await super().close()

        if self._event_tasks:
            await asyncio.gather(*self._event_tasks, return_exceptions=True)

        await self.app.close()


async def run_bot(app: AppContext) -> None:
    """
    Run the bot until the gateway closes or a shutdown signal arrives.

    Raises:
        discord.LoginFailure: When the token is rejected
    """
    client = BotClient(app)
    loop = asyncio.get_running_loop()
    shutdown_tasks: Set[asyncio.Task] = set()

    def request_shutdown(sig: signal.Signals) -> None:
        logger.info(f"Received {sig.name}, shutting down...")
        task = asyncio.create_task(client.close(), name="shutdown")
        shutdown_tasks.add(task)
        task.add_done_callback(shutdown_tasks.discard)

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, request_shutdown, sig)
        except NotImplementedError:
            # Windows event loops have no signal support
            pass

    server = None
    try:
        if app.config.KEEP_ALIVE:
            server, server_task = await start_server(app)

        async with client:
            await client.start(app.config.DISCORD_TOKEN)
    finally:
        if shutdown_tasks:
            await asyncio.gather(*shutdown_tasks, return_exceptions=True)
        if server is not None:
            await stop_server(server, server_task)
        await app.close()
