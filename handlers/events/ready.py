"""
Ready event: startup logging and application command sync.
"""

from events.event_registry import EventHandlerSpec
from utils.logger import get_logger

logger = get_logger("Ready")


async def on_ready(app):
    client = app.client
    logger.info(f"Logged in as: {client.user}")
    logger.info(f"Serving {len(client.guilds)} guilds with {len(app.commands)} commands")


async def sync_commands(app):
    client = app.client
    # ready fires again after every reconnect
    if not app.config.SYNC_COMMANDS or client.commands_synced:
        return
    await client.sync_application_commands()


handler = [
    EventHandlerSpec("ready", on_ready),
    EventHandlerSpec("ready", sync_commands),
]
