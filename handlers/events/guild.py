"""
Guild lifecycle events.
"""

from events.event_registry import EventHandlerSpec
from utils.logger import get_logger

logger = get_logger("Guild")


async def on_guild_join(app, guild):
    logger.info(f"Guild Joined: {guild.name} Members: {guild.member_count}")
    await app.settings.register_guild(guild.id, guild.name)


async def on_guild_remove(app, guild):
    logger.info(f"Guild Left: {guild.name} Members: {guild.member_count}")
    await app.settings.mark_left(guild.id)


handler = [
    EventHandlerSpec("guild_join", on_guild_join),
    EventHandlerSpec("guild_remove", on_guild_remove),
]
