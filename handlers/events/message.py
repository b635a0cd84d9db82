"""
Message event: prefixed text commands.
"""

from events.event_registry import EventHandlerSpec


async def on_message(app, message):
    await app.dispatcher.handle_message(message)


handler = EventHandlerSpec("message", on_message)
