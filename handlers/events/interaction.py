"""
Interaction event: slash commands and context menus.
"""

from events.event_registry import EventHandlerSpec


async def on_interaction(app, interaction):
    await app.dispatcher.handle_interaction(interaction)


handler = EventHandlerSpec("interaction", on_interaction)
