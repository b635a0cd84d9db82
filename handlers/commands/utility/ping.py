"""
Ping command.
"""

import math

from commands.command_spec import CommandSpec


async def run(ctx, args):
    client = ctx.app.client if ctx.app else None
    latency = client.latency if client is not None else 0.0
    if math.isnan(latency) or math.isinf(latency):
        latency = 0.0
    return f"🏓 Pong : `{math.floor(latency * 1000)}ms`"


command = CommandSpec(
    name="ping",
    description="shows the current ping from the bot to the discord servers",
    category="Utility",
    text_entry=run,
    interaction_entry=run,
    cooldown=5,
)
