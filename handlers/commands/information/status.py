"""
Status command.
"""

from commands.command_spec import CommandSpec


async def run(ctx, args):
    return ctx.app.monitoring.format_health_status()


command = CommandSpec(
    name="status",
    description="shows bot health and dispatch statistics",
    category="Information",
    text_entry=run,
    interaction_entry=run,
    aliases=("health",),
    cooldown=10,
)
