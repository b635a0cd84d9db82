"""
Set the command prefix for a server.
"""

from commands.command_spec import ArgumentSpec, CommandSpec
from commands.errors import ArityViolation
from utils.validation import ValidationUtils


async def run(ctx, args):
    result = ValidationUtils.validate_prefix(args["prefix"])
    if not result:
        raise ArityViolation(result.error, command.usage(ctx.prefix))

    prefix = await ctx.app.settings.set_prefix(ctx.guild_id, result.sanitized)
    return f"✅ New prefix is set to `{prefix}`"


command = CommandSpec(
    name="setprefix",
    description="sets a new prefix for this server",
    category="Admin",
    text_entry=run,
    interaction_entry=run,
    caller_permissions=frozenset({"MANAGE_GUILD"}),
    arguments=(ArgumentSpec("prefix", description="the new prefix to set"),),
    guild_only=True,
    examples=("?",),
)
