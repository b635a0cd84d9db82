"""
Help command.
Lists commands by category, or shows usage for one command.
"""

import discord

from commands.command_spec import ArgumentSpec, CommandSpec
from utils.discord import DiscordUtils

EMBED_COLOR = 0x068ADD


def command_help(spec: CommandSpec, prefix: str) -> discord.Embed:
    """Usage embed for a single command."""
    embed = discord.Embed(title=f"Command: {spec.name}", description=spec.description, color=EMBED_COLOR)
    embed.add_field(name="Usage", value=f"`{spec.usage(prefix)}`", inline=False)

    if spec.aliases:
        embed.add_field(name="Aliases", value=", ".join(f"`{alias}`" for alias in spec.aliases), inline=False)
    if spec.examples:
        examples = "\n".join(f"`{prefix}{spec.name} {example}`" for example in spec.examples)
        embed.add_field(name="Examples", value=examples, inline=False)
    if spec.cooldown:
        embed.add_field(name="Cooldown", value=DiscordUtils.format_duration(int(spec.cooldown)), inline=True)

    return embed


def overview(registry, prefix: str) -> discord.Embed:
    """Category listing of every command."""
    embed = discord.Embed(
        title="Available Commands",
        description=f"Use `{prefix}help <command>` for details",
        color=EMBED_COLOR,
    )

    for category in registry.categories():
        names = [f"`{spec.name}`" for spec in registry.list(category)]
        embed.add_field(name=category, value=" ".join(names), inline=False)

    return embed


async def run(ctx, args):
    registry = ctx.app.commands
    name = args.get("command")

    if not name:
        return overview(registry, ctx.prefix)

    spec = registry.resolve(name)
    if spec is None:
        return f"❌ No command called `{DiscordUtils.truncate(name, 32)}`"
    return command_help(spec, ctx.prefix)


command = CommandSpec(
    name="help",
    description="command help menu",
    category="Information",
    text_entry=run,
    interaction_entry=run,
    aliases=("commands",),
    arguments=(ArgumentSpec("command", required=False, description="name of the command"),),
    examples=("covid",),
)
