"""
Avatar user context menu.
"""

import discord

from commands.command_spec import ContextSpec, ContextType

EMBED_COLOR = 0x068ADD


async def run(ctx, args):
    client = ctx.app.client
    user = client.get_user(args["target"]) or await client.fetch_user(args["target"])

    embed = discord.Embed(title=f"Avatar of {user.name}", color=EMBED_COLOR)
    embed.set_image(url=user.display_avatar.url)
    return embed


context = ContextSpec(
    name="Avatar",
    type=ContextType.USER,
    entry=run,
    description="displays avatar information about the user",
    cooldown=3,
    ephemeral=True,
)
