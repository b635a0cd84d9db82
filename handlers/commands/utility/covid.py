"""
Covid statistics command.
Pulls per-country numbers from disease.sh.
"""

from datetime import datetime, timezone
from urllib.parse import quote

import discord

from commands.command_spec import ArgumentSpec, CommandSpec
from utils.discord import DiscordUtils
from utils.http import get_json

API_URL = "https://disease.sh/v2/countries/{country}"
EMBED_COLOR = 0x068ADD

NOT_FOUND = "```css\nCountry with the provided name is not found```"
API_ERROR = "❌ Unexpected Backend Error! Try again later or contact support"

FIELDS = (
    ("Cases total", "cases"),
    ("Cases today", "todayCases"),
    ("Total deaths", "deaths"),
    ("Deaths today", "todayDeaths"),
    ("Recovered", "recovered"),
    ("Active", "active"),
    ("Critical stage", "critical"),
    ("Cases per 1 million", "casesPerOneMillion"),
    ("Deaths per 1 million", "deathsPerOneMillion"),
)


async def get_covid(country: str):
    """
    Build the statistics reply for a country.

    Args:
        country: Country name or ISO code

    Returns:
        Embed payload, or an error message string
    """
    response = await get_json(API_URL.format(country=quote(country)))

    if response.status == 404:
        return NOT_FOUND
    if not response.success or not isinstance(response.data, dict):
        return API_ERROR

    data = response.data
    embed = discord.Embed(title=f"Covid - {data.get('country', country)}", color=EMBED_COLOR)

    flag = (data.get("countryInfo") or {}).get("flag")
    if flag:
        embed.set_thumbnail(url=flag)

    for label, key in FIELDS:
        embed.add_field(name=label, value=DiscordUtils.format_number(data.get(key, 0)), inline=True)

    updated = data.get("updated")
    if updated:
        when = datetime.fromtimestamp(updated / 1000, tz=timezone.utc)
        embed.set_footer(text=f"Last updated on {when:%d.%m.%Y at %H:%M} UTC")

    return {"embeds": [embed]}


async def run(ctx, args):
    return await get_covid(args["country"])


command = CommandSpec(
    name="covid",
    description="get covid statistics for a country",
    category="Utility",
    text_entry=run,
    interaction_entry=run,
    cooldown=5,
    agent_permissions=frozenset({"EMBED_LINKS"}),
    arguments=(
        ArgumentSpec("country", description="country name to get covid statistics for", rest=True),
    ),
    examples=("france", "united states"),
)
