"""Shipped command, context menu and event handlers."""

from types import SimpleNamespace

import pytest

from bot.app_context import create_app
from bot.config import Config
from commands.command_spec import ContextType
from commands.dispatcher import DispatchOutcome
from handlers.commands.utility import covid
from tests.conftest import GUILD_ID, guild_location, interaction, make_message, text
from utils.http import JsonResponse

A = 1001

FRANCE = {
    "country": "France",
    "countryInfo": {"flag": "https://disease.sh/assets/img/flags/fr.png"},
    "cases": 1234567,
    "todayCases": 10,
    "deaths": 100,
    "todayDeaths": 1,
    "recovered": 1000000,
    "active": 234467,
    "critical": 5,
    "casesPerOneMillion": 18900,
    "deathsPerOneMillion": 1500,
    "updated": 1600000000000,
}


class FakeClient:
    latency = 0.042
    guilds = []
    user = "Bot#0001"

    def __init__(self):
        self.commands_synced = False
        self.synced = 0

    def is_ready(self):
        return True

    def get_user(self, user_id):
        return SimpleNamespace(id=user_id, name="alice", display_avatar=SimpleNamespace(url="https://cdn/alice.png"))

    async def sync_application_commands(self):
        self.synced += 1
        self.commands_synced = True


@pytest.fixture
def app():
    app = create_app(Config(DISCORD_TOKEN="token")).load()
    app.attach(FakeClient())
    return app


def test_shipped_handlers_load(app) -> None:
    for name in ("ping", "covid", "help", "commands", "status", "setprefix"):
        assert app.commands.resolve(name) is not None, name

    assert app.commands.resolve_context("Avatar", ContextType.USER) is not None
    for event in ("message", "interaction", "ready", "guild_join", "guild_remove"):
        assert event in app.events, event


def test_shipped_commands_sync_as_slash_commands(app) -> None:
    names = {payload["name"] for payload in app.commands.application_commands()}
    assert {"ping", "covid", "help", "status", "setprefix", "Avatar"} <= names


async def test_ping(app) -> None:
    invocation = text("!ping", A)

    assert await app.dispatcher.dispatch(invocation) is DispatchOutcome.REPLIED
    assert invocation.reply.content == "🏓 Pong : `42ms`"


async def test_covid_text_and_interaction(app, monkeypatch) -> None:
    requested = []

    async def fake_get_json(url, timeout=None):
        requested.append(url)
        return JsonResponse(True, 200, FRANCE)

    monkeypatch.setattr(covid, "get_json", fake_get_json)

    slash = interaction("covid", A, options={"country": "france"})
    assert await app.dispatcher.dispatch(slash) is DispatchOutcome.REPLIED

    embed = slash.reply.messages[0]["embeds"][0]
    assert embed.title == "Covid - France"
    assert embed.fields[0].name == "Cases total"
    assert embed.fields[0].value == "1,234,567"
    assert requested == ["https://disease.sh/v2/countries/france"]

    message = text("!covid united states", A + 1)
    assert await app.dispatcher.dispatch(message) is DispatchOutcome.REPLIED
    assert requested[-1] == "https://disease.sh/v2/countries/united%20states"


async def test_covid_unknown_country(app, monkeypatch) -> None:
    async def fake_get_json(url, timeout=None):
        return JsonResponse(False, 404)

    monkeypatch.setattr(covid, "get_json", fake_get_json)

    invocation = text("!covid atlantis", A)
    await app.dispatcher.dispatch(invocation)
    assert "not found" in invocation.reply.content


async def test_covid_needs_embed_links(app) -> None:
    invocation = text("!covid france", A, guild_location(agent={"SEND_MESSAGES"}))

    assert await app.dispatcher.dispatch(invocation) is DispatchOutcome.REJECTED
    assert "Embed Links" in invocation.reply.content


async def test_help_overview_and_detail(app) -> None:
    overview = text("!help", A)
    await app.dispatcher.dispatch(overview)
    embed = overview.reply.messages[0]["embed"]
    assert embed.title == "Available Commands"
    assert "Utility" in [field.name for field in embed.fields]

    detail = text("!help covid", A + 1)
    await app.dispatcher.dispatch(detail)
    embed = detail.reply.messages[0]["embed"]
    assert embed.title == "Command: covid"
    assert embed.fields[0].value == "`!covid <country...>`"

    missing = text("!help nope", A + 2)
    await app.dispatcher.dispatch(missing)
    assert "No command called `nope`" in missing.reply.content


async def test_status(app) -> None:
    invocation = text("!status", A)
    await app.dispatcher.dispatch(invocation)
    assert "Bot Health Status" in invocation.reply.content


async def test_setprefix_changes_the_guild_prefix(app) -> None:
    manager = guild_location(caller={"MANAGE_GUILD"})

    change = text("!setprefix ?", A, manager)
    assert await app.dispatcher.dispatch(change) is DispatchOutcome.REPLIED
    assert change.reply.content == "✅ New prefix is set to `?`"

    assert await app.dispatcher.dispatch(text("!ping", A)) is DispatchOutcome.IGNORED
    assert await app.dispatcher.dispatch(text("?ping", A)) is DispatchOutcome.REPLIED


async def test_setprefix_rejects_invalid_prefix(app) -> None:
    manager = guild_location(caller={"MANAGE_GUILD"})

    invocation = text("!setprefix toolong", A, manager)
    assert await app.dispatcher.dispatch(invocation) is DispatchOutcome.REJECTED
    assert "too long" in invocation.reply.content
    assert await app.settings.get_prefix(GUILD_ID) == "!"


async def test_setprefix_requires_manage_guild(app) -> None:
    invocation = text("!setprefix ?", A)
    assert await app.dispatcher.dispatch(invocation) is DispatchOutcome.REJECTED
    assert "Manage Guild" in invocation.reply.content


async def test_avatar_context_menu(app) -> None:
    invocation = interaction("Avatar", A, context_type=ContextType.USER, target_id=42)

    assert await app.dispatcher.dispatch(invocation) is DispatchOutcome.REPLIED
    message = invocation.reply.messages[0]
    assert message["embed"].image.url == "https://cdn/alice.png"
    assert message["ephemeral"] is True
    assert app.commands.resolve_context("Avatar", ContextType.USER).ephemeral
    assert invocation.reply.prepared_ephemeral is True


async def test_message_event_dispatches_commands(app) -> None:
    message = make_message("!ping", A)

    assert await app.events.dispatch("message", message) == 0
    assert message.channel.sent[0]["content"].startswith("🏓 Pong")


async def test_ready_syncs_commands_once(app) -> None:
    await app.events.dispatch("ready")
    await app.events.dispatch("ready")
    assert app.client.synced == 1


async def test_guild_lifecycle_events(app) -> None:
    guild = SimpleNamespace(id=GUILD_ID, name="Test Server", member_count=3)
    await app.settings.set_prefix(GUILD_ID, "?")

    assert await app.events.dispatch("guild_join", guild) == 0
    assert await app.events.dispatch("guild_remove", guild) == 0
    assert await app.settings.get_prefix(GUILD_ID) == "!"
