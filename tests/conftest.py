"""Pytest configuration and shared fixtures."""

from types import SimpleNamespace
from typing import Any, Dict, List

import discord
import pytest

from commands.command_registry import CommandRegistry
from commands.cooldowns import CooldownTracker
from commands.dispatcher import Dispatcher
from commands.invocation import InteractionInvocation, Location, ReplySink, TextInvocation
from utils.error_handler import ErrorHandler
from utils.monitoring import Monitoring

GUILD_ID = 111111111111111111
CHANNEL_ID = 222222222222222222

BOT_PERMISSIONS = frozenset({"SEND_MESSAGES", "EMBED_LINKS", "VIEW_CHANNEL"})
MEMBER_PERMISSIONS = frozenset({"SEND_MESSAGES", "VIEW_CHANNEL"})


class FakeSink(ReplySink):
    """Reply sink that records deliveries instead of talking to Discord."""

    def __init__(self):
        super().__init__()
        self.messages: List[Dict[str, Any]] = []
        self.prepared = False
        self.prepared_ephemeral = None
        self.closed = False

    async def prepare(self, ephemeral: bool = False) -> None:
        self.prepared = True
        self.prepared_ephemeral = ephemeral

    async def _deliver(self, kwargs: Dict[str, Any], ephemeral: bool) -> None:
        self.messages.append({"ephemeral": ephemeral, **kwargs})

    async def close(self) -> None:
        self.closed = True

    @property
    def content(self):
        return self.messages[0].get("content") if self.messages else None


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def guild_location(agent=BOT_PERMISSIONS, caller=MEMBER_PERMISSIONS, guild_id=GUILD_ID) -> Location:
    return Location(
        guild_id=guild_id,
        channel_id=CHANNEL_ID,
        agent_permissions=frozenset(agent),
        caller_permissions=frozenset(caller),
    )


def dm_location() -> Location:
    return Location(guild_id=None, channel_id=CHANNEL_ID, agent_permissions=BOT_PERMISSIONS, caller_permissions=BOT_PERMISSIONS)


def text(content: str, entity_id: int = 1, location: Location = None) -> TextInvocation:
    return TextInvocation(
        content=content,
        entity_id=entity_id,
        location=location or guild_location(),
        reply=FakeSink(),
    )


def interaction(name: str, entity_id: int = 1, location: Location = None, **kwargs) -> InteractionInvocation:
    return InteractionInvocation(
        command_name=name,
        entity_id=entity_id,
        location=location or guild_location(),
        reply=FakeSink(),
        **kwargs,
    )


class FakeChannel:
    """Text channel with fixed permissions per member."""

    def __init__(self, permissions: Dict[int, discord.Permissions], channel_id: int = CHANNEL_ID):
        self.id = channel_id
        self._permissions = permissions
        self.sent: List[Dict[str, Any]] = []

    def permissions_for(self, member):
        return self._permissions.get(member.id, discord.Permissions.none())

    async def send(self, **kwargs):
        self.sent.append(kwargs)


def make_message(content: str, author_id: int = 1, bot: bool = False, channel: FakeChannel = None, in_guild: bool = True):
    me = SimpleNamespace(id=999)
    author = SimpleNamespace(id=author_id, bot=bot)
    if channel is None:
        channel = FakeChannel({
            me.id: discord.Permissions(send_messages=True, embed_links=True),
            author_id: discord.Permissions(send_messages=True),
        })
    guild = SimpleNamespace(id=GUILD_ID, me=me) if in_guild else None
    return SimpleNamespace(content=content, author=author, channel=channel, guild=guild)


class FakeResponse:
    def __init__(self):
        self.done = False
        self.deferred = False
        self.deferred_ephemeral = None
        self.sent: List[Dict[str, Any]] = []

    def is_done(self) -> bool:
        return self.done

    async def defer(self, ephemeral: bool = False, thinking: bool = False):
        self.done = True
        self.deferred = True
        self.deferred_ephemeral = ephemeral

    async def send_message(self, **kwargs):
        self.done = True
        self.sent.append(kwargs)


class FakeFollowup:
    def __init__(self):
        self.sent: List[Dict[str, Any]] = []

    async def send(self, **kwargs):
        self.sent.append(kwargs)


class FakeInteraction:
    """Application command interaction as discord.py hands it over."""

    def __init__(self, data: Dict[str, Any], user_id: int = 1, guild_id=GUILD_ID):
        self.type = discord.InteractionType.application_command
        self.data = data
        self.user = SimpleNamespace(id=user_id)
        self.guild_id = guild_id
        self.channel_id = CHANNEL_ID
        self.app_permissions = discord.Permissions(send_messages=True, embed_links=True)
        self.permissions = discord.Permissions(send_messages=True)
        self.response = FakeResponse()
        self.followup = FakeFollowup()
        self.deleted_original = False

    async def delete_original_response(self):
        self.deleted_original = True


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cooldowns(clock: FakeClock) -> CooldownTracker:
    return CooldownTracker(clock=clock)


@pytest.fixture
def registry() -> CommandRegistry:
    return CommandRegistry()


@pytest.fixture
def error_handler() -> ErrorHandler:
    return ErrorHandler()


@pytest.fixture
def monitoring() -> Monitoring:
    return Monitoring()


@pytest.fixture
def dispatcher(registry, cooldowns, error_handler, monitoring) -> Dispatcher:
    return Dispatcher(
        registry,
        cooldowns,
        prefix="!",
        error_handler=error_handler,
        monitoring=monitoring,
    )
