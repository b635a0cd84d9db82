"""
Invocations
Inbound requests, the per-dispatch context and reply sinks
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional, Union

import discord

from commands.command_spec import ContextType
from commands.errors import TransportFailure
from utils.discord import DiscordUtils
from utils.logger import get_logger

logger = get_logger("Reply")


class Origin(Enum):
    """Surface an invocation came from."""

    TEXT = "text"
    INTERACTION = "interaction"
    CONTEXT_MENU = "context_menu"


@dataclass(frozen=True)
class Location:
    """Where an invocation happened and what each party may do there."""

    guild_id: Optional[int]
    channel_id: Optional[int]
    agent_permissions: FrozenSet[str] = frozenset()
    caller_permissions: FrozenSet[str] = frozenset()

    @property
    def is_dm(self) -> bool:
        return self.guild_id is None


class ReplySink:
    """
    Capability to answer one invocation.

    Delivers at most one logical reply; further sends are dropped with a
    warning. Delivery failures of any kind are logged as transport failures
    and never retried or raised.
    """

    def __init__(self):
        self.sent = False

    async def prepare(self, ephemeral: bool = False) -> None:
        """Called right before the entry point runs."""

    async def send(self, payload: Any, ephemeral: bool = False) -> bool:
        """
        Send the reply.

        Args:
            payload: ``str``, ``discord.Embed`` or kwargs dict; None sends nothing
            ephemeral: Only visible to the caller, where the surface supports it

        Returns:
            True if the reply was delivered
        """
        if payload is None:
            return False
        if self.sent:
            logger.warning("Dropping a second reply for the same invocation")
            return False

        self.sent = True
        try:
            await self._deliver(DiscordUtils.reply_kwargs(payload), ephemeral)
        except TransportFailure as e:
            logger.error(f"Reply delivery failed: {e}")
            return False
        except Exception as e:
            # e.g. a reset connection or a payload the library refuses
            logger.error(f"Reply delivery failed: {type(e).__name__}: {e}")
            return False
        return True

    async def close(self) -> None:
        """Called once the dispatch is finished."""

    async def _deliver(self, kwargs: Dict[str, Any], ephemeral: bool) -> None:
        raise NotImplementedError


class MessageReplySink(ReplySink):
    """Replies in the channel a text command was sent in."""

    def __init__(self, message: Any):
        super().__init__()
        self.message = message

    async def _deliver(self, kwargs: Dict[str, Any], ephemeral: bool) -> None:
        kwargs.pop("ephemeral", None)
        try:
            await self.message.channel.send(**kwargs)
        except discord.HTTPException as e:
            raise TransportFailure(str(e)) from e


class InteractionReplySink(ReplySink):
    """Answers an interaction, or follows up once it has been deferred."""

    def __init__(self, interaction: Any):
        super().__init__()
        self.interaction = interaction
        self._deferred = False
        self._deferred_ephemeral = False

    async def prepare(self, ephemeral: bool = False) -> None:
        # Entry points may take longer than the interaction acknowledgement window
        if self.sent or self.interaction.response.is_done():
            return
        try:
            await self.interaction.response.defer(ephemeral=ephemeral, thinking=True)
            self._deferred = True
            self._deferred_ephemeral = ephemeral
        except Exception as e:
            logger.error(f"Failed to defer interaction: {e}")

    async def _deliver(self, kwargs: Dict[str, Any], ephemeral: bool) -> None:
        kwargs.setdefault("ephemeral", ephemeral)
        try:
            if not self.interaction.response.is_done():
                await self.interaction.response.send_message(**kwargs)
                return

            if self._deferred and kwargs["ephemeral"] and not self._deferred_ephemeral:
                # The first followup would edit the public placeholder and lose the flag
                await self._clear_placeholder()
            await self.interaction.followup.send(**kwargs)
        except discord.HTTPException as e:
            raise TransportFailure(str(e)) from e

    async def _clear_placeholder(self) -> None:
        try:
            await self.interaction.delete_original_response()
        except Exception as e:
            logger.debug(f"Failed to clear deferred response: {e}")
        self._deferred = False

    async def close(self) -> None:
        # A deferred interaction that never got an answer keeps "thinking" forever
        if self._deferred and not self.sent:
            await self._clear_placeholder()


@dataclass
class TextInvocation:
    """A message that may contain a prefixed command."""

    content: str
    entity_id: int
    location: Location
    reply: ReplySink
    source: Any = None


@dataclass
class InteractionInvocation:
    """A slash command or context menu interaction."""

    command_name: str
    entity_id: int
    location: Location
    reply: ReplySink
    options: Dict[str, Any] = field(default_factory=dict)
    # None for slash commands
    context_type: Optional[ContextType] = None
    target_id: Optional[int] = None
    source: Any = None


Invocation = Union[TextInvocation, InteractionInvocation]


@dataclass
class InvocationContext:
    """
    Everything an entry point gets to know about one invocation.

    Owned by a single dispatch and dropped when it finishes.
    """

    origin: Origin
    command: str
    entity_id: int
    location: Location
    reply: ReplySink
    raw_arguments: Union[List[str], Dict[str, Any]]
    prefix: str = "/"
    source: Any = None
    app: Any = None

    @property
    def guild_id(self) -> Optional[int]:
        return self.location.guild_id

    @property
    def channel_id(self) -> Optional[int]:
        return self.location.channel_id
