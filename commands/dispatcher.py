"""
Dispatcher
Turns one inbound gateway event into at most one command invocation
"""

import asyncio
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Optional, Union

import discord

from commands.arguments import interaction_options, parse_text_arguments, resolve_interaction_options
from commands.command_registry import CommandRegistry
from commands.command_spec import CommandSpec, ContextSpec, ContextType, EntryPoint
from commands.cooldowns import CooldownTracker
from commands.errors import (
    ArityViolation,
    CooldownViolation,
    HandlerFailure,
    PermissionViolation,
    PolicyViolation,
)
from commands.invocation import (
    InteractionInvocation,
    InteractionReplySink,
    Invocation,
    InvocationContext,
    Location,
    MessageReplySink,
    Origin,
    TextInvocation,
)
from commands.permissions import PermissionChecker
from utils.error_handler import ErrorHandler
from utils.logger import get_logger
from utils.monitoring import Monitoring
from utils.validation import ValidationUtils

GENERIC_FAILURE = "❌ An error occurred while running this command. Please try again later."
UNAVAILABLE = "❌ This command is not available right now. Please try again later."
GUILD_ONLY = "❌ This command must be used in a server"

PrefixResolver = Callable[[Optional[int]], Awaitable[Optional[str]]]


class DispatchOutcome(Enum):
    """Terminal state of one dispatch."""

    IGNORED = "ignored"
    NOT_FOUND = "not_found"
    REJECTED = "rejected"
    REPLIED = "replied"
    FAILED = "failed"


class Dispatcher:
    """
    Resolves invocations and runs them through the policy chain.

    Order is fixed: arity, permissions, cooldown, then the entry point.
    The first failing step replies to the caller and stops the chain. Entry
    point failures are reported and answered with a generic message; nothing
    is ever raised back to the gateway client.
    """

    def __init__(
        self,
        registry: CommandRegistry,
        cooldowns: CooldownTracker,
        permissions: Optional[PermissionChecker] = None,
        *,
        prefix: str = "!",
        prefix_resolver: Optional[PrefixResolver] = None,
        timeout: Optional[float] = None,
        error_handler: Optional[ErrorHandler] = None,
        monitoring: Optional[Monitoring] = None,
        app: Any = None,
    ):
        self.logger = get_logger("Dispatcher")
        self.registry = registry
        self.cooldowns = cooldowns
        self.permissions = permissions or PermissionChecker()
        self.prefix = prefix
        self.prefix_resolver = prefix_resolver
        self.timeout = timeout or None
        self.error_handler = error_handler or ErrorHandler()
        self.monitoring = monitoring
        self.app = app

    # Gateway adapters

    async def handle_message(self, message: Any) -> DispatchOutcome:
        """
        Handle a ``discord.Message``.

        Args:
            message: Discord message object

        Returns:
            Outcome of the dispatch
        """
        if message.author.bot:
            return DispatchOutcome.IGNORED

        if self.monitoring:
            self.monitoring.record_message()

        invocation = TextInvocation(
            content=message.content or "",
            entity_id=message.author.id,
            location=self._message_location(message),
            reply=MessageReplySink(message),
            source=message,
        )
        return await self.dispatch(invocation)

    async def handle_interaction(self, interaction: Any) -> DispatchOutcome:
        """
        Handle an application command ``discord.Interaction``.

        Args:
            interaction: Discord interaction object

        Returns:
            Outcome of the dispatch
        """
        if interaction.type != discord.InteractionType.application_command:
            return DispatchOutcome.IGNORED

        data = interaction.data or {}
        command_type = data.get("type", 1)
        target_id = data.get("target_id")

        invocation = InteractionInvocation(
            command_name=data.get("name", ""),
            entity_id=interaction.user.id,
            location=Location(
                guild_id=interaction.guild_id,
                channel_id=interaction.channel_id,
                agent_permissions=PermissionChecker.capabilities(interaction.app_permissions),
                caller_permissions=PermissionChecker.capabilities(interaction.permissions),
            ),
            reply=InteractionReplySink(interaction),
            options=interaction_options(data),
            context_type=ContextType(command_type) if command_type in (2, 3) else None,
            target_id=int(target_id) if target_id is not None else None,
            source=interaction,
        )
        return await self.dispatch(invocation)

    def _message_location(self, message: Any) -> Location:
        channel = message.channel
        guild = message.guild

        if guild is None:
            # DM permissions do not depend on who asks
            held = PermissionChecker.capabilities(channel.permissions_for(message.author))
            return Location(guild_id=None, channel_id=channel.id, agent_permissions=held, caller_permissions=held)

        return Location(
            guild_id=guild.id,
            channel_id=channel.id,
            agent_permissions=PermissionChecker.capabilities(channel.permissions_for(guild.me)),
            caller_permissions=PermissionChecker.capabilities(channel.permissions_for(message.author)),
        )

    # Dispatch

    async def dispatch(self, invocation: Invocation) -> DispatchOutcome:
        """
        Dispatch one invocation.

        Args:
            invocation: Text or interaction invocation

        Returns:
            Outcome of the dispatch
        """
        try:
            if isinstance(invocation, TextInvocation):
                return await self._dispatch_text(invocation)
            return await self._dispatch_interaction(invocation)
        finally:
            await invocation.reply.close()

    async def _dispatch_text(self, invocation: TextInvocation) -> DispatchOutcome:
        prefix = await self._resolve_prefix(invocation.location.guild_id)
        content = ValidationUtils.sanitize_input(invocation.content)

        # Ordinary conversation
        if not content.startswith(prefix):
            return DispatchOutcome.IGNORED

        tokens = content[len(prefix):].split()
        if not tokens:
            return DispatchOutcome.IGNORED

        name, tokens = tokens[0], tokens[1:]
        spec = self.registry.resolve(name)
        if spec is None or not spec.supports_text:
            self.logger.debug(f"No text command matches '{name}'")
            return DispatchOutcome.IGNORED

        usage = spec.usage(prefix)
        ctx = InvocationContext(
            origin=Origin.TEXT,
            command=spec.name,
            entity_id=invocation.entity_id,
            location=invocation.location,
            reply=invocation.reply,
            raw_arguments=tokens,
            prefix=prefix,
            source=invocation.source,
            app=self.app,
        )
        return await self._run(
            spec,
            spec.text_entry,
            ctx,
            lambda: parse_text_arguments(spec.arguments, tokens, usage),
            cooldown_key=spec.name,
        )

    async def _dispatch_interaction(self, invocation: InteractionInvocation) -> DispatchOutcome:
        if invocation.context_type is not None:
            return await self._dispatch_context_menu(invocation)

        spec = self.registry.resolve(invocation.command_name)
        if spec is None or not spec.supports_interaction:
            return await self._unknown_interaction(invocation)

        usage = spec.usage("/")
        ctx = InvocationContext(
            origin=Origin.INTERACTION,
            command=spec.name,
            entity_id=invocation.entity_id,
            location=invocation.location,
            reply=invocation.reply,
            raw_arguments=dict(invocation.options),
            source=invocation.source,
            app=self.app,
        )
        return await self._run(
            spec,
            spec.interaction_entry,
            ctx,
            lambda: resolve_interaction_options(spec.arguments, invocation.options, usage),
            cooldown_key=spec.name,
        )

    async def _dispatch_context_menu(self, invocation: InteractionInvocation) -> DispatchOutcome:
        spec = self.registry.resolve_context(invocation.command_name, invocation.context_type)
        if spec is None:
            return await self._unknown_interaction(invocation)

        def resolve_target() -> Dict[str, Any]:
            if invocation.target_id is None:
                raise ArityViolation("This menu needs a target")
            return {"target": invocation.target_id}

        ctx = InvocationContext(
            origin=Origin.CONTEXT_MENU,
            command=spec.name,
            entity_id=invocation.entity_id,
            location=invocation.location,
            reply=invocation.reply,
            raw_arguments={"target": invocation.target_id},
            source=invocation.source,
            app=self.app,
        )
        return await self._run(
            spec,
            spec.entry,
            ctx,
            resolve_target,
            cooldown_key=f"context:{spec.type.name.lower()}:{spec.name.casefold()}",
        )

    async def _unknown_interaction(self, invocation: InteractionInvocation) -> DispatchOutcome:
        # The gateway says this command exists; our registry disagrees
        self.logger.error(f"Received interaction for unregistered command '{invocation.command_name}'")
        if self.monitoring:
            self.monitoring.record_error()
        await invocation.reply.send(UNAVAILABLE, ephemeral=True)
        return DispatchOutcome.NOT_FOUND

    async def _run(
        self,
        spec: Union[CommandSpec, ContextSpec],
        entry: EntryPoint,
        ctx: InvocationContext,
        resolve_arguments: Callable[[], Dict[str, Any]],
        cooldown_key: str,
    ) -> DispatchOutcome:
        try:
            arguments = resolve_arguments()
            self._check_permissions(spec, ctx.location)

            lease = self.cooldowns.reserve(cooldown_key, ctx.entity_id, spec.cooldown)
            if lease.throttled:
                raise CooldownViolation(lease.remaining)

            try:
                payload = await self._invoke(spec, entry, ctx, arguments)
            except BaseException:
                # Failed, rejected or cancelled invocations leave no cooldown behind
                lease.release()
                raise
            lease.commit()

        except PolicyViolation as violation:
            self.logger.debug(f"Rejected {spec.name} for {ctx.entity_id}: {violation.message}")
            if self.monitoring:
                self.monitoring.record_rejection()
            if not ctx.reply.sent:
                await ctx.reply.send(violation.message, ephemeral=True)
            return DispatchOutcome.REJECTED

        except HandlerFailure as failure:
            self.error_handler.handle_exception(failure.cause, f"command:{spec.name}")
            if self.monitoring:
                self.monitoring.record_failure()
            if not ctx.reply.sent:
                await ctx.reply.send(GENERIC_FAILURE, ephemeral=True)
            return DispatchOutcome.FAILED

        if self.monitoring:
            self.monitoring.record_command()
        if payload is not None and not ctx.reply.sent:
            await ctx.reply.send(payload, ephemeral=spec.ephemeral)
        return DispatchOutcome.REPLIED

    def _check_permissions(self, spec: Union[CommandSpec, ContextSpec], location: Location) -> None:
        if spec.guild_only and location.is_dm:
            raise PermissionViolation(GUILD_ONLY)

        result = self.permissions.check(spec.agent_permissions, location.agent_permissions, location)
        if not result:
            raise PermissionViolation(
                f"❌ I need the `{PermissionChecker.display_name(result.missing)}` permission to run this command",
                result.missing,
                agent=True,
            )

        result = self.permissions.check(spec.caller_permissions, location.caller_permissions, location)
        if not result:
            raise PermissionViolation(
                f"❌ You need the `{PermissionChecker.display_name(result.missing)}` permission to use this command",
                result.missing,
            )

    async def _invoke(
        self,
        spec: Union[CommandSpec, ContextSpec],
        entry: EntryPoint,
        ctx: InvocationContext,
        arguments: Dict[str, Any],
    ) -> Any:
        self.logger.debug(f"Executing: {spec.name} ({ctx.origin.value}) for {ctx.entity_id}")
        await ctx.reply.prepare(spec.ephemeral)

        try:
            if self.timeout:
                return await asyncio.wait_for(entry(ctx, arguments), self.timeout)
            return await entry(ctx, arguments)
        except PolicyViolation:
            # Entry points may reject with a user-facing message themselves
            raise
        except asyncio.TimeoutError as e:
            cause = asyncio.TimeoutError(f"timed out after {self.timeout}s") if self.timeout else e
            raise HandlerFailure(spec.name, cause) from e
        except Exception as e:
            raise HandlerFailure(spec.name, e) from e

    async def _resolve_prefix(self, guild_id: Optional[int]) -> str:
        if self.prefix_resolver is None or guild_id is None:
            return self.prefix

        try:
            return await self.prefix_resolver(guild_id) or self.prefix
        except Exception as e:
            self.logger.warning(f"Prefix lookup failed for guild {guild_id}, using default: {e}")
            return self.prefix
