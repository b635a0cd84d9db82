"""
Dispatch Errors
Error taxonomy shared by the registries and the dispatcher
"""

import math
from typing import Optional

from utils.discord import DiscordUtils


class DispatchError(Exception):
    """Base class for all dispatch-core errors."""


# Load time


class LoadError(DispatchError):
    """A handler definition could not be loaded. Fatal at startup."""


class InvalidDefinition(LoadError):
    """A descriptor is malformed."""


class DuplicateCommand(LoadError):
    """Two descriptors share a name or alias."""

    def __init__(self, name: str, first: str, second: str):
        super().__init__(f"Duplicate command name or alias '{name}' (defined by '{first}' and '{second}')")
        self.name = name
        self.first = first
        self.second = second


# Dispatch time


class PolicyViolation(DispatchError):
    """
    An invocation was rejected by the policy chain.

    The message is meant for the invoking user; these are not logged as errors.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ArityViolation(PolicyViolation):
    """Supplied arguments do not match the argument schema."""

    def __init__(self, reason: str, usage: Optional[str] = None):
        message = f"❌ {reason}"
        if usage:
            message += f"\n**Usage:** `{usage}`"
        super().__init__(message)
        self.reason = reason
        self.usage = usage


class PermissionViolation(PolicyViolation):
    """The agent or the caller lacks a required permission."""

    def __init__(self, message: str, missing: Optional[str] = None, agent: bool = False):
        super().__init__(message)
        self.missing = missing
        self.agent = agent


class CooldownViolation(PolicyViolation):
    """The command is throttled for this entity."""

    def __init__(self, remaining: float):
        super().__init__(
            f"⏳ You are on cooldown. You can use this command again in "
            f"`{DiscordUtils.format_duration(max(1, math.ceil(remaining)))}`"
        )
        self.remaining = remaining


class HandlerFailure(DispatchError):
    """An entry point raised or timed out."""

    def __init__(self, command: str, cause: BaseException):
        super().__init__(f"Command '{command}' failed: {type(cause).__name__}: {cause}")
        self.command = command
        self.cause = cause


class TransportFailure(DispatchError):
    """Delivering a reply to the gateway failed."""
