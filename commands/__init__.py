"""
Command system for the dispatch bot.
"""

from .command_spec import ArgumentSpec, ArgumentType, CommandSpec, ContextSpec, ContextType
from .command_registry import CommandRegistry
from .cooldowns import CooldownTracker
from .dispatcher import DispatchOutcome, Dispatcher
from .errors import (
    ArityViolation,
    CooldownViolation,
    DuplicateCommand,
    HandlerFailure,
    InvalidDefinition,
    LoadError,
    PermissionViolation,
    PolicyViolation,
    TransportFailure,
)
from .invocation import InteractionInvocation, InvocationContext, Location, Origin, TextInvocation
from .permissions import PermissionChecker

__all__ = [
    "ArgumentSpec",
    "ArgumentType",
    "CommandSpec",
    "ContextSpec",
    "ContextType",
    "CommandRegistry",
    "CooldownTracker",
    "DispatchOutcome",
    "Dispatcher",
    "ArityViolation",
    "CooldownViolation",
    "DuplicateCommand",
    "HandlerFailure",
    "InvalidDefinition",
    "LoadError",
    "PermissionViolation",
    "PolicyViolation",
    "TransportFailure",
    "InteractionInvocation",
    "InvocationContext",
    "Location",
    "Origin",
    "TextInvocation",
    "PermissionChecker",
]
