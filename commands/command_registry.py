"""
Command Registry
Centralized command registration and lookup
"""

from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from commands.command_spec import CommandSpec, ContextSpec, ContextType
from commands.errors import DuplicateCommand, InvalidDefinition
from commands.loader import collect
from utils.logger import get_logger


class _Snapshot:
    """One fully validated registry state. Never mutated once published."""

    def __init__(
        self,
        commands: Tuple[CommandSpec, ...],
        names: Dict[str, CommandSpec],
        contexts: Dict[Tuple[ContextType, str], ContextSpec],
    ):
        self.commands = commands
        self.names = names
        self.contexts = contexts


_EMPTY = _Snapshot((), {}, {})


class CommandListing:
    """Lazy, restartable view over registered commands."""

    def __init__(self, commands: Tuple[CommandSpec, ...], category: Optional[str] = None):
        self._commands = commands
        self._category = category.casefold() if category else None

    def __iter__(self) -> Iterator[CommandSpec]:
        for spec in self._commands:
            if self._category is None or spec.category.casefold() == self._category:
                yield spec


class CommandRegistry:
    """Loads command descriptors and resolves names and aliases."""

    def __init__(self):
        self.logger = get_logger("CommandRegistry")
        self._snapshot = _EMPTY

    def load(self, source: str, context_source: Optional[str] = None) -> "CommandRegistry":
        """
        Discover and register every command below a handler package.

        The new registry state is built completely before it replaces the
        current one. If anything fails, the current state stays active.

        Args:
            source: Dotted package holding command modules (``command`` attribute)
            context_source: Optional package holding context menus (``context`` attribute)

        Returns:
            Self for chaining

        Raises:
            LoadError: On import failures, malformed or duplicate definitions
        """
        commands = collect(source, "command", CommandSpec)
        contexts = collect(context_source, "context", ContextSpec) if context_source else []
        self._publish(self._build(commands, contexts))

        self.logger.info(
            f"Loaded {len(self._snapshot.commands)} commands and "
            f"{len(self._snapshot.contexts)} context menus from {source}"
        )
        return self

    def load_specs(
        self,
        commands: Iterable[CommandSpec],
        contexts: Iterable[ContextSpec] = (),
    ) -> "CommandRegistry":
        """Register in-memory descriptors with the same all-or-nothing rules as ``load``."""
        origin = "<memory>"
        self._publish(self._build(
            [(origin, spec) for spec in commands],
            [(origin, spec) for spec in contexts],
        ))
        return self

    def _build(
        self,
        commands: List[Tuple[str, CommandSpec]],
        contexts: List[Tuple[str, ContextSpec]],
    ) -> _Snapshot:
        names: Dict[str, CommandSpec] = {}
        owners: Dict[str, str] = {}
        ordered: List[CommandSpec] = []

        for origin, spec in commands:
            if not isinstance(spec, CommandSpec):
                raise InvalidDefinition(f"{origin}: expected CommandSpec, got {type(spec).__name__}")

            for token in spec.names:
                key = token.casefold()
                if key in names:
                    raise DuplicateCommand(token, owners[key], spec.name)
                names[key] = spec
                owners[key] = spec.name
            ordered.append(spec)

        context_map: Dict[Tuple[ContextType, str], ContextSpec] = {}
        for origin, spec in contexts:
            if not isinstance(spec, ContextSpec):
                raise InvalidDefinition(f"{origin}: expected ContextSpec, got {type(spec).__name__}")
            if spec.key in context_map:
                raise DuplicateCommand(spec.name, context_map[spec.key].name, spec.name)
            context_map[spec.key] = spec

        return _Snapshot(tuple(ordered), names, context_map)

    def _publish(self, snapshot: _Snapshot) -> None:
        # Single reference swap; readers see either the old or the new state
        self._snapshot = snapshot
        for spec in snapshot.commands:
            self.logger.debug(f"Registered command: {spec.name}")

    def resolve(self, token: str) -> Optional[CommandSpec]:
        """
        Get a command by name or alias.

        Args:
            token: Command name or alias, any case

        Returns:
            CommandSpec or None if nothing matches
        """
        if not token:
            return None
        return self._snapshot.names.get(token.casefold())

    def resolve_context(self, name: str, context_type: ContextType) -> Optional[ContextSpec]:
        """Get a context menu by its display name and target type."""
        if not name:
            return None
        return self._snapshot.contexts.get((context_type, name.casefold()))

    def list(self, category: Optional[str] = None) -> CommandListing:
        """
        Commands in registration order.

        Args:
            category: Only commands of this category (case-insensitive)

        Returns:
            An iterable that can be iterated any number of times
        """
        return CommandListing(self._snapshot.commands, category)

    def categories(self) -> List[str]:
        """Category names in first-seen order."""
        seen: Dict[str, str] = {}
        for spec in self._snapshot.commands:
            seen.setdefault(spec.category.casefold(), spec.category)
        return list(seen.values())

    def contexts(self) -> List[ContextSpec]:
        """All registered context menus."""
        return list(self._snapshot.contexts.values())

    def application_commands(self) -> List[dict]:
        """
        Payloads for Discord's bulk application command overwrite.

        Returns:
            Slash commands for specs with an interaction entry, then context menus
        """
        payloads = [
            spec.to_application_command()
            for spec in self._snapshot.commands
            if spec.supports_interaction
        ]
        payloads.extend(spec.to_application_command() for spec in self._snapshot.contexts.values())
        return payloads

    def __len__(self) -> int:
        return len(self._snapshot.commands)

    def __contains__(self, token: str) -> bool:
        return self.resolve(token) is not None
