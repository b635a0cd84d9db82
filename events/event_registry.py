"""
Event Registry
Loads gateway event handlers and fans events out to them
"""

import inspect
import re
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Tuple

from commands.errors import InvalidDefinition
from commands.loader import collect
from utils.error_handler import ErrorHandler
from utils.logger import get_logger

# (app, *event payload) -> None
EventCallback = Callable[..., Awaitable[None]]

# discord.py event names, e.g. "message", "guild_join", "raw_reaction_add"
EVENT_NAME_REGEX = re.compile(r"^[a-z][a-z0-9_]*$")


@dataclass(frozen=True)
class EventHandlerSpec:
    """Descriptor for one gateway event handler."""

    event: str
    callback: EventCallback
    name: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.event, str) or not EVENT_NAME_REGEX.match(self.event):
            raise InvalidDefinition(f"Invalid event name: {self.event!r}")
        if not inspect.iscoroutinefunction(self.callback):
            raise InvalidDefinition(f"Handler for '{self.event}' must be an async function")
        if self.name is None:
            object.__setattr__(self, "name", getattr(self.callback, "__qualname__", self.event))


class EventRegistry:
    """Keyed handler groups, one per gateway event type."""

    def __init__(self, app: Any = None, error_handler: Optional[ErrorHandler] = None):
        self.logger = get_logger("EventRegistry")
        self.app = app
        self.error_handler = error_handler or ErrorHandler()
        self._handlers: Dict[str, Tuple[EventHandlerSpec, ...]] = {}

    def load(self, source: str) -> "EventRegistry":
        """
        Discover every event handler below a handler package.

        Args:
            source: Dotted package holding event modules (``handler`` attribute)

        Returns:
            Self for chaining

        Raises:
            LoadError: On import failures or malformed definitions; the
                current handlers stay active
        """
        specs = [spec for _, spec in collect(source, "handler", EventHandlerSpec)]
        self.load_specs(specs)
        self.logger.info(f"Loaded {len(self)} event handlers from {source}")
        return self

    def load_specs(self, specs: Iterable[EventHandlerSpec]) -> "EventRegistry":
        """Register in-memory descriptors, replacing the current handlers."""
        grouped: Dict[str, List[EventHandlerSpec]] = {}
        for spec in specs:
            if not isinstance(spec, EventHandlerSpec):
                raise InvalidDefinition(f"Expected EventHandlerSpec, got {type(spec).__name__}")
            grouped.setdefault(spec.event, []).append(spec)

        self._handlers = {event: tuple(group) for event, group in grouped.items()}
        for event, group in self._handlers.items():
            self.logger.debug(f"Event {event}: {', '.join(spec.name for spec in group)}")
        return self

    @property
    def events(self) -> List[str]:
        """Event types with at least one handler."""
        return list(self._handlers)

    def handlers(self, event: str) -> Tuple[EventHandlerSpec, ...]:
        """Handlers for an event in registration order."""
        return self._handlers.get(event, ())

    async def dispatch(self, event: str, *payload: Any) -> int:
        """
        Run every handler registered for an event.

        Handlers run one after another in registration order. A failing
        handler is reported and skipped; the others still run.

        Args:
            event: Event type, e.g. ``message``
            *payload: Event arguments as delivered by the gateway client

        Returns:
            Number of handlers that failed
        """
        failures = 0
        for spec in self._handlers.get(event, ()):
            try:
                await spec.callback(self.app, *payload)
            except Exception as e:
                failures += 1
                self.error_handler.handle_exception(e, f"event:{event}:{spec.name}")
        return failures

    def __contains__(self, event: str) -> bool:
        return event in self._handlers

    def __len__(self) -> int:
        return sum(len(group) for group in self._handlers.values())
