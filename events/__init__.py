"""
Gateway event routing for the dispatch bot.
"""

from .event_registry import EventHandlerSpec, EventRegistry

__all__ = [
    "EventHandlerSpec",
    "EventRegistry",
]
