"""
Database repositories for the dispatch bot.
"""

from .base_repository import BaseRepository
from .settings_repository import GuildSettingsRepository

__all__ = [
    "BaseRepository",
    "GuildSettingsRepository",
]
