"""
Guild Settings Repository
Per-guild settings (command prefix) with an in-memory cache
"""

from typing import Any, Dict, Optional

import asyncpg

from repositories.base_repository import BaseRepository


class GuildSettingsRepository(BaseRepository):
    """Repository for the guild_settings table."""

    def __init__(self, pool: Optional[asyncpg.Pool], default_prefix: str = "!"):
        """
        Create GuildSettingsRepository instance.

        Args:
            pool: PostgreSQL connection pool, or None to keep settings in memory only
            default_prefix: Prefix for guilds without a stored one
        """
        super().__init__(pool, "guild_settings", "guild_id")
        self.default_prefix = default_prefix
        self._cache: Dict[int, Dict[str, Any]] = {}

    async def get(self, guild_id: int) -> Dict[str, Any]:
        """
        Get settings for a guild.

        Args:
            guild_id: Guild ID

        Returns:
            Settings dict (defaults when nothing is stored)
        """
        cached = self._cache.get(guild_id)
        if cached is not None:
            return cached

        row = await self.find_by_id(guild_id)
        settings = row or {"guild_id": guild_id, "prefix": None}
        self._cache[guild_id] = settings
        return settings

    async def get_prefix(self, guild_id: Optional[int]) -> str:
        """
        Get the command prefix for a guild.

        Args:
            guild_id: Guild ID, or None for direct messages

        Returns:
            Stored prefix or the default
        """
        if guild_id is None:
            return self.default_prefix

        settings = await self.get(guild_id)
        return settings.get("prefix") or self.default_prefix

    async def set_prefix(self, guild_id: int, prefix: str) -> str:
        """
        Store a new prefix for a guild.

        Args:
            guild_id: Guild ID
            prefix: Validated prefix

        Returns:
            The stored prefix
        """
        settings = dict(await self.get(guild_id))
        settings["prefix"] = prefix

        if self.is_connected():
            row = await self.upsert({"guild_id": guild_id, "prefix": prefix}, ["guild_id"])
            settings = row or settings
        else:
            self.logger.debug(f"No database, prefix for guild {guild_id} kept in memory")

        self._cache[guild_id] = settings
        return prefix

    async def register_guild(self, guild_id: int, name: str) -> None:
        """
        Record that the bot joined a guild.

        Args:
            guild_id: Guild ID
            name: Guild name
        """
        self._cache.pop(guild_id, None)
        if not self.is_connected():
            return

        await self.upsert({"guild_id": guild_id, "name": name, "left_at": None}, ["guild_id"])
        self.logger.info(f"Registered guild {name} ({guild_id})")

    async def mark_left(self, guild_id: int) -> None:
        """
        Record that the bot left a guild.

        Args:
            guild_id: Guild ID
        """
        self._cache.pop(guild_id, None)
        if not self.is_connected():
            return

        sql = f"""
            UPDATE {self.table_name}
            SET left_at = CURRENT_TIMESTAMP, updated_at = CURRENT_TIMESTAMP
            WHERE guild_id = $1
        """
        await self.query(sql, [guild_id])
