"""Guild settings without a database."""

import pytest

from repositories.base_repository import BaseRepository
from repositories.settings_repository import GuildSettingsRepository

GUILD = 111111111111111111


@pytest.fixture
def settings() -> GuildSettingsRepository:
    return GuildSettingsRepository(None, default_prefix="!")


async def test_default_prefix(settings: GuildSettingsRepository) -> None:
    assert not settings.is_connected()
    assert await settings.get_prefix(GUILD) == "!"
    assert await settings.get_prefix(None) == "!"


async def test_prefix_kept_in_memory(settings: GuildSettingsRepository) -> None:
    assert await settings.set_prefix(GUILD, "?") == "?"

    assert await settings.get_prefix(GUILD) == "?"
    assert await settings.get_prefix(GUILD + 1) == "!"


async def test_leaving_a_guild_forgets_its_settings(settings: GuildSettingsRepository) -> None:
    await settings.set_prefix(GUILD, "?")
    await settings.mark_left(GUILD)

    assert await settings.get_prefix(GUILD) == "!"


async def test_register_guild_without_database(settings: GuildSettingsRepository) -> None:
    await settings.register_guild(GUILD, "Test Server")
    assert await settings.get_prefix(GUILD) == "!"


def test_base_repository_is_abstract() -> None:
    with pytest.raises(TypeError):
        BaseRepository(None, "guild_settings")
