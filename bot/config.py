"""
Configuration management for the dispatch bot.
Loads environment variables and provides configuration settings.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from utils.validation import ValidationUtils

# Load environment variables from .env file
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(dotenv_path=env_path)


def _env_flag(name: str, default: bool) -> bool:
    """Read a yes/no environment variable, falling back on unset or unparsable values."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    result = ValidationUtils.parse_bool(raw)
    return result.value if result.valid else default


@dataclass(frozen=True)
class Config:
    """Bot configuration settings."""

    # Discord
    DISCORD_TOKEN: str

    # Database (empty disables persistence)
    DATABASE_URL: str = ""

    # Commands
    PREFIX: str = "!"
    COMMAND_TIMEOUT: float = 30.0
    SYNC_COMMANDS: bool = True
    DEV_GUILD_ID: Optional[int] = None

    # Handler packages
    COMMAND_SOURCE: str = "handlers.commands"
    CONTEXT_SOURCE: str = "handlers.contexts"
    EVENT_SOURCE: str = "handlers.events"

    # Web Server (keep-alive)
    KEEP_ALIVE: bool = True
    PORT: int = 8080
    HOST: str = "0.0.0.0"

    # Debug
    DEBUG: bool = False

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        dev_guild = os.getenv("DEV_GUILD_ID", "").strip()

        return cls(
            DISCORD_TOKEN=os.getenv("DISCORD_TOKEN", ""),
            DATABASE_URL=os.getenv("DATABASE_URL", ""),
            PREFIX=os.getenv("PREFIX", "!"),
            COMMAND_TIMEOUT=float(os.getenv("COMMAND_TIMEOUT", "30")),
            SYNC_COMMANDS=_env_flag("SYNC_COMMANDS", True),
            DEV_GUILD_ID=int(dev_guild) if dev_guild else None,
            COMMAND_SOURCE=os.getenv("COMMAND_SOURCE", "handlers.commands"),
            CONTEXT_SOURCE=os.getenv("CONTEXT_SOURCE", "handlers.contexts"),
            EVENT_SOURCE=os.getenv("EVENT_SOURCE", "handlers.events"),
            KEEP_ALIVE=_env_flag("KEEP_ALIVE", True),
            PORT=int(os.getenv("PORT", "8080")),
            HOST=os.getenv("HOST", "0.0.0.0"),
            DEBUG=_env_flag("DEBUG", False),
        )

    @property
    def timeout(self) -> Optional[float]:
        """Per-invocation timeout, None when disabled."""
        return self.COMMAND_TIMEOUT if self.COMMAND_TIMEOUT > 0 else None

    def validate(self) -> None:
        """Validate required configuration."""
        if not self.DISCORD_TOKEN:
            raise ValueError("DISCORD_TOKEN is required")

        prefix_check = ValidationUtils.validate_prefix(self.PREFIX)
        if not prefix_check.valid:
            raise ValueError(f"PREFIX is invalid: {prefix_check.error}")

        if self.COMMAND_TIMEOUT < 0:
            raise ValueError("COMMAND_TIMEOUT must not be negative")
