"""
Application context.

One explicitly constructed object owns every long-lived piece of the bot:
configuration, the command and event registries, the cooldown tracker, the
dispatcher and the services handlers use. Handlers receive it as ``app``
instead of reaching for module globals.
"""

from typing import Any, Optional

from bot import database
from bot.config import Config
from commands.command_registry import CommandRegistry
from commands.cooldowns import CooldownTracker
from commands.dispatcher import Dispatcher
from commands.permissions import PermissionChecker
from events.event_registry import EventRegistry
from repositories.settings_repository import GuildSettingsRepository
from utils.error_handler import ErrorHandler
from utils.logger import configure_logging, get_logger
from utils.monitoring import Monitoring

logger = get_logger("App")


class AppContext:
    """Holder of registries, tracker, dispatcher and services."""

    def __init__(self, config: Config):
        self.config = config
        self.client: Optional[Any] = None

        self.error_handler = ErrorHandler()
        self.monitoring = Monitoring()
        self.permissions = PermissionChecker()
        self.cooldowns = CooldownTracker()
        self.settings = GuildSettingsRepository(None, config.PREFIX)

        self.commands = CommandRegistry()
        self.events = EventRegistry(self, self.error_handler)
        self.dispatcher = Dispatcher(
            self.commands,
            self.cooldowns,
            self.permissions,
            prefix=config.PREFIX,
            prefix_resolver=self.settings.get_prefix,
            timeout=config.timeout,
            error_handler=self.error_handler,
            monitoring=self.monitoring,
            app=self,
        )

    def load(self) -> "AppContext":
        """
        Load command, context menu and event handlers.

        Raises:
            LoadError: When any handler module is broken; nothing is half-loaded
        """
        self.commands.load(self.config.COMMAND_SOURCE, self.config.CONTEXT_SOURCE)
        self.events.load(self.config.EVENT_SOURCE)
        return self

    def attach(self, client: Any) -> None:
        """Bind the gateway client once it exists."""
        self.client = client
        self.monitoring.client = client

    async def start(self) -> None:
        """Start background services: loop error hook, database, cooldown pruning."""
        self.error_handler.initialize()
        self.settings.pool = await database.init_database(self.config.DATABASE_URL)
        self.cooldowns.start()
        logger.info("Services started")

    async def close(self) -> None:
        """Stop background services. Safe to call more than once."""
        await self.cooldowns.stop()
        await database.close_database()
        self.settings.pool = None
        logger.info("Services stopped")


def create_app(config: Config) -> AppContext:
    """
    Build the application context for a configuration.

    Args:
        config: Validated configuration

    Returns:
        AppContext with handlers not yet loaded
    """
    configure_logging(config.DEBUG)
    return AppContext(config)
