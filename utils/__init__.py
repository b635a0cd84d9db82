"""
Utility modules for the dispatch bot.
"""

from .logger import configure_logging, get_logger, setup_logging
from .discord import DiscordUtils
from .validation import ValidationUtils, ValidationResult
from .monitoring import Monitoring, HealthStatus
from .error_handler import ErrorHandler

__all__ = [
    "configure_logging",
    "get_logger",
    "setup_logging",
    "DiscordUtils",
    "ValidationUtils",
    "ValidationResult",
    "Monitoring",
    "HealthStatus",
    "ErrorHandler",
]
