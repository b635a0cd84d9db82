"""
Error Handler
Central failure reporting for isolated handler errors
"""

import asyncio
from typing import Any, Dict, Optional

from utils.logger import get_logger


class ErrorHandler:
    """Logs and counts failures that must not crash the event loop."""

    def __init__(self):
        self.logger = get_logger("ErrorHandler")
        self.error_counts: Dict[str, int] = {}
        self.total_errors = 0

    def initialize(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        """Install the loop-wide handler for exceptions nobody awaited."""
        if loop is None:
            loop = asyncio.get_running_loop()

        loop.set_exception_handler(self._async_exception_handler)
        self.logger.info("Error handlers initialized")

    def _async_exception_handler(self, loop: asyncio.AbstractEventLoop, context: Dict[str, Any]) -> None:
        """Handle async exceptions."""
        exception = context.get("exception")
        if exception:
            self.handle_exception(exception, "loop")
        else:
            message = context.get("message", "Unknown async error")
            self.logger.error(f"Async error: {message}")

    def handle_exception(self, error: BaseException, context: str = "") -> int:
        """
        Report an exception.

        Args:
            error: The exception that occurred
            context: Where it happened, e.g. ``command:ping`` or ``event:guild_join``

        Returns:
            How many times this context/error type has failed so far
        """
        error_key = f"{context}:{type(error).__name__}"

        if context:
            self.logger.error(f"[{context}] {error}", exc_info=error)
        else:
            self.logger.error(f"{error}", exc_info=error)

        count = self.error_counts.get(error_key, 0) + 1
        self.error_counts[error_key] = count
        self.total_errors += 1

        return count

    def reset(self) -> None:
        """Clear error counts."""
        self.error_counts.clear()
        self.total_errors = 0
