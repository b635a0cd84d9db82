"""
Discord Utilities
Helper functions for Discord interactions
"""

import re
from typing import Any, Dict, Optional

# Pre-compiled regex patterns for performance
REGEX = {
    "USER_MENTION": re.compile(r"^<@!?(\d{17,20})>$"),
    "CHANNEL_MENTION": re.compile(r"^<#(\d{17,20})>$"),
    "ROLE_MENTION": re.compile(r"^<@&(\d{17,20})>$"),
    "NUMBER_FORMAT": re.compile(r"\B(?=(\d{3})+(?!\d))"),
}

# Discord limits
MAX_MESSAGE_LENGTH = 2000


class DiscordUtils:
    """Utility class for Discord-related helper functions."""

    @staticmethod
    def reply_kwargs(payload: Any) -> Dict[str, Any]:
        """
        Turn a reply payload into keyword arguments for ``send``.

        Args:
            payload: ``str``, ``discord.Embed`` or a kwargs dict

        Returns:
            Keyword arguments for ``Messageable.send`` / ``InteractionResponse.send_message``
        """
        if isinstance(payload, dict):
            return dict(payload)
        if isinstance(payload, str):
            return {"content": DiscordUtils.truncate(payload)}

        # discord.Embed and anything embed-shaped
        if hasattr(payload, "to_dict"):
            return {"embed": payload}

        return {"content": DiscordUtils.truncate(str(payload))}

    @staticmethod
    def truncate(content: str, limit: int = MAX_MESSAGE_LENGTH) -> str:
        """Cut content down to the message length limit."""
        if len(content) <= limit:
            return content
        return content[: limit - 1] + "…"

    @staticmethod
    def format_duration(seconds: int) -> str:
        """
        Format duration in human readable format.

        Args:
            seconds: Duration in seconds

        Returns:
            Formatted duration string
        """
        if seconds < 60:
            return f"{seconds}s"
        if seconds < 3600:
            mins = seconds // 60
            secs = seconds % 60
            return f"{mins}m {secs}s"
        hours = seconds // 3600
        mins = (seconds % 3600) // 60
        return f"{hours}h {mins}m"

    @staticmethod
    def format_number(num: Any) -> str:
        """
        Format number with commas.

        Args:
            num: Number to format

        Returns:
            Formatted number string
        """
        if not isinstance(num, int):
            return str(num)
        return REGEX["NUMBER_FORMAT"].sub(",", str(num))

    @staticmethod
    def parse_mention(value: str, kind: str) -> Optional[int]:
        """
        Extract the snowflake from a user, channel or role mention.

        Args:
            value: Raw token, e.g. ``<@!123...>``
            kind: ``user``, ``channel`` or ``role``

        Returns:
            The id or None if the token is not a mention of that kind
        """
        match = REGEX[f"{kind.upper()}_MENTION"].match(value)
        return int(match.group(1)) if match else None
