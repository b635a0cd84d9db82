"""
Validation Utilities
Helper functions for validating Discord IDs and user input
"""

import re
from typing import Any, Optional, Union

# Discord snowflake ID pattern: 17-20 digits
SNOWFLAKE_REGEX = re.compile(r"^[0-9]{17,20}$")

# Slash command and option names
COMMAND_NAME_REGEX = re.compile(r"^[-_\w]{1,32}$")

MAX_PREFIX_LENGTH = 5

TRUE_VALUES = ("true", "yes", "y", "on", "1", "enable", "enabled")
FALSE_VALUES = ("false", "no", "n", "off", "0", "disable", "disabled")


class ValidationResult:
    """Result of a validation operation."""

    def __init__(
        self,
        valid: bool,
        error: Optional[str] = None,
        sanitized: Optional[str] = None,
        value: Optional[Any] = None,
    ):
        self.valid = valid
        self.error = error
        self.sanitized = sanitized
        self.value = value

    def __bool__(self) -> bool:
        return self.valid


class ValidationUtils:
    """Utility class for input validation."""

    @staticmethod
    def is_valid_snowflake(id_value: Union[str, int]) -> bool:
        """
        Check if value is a valid Discord snowflake ID.

        Args:
            id_value: ID to validate

        Returns:
            True if valid snowflake
        """
        if isinstance(id_value, bool) or not isinstance(id_value, (str, int)):
            return False
        return bool(SNOWFLAKE_REGEX.match(str(id_value)))

    @staticmethod
    def is_valid_command_name(name: str) -> bool:
        """Check a name against Discord's application command name rules."""
        return bool(COMMAND_NAME_REGEX.match(name)) and name == name.lower()

    @staticmethod
    def validate_prefix(prefix: Optional[str]) -> ValidationResult:
        """
        Validate a command prefix.

        Args:
            prefix: Prefix to validate

        Returns:
            ValidationResult with valid status and sanitized value
        """
        if not prefix:
            return ValidationResult(valid=False, error="Prefix is required")

        sanitized = ValidationUtils.sanitize_input(prefix)

        if not sanitized or any(ch.isspace() for ch in sanitized):
            return ValidationResult(valid=False, error="Prefix cannot contain spaces")

        if len(sanitized) > MAX_PREFIX_LENGTH:
            return ValidationResult(
                valid=False,
                error=f"Prefix too long (max {MAX_PREFIX_LENGTH} chars)"
            )

        return ValidationResult(valid=True, sanitized=sanitized)

    @staticmethod
    def parse_bool(value: str) -> ValidationResult:
        """Parse a yes/no style token."""
        lowered = value.strip().lower()
        if lowered in TRUE_VALUES:
            return ValidationResult(valid=True, value=True)
        if lowered in FALSE_VALUES:
            return ValidationResult(valid=True, value=False)
        return ValidationResult(valid=False, error=f"'{value}' is not a yes/no value")

    @staticmethod
    def sanitize_input(input_value: str) -> str:
        """
        Sanitize user input.

        Args:
            input_value: Input to sanitize

        Returns:
            Sanitized input string
        """
        if not isinstance(input_value, str):
            return ""

        # Trim whitespace
        sanitized = input_value.strip()

        # Remove zero-width characters
        sanitized = re.sub(r"[\u200B-\u200D\uFEFF]", "", sanitized)

        # Remove control characters, keeping newlines and tabs as separators
        sanitized = re.sub(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F-\x9F]", "", sanitized)

        return sanitized
