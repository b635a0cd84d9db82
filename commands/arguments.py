"""
Argument Resolution
Checks text tokens and interaction options against a command's argument schema
"""

from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from commands.command_spec import ArgumentSpec, ArgumentType
from commands.errors import ArityViolation
from utils.discord import DiscordUtils
from utils.validation import ValidationUtils


class ConversionError(ValueError):
    """A raw value does not fit an argument's type."""


def _to_int(value: Any) -> int:
    if isinstance(value, bool):
        raise ConversionError("expected a whole number")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ConversionError("expected a whole number") from None


def _to_number(value: Any) -> float:
    if isinstance(value, bool):
        raise ConversionError("expected a number")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ConversionError("expected a number") from None


def _to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    result = ValidationUtils.parse_bool(str(value))
    if not result:
        raise ConversionError("expected yes or no")
    return result.value


def _snowflake(kind: str) -> Callable[[Any], int]:
    def convert(value: Any) -> int:
        if isinstance(value, int) and not isinstance(value, bool):
            if ValidationUtils.is_valid_snowflake(value):
                return value
            raise ConversionError(f"expected a {kind}")

        text = str(value).strip()
        mentioned = DiscordUtils.parse_mention(text, kind)
        if mentioned is not None:
            return mentioned
        if ValidationUtils.is_valid_snowflake(text):
            return int(text)
        raise ConversionError(f"expected a {kind} mention or ID")

    return convert


def _to_string(value: Any) -> str:
    return str(value)


CONVERTERS: Dict[ArgumentType, Callable[[Any], Any]] = {
    ArgumentType.STRING: _to_string,
    ArgumentType.INTEGER: _to_int,
    ArgumentType.NUMBER: _to_number,
    ArgumentType.BOOLEAN: _to_bool,
    ArgumentType.USER: _snowflake("user"),
    ArgumentType.CHANNEL: _snowflake("channel"),
    ArgumentType.ROLE: _snowflake("role"),
}


def convert(argument: ArgumentSpec, value: Any, usage: Optional[str] = None) -> Any:
    """
    Convert one raw value to the argument's type.

    Raises:
        ArityViolation: If the value does not fit
    """
    try:
        return CONVERTERS[argument.type](value)
    except ConversionError as e:
        raise ArityViolation(f"Invalid value for `{argument.name}`: {e}", usage) from None


def parse_text_arguments(
    schema: Sequence[ArgumentSpec],
    tokens: List[str],
    usage: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Map positional text tokens onto the schema.

    Args:
        schema: Ordered argument specs
        tokens: Tokens after the command name
        usage: Usage hint attached to failures

    Returns:
        Dict of argument name -> converted value (missing optionals omitted)

    Raises:
        ArityViolation: On too few/too many tokens or a type mismatch
    """
    resolved: Dict[str, Any] = {}
    index = 0

    for argument in schema:
        if index >= len(tokens):
            if argument.required:
                raise ArityViolation(f"Missing required argument `{argument.name}`", usage)
            continue

        if argument.rest:
            resolved[argument.name] = " ".join(tokens[index:])
            index = len(tokens)
        else:
            resolved[argument.name] = convert(argument, tokens[index], usage)
            index += 1

    if index < len(tokens):
        raise ArityViolation(
            f"Too many arguments (expected at most {len(schema)}, got {len(tokens)})",
            usage,
        )

    return resolved


def resolve_interaction_options(
    schema: Sequence[ArgumentSpec],
    options: Mapping[str, Any],
    usage: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Check an interaction's option map against the schema.

    Args:
        schema: Ordered argument specs
        options: Option name -> raw value as sent by the gateway
        usage: Usage hint attached to failures

    Returns:
        Dict of argument name -> converted value (missing optionals omitted)

    Raises:
        ArityViolation: On missing required options, unknown options or a type mismatch
    """
    known = {argument.name for argument in schema}
    unknown = sorted(set(options) - known)
    if unknown:
        raise ArityViolation(f"Unknown option `{unknown[0]}`", usage)

    resolved: Dict[str, Any] = {}
    for argument in schema:
        if argument.name not in options or options[argument.name] is None:
            if argument.required:
                raise ArityViolation(f"Missing required option `{argument.name}`", usage)
            continue
        resolved[argument.name] = convert(argument, options[argument.name], usage)

    return resolved


def interaction_options(data: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Flatten the ``options`` list of raw interaction data into a name -> value map.

    Args:
        data: ``interaction.data`` as delivered by the gateway

    Returns:
        Option name -> raw value
    """
    if not data:
        return {}
    return {
        option["name"]: option.get("value")
        for option in data.get("options", []) or []
        if "name" in option
    }
