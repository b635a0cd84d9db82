"""Argument resolution for text tokens and interaction options."""

import pytest

from commands.arguments import interaction_options, parse_text_arguments, resolve_interaction_options
from commands.command_spec import ArgumentSpec, ArgumentType
from commands.errors import ArityViolation

SCHEMA = (
    ArgumentSpec("count", ArgumentType.INTEGER),
    ArgumentSpec("user", ArgumentType.USER, required=False),
)

USER_ID = 123456789012345678


def test_text_tokens_are_converted() -> None:
    resolved = parse_text_arguments(SCHEMA, ["3", f"<@!{USER_ID}>"])
    assert resolved == {"count": 3, "user": USER_ID}


def test_optional_arguments_may_be_omitted() -> None:
    assert parse_text_arguments(SCHEMA, ["3"]) == {"count": 3}


def test_missing_required_argument_carries_usage() -> None:
    with pytest.raises(ArityViolation) as excinfo:
        parse_text_arguments(SCHEMA, [], "!give <count> [user]")

    assert "Missing required argument `count`" in excinfo.value.message
    assert "!give <count> [user]" in excinfo.value.message


def test_too_many_arguments() -> None:
    with pytest.raises(ArityViolation, match="Too many arguments"):
        parse_text_arguments(SCHEMA, ["1", str(USER_ID), "extra"])


def test_type_mismatch() -> None:
    with pytest.raises(ArityViolation, match="Invalid value for `count`"):
        parse_text_arguments(SCHEMA, ["three"])


def test_rest_argument_joins_remaining_tokens() -> None:
    schema = (ArgumentSpec("country", rest=True),)
    assert parse_text_arguments(schema, ["united", "states"]) == {"country": "united states"}


@pytest.mark.parametrize("raw, expected", [("yes", True), ("off", False), ("TRUE", True)])
def test_boolean_tokens(raw, expected) -> None:
    schema = (ArgumentSpec("flag", ArgumentType.BOOLEAN),)
    assert parse_text_arguments(schema, [raw]) == {"flag": expected}


def test_interaction_options_resolve_against_the_same_schema() -> None:
    resolved = resolve_interaction_options(SCHEMA, {"count": 2, "user": str(USER_ID)})
    assert resolved == {"count": 2, "user": USER_ID}


def test_interaction_missing_required_option() -> None:
    with pytest.raises(ArityViolation, match="Missing required option `count`"):
        resolve_interaction_options(SCHEMA, {})


def test_interaction_unknown_option() -> None:
    with pytest.raises(ArityViolation, match="Unknown option `color`"):
        resolve_interaction_options(SCHEMA, {"count": 1, "color": "red"})


def test_interaction_options_flattening() -> None:
    data = {"name": "covid", "options": [{"name": "country", "type": 3, "value": "france"}]}

    assert interaction_options(data) == {"country": "france"}
    assert interaction_options({"name": "ping"}) == {}
    assert interaction_options(None) == {}
