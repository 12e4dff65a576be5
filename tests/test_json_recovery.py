import json

import pytest

from toolcall_bench.core.exceptions import RecoveryError, ShapeError
from toolcall_bench.core.intents import parse_tool_intent_text
from toolcall_bench.core.json_recovery import (
    as_json_object,
    extract_first_balanced_json_object,
    parse_object_with_repair,
    recover,
    unwrap_markdown_code_fence,
)

VALUES = [
    {"action": "respond", "response": "hi"},
    {"nested": {"numbers": [1, 2.5, -3]}, "flag": True, "nothing": None},
    [1, "two", {"three": 3}],
    {"text": "braces { inside } strings"},
]


@pytest.mark.parametrize("value", VALUES)
def test_recover_plain_json(value) -> None:
    assert recover(json.dumps(value)) == value


@pytest.mark.parametrize("value", VALUES)
def test_recover_fenced_json(value) -> None:
    assert recover(f"```json\n{json.dumps(value)}\n```") == value
    assert recover(f"```\n{json.dumps(value)}\n```") == value


def test_recover_trailing_comma() -> None:
    assert recover('{"a": 1, "b": [1, 2,],}') == {"a": 1, "b": [1, 2]}


def test_recover_trailing_prose() -> None:
    assert recover('{"action": "respond", "response": "ok"} Hope this helps!') == {
        "action": "respond",
        "response": "ok",
    }


@pytest.mark.parametrize(
    "text, expected",
    [
        ('{"a": 1} see {details}', {"a": 1}),
        ('{"a":1}\n{"b":2}', {"a": 1}),
        (
            '{"action": "respond", "response": "ok"} Let me know if you need {more}.',
            {"action": "respond", "response": "ok"},
        ),
    ],
)
def test_recover_trailing_prose_with_braces(text, expected) -> None:
    assert recover(text) == expected


def test_intent_survives_trailing_prose_with_braces() -> None:
    intent = parse_tool_intent_text('{"action": "respond", "response": "ok"} Ask me for {anything} else.')
    assert intent.action == "respond"
    assert intent.response == "ok"


def test_recover_leading_prose() -> None:
    text = 'Sure, here is the JSON: {"toolName": "sum_numbers", "args": {"numbers": [1, 2]}}'
    assert recover(text) == {"toolName": "sum_numbers", "args": {"numbers": [1, 2]}}


def test_recover_unquoted_keys() -> None:
    assert recover("{action: 'respond', response: 'ok'}") == {"action": "respond", "response": "ok"}


def test_recover_empty_raises() -> None:
    with pytest.raises(RecoveryError, match="Empty JSON string"):
        recover("   ")


def test_recover_prose_without_object_raises() -> None:
    with pytest.raises(RecoveryError, match="No JSON object found"):
        recover("I cannot help with that request.")


def test_unwrap_only_whole_fence() -> None:
    text = 'prefix ```json\n{"a": 1}\n```'
    assert unwrap_markdown_code_fence(text) == text


def test_extract_first_balanced_object() -> None:
    assert extract_first_balanced_json_object('x {"a": {"b": 1}} {"c": 2}') == '{"a": {"b": 1}}'
    assert extract_first_balanced_json_object("no object") is None
    assert extract_first_balanced_json_object('{"open": 1') is None


@pytest.mark.parametrize("value", [[1, 2], "text", 3, None, True])
def test_as_json_object_rejects_non_objects(value) -> None:
    with pytest.raises(ShapeError, match="payload must be a JSON object"):
        as_json_object(value, "payload")


def test_parse_object_with_repair() -> None:
    assert parse_object_with_repair('```json\n{"numbers": [1, 2,]}\n```', "args") == {"numbers": [1, 2]}
    with pytest.raises(ShapeError):
        parse_object_with_repair("[1, 2, 3]", "args")
