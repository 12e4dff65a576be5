from typing import List, Optional

import pytest
from pydantic import BaseModel, Field

from toolcall_bench.core.exceptions import ToolRegistrationError
from toolcall_bench.core.tools import SchemaValidator


class Point(BaseModel):
    x: float
    y: float


class PathArgs(BaseModel):
    points: List[Point] = Field(min_length=1)
    title: Optional[str] = Field(default=None, description="Optional caption")


class TreeNode(BaseModel):
    value: int
    children: List["TreeNode"] = []


def test_assert_no_recursive_refs_no_recursion():
    schema = {
        "type": "object",
        "properties": {
            "prop1": {"type": "string"},
            "prop2": {"type": "object", "properties": {"subprop": {"type": "integer"}}},
        },
    }
    # Should not raise
    SchemaValidator.assert_no_recursive_refs(schema)


def test_assert_no_recursive_refs_with_recursion():
    schema = {
        "$defs": {"Node": {"type": "object", "properties": {"child": {"$ref": "#/$defs/Node"}}}},
        "properties": {"root": {"$ref": "#/$defs/Node"}},
    }
    with pytest.raises(ToolRegistrationError, match="Recursive structure detected"):
        SchemaValidator.assert_no_recursive_refs(schema)


def test_json_schema_for_rejects_recursive_models():
    with pytest.raises(ToolRegistrationError):
        SchemaValidator.json_schema_for(TreeNode)


def test_json_schema_for_inlines_refs_and_strips_metadata():
    schema = SchemaValidator.json_schema_for(PathArgs)

    assert "$defs" not in schema
    assert "title" not in schema
    assert schema["additionalProperties"] is False

    item = schema["properties"]["points"]["items"]
    assert "$ref" not in item
    assert item["type"] == "object"
    assert item["additionalProperties"] is False
    assert set(item["properties"]) == {"x", "y"}


def test_property_named_title_survives():
    schema = SchemaValidator.json_schema_for(PathArgs)
    assert "title" in schema["properties"]
    assert schema["properties"]["title"]["type"] == "string"
    assert schema["properties"]["title"]["description"] == "Optional caption"


def test_sanitize_schema_removes_metadata():
    schema = {
        "$schema": "http://json-schema.org/draft-07/schema#",
        "$id": "http://example.com/schema",
        "title": "MySchema",
        "type": "object",
        "properties": {"field": {"type": "string", "title": "FieldTitle"}},
        "definitions": {"SomeDef": {}},
    }
    sanitized = SchemaValidator.sanitize_schema(schema)

    assert "$schema" not in sanitized
    assert "$id" not in sanitized
    assert "title" not in sanitized
    assert "definitions" not in sanitized
    assert "title" not in sanitized["properties"]["field"]


def test_sanitize_schema_simplifies_optional():
    schema = {
        "type": "object",
        "properties": {
            "optional_field": {
                "anyOf": [{"type": "integer", "description": "An integer"}, {"type": "null"}],
                "description": "Parent description",
                "default": None,
            }
        },
    }
    field = SchemaValidator.sanitize_schema(schema)["properties"]["optional_field"]

    assert "anyOf" not in field
    assert field["type"] == "integer"
    assert field["description"] == "Parent description"
    assert field["default"] is None


def test_sanitize_schema_keeps_explicit_additional_properties():
    schema = {"type": "object", "additionalProperties": True}
    assert SchemaValidator.sanitize_schema(schema)["additionalProperties"] is True
