"""Strict structured-output schema normalization."""

from __future__ import annotations

import copy
from typing import Any

import pytest

from unillm.errors import ConfigurationError
from unillm.providers._utils import schema_format_name, to_strict_schema

pytestmark = pytest.mark.unit


def _nested_schema() -> dict[str, Any]:
    return {
        "title": "Report",
        "type": "object",
        "properties": {
            "meta": {
                "type": "object",
                "properties": {"author": {"type": "string"}},
            },
            "rows": {
                "type": "array",
                "items": {
                    "type": "object",
                    "properties": {"value": {"type": "number"}},
                },
            },
            "choice": {
                "anyOf": [
                    {"type": "object", "properties": {"a": {"type": "string"}}},
                    {"type": "null"},
                ]
            },
            "merged": {
                "allOf": [{"type": "object", "properties": {"b": {"type": "string"}}}]
            },
            "variant": {
                "oneOf": [{"type": "object", "properties": {"c": {"type": "string"}}}]
            },
            "open": {"type": "object", "additionalProperties": True},
        },
    }


def test_closes_objects_at_every_depth() -> None:
    strict = to_strict_schema(_nested_schema())
    props = strict["properties"]

    assert strict["additionalProperties"] is False
    assert props["meta"]["additionalProperties"] is False
    assert props["rows"]["items"]["additionalProperties"] is False
    assert props["choice"]["anyOf"][0]["additionalProperties"] is False
    assert props["merged"]["allOf"][0]["additionalProperties"] is False
    assert props["variant"]["oneOf"][0]["additionalProperties"] is False


def test_explicit_additional_properties_is_preserved() -> None:
    strict = to_strict_schema(_nested_schema())

    assert strict["properties"]["open"]["additionalProperties"] is True


def test_non_object_nodes_are_untouched() -> None:
    strict = to_strict_schema(_nested_schema())
    props = strict["properties"]

    assert props["meta"]["properties"]["author"] == {"type": "string"}
    assert props["choice"]["anyOf"][1] == {"type": "null"}
    assert "additionalProperties" not in props["rows"]


def test_input_is_never_mutated() -> None:
    raw = _nested_schema()
    snapshot = copy.deepcopy(raw)

    strict = to_strict_schema(raw)
    strict["properties"]["meta"]["properties"]["injected"] = {"type": "string"}
    strict["properties"]["rows"]["items"]["additionalProperties"] = "changed"

    assert raw == snapshot


def test_definitions_are_closed_too() -> None:
    """Pydantic puts nested models under $defs and references them."""
    raw = {
        "type": "object",
        "properties": {"item": {"$ref": "#/$defs/Item"}},
        "$defs": {
            "Item": {"type": "object", "properties": {"name": {"type": "string"}}}
        },
    }

    strict = to_strict_schema(raw)

    assert strict["$defs"]["Item"]["additionalProperties"] is False
    assert strict["properties"]["item"] == {"$ref": "#/$defs/Item"}


def test_rejects_non_dict_schema() -> None:
    with pytest.raises(ConfigurationError):
        to_strict_schema(["not", "a", "schema"])  # type: ignore[arg-type]


def test_format_name_uses_title_else_fallback() -> None:
    assert schema_format_name({"title": "Sentiment", "type": "object"}) == "Sentiment"
    assert schema_format_name({"type": "object"}) == "response"
    assert schema_format_name({"title": "", "type": "object"}) == "response"
