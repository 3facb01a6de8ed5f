"""Shared utilities for adapter implementations."""

from __future__ import annotations

from copy import deepcopy
from typing import Any

from unillm.errors import ConfigurationError

DEFAULT_SCHEMA_NAME = "response"

_COMBINATORS = ("anyOf", "allOf", "oneOf")
_DEFINITION_KEYS = ("$defs", "definitions")


def to_strict_schema(schema: dict[str, Any]) -> dict[str, Any]:
    """Normalize a JSON schema for strict structured-output enforcement.

    Every ``object`` node without an explicit ``additionalProperties`` gets
    ``additionalProperties: false``, at any depth reachable through
    ``properties``, ``items``, ``anyOf``/``allOf``/``oneOf`` and
    ``$defs``/``definitions``. Explicit values are kept as-is. The input is
    never mutated.
    """
    if not isinstance(schema, dict):
        raise ConfigurationError("Invalid schema: expected a JSON object schema")

    normalized = deepcopy(schema)

    def walk(node: Any) -> None:
        if not isinstance(node, dict):
            return

        if node.get("type") == "object" and "additionalProperties" not in node:
            node["additionalProperties"] = False

        properties = node.get("properties")
        if isinstance(properties, dict):
            for child in properties.values():
                walk(child)

        items = node.get("items")
        if isinstance(items, list):
            for child in items:
                walk(child)
        else:
            walk(items)

        for key in _COMBINATORS:
            branches = node.get(key)
            if isinstance(branches, list):
                for child in branches:
                    walk(child)

        for key in _DEFINITION_KEYS:
            defs = node.get(key)
            if isinstance(defs, dict):
                for child in defs.values():
                    walk(child)

    walk(normalized)
    return normalized


def schema_format_name(schema: dict[str, Any]) -> str:
    """Name for the structured-output format: the schema title, else a fixed fallback."""
    title = schema.get("title")
    if isinstance(title, str) and title:
        return title
    return DEFAULT_SCHEMA_NAME
