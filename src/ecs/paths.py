"""
Dotted-path helpers shared by the record builders and the validator.

ECS field names are dotted ("http.request.method"). A record may hold such a
field either as one literal flat key or as nested mappings; both forms are
equivalent and every lookup here accepts either.
"""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping
from typing import Any


class _Missing:
    """Marker for a field that is absent (as opposed to present and None)."""

    _instance = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


def namespace_root(name: str) -> str:
    """Return the first segment of a dotted name ("http" for "http.version")."""
    return name.split(".", 1)[0]


def has_top_level_key(record: Mapping, name: str) -> bool:
    return isinstance(record, Mapping) and name in record


def dotted_get(record: Any, name: str) -> Any:
    """
    Look up a dotted field name in a record.

    Name "foo.bar" resolves to 42 for both {"foo.bar": 42} and
    {"foo": {"bar": 42}}. The literal flat key wins when both exist.

    Args:
        record: Mapping to search
        name: Dotted field name

    Returns:
        The value, or MISSING if no representation of the field exists
    """
    if not isinstance(record, Mapping):
        return MISSING
    if name in record:
        return record[name]

    node: Any = record
    for part in name.split("."):
        if not isinstance(node, Mapping) or part not in node:
            return MISSING
        node = node[part]
    return node


def dotted_set(record: MutableMapping, name: str, value: Any) -> None:
    """
    Write a value at a dotted path using nested dicts.

    Intermediate mappings are created as needed. An intermediate value that
    is not a mapping is replaced with a fresh dict.
    """
    parts = name.split(".")
    node = record
    for part in parts[:-1]:
        child = node.get(part)
        if not isinstance(child, MutableMapping):
            child = {}
            node[part] = child
        node = child
    node[parts[-1]] = value


def dotted_merge(record: MutableMapping, name: str, values: Mapping) -> None:
    """Shallow-merge a mapping into the dict at a dotted path."""
    target = dotted_get(record, name)
    if not isinstance(target, MutableMapping):
        target = {}
        dotted_set(record, name, target)
    target.update(values)
