"""Capabilities a contained value can expose to the collection.

Checked structurally at runtime: any object with the matching method
qualifies, no registration or inheritance required.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Arrayable(Protocol):
    """Value convertible to a plain nested structure."""

    def to_array(self) -> Any: ...


@runtime_checkable
class Jsonable(Protocol):
    """Value that renders itself as JSON text."""

    def to_json(self, options: int = 0) -> str: ...


@runtime_checkable
class JsonSerializable(Protocol):
    """Value that produces a structure ready for JSON encoding.

    The result may differ from `Arrayable.to_array()`, e.g. dropping
    fields that only make sense in-process.
    """

    def json_serialize(self) -> Any: ...


def exposes(value: Any, capability: type) -> bool:
    """Return True if ``value`` is an instance offering ``capability``.

    Classes are never treated as exposing a capability, even when their
    body defines the method.
    """
    return not isinstance(value, type) and isinstance(value, capability)
