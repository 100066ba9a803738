"""Normalization of arbitrary input into a key-value mapping."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

import structlog

from kvcollection.encoding import decode_json
from kvcollection.protocols import Arrayable, Jsonable, JsonSerializable, exposes

if TYPE_CHECKING:
    from kvcollection.collection import Key

logger = structlog.get_logger()

_SCALAR_TYPES = (str, bytes, bytearray)


def _from_plain(value: Any) -> dict[Key, Any]:
    """Turn a plain structure into a mapping, lists keyed by position."""
    if isinstance(value, Mapping):
        return dict(value)
    if isinstance(value, list | tuple):
        return dict(enumerate(value))
    if value is None:
        return {}
    return {0: value}


def coerce_items(items: Any) -> dict[Key, Any]:
    """Normalize ``items`` into a fresh ``{key: value}`` dict.

    Resolution order (first match wins):
        1. ``None``, a mapping, a list or a tuple
        2. another collection (its full contents)
        3. an `Arrayable` (``to_array()``)
        4. a `Jsonable` (``to_json()``, decoded back)
        5. a `JsonSerializable` (``json_serialize()``)
        6. any other iterable, keyed by iteration position
        7. anything else, wrapped as ``{0: items}``

    Strings and bytes are scalars here, never iterated.

    Raises:
        json.JSONDecodeError: If a `Jsonable` produces malformed text.
    """
    from kvcollection.collection import Collection  # noqa: PLC0415

    if items is None or isinstance(items, Mapping | list | tuple):
        return _from_plain(items)
    if isinstance(items, Collection):
        return items.all()
    if exposes(items, Arrayable):
        return _from_plain(items.to_array())
    if exposes(items, Jsonable):
        return _from_plain(decode_json(items.to_json()))
    if exposes(items, JsonSerializable):
        return _from_plain(items.json_serialize())
    if isinstance(items, Iterable) and not isinstance(items, _SCALAR_TYPES):
        return dict(enumerate(items))

    logger.debug("coerced_scalar", value_type=type(items).__name__)
    return {0: items}


def use_as_callable(value: Any) -> bool:
    """Return True if ``value`` is callable but not a string."""
    return not isinstance(value, _SCALAR_TYPES) and callable(value)


def resolve_value(value: Any) -> Any:
    """Return ``value``, or the result of calling it if it is a non-string callable."""
    if use_as_callable(value):
        return value()
    return value
