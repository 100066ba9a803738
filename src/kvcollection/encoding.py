"""JSON text encoding for collections.

Output follows associative-array conventions:
- Mappings keyed exactly ``0..n-1`` (in order) encode as JSON arrays
- Every other mapping encodes as a JSON object
- Compact separators, ``/`` escaped as ``\\/`` and non-ASCII escaped,
  unless the matching `JsonOptions` flag says otherwise
- Integral floats encode without a fraction unless PRESERVE_ZERO_FRACTION
- NaN/Infinity are rejected by the codec

Decoding turns object keys written as canonical decimal integers back into
``int`` keys, so positional keys survive a text round-trip.
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from enum import IntFlag
from typing import Any

from kvcollection.protocols import JsonSerializable, exposes

_PRETTY_INDENT = 4
_INT_KEY_RE = re.compile(r"^(0|-?[1-9][0-9]*)\Z")


class JsonOptions(IntFlag):
    """Bitmask of text-encoding flags accepted by ``to_json``."""

    NONE = 0
    PRETTY_PRINT = 1
    UNESCAPED_SLASHES = 2
    UNESCAPED_UNICODE = 4
    FORCE_OBJECT = 8
    PRESERVE_ZERO_FRACTION = 16


def is_list_like(mapping: Mapping[Any, Any]) -> bool:
    """Return True if the mapping is keyed ``0..n-1`` in insertion order."""
    for expected, key in enumerate(mapping):
        if type(key) is not int or key != expected:
            return False
    return True


def _prepare(value: Any, options: JsonOptions) -> Any:
    if exposes(value, JsonSerializable):
        return _prepare(value.json_serialize(), options)
    if isinstance(value, Mapping):
        if not options & JsonOptions.FORCE_OBJECT and is_list_like(value):
            return [_prepare(v, options) for v in value.values()]
        prepared: dict[str, Any] = {}
        for k, v in value.items():
            if not isinstance(k, str | int) or isinstance(k, bool):
                msg = f"JSON object keys must be strings or integers, got {type(k).__name__}"
                raise TypeError(msg)
            prepared[str(k)] = _prepare(v, options)
        return prepared
    if isinstance(value, list | tuple):
        if options & JsonOptions.FORCE_OBJECT:
            return {str(i): _prepare(v, options) for i, v in enumerate(value)}
        return [_prepare(v, options) for v in value]
    if (
        isinstance(value, float)
        and value.is_integer()
        and not options & JsonOptions.PRESERVE_ZERO_FRACTION
    ):
        return int(value)
    return value


def encode_json(value: Any, options: int = 0) -> str:
    """Encode a value as JSON text.

    Args:
        value: Plain structure (mappings, sequences, scalars) or any object
            exposing ``json_serialize()``.
        options: `JsonOptions` bitmask.

    Returns:
        JSON text.

    Raises:
        TypeError: If the structure holds a value the codec cannot encode.
        ValueError: If the structure holds NaN or Infinity.
    """
    flags = JsonOptions(options)
    prepared = _prepare(value, flags)

    if flags & JsonOptions.PRETTY_PRINT:
        text = json.dumps(
            prepared,
            indent=_PRETTY_INDENT,
            separators=(",", ": "),
            ensure_ascii=not flags & JsonOptions.UNESCAPED_UNICODE,
            allow_nan=False,
        )
    else:
        text = json.dumps(
            prepared,
            separators=(",", ":"),
            ensure_ascii=not flags & JsonOptions.UNESCAPED_UNICODE,
            allow_nan=False,
        )

    # "/" only ever occurs inside string literals of the encoded text
    if not flags & JsonOptions.UNESCAPED_SLASHES:
        text = text.replace("/", "\\/")
    return text


def _object_pairs(pairs: list[tuple[str, Any]]) -> dict[str | int, Any]:
    return {int(k) if _INT_KEY_RE.match(k) else k: v for k, v in pairs}


def decode_json(text: str | bytes) -> Any:
    """Decode JSON text, restoring integer object keys.

    Raises:
        json.JSONDecodeError: If the text is not valid JSON.
    """
    return json.loads(text, object_pairs_hook=_object_pairs)
