"""Key-value collections with mutable, copy-on-write and frozen variants.

All three share one read path. Write operations compute the resulting
mapping the same way and differ only in what happens to it, as decided by
the class's `MutationPolicy`:

- MUTABLE: the receiver takes the new mapping and is returned
- COPY_ON_WRITE: a new instance of the same class is returned
- FROZEN: nothing is computed, `IllegalMutationError` is raised

Example:
    >>> base = ImmutableCollection({"a": 1, "b": 2})
    >>> merged = base.merge({"b": 3, "c": 4})
    >>> base.all(), merged.all()
    ({'a': 1, 'b': 2}, {'a': 1, 'b': 3, 'c': 4})
"""

from __future__ import annotations

from collections.abc import Iterator
from enum import Enum
from typing import Any, ClassVar, Self

import structlog

from kvcollection._internal.coerce import coerce_items, resolve_value
from kvcollection.config import get_settings
from kvcollection.encoding import decode_json, encode_json
from kvcollection.errors import IllegalMutationError
from kvcollection.iteration import CachingIterator
from kvcollection.protocols import Arrayable, Jsonable, JsonSerializable, exposes

logger = structlog.get_logger()

Key = int | str


class MutationPolicy(str, Enum):
    """How a collection responds to write operations."""

    MUTABLE = "mutable"
    COPY_ON_WRITE = "copy_on_write"
    FROZEN = "frozen"


WRITE_OPERATIONS = ("values", "set", "add", "merge", "replace", "remove", "clear")

_FORBIDDEN: dict[MutationPolicy, frozenset[str]] = {
    MutationPolicy.MUTABLE: frozenset(),
    MutationPolicy.COPY_ON_WRITE: frozenset({"clear"}),
    MutationPolicy.FROZEN: frozenset(WRITE_OPERATIONS),
}

# Phrasing of "Impossible to <action> a frozen collection"
_FROZEN_ACTIONS = {
    "values": "reset keys on",
    "set": "set items on",
    "add": "add items to",
    "merge": "merge items on",
    "replace": "replace items on",
    "remove": "remove an item on",
    "clear": "clear",
}


def _index_after(items: dict[Key, Any]) -> int:
    int_keys = [k for k in items if isinstance(k, int)]
    return max(int_keys) + 1 if int_keys else 0


def _merge(base: dict[Key, Any], incoming: dict[Key, Any]) -> dict[Key, Any]:
    """String keys from ``incoming`` win; integer keys from both sides are renumbered."""
    result: dict[Key, Any] = {}
    position = 0
    for source in (base, incoming):
        for key, value in source.items():
            if isinstance(key, int):
                result[position] = value
                position += 1
            else:
                result[key] = value
    return result


def _replace(base: dict[Key, Any], incoming: dict[Key, Any]) -> dict[Key, Any]:
    """Every key of ``incoming`` is assigned, integer keys by position."""
    result = dict(base)
    result.update(incoming)
    return result


class Collection:
    """Ordered key-value collection that mutates in place.

    Keys are strings or integers. Passing ``None`` as a key appends with
    the next integer index. Values are held by reference, never copied.

    Any input accepted by `coerce_items` can seed a collection: mappings,
    lists, other collections, objects exposing ``to_array``, ``to_json``
    or ``json_serialize``, iterables, or a lone scalar.
    """

    policy: ClassVar[MutationPolicy] = MutationPolicy.MUTABLE

    __hash__ = None  # type: ignore[assignment]

    def __init__(self, items: Any = None) -> None:
        self._items: dict[Key, Any] = coerce_items(items)
        # Next append index; never lowered by remove()
        self._next_index = _index_after(self._items)
        if isinstance(items, Collection):
            self._next_index = max(self._next_index, items._next_index)

    # Reads

    def keys(self) -> list[Key]:
        """Keys in insertion order."""
        return list(self._items)

    def get(self, key: Key, default: Any = None) -> Any:
        """Return the value at ``key``, or the resolved ``default``.

        A callable default (other than a string) is invoked only when the
        key is missing.
        """
        if key in self._items:
            return self._items[key]
        return resolve_value(default)

    def has(self, key: Key) -> bool:
        """Return True if ``key`` is present, even when its value is None."""
        return key in self._items

    def all(self) -> dict[Key, Any]:
        """Return a copy of the underlying mapping."""
        return dict(self._items)

    def count(self) -> int:
        return len(self._items)

    def caching_iterator(self, flags: int | None = None) -> CachingIterator:
        """Iterate with one-item lookahead.

        Args:
            flags: `CachingFlags` bitmask; defaults to the configured
                ``caching_flags`` setting.
        """
        if flags is None:
            flags = get_settings().caching_flags
        return CachingIterator(dict(self._items), flags)

    # Serialization

    def to_array(self) -> dict[Key, Any]:
        """Return the items as plain data, expanding `Arrayable` values."""
        return {
            key: value.to_array() if exposes(value, Arrayable) else value
            for key, value in self._items.items()
        }

    def json_serialize(self) -> dict[Key, Any]:
        """Return the items in a form ready for JSON encoding.

        Per value, the first capability found is used: `JsonSerializable`,
        then `Jsonable` (its text decoded back), then `Arrayable`.
        """
        return {key: self._json_value(value) for key, value in self._items.items()}

    @staticmethod
    def _json_value(value: Any) -> Any:
        if exposes(value, JsonSerializable):
            return value.json_serialize()
        if exposes(value, Jsonable):
            return decode_json(value.to_json())
        if exposes(value, Arrayable):
            return value.to_array()
        return value

    def to_json(self, options: int | None = None) -> str:
        """Encode the collection as JSON text.

        Args:
            options: `JsonOptions` bitmask; defaults to the configured
                ``json_options`` setting.
        """
        if options is None:
            options = get_settings().json_options
        return encode_json(self.json_serialize(), options)

    def to_base(self) -> Collection:
        """Return a plain mutable `Collection` holding the same items."""
        return Collection(self)

    # Writes

    def _writable(self, operation: str) -> dict[Key, Any]:
        """Return the mapping a write may modify, or raise if forbidden."""
        if operation in _FORBIDDEN[self.policy]:
            name = type(self).__name__
            logger.debug("illegal_mutation", collection_type=name, operation=operation)
            if self.policy is MutationPolicy.FROZEN:
                msg = f"Impossible to {_FROZEN_ACTIONS[operation]} a frozen collection ({name})"
            else:
                msg = f"Impossible to {operation} an immutable collection ({name})"
            raise IllegalMutationError(name, operation, msg)
        if self.policy is MutationPolicy.MUTABLE:
            return self._items
        return dict(self._items)

    def _commit(self, items: dict[Key, Any], next_index: int) -> Self:
        if self.policy is MutationPolicy.MUTABLE:
            self._items = items
            self._next_index = next_index
            return self
        copy = type(self)(items)
        copy._next_index = next_index
        return copy

    def values(self) -> Self:
        """Re-key the items as ``0..n-1``, keeping their order."""
        items = self._writable("values")
        return self._commit(dict(enumerate(items.values())), len(items))

    def set(self, key: Key | None, value: Any) -> Self:
        """Set ``value`` at ``key``; a ``None`` key appends."""
        items = self._writable("set")
        next_index = self._next_index
        if key is None:
            items[next_index] = value
            next_index += 1
        else:
            items[key] = value
            if isinstance(key, int):
                next_index = max(next_index, key + 1)
        return self._commit(items, next_index)

    def add(self, value: Any) -> Self:
        """Append ``value`` under the next integer index."""
        items = self._writable("add")
        items[self._next_index] = value
        return self._commit(items, self._next_index + 1)

    def merge(self, items: Any) -> Self:
        """Merge ``items`` in.

        String keys overwrite existing ones; integer-keyed items are
        appended and every integer key is renumbered from 0.
        """
        current = self._writable("merge")
        merged = _merge(current, coerce_items(items))
        return self._commit(merged, _index_after(merged))

    def replace(self, items: Any) -> Self:
        """Assign every key of ``items``, overwriting integer keys by position."""
        current = self._writable("replace")
        incoming = coerce_items(items)
        next_index = max(self._next_index, _index_after(incoming))
        return self._commit(_replace(current, incoming), next_index)

    def remove(self, key: Key) -> Self:
        """Remove ``key``; a missing key is not an error."""
        items = self._writable("remove")
        items.pop(key, None)
        return self._commit(items, self._next_index)

    def clear(self) -> Self:
        """Remove every item."""
        self._writable("clear")
        return self._commit({}, 0)

    # Python protocols

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def __getitem__(self, key: Key) -> Any:
        return self.get(key)

    def _reject_in_place(self, operation: str) -> None:
        if self.policy is MutationPolicy.COPY_ON_WRITE:
            name = type(self).__name__
            logger.debug("illegal_mutation", collection_type=name, operation=operation)
            msg = (
                f"Impossible to {operation} in place on an immutable collection ({name}); "
                f"use {operation}() to get a modified copy"
            )
            raise IllegalMutationError(name, operation, msg)

    def __setitem__(self, key: Key | None, value: Any) -> None:
        self._reject_in_place("set")
        if key is None:
            self.add(value)
        else:
            self.set(key, value)

    def __delitem__(self, key: Key) -> None:
        self._reject_in_place("remove")
        self.remove(key)

    def __len__(self) -> int:
        return self.count()

    def __iter__(self) -> Iterator[tuple[Key, Any]]:
        """Iterate over ``(key, value)`` pairs of the items as they are now."""
        return iter(dict(self._items).items())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Collection):
            return NotImplemented
        return type(self) is type(other) and self._items == other._items

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._items!r})"

    def __str__(self) -> str:
        return self.to_json()


class ImmutableCollection(Collection):
    """Collection whose writes return a modified copy.

    The receiver never changes. ``clear()`` is not supported and raises
    `IllegalMutationError`, while removing every key one by one still
    works. Item assignment and deletion (``c[k] = v``, ``del c[k]``)
    cannot hand back a copy and raise as well.
    """

    policy = MutationPolicy.COPY_ON_WRITE


class FrozenCollection(Collection):
    """Read-only collection; every write raises `IllegalMutationError`."""

    policy = MutationPolicy.FROZEN
