"""One-ahead caching iteration over collection items."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from enum import IntFlag
from typing import TYPE_CHECKING, Any

from kvcollection.errors import CollectionError

if TYPE_CHECKING:
    from kvcollection.collection import Key


class CachingFlags(IntFlag):
    """Controls how a `CachingIterator` caches and stringifies elements."""

    NONE = 0
    CALL_TOSTRING = 1  # str() the current value as it is fetched
    TOSTRING_USE_KEY = 2
    TOSTRING_USE_CURRENT = 4
    FULL_CACHE = 256  # keep every fetched pair


_TOSTRING_FLAGS = (
    CachingFlags.CALL_TOSTRING,
    CachingFlags.TOSTRING_USE_KEY,
    CachingFlags.TOSTRING_USE_CURRENT,
)

_MISSING: Any = object()


class CachingIterator(Iterator[tuple["Key", Any]]):
    """Iterator over ``(key, value)`` pairs that always knows whether more remain.

    Example:
        >>> it = CachingIterator({"a": 1, "b": 2})
        >>> [(k, it.has_next()) for k, _ in it]
        [('a', True), ('b', False)]
    """

    def __init__(
        self,
        items: Mapping[Key, Any],
        flags: int = CachingFlags.CALL_TOSTRING,
    ) -> None:
        self.flags = CachingFlags(flags)
        if sum(1 for f in _TOSTRING_FLAGS if self.flags & f) > 1:
            msg = (
                "Flags must contain only one of "
                "CALL_TOSTRING, TOSTRING_USE_KEY, TOSTRING_USE_CURRENT"
            )
            raise ValueError(msg)
        self._items = items
        self.rewind()

    def rewind(self) -> None:
        """Restart from the first item, dropping any cached state."""
        self._inner = iter(self._items.items())
        self._cache: dict[Key, Any] = {}
        self._key: Any = _MISSING
        self._current: Any = _MISSING
        self._string: str | None = None
        self._next = next(self._inner, _MISSING)

    def __iter__(self) -> CachingIterator:
        return self

    def __next__(self) -> tuple[Key, Any]:
        if self._next is _MISSING:
            raise StopIteration
        key, value = self._next
        self._key, self._current = key, value
        if self.flags & CachingFlags.CALL_TOSTRING:
            self._string = str(value)
        if self.flags & CachingFlags.FULL_CACHE:
            self._cache[key] = value
        self._next = next(self._inner, _MISSING)
        return key, value

    def has_next(self) -> bool:
        """Return True if another item follows the current one."""
        return self._next is not _MISSING

    def valid(self) -> bool:
        """Return True once an item has been fetched."""
        return self._key is not _MISSING

    def key(self) -> Key | None:
        return None if self._key is _MISSING else self._key

    def current(self) -> Any:
        return None if self._current is _MISSING else self._current

    def _require_full_cache(self) -> None:
        if not self.flags & CachingFlags.FULL_CACHE:
            msg = f"{type(self).__name__} does not use a full cache (see CachingFlags.FULL_CACHE)"
            raise CollectionError(msg)

    def get_cache(self) -> dict[Key, Any]:
        """Return every pair fetched so far.

        Raises:
            CollectionError: If FULL_CACHE is not set.
        """
        self._require_full_cache()
        return dict(self._cache)

    def __getitem__(self, key: Key) -> Any:
        self._require_full_cache()
        return self._cache[key]

    def __contains__(self, key: object) -> bool:
        self._require_full_cache()
        return key in self._cache

    def __str__(self) -> str:
        if self.flags & CachingFlags.TOSTRING_USE_KEY:
            return "" if self._key is _MISSING else str(self._key)
        if self.flags & CachingFlags.TOSTRING_USE_CURRENT:
            return "" if self._current is _MISSING else str(self._current)
        if self.flags & CachingFlags.CALL_TOSTRING:
            return self._string or ""
        msg = f"{type(self).__name__} does not fetch string value (see CachingFlags)"
        raise CollectionError(msg)
