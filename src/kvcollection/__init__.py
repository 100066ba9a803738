"""Ordered key-value collections with mutable, copy-on-write and frozen variants.

Example:
    >>> from kvcollection import Collection, FrozenCollection
    >>> c = Collection({"name": "ada"}).add("first").add("second")
    >>> c.to_json()
    '{"name":"ada","0":"first","1":"second"}'
    >>> FrozenCollection(c).set("name", "grace")
    Traceback (most recent call last):
    ...
    kvcollection.errors.IllegalMutationError: Impossible to set items on a frozen collection (FrozenCollection)
"""

from __future__ import annotations

from kvcollection._internal.coerce import coerce_items, resolve_value
from kvcollection.collection import (
    Collection,
    FrozenCollection,
    ImmutableCollection,
    Key,
    MutationPolicy,
)
from kvcollection.encoding import JsonOptions, decode_json, encode_json
from kvcollection.errors import CollectionError, IllegalMutationError
from kvcollection.iteration import CachingFlags, CachingIterator
from kvcollection.protocols import Arrayable, Jsonable, JsonSerializable

__version__ = "0.1.0"

__all__ = [
    "Arrayable",
    "CachingFlags",
    "CachingIterator",
    "Collection",
    "CollectionError",
    "FrozenCollection",
    "IllegalMutationError",
    "ImmutableCollection",
    "JsonOptions",
    "JsonSerializable",
    "Jsonable",
    "Key",
    "MutationPolicy",
    "__version__",
    "coerce_items",
    "decode_json",
    "encode_json",
    "resolve_value",
]
