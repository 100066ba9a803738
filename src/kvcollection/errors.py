"""Exceptions raised by collections."""

from __future__ import annotations


class CollectionError(Exception):
    """Base class for collection errors."""


class IllegalMutationError(CollectionError):
    """A write was attempted against a collection whose policy forbids it.

    Attributes:
        collection_type: Name of the concrete collection class.
        operation: Name of the rejected operation (e.g. ``"set"``).
    """

    def __init__(self, collection_type: str, operation: str, message: str) -> None:
        self.collection_type = collection_type
        self.operation = operation
        super().__init__(message)
