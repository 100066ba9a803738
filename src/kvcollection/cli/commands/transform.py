"""Commands that derive a new document from one or two inputs."""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

import structlog

from kvcollection.cli.documents import load_document, print_json
from kvcollection.collection import ImmutableCollection
from kvcollection.config import get_settings
from kvcollection.encoding import JsonOptions

if TYPE_CHECKING:
    from pathlib import Path

logger = structlog.get_logger()


def _options(*, pretty: bool, force_object: bool = False) -> int:
    options = JsonOptions(get_settings().json_options)
    if pretty:
        options |= JsonOptions.PRETTY_PRINT
    if force_object:
        options |= JsonOptions.FORCE_OBJECT
    return options


def run_convert(path: Path, *, pretty: bool, force_object: bool) -> None:
    """Load a document and print it back through the collection encoder.

    Args:
        path: JSON document to load.
        pretty: Pretty-print the output.
        force_object: Encode list-like items as a JSON object.
    """
    print_json(load_document(path), _options(pretty=pretty, force_object=force_object))


def run_combine(
    operation: Literal["merge", "replace"],
    base_path: Path,
    other_path: Path,
    *,
    pretty: bool,
) -> None:
    """Merge or replace ``other_path`` into ``base_path`` and print the result."""
    base = ImmutableCollection(load_document(base_path))
    other = load_document(other_path)

    combined = base.merge(other) if operation == "merge" else base.replace(other)
    logger.debug(
        "combined_documents",
        operation=operation,
        base_count=base.count(),
        other_count=other.count(),
        result_count=combined.count(),
    )
    print_json(combined, _options(pretty=pretty))


def run_values(path: Path, *, pretty: bool) -> None:
    """Print the document's values re-keyed as 0..n-1."""
    collection = ImmutableCollection(load_document(path))
    print_json(collection.values(), _options(pretty=pretty))
