"""Read-only inspection commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.table import Table
from rich.text import Text

from kvcollection.cli.documents import console, load_document
from kvcollection.encoding import JsonOptions, encode_json

if TYPE_CHECKING:
    from pathlib import Path


def _render_value(value: object) -> str:
    if isinstance(value, str):
        return value
    return encode_json(value, JsonOptions.UNESCAPED_SLASHES | JsonOptions.UNESCAPED_UNICODE)


def show_items(path: Path) -> None:
    """Print a key/value table of the document's top-level items.

    Args:
        path: JSON document to load.
    """
    collection = load_document(path)

    if not collection.count():
        console.print("[yellow]![/yellow] No items.")
        return

    table = Table(title=str(path))
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    table.add_column("Type", style="dim")

    for key, value in collection:
        table.add_row(Text(str(key)), Text(_render_value(value)), type(value).__name__)

    console.print(table)


def show_keys(path: Path) -> None:
    """Print the document's keys in order, one per line."""
    collection = load_document(path)
    for key in collection.keys():
        console.print(str(key), markup=False, highlight=False)


def show_count(path: Path) -> None:
    """Print the number of top-level items."""
    console.print(str(load_document(path).count()), markup=False, highlight=False)
