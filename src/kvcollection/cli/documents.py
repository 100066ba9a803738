"""Loading and printing JSON documents for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console

from kvcollection.collection import FrozenCollection
from kvcollection.encoding import decode_json

if TYPE_CHECKING:
    from pathlib import Path

    from kvcollection.collection import Collection

console = Console()
err_console = Console(stderr=True)


def load_document(path: Path) -> FrozenCollection:
    """Read ``path`` as JSON into a read-only collection.

    Exits with status 1 if the file cannot be read or decoded.
    """
    try:
        data = decode_json(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as err:
        err_console.print(f"[red]✗[/red] Could not load {path}: {err}")
        raise SystemExit(1) from None
    return FrozenCollection(data)


def print_json(collection: Collection, options: int) -> None:
    """Print the collection as JSON text, exiting with status 1 if it cannot be encoded."""
    try:
        text = collection.to_json(options)
    except (TypeError, ValueError) as err:
        err_console.print(f"[red]✗[/red] Could not encode result: {err}")
        raise SystemExit(1) from None
    console.print(text, markup=False, highlight=False, soft_wrap=True)
