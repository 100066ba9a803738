"""Main CLI entry point using Typer.

This module defines the top-level CLI commands:
- kvcollection show: Print a JSON document's items as a table
- kvcollection keys: List keys in order
- kvcollection count: Count items
- kvcollection convert: Re-encode a JSON document through a collection
- kvcollection merge: Merge one document into another
- kvcollection replace: Replace items of one document with another's
- kvcollection values: Re-key items as 0..n-1
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path  # noqa: TC003 - Typer requires runtime access
from typing import Annotated

import structlog
import typer
from rich.console import Console

from kvcollection import __version__
from kvcollection.config import get_settings

app = typer.Typer(
    name="kvcollection",
    help="kvcollection - inspect and combine key-value JSON documents",
    no_args_is_help=True,
)
console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"kvcollection {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[  # noqa: ARG001
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose output."),
    ] = False,
) -> None:
    """kvcollection - inspect and combine key-value JSON documents.

    Use 'kvcollection COMMAND --help' for information on specific commands.
    """
    level = logging.DEBUG if verbose else logging.getLevelName(get_settings().log_level)
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


FileArg = Annotated[
    Path,
    typer.Argument(help="JSON document to load.", exists=True, dir_okay=False),
]


@app.command()
def show(path: FileArg) -> None:
    """Print the items of a JSON document as a key/value table."""
    from kvcollection.cli.commands.listing import show_items  # noqa: PLC0415

    show_items(path)


@app.command()
def keys(path: FileArg) -> None:
    """Print keys in insertion order, one per line."""
    from kvcollection.cli.commands.listing import show_keys  # noqa: PLC0415

    show_keys(path)


@app.command()
def count(path: FileArg) -> None:
    """Print the number of top-level items."""
    from kvcollection.cli.commands.listing import show_count  # noqa: PLC0415

    show_count(path)


@app.command()
def convert(
    path: FileArg,
    pretty: Annotated[
        bool,
        typer.Option("--pretty", "-p", help="Pretty-print the output."),
    ] = False,
    force_object: Annotated[
        bool,
        typer.Option("--force-object", help="Encode list-like items as a JSON object."),
    ] = False,
) -> None:
    """Re-encode a JSON document through a collection.

    Examples:
        kvcollection convert data.json --pretty

        kvcollection convert list.json --force-object
    """
    from kvcollection.cli.commands.transform import run_convert  # noqa: PLC0415

    run_convert(path, pretty=pretty, force_object=force_object)


@app.command()
def merge(
    base: FileArg,
    other: FileArg,
    pretty: Annotated[
        bool,
        typer.Option("--pretty", "-p", help="Pretty-print the output."),
    ] = False,
) -> None:
    """Merge OTHER into BASE and print the result.

    String keys from OTHER overwrite BASE; positional items are appended.
    """
    from kvcollection.cli.commands.transform import run_combine  # noqa: PLC0415

    run_combine("merge", base, other, pretty=pretty)


@app.command()
def replace(
    base: FileArg,
    other: FileArg,
    pretty: Annotated[
        bool,
        typer.Option("--pretty", "-p", help="Pretty-print the output."),
    ] = False,
) -> None:
    """Replace items of BASE with those of OTHER and print the result.

    Positional items overwrite BASE's items at the same position.
    """
    from kvcollection.cli.commands.transform import run_combine  # noqa: PLC0415

    run_combine("replace", base, other, pretty=pretty)


@app.command()
def values(
    path: FileArg,
    pretty: Annotated[
        bool,
        typer.Option("--pretty", "-p", help="Pretty-print the output."),
    ] = False,
) -> None:
    """Drop keys and print the items as a JSON array."""
    from kvcollection.cli.commands.transform import run_values  # noqa: PLC0415

    run_values(path, pretty=pretty)


if __name__ == "__main__":
    app()
