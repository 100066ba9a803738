"""CLI module."""

from __future__ import annotations

from kvcollection.cli.main import app

__all__ = ["app"]
