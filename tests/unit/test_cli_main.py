"""Tests for the CLI."""
from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest
import structlog
from typer.testing import CliRunner

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

runner = CliRunner()


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    yield
    structlog.reset_defaults()


def _write(path: Path, data: object) -> Path:
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestCLIMain:
    """Tests for CLI main commands."""

    def test_version_flag(self) -> None:
        """--version shows version and exits."""
        from kvcollection.cli.main import app

        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert "kvcollection" in result.stdout.lower()

    def test_help_flag(self) -> None:
        """--help lists the commands."""
        from kvcollection.cli.main import app

        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        for command in ("show", "keys", "count", "convert", "merge", "replace", "values"):
            assert command in result.stdout


class TestCLICommands:
    """Tests for individual commands."""

    def test_convert(self, tmp_path: Path) -> None:
        """convert re-encodes through a collection."""
        from kvcollection.cli.main import app

        path = _write(tmp_path / "doc.json", {"a": 1, "b": "x/y"})
        result = runner.invoke(app, ["convert", str(path)])

        assert result.exit_code == 0
        assert result.stdout.strip() == '{"a":1,"b":"x\\/y"}'

    def test_convert_pretty_force_object(self, tmp_path: Path) -> None:
        """convert honours --pretty and --force-object."""
        from kvcollection.cli.main import app

        path = _write(tmp_path / "list.json", ["a"])
        result = runner.invoke(app, ["convert", str(path), "--pretty", "--force-object"])

        assert result.exit_code == 0
        assert result.stdout.strip() == '{\n    "0": "a"\n}'

    def test_merge(self, tmp_path: Path) -> None:
        """merge overwrites and adds keys."""
        from kvcollection.cli.main import app

        base = _write(tmp_path / "base.json", {"a": 1, "b": 2})
        other = _write(tmp_path / "other.json", {"b": 3, "c": 4})
        result = runner.invoke(app, ["merge", str(base), str(other)])

        assert result.exit_code == 0
        assert json.loads(result.stdout) == {"a": 1, "b": 3, "c": 4}

    def test_replace_by_position(self, tmp_path: Path) -> None:
        """replace overwrites positional items."""
        from kvcollection.cli.main import app

        base = _write(tmp_path / "base.json", ["x", "y", "z"])
        other = _write(tmp_path / "other.json", ["a"])
        result = runner.invoke(app, ["replace", str(base), str(other)])

        assert result.exit_code == 0
        assert result.stdout.strip() == '["a","y","z"]'

    def test_values(self, tmp_path: Path) -> None:
        """values drops keys."""
        from kvcollection.cli.main import app

        path = _write(tmp_path / "doc.json", {"x": "a", "y": "b"})
        result = runner.invoke(app, ["values", str(path)])

        assert result.exit_code == 0
        assert result.stdout.strip() == '["a","b"]'

    def test_keys_and_count(self, tmp_path: Path) -> None:
        """keys and count describe the document."""
        from kvcollection.cli.main import app

        path = _write(tmp_path / "doc.json", {"first": 1, "second": 2})

        keys = runner.invoke(app, ["keys", str(path)])
        count = runner.invoke(app, ["count", str(path)])

        assert keys.exit_code == 0
        assert keys.stdout.split() == ["first", "second"]
        assert count.exit_code == 0
        assert count.stdout.strip() == "2"

    def test_show(self, tmp_path: Path) -> None:
        """show renders a table of items."""
        from kvcollection.cli.main import app

        path = _write(tmp_path / "doc.json", {"name": "ada", "tags": ["x"]})
        result = runner.invoke(app, ["show", str(path)])

        assert result.exit_code == 0
        assert "name" in result.stdout
        assert "ada" in result.stdout
        assert "tags" in result.stdout

    def test_show_empty(self, tmp_path: Path) -> None:
        """show reports an empty document."""
        from kvcollection.cli.main import app

        path = _write(tmp_path / "doc.json", {})
        result = runner.invoke(app, ["show", str(path)])

        assert result.exit_code == 0
        assert "No items" in result.stdout

    def test_malformed_document(self, tmp_path: Path) -> None:
        """Malformed JSON exits with status 1."""
        from kvcollection.cli.main import app

        path = tmp_path / "bad.json"
        path.write_text("{not json", encoding="utf-8")
        result = runner.invoke(app, ["convert", str(path)])

        assert result.exit_code == 1

    def test_missing_file(self, tmp_path: Path) -> None:
        """A missing file is a usage error."""
        from kvcollection.cli.main import app

        result = runner.invoke(app, ["convert", str(tmp_path / "missing.json")])

        assert result.exit_code != 0
