"""Shared pytest fixtures and test helpers for neuron tests."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner, Result

from neuron.domain.note import Note
from neuron.infrastructure.database import init_database
from neuron.infrastructure.store import NoteStore

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "data" / "neuron.db"


@pytest.fixture
def store(db_path: Path) -> Iterator[NoteStore]:
    """A NoteStore on a fresh SQLite file."""
    s = NoteStore(init_database(db_path))
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def notes_dir(tmp_path: Path) -> Path:
    """A directory of three Markdown notes and one text file."""
    root = tmp_path / "notes"
    (root / "cs").mkdir(parents=True)
    write_note(
        root / "binary-search.md",
        "# Binary Search\n\nHalve the search space each step.\n",
        title="Binary Search",
        tags=["algorithms", "search"],
        created="2024-01-15",
    )
    write_note(root / "cs" / "graphs.md", "# Graphs\n\nNodes and edges.\n")
    (root / "cs" / "Kafka.MD").write_text("Logs all the way down.\n", encoding="utf-8")
    (root / "todo.txt").write_text("# Not a note\n", encoding="utf-8")
    return root


@pytest.fixture
def _isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run in a temp CWD with no inherited neuron config."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("NEURON_CONFIG", raising=False)
    monkeypatch.delenv("NEURON_DB_PATH", raising=False)


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def write_note(path: Path, body: str, **frontmatter: Any) -> Path:
    """Write a Markdown file with optional YAML frontmatter."""
    path.parent.mkdir(parents=True, exist_ok=True)
    text = body
    if frontmatter:
        lines = ["---"]
        for key, value in frontmatter.items():
            if isinstance(value, list):
                lines.append(f"{key}:")
                lines.extend(f"  - {item}" for item in value)
            else:
                lines.append(f"{key}: {value}")
        lines.append("---")
        text = "\n".join(lines) + "\n" + body
    path.write_text(text, encoding="utf-8")
    return path


def make_note(source_path: str = "/notes/a.md", **fields: Any) -> Note:
    """Build a Note with sensible defaults for store tests."""
    fields.setdefault("title", "A note")
    fields.setdefault("body", "# A note\n")
    fields.setdefault("due_at", NOW)
    return Note(source_path=source_path, **fields)


def invoke(runner: CliRunner, db_path: Path, *args: str, **kwargs: Any) -> Result:
    """Run the CLI against the database at *db_path*."""
    from neuron.cli import cli

    return runner.invoke(cli, ["--db", str(db_path), *args], **kwargs)
