"""Tests for the sync command."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from tests.conftest import invoke

pytestmark = pytest.mark.usefixtures("_isolated_env")


class TestSyncCommand:
    def test_imports_notes(self, cli_runner: CliRunner, db_path: Path, notes_dir: Path) -> None:
        result = invoke(cli_runner, db_path, "sync", str(notes_dir))
        assert result.exit_code == 0, result.output
        assert "Sync complete. Processed 3 notes." in result.output
        assert db_path.exists()

    def test_verbose_lists_titles(
        self, cli_runner: CliRunner, db_path: Path, notes_dir: Path
    ) -> None:
        result = invoke(cli_runner, db_path, "-v", "sync", str(notes_dir))
        assert result.exit_code == 0, result.output
        assert "Synced: Binary Search" in result.output

    def test_reports_removals(self, cli_runner: CliRunner, db_path: Path, notes_dir: Path) -> None:
        invoke(cli_runner, db_path, "sync", str(notes_dir))
        (notes_dir / "cs" / "graphs.md").unlink()
        result = invoke(cli_runner, db_path, "sync", str(notes_dir))
        assert result.exit_code == 0, result.output
        assert "Processed 2 notes. Removed 1 deleted notes." in result.output
        assert "Removed: graphs.md" in result.output

    def test_no_prune(self, cli_runner: CliRunner, db_path: Path, notes_dir: Path) -> None:
        invoke(cli_runner, db_path, "sync", str(notes_dir))
        (notes_dir / "cs" / "graphs.md").unlink()
        result = invoke(cli_runner, db_path, "sync", str(notes_dir), "--no-prune")
        assert "Removed" not in result.output
        stats = invoke(cli_runner, db_path, "--json", "stats")
        assert json.loads(stats.output)["data"]["total"] == 3

    def test_prune_off_in_config(
        self, cli_runner: CliRunner, db_path: Path, notes_dir: Path, tmp_path: Path
    ) -> None:
        (tmp_path / "neuron.toml").write_text("[sync]\nprune = false\n")
        invoke(cli_runner, db_path, "sync", str(notes_dir))
        (notes_dir / "cs" / "graphs.md").unlink()
        result = invoke(cli_runner, db_path, "sync", str(notes_dir))
        assert "Removed" not in result.output

    def test_json_output(self, cli_runner: CliRunner, db_path: Path, notes_dir: Path) -> None:
        result = invoke(cli_runner, db_path, "--json", "sync", str(notes_dir))
        payload = json.loads(result.output)
        assert payload["ok"] is True
        assert payload["op"] == "sync"
        assert payload["data"]["synced"] == 3
        assert payload["data"]["removed"] == 0

    def test_skipped_file_warns(self, cli_runner: CliRunner, db_path: Path, notes_dir: Path) -> None:
        (notes_dir / "bad.md").write_bytes(b"\xff\xfe")
        result = invoke(cli_runner, db_path, "sync", str(notes_dir))
        assert result.exit_code == 0
        assert "Skipped 1 files." in result.output
        assert "WARNING: Failed to parse" in result.output

    def test_missing_directory(self, cli_runner: CliRunner, db_path: Path, tmp_path: Path) -> None:
        result = invoke(cli_runner, db_path, "sync", str(tmp_path / "nope"))
        assert result.exit_code == 2
        assert "does not exist" in result.output

    def test_unopenable_store(self, cli_runner: CliRunner, tmp_path: Path, notes_dir: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        result = invoke(cli_runner, blocker / "neuron.db", "sync", str(notes_dir))
        assert result.exit_code == 1
        assert "Cannot open note store" in result.output
