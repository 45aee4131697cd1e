"""Tests for SyncService — directory import and pruning."""

from __future__ import annotations

from datetime import timedelta
from pathlib import Path
from unittest.mock import patch

from neuron.domain.errors import StorageError
from neuron.domain.note import utc_now
from neuron.infrastructure.store import NoteStore
from neuron.services.sync import SyncService
from tests.conftest import write_note


class TestSync:
    def test_imports_markdown_only(self, store: NoteStore, notes_dir: Path) -> None:
        result = SyncService(store).sync(notes_dir)
        assert result.ok
        assert result.data["synced"] == 3
        assert result.data["removed"] == 0
        assert result.data["skipped"] == 0
        assert store.count() == 3
        assert str((notes_dir / "todo.txt").resolve()) not in store.all_paths()

    def test_result_payload(self, store: NoteStore, notes_dir: Path) -> None:
        result = SyncService(store).sync(notes_dir)
        assert result.op == "sync"
        assert result.data["directory"] == str(notes_dir.resolve())
        assert sorted(result.data["synced_titles"]) == ["Binary Search", "Graphs", "Untitled"]

    def test_fields_from_files(self, store: NoteStore, notes_dir: Path) -> None:
        SyncService(store).sync(notes_dir)
        note = store.get(str((notes_dir / "binary-search.md").resolve()))
        assert note.title == "Binary Search"
        assert note.tags == ["algorithms", "search"]
        assert note.created_at.year == 2024
        assert note.interval == 1.0
        assert note.ease_factor == 2.5

    def test_new_notes_are_due_immediately(self, store: NoteStore, notes_dir: Path) -> None:
        SyncService(store).sync(notes_dir)
        assert store.count_due(utc_now() + timedelta(seconds=1)) == 3

    def test_idempotent(self, store: NoteStore, notes_dir: Path) -> None:
        svc = SyncService(store)
        svc.sync(notes_dir)
        before = {p: store.get(p) for p in store.all_paths()}
        result = svc.sync(notes_dir)
        assert result.data["synced"] == 3
        assert result.data["removed"] == 0
        after = {p: store.get(p) for p in store.all_paths()}
        assert after == before

    def test_resync_keeps_schedule(self, store: NoteStore, notes_dir: Path) -> None:
        svc = SyncService(store)
        svc.sync(notes_dir)
        path = str((notes_dir / "cs" / "graphs.md").resolve())
        later = utc_now() + timedelta(days=9)
        store.update_schedule(
            store.get(path).model_copy(update={"interval": 9.0, "ease_factor": 2.2, "due_at": later})
        )
        write_note(notes_dir / "cs" / "graphs.md", "# Graph Theory\n")

        svc.sync(notes_dir)

        note = store.get(path)
        assert note.title == "Graph Theory"
        assert note.interval == 9.0
        assert note.ease_factor == 2.2
        assert note.due_at == later


class TestPrune:
    def test_removes_deleted_file(self, store: NoteStore, notes_dir: Path) -> None:
        svc = SyncService(store)
        svc.sync(notes_dir)
        gone = notes_dir / "cs" / "graphs.md"
        gone_key = str(gone.resolve())
        gone.unlink()

        result = svc.sync(notes_dir)

        assert result.data["removed"] == 1
        assert result.data["removed_paths"] == [gone_key]
        assert result.data["synced"] == 2
        assert gone_key not in store.all_paths()

    def test_no_prune_keeps_orphans(self, store: NoteStore, notes_dir: Path) -> None:
        svc = SyncService(store)
        svc.sync(notes_dir)
        (notes_dir / "cs" / "graphs.md").unlink()

        result = svc.sync(notes_dir, prune=False)

        assert result.data["removed"] == 0
        assert store.count() == 3

    def test_other_directory_notes_are_pruned(
        self, store: NoteStore, notes_dir: Path, tmp_path: Path
    ) -> None:
        other = tmp_path / "other"
        write_note(other / "lone.md", "# Lone\n")
        svc = SyncService(store)
        svc.sync(notes_dir)

        result = svc.sync(other)

        assert result.data["removed"] == 3
        assert store.count() == 1

    def test_all_paths_failure_skips_prune(self, store: NoteStore, notes_dir: Path) -> None:
        svc = SyncService(store)
        with patch.object(store, "all_paths", side_effect=StorageError("all_paths", "locked")):
            result = svc.sync(notes_dir)
        assert result.ok
        assert result.data["removed"] == 0
        assert any("Prune skipped" in w for w in result.warnings)

    def test_symlink_to_outside_file_survives(
        self, store: NoteStore, notes_dir: Path, tmp_path: Path
    ) -> None:
        real = write_note(tmp_path / "elsewhere" / "real.md", "# Real\n")
        (notes_dir / "link.md").symlink_to(real)
        key = str(real.resolve())
        svc = SyncService(store)

        first = svc.sync(notes_dir)

        assert first.data["synced"] == 4
        assert first.data["removed"] == 0
        assert key in store.all_paths()

        later = utc_now() + timedelta(days=5)
        store.update_schedule(store.get(key).model_copy(update={"interval": 5.0, "due_at": later}))
        second = svc.sync(notes_dir)

        assert second.data["removed"] == 0
        assert store.get(key).interval == 5.0
        assert store.get(key).due_at == later


class TestFailures:
    def test_unparsable_file_is_skipped(self, store: NoteStore, notes_dir: Path) -> None:
        (notes_dir / "broken.md").write_bytes(b"\xff\xfe not utf-8")
        result = SyncService(store).sync(notes_dir)
        assert result.ok
        assert result.data["synced"] == 3
        assert result.data["skipped"] == 1
        assert len(result.warnings) == 1
        assert "broken.md" in result.warnings[0]

    def test_malformed_file_keeps_stored_note(self, store: NoteStore, notes_dir: Path) -> None:
        svc = SyncService(store)
        svc.sync(notes_dir)
        path = notes_dir / "binary-search.md"
        path.write_text("---\ntitle: [broken\n---\n", encoding="utf-8")

        result = svc.sync(notes_dir)

        assert result.data["skipped"] == 1
        assert result.data["removed"] == 0
        assert store.get(str(path.resolve())).title == "Binary Search"

    def test_store_rejection_is_skipped(self, store: NoteStore, notes_dir: Path) -> None:
        calls = {"n": 0}
        real_upsert = store.upsert

        def flaky(note):  # type: ignore[no-untyped-def]
            calls["n"] += 1
            if calls["n"] == 1:
                raise StorageError("upsert", "disk full", source_path=note.source_path)
            real_upsert(note)

        with patch.object(store, "upsert", side_effect=flaky):
            result = SyncService(store).sync(notes_dir)

        assert result.data["synced"] == 2
        assert result.data["skipped"] == 1
        assert "disk full" in result.warnings[0]

    def test_invalid_directory(self, store: NoteStore, tmp_path: Path) -> None:
        result = SyncService(store).sync(tmp_path / "missing")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "INVALID_PATH"

    def test_empty_directory(self, store: NoteStore, tmp_path: Path) -> None:
        result = SyncService(store).sync(tmp_path)
        assert result.ok
        assert result.data["synced"] == 0
