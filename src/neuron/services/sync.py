"""SyncService — reconcile the note store with a directory of Markdown files.

Each file is parsed and upserted on its own: a file that fails to parse,
or a record the store rejects, is logged and skipped without stopping the
pass. With ``prune`` enabled, stored notes whose file was not found in
this pass are deleted afterwards.

A note counts as "seen" when its file is discovered, even if it then
fails to parse. Paths are recorded resolved, matching the store key, so
a symlinked note is not pruned in the pass that imports it. A file that
is briefly malformed keeps its stored note and review schedule.
"""

from __future__ import annotations

import logging
from pathlib import Path

from neuron.domain.errors import ParseError, StorageError
from neuron.domain.note import utc_now
from neuron.domain.parser import parse_note_file
from neuron.infrastructure.filesystem import find_markdown_files
from neuron.services.base import BaseService
from neuron.services.result import ServiceResult

logger = logging.getLogger(__name__)


class SyncService(BaseService):
    """Import and reconcile notes from a directory tree."""

    def sync(self, directory: Path, *, prune: bool = True) -> ServiceResult:
        """Walk *directory*, upsert every Markdown note, optionally prune.

        Result data:
            directory: the resolved directory scanned
            synced: notes upserted in this pass
            skipped: files that failed to parse or store
            removed: notes pruned from the store
            removed_paths: their source paths
            synced_titles: titles of the synced notes, in scan order
        """
        op = "sync"
        try:
            files = find_markdown_files(directory)
        except NotADirectoryError as exc:
            return ServiceResult.failure(op, "INVALID_PATH", str(exc), directory=str(directory))

        warnings: list[str] = []
        seen: set[str] = set()
        synced_titles: list[str] = []
        skipped = 0
        now = utc_now()

        for path in files:
            seen.add(str(path.resolve()))
            try:
                note = parse_note_file(path, now=now)
            except ParseError as exc:
                logger.warning("Skipping unparsable note %s: %s", path, exc.reason)
                warnings.append(str(exc))
                skipped += 1
                continue

            try:
                self._store.upsert(note)
            except StorageError as exc:
                logger.warning("Skipping note %s: %s", path, exc)
                warnings.append(str(exc))
                skipped += 1
                continue

            logger.debug("Synced %s (%s)", note.title, path)
            synced_titles.append(note.title)

        removed_paths: list[str] = []
        if prune:
            removed_paths = self._prune(seen, warnings)

        logger.info(
            "Sync of %s complete: %d synced, %d removed, %d skipped",
            directory,
            len(synced_titles),
            len(removed_paths),
            skipped,
        )
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "directory": str(directory.resolve()),
                "synced": len(synced_titles),
                "skipped": skipped,
                "removed": len(removed_paths),
                "removed_paths": removed_paths,
                "synced_titles": synced_titles,
            },
            warnings=warnings,
        )

    def _prune(self, seen: set[str], warnings: list[str]) -> list[str]:
        """Delete stored notes whose path is not in *seen*."""
        try:
            stored = self._store.all_paths()
        except StorageError as exc:
            logger.warning("Prune aborted: %s", exc)
            warnings.append(f"Prune skipped: {exc}")
            return []

        removed: list[str] = []
        for path in sorted(stored - seen):
            try:
                if self._store.delete(path):
                    removed.append(path)
            except StorageError as exc:
                logger.warning("Could not remove %s: %s", path, exc)
                warnings.append(str(exc))
        return removed
