"""NoteStore — the persistent keyed collection of notes.

Notes are keyed by ``source_path``. Sync writes content fields through
:meth:`NoteStore.upsert`; the scheduler writes scheduling fields through
:meth:`NoteStore.update_schedule`. Neither path touches the other's
columns, so re-syncing a file never resets its review schedule.

Every SQLAlchemy failure surfaces as :class:`StorageError` naming the
operation and, where there is one, the note's path.

``find_by_title_or_path`` returns the lowest-id match when several notes
match. That order is an implementation detail; callers must not depend
on which of several matches they get.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from typing import Any

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.engine import Engine, RowMapping
from sqlalchemy.exc import SQLAlchemyError

from neuron.domain.errors import NoteNotFoundError, StorageError
from neuron.domain.note import Note, as_utc
from neuron.infrastructure.database.schema import notes

logger = logging.getLogger(__name__)

# Columns sync may overwrite on an existing row.
_CONTENT_COLUMNS = ("title", "tags", "body", "created_at")


def to_iso(value: datetime) -> str:
    """Fixed-layout UTC ISO text; lexical order equals time order."""
    return as_utc(value).isoformat(timespec="microseconds")


def from_iso(value: str) -> datetime:
    return as_utc(datetime.fromisoformat(value))


@contextmanager
def _storage_errors(operation: str, source_path: str | None = None) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        raise StorageError(operation, str(exc), source_path=source_path) from exc


class NoteStore:
    """SQL access to the ``notes`` table."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    @property
    def engine(self) -> Engine:
        return self._engine

    def close(self) -> None:
        """Release pooled connections."""
        self._engine.dispose()

    # ------------------------------------------------------------------
    # Row mapping
    # ------------------------------------------------------------------

    @staticmethod
    def _to_row(note: Note) -> dict[str, Any]:
        return {
            "source_path": note.source_path,
            "title": note.title,
            "tags": json.dumps(note.tags),
            "body": note.body,
            "created_at": to_iso(note.created_at),
            "due_at": to_iso(note.due_at),
            "interval": note.interval,
            "ease_factor": note.ease_factor,
        }

    @staticmethod
    def _to_note(row: RowMapping) -> Note:
        try:
            tags = json.loads(row["tags"] or "[]")
        except json.JSONDecodeError as exc:
            raise StorageError(
                "decode", f"invalid tags JSON: {exc}", source_path=row["source_path"]
            ) from exc
        data: dict[str, Any] = {
            "id": row["id"],
            "source_path": row["source_path"],
            "title": row["title"],
            "tags": [t for t in tags if isinstance(t, str)],
            "body": row["body"],
            "due_at": from_iso(row["due_at"]),
            "interval": row["interval"],
            "ease_factor": row["ease_factor"],
        }
        if row["created_at"]:
            data["created_at"] = from_iso(row["created_at"])
        return Note(**data)

    def _fetch_one(self, stmt: Any, operation: str, missing: str) -> Note:
        with _storage_errors(operation), self._engine.connect() as conn:
            row = conn.execute(stmt).mappings().first()
        if row is None:
            raise NoteNotFoundError(missing)
        return self._to_note(row)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def upsert(self, note: Note) -> None:
        """Insert *note*, or overwrite only its content fields if it exists.

        Scheduling columns of an existing row are left untouched.
        """
        stmt = sqlite_insert(notes).values(**self._to_row(note))
        stmt = stmt.on_conflict_do_update(
            index_elements=[notes.c.source_path],
            set_={col: stmt.excluded[col] for col in _CONTENT_COLUMNS},
        )
        with _storage_errors("upsert", note.source_path), self._engine.begin() as conn:
            conn.execute(stmt)

    def update_schedule(self, note: Note) -> None:
        """Persist only ``due_at``, ``interval`` and ``ease_factor``.

        Raises:
            NoteNotFoundError: If no stored note has this ``source_path``.
        """
        stmt = (
            update(notes)
            .where(notes.c.source_path == note.source_path)
            .values(
                due_at=to_iso(note.due_at),
                interval=note.interval,
                ease_factor=note.ease_factor,
            )
        )
        with _storage_errors("update_schedule", note.source_path), self._engine.begin() as conn:
            updated = conn.execute(stmt).rowcount
        if updated == 0:
            raise NoteNotFoundError(f"No note stored for '{note.source_path}'")

    def delete(self, source_path: str) -> bool:
        """Remove a note. Returns whether a row was removed; absent is not an error."""
        stmt = delete(notes).where(notes.c.source_path == source_path)
        with _storage_errors("delete", source_path), self._engine.begin() as conn:
            removed = conn.execute(stmt).rowcount
        if removed:
            logger.debug("Deleted note %s", source_path)
        return removed > 0

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, source_path: str) -> Note:
        """Exact lookup by ``source_path``."""
        stmt = select(notes).where(notes.c.source_path == source_path)
        return self._fetch_one(stmt, "get", f"No note stored for '{source_path}'")

    def get_due(self, now: datetime) -> Note:
        """The note with the earliest ``due_at`` at or before *now*."""
        stmt = (
            select(notes)
            .where(notes.c.due_at <= to_iso(now))
            .order_by(notes.c.due_at, notes.c.id)
            .limit(1)
        )
        return self._fetch_one(stmt, "get_due", "No notes are due for review")

    def get_due_batch(self, now: datetime, limit: int) -> list[Note]:
        """Up to *limit* due notes, sampled uniformly at random."""
        if limit <= 0:
            return []
        stmt = (
            select(notes)
            .where(notes.c.due_at <= to_iso(now))
            .order_by(func.random())
            .limit(limit)
        )
        with _storage_errors("get_due_batch"), self._engine.connect() as conn:
            rows = conn.execute(stmt).mappings().all()
        return [self._to_note(row) for row in rows]

    def get_any(self) -> Note:
        """One note chosen uniformly at random, due or not."""
        stmt = select(notes).order_by(func.random()).limit(1)
        return self._fetch_one(stmt, "get_any", "The store has no notes")

    def find_by_title_or_path(self, term: str) -> Note:
        """First note whose title or path contains *term* (case-insensitive).

        Matching uses SQLite ``LIKE`` with ``%``/``_`` in *term* escaped, so
        case folding covers ASCII letters only.
        """
        stmt = (
            select(notes)
            .where(
                or_(
                    notes.c.title.contains(term, autoescape=True),
                    notes.c.source_path.contains(term, autoescape=True),
                )
            )
            .order_by(notes.c.id)
            .limit(1)
        )
        return self._fetch_one(stmt, "find", f"No note matches '{term}'")

    def all_paths(self) -> set[str]:
        """Every stored ``source_path``."""
        with _storage_errors("all_paths"), self._engine.connect() as conn:
            rows = conn.execute(select(notes.c.source_path)).fetchall()
        return {str(row.source_path) for row in rows}

    def count(self) -> int:
        with _storage_errors("count"), self._engine.connect() as conn:
            return int(conn.execute(select(func.count(notes.c.id))).scalar_one() or 0)

    def count_due(self, now: datetime) -> int:
        stmt = select(func.count(notes.c.id)).where(notes.c.due_at <= to_iso(now))
        with _storage_errors("count_due"), self._engine.connect() as conn:
            return int(conn.execute(stmt).scalar_one() or 0)
