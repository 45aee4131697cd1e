"""ReviewService — pick notes, generate questions, and record ratings.

"Nothing due" and "no match" come back as ``NOT_FOUND`` results; they are
normal outcomes and are only logged at debug level. Provider failures
come back as ``PROVIDER_UNAVAILABLE`` or ``PROVIDER_PROTOCOL_ERROR`` and
abort only the one call.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING, Any

from neuron.domain.errors import (
    NoteNotFoundError,
    ProviderError,
    ProviderUnavailableError,
    StorageError,
)
from neuron.domain.note import Note, utc_now
from neuron.domain.srs import apply_rating, days_until
from neuron.domain.types import QuestionStyle, Rating
from neuron.services.base import BaseService
from neuron.services.result import ServiceResult

if TYPE_CHECKING:
    from neuron.infrastructure.provider import QuestionProvider
    from neuron.infrastructure.store import NoteStore

logger = logging.getLogger(__name__)


def note_payload(note: Note) -> dict[str, Any]:
    """JSON-safe representation of a note for result data."""
    return note.model_dump(mode="json")


class ReviewService(BaseService):
    """Drives the scheduler against the store and the question provider."""

    def __init__(self, store: NoteStore, provider: QuestionProvider | None = None) -> None:
        super().__init__(store)
        self._provider = provider

    # ------------------------------------------------------------------
    # Note selection
    # ------------------------------------------------------------------

    def _single(self, op: str, fetch: Any) -> ServiceResult:
        try:
            note = fetch()
        except NoteNotFoundError as exc:
            logger.debug("%s: %s", op, exc)
            return ServiceResult.failure(op, "NOT_FOUND", str(exc))
        except StorageError as exc:
            return ServiceResult.failure(op, "STORAGE_ERROR", str(exc))
        return ServiceResult(ok=True, op=op, data={"note": note_payload(note)})

    def next_due(self, now: datetime | None = None) -> ServiceResult:
        """The most overdue note."""
        return self._single("next_due", lambda: self._store.get_due(now or utc_now()))

    def random_note(self) -> ServiceResult:
        """Any note, due or not."""
        return self._single("random_note", self._store.get_any)

    def find(self, term: str) -> ServiceResult:
        """A note whose title or path contains *term*.

        When several notes match, which one is returned is unspecified.
        """
        return self._single("find", lambda: self._store.find_by_title_or_path(term))

    def due_batch(self, limit: int, now: datetime | None = None) -> ServiceResult:
        """Up to *limit* due notes in random order, for interleaved review."""
        op = "due_batch"
        try:
            notes = self._store.get_due_batch(now or utc_now(), limit)
        except StorageError as exc:
            return ServiceResult.failure(op, "STORAGE_ERROR", str(exc))
        return ServiceResult(
            ok=True,
            op=op,
            data={"count": len(notes), "notes": [note_payload(n) for n in notes]},
        )

    def stats(self, now: datetime | None = None) -> ServiceResult:
        op = "stats"
        try:
            total = self._store.count()
            due = self._store.count_due(now or utc_now())
        except StorageError as exc:
            return ServiceResult.failure(op, "STORAGE_ERROR", str(exc))
        return ServiceResult(ok=True, op=op, data={"total": total, "due": due})

    # ------------------------------------------------------------------
    # Scheduling
    # ------------------------------------------------------------------

    def rate(
        self,
        source_path: str,
        rating: Rating | int | str,
        now: datetime | None = None,
    ) -> ServiceResult:
        """Apply *rating* to the stored note and persist its new schedule."""
        op = "rate"
        try:
            parsed = Rating.parse(rating)
        except ValueError as exc:
            return ServiceResult.failure(op, "INVALID_RATING", str(exc))

        now = now or utc_now()
        try:
            note = self._store.get(source_path)
            updated = apply_rating(note, parsed, now)
            self._store.update_schedule(updated)
        except NoteNotFoundError as exc:
            return ServiceResult.failure(op, "NOT_FOUND", str(exc), source_path=source_path)
        except StorageError as exc:
            return ServiceResult.failure(op, "STORAGE_ERROR", str(exc), source_path=source_path)

        logger.debug(
            "Rated %s %s: interval %.1f -> %.1f, ease %.2f -> %.2f",
            source_path,
            parsed.name,
            note.interval,
            updated.interval,
            note.ease_factor,
            updated.ease_factor,
        )
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "source_path": updated.source_path,
                "title": updated.title,
                "rating": parsed.name.lower(),
                "interval": updated.interval,
                "ease_factor": round(updated.ease_factor, 4),
                "due_at": updated.due_at.isoformat(),
                "days": days_until(updated.due_at, now),
            },
        )

    # ------------------------------------------------------------------
    # Question generation
    # ------------------------------------------------------------------

    def _ask(self, op: str, call: Any) -> ServiceResult:
        if self._provider is None:
            return ServiceResult.failure(
                op, "PROVIDER_UNAVAILABLE", "No question provider is configured"
            )
        try:
            text = call(self._provider)
        except ProviderUnavailableError as exc:
            logger.warning("%s: %s", op, exc)
            return ServiceResult.failure(op, "PROVIDER_UNAVAILABLE", str(exc))
        except ProviderError as exc:
            logger.warning("%s: %s", op, exc)
            return ServiceResult.failure(op, "PROVIDER_PROTOCOL_ERROR", str(exc))
        return ServiceResult(ok=True, op=op, data={"text": text})

    def generate_question(
        self,
        note: Note | str,
        style: QuestionStyle | str = QuestionStyle.MIXED,
    ) -> ServiceResult:
        """Ask the provider for one review question about *note*.

        *note* may be a stored note's ``source_path`` instead of a Note.
        """
        op = "generate_question"
        try:
            resolved = QuestionStyle(style)
        except ValueError:
            choices = ", ".join(s.value for s in QuestionStyle)
            return ServiceResult.failure(
                op,
                "INVALID_STYLE",
                f"Unknown question style {style!r}; expected one of: {choices}",
            )
        if isinstance(note, str):
            try:
                note = self._store.get(note)
            except NoteNotFoundError as exc:
                return ServiceResult.failure(op, "NOT_FOUND", str(exc))
            except StorageError as exc:
                return ServiceResult.failure(op, "STORAGE_ERROR", str(exc))
        body = note.body
        return self._ask(op, lambda p: p.generate_question(body, resolved))

    def generate_answer(self, question: str, note: Note) -> ServiceResult:
        """Ask the provider for a concise answer grounded in *note*."""
        return self._ask("generate_answer", lambda p: p.generate_answer(question, note.body))
