"""Commands: interactive review sessions (single card and interleaved mix).

A card is: generate a question, wait for the user, generate a concise
answer, optionally show the full rendered note, then ask for a 1-3
rating and reschedule the note.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from neuron.commands._base import with_examples
from neuron.domain.note import Note
from neuron.domain.types import QuestionStyle, Rating
from neuron.output.renderers import render_or_raw
from neuron.services.result import ServiceResult
from neuron.services.review import ReviewService

if TYPE_CHECKING:
    from neuron.commands._context import AppContext

_RULE = "-" * 59
_STYLE_CHOICE = click.Choice([s.value for s in QuestionStyle])

_question_type_option = click.option(
    "--question-type",
    type=_STYLE_CHOICE,
    default=None,
    help="Kind of question to generate (default from config: mixed).",
)
_brief_option = click.option(
    "--brief/--no-brief",
    default=None,
    help="Skip the offer to show the full note; only show Q&A.",
)


def _resolve(app: AppContext, question_type: str | None, brief: bool | None) -> tuple[str, bool]:
    cfg = app.settings.review
    style = question_type or cfg.question_type.value
    return style, cfg.brief if brief is None else brief


def run_card(
    svc: ReviewService,
    note: Note,
    *,
    style: str,
    brief: bool,
) -> ServiceResult:
    """Run one question/answer/rating round for *note*.

    Returns the provider failure if question or answer generation fails,
    otherwise the result of rating the note.
    """
    click.echo(f"\nGenerating {style} question...")
    question = svc.generate_question(note, style)
    if not question.ok:
        return question
    question_text = question.data["text"]

    click.echo(f"\n{click.style('Question:', bold=True)} {question_text}")
    click.prompt(
        "   (Press Enter to reveal concise answer)",
        default="",
        show_default=False,
        prompt_suffix="",
    )

    click.echo("\nGenerating concise answer...")
    answer = svc.generate_answer(question_text, note)
    if not answer.ok:
        return answer

    click.echo(f"\n{click.style('Concise Answer:', bold=True)}")
    click.echo(_RULE)
    click.echo(answer.data["text"])
    click.echo(_RULE)

    if not brief and click.confirm("\nSee the full note for additional context?", default=False):
        click.echo(f"\n{click.style('Full Note:', bold=True)}")
        click.echo(_RULE)
        click.echo(render_or_raw(note.body))
        click.echo(_RULE)

    rating = click.prompt(
        "\nHow well did you recall this? (1=Again, 2=Good, 3=Easy)",
        type=click.IntRange(Rating.AGAIN, Rating.EASY),
    )
    return svc.rate(note.source_path, rating)


@click.command()
@with_examples("""\
  neuron review
  neuron review --any
  neuron review --brief --question-type conceptual""")
@click.option("--any", "any_note", is_flag=True, help="Review any note, even if it's not due.")
@_brief_option
@_question_type_option
@click.pass_obj
def review(
    app: AppContext,
    any_note: bool,
    brief: bool | None,
    question_type: str | None,
) -> None:
    """Review the most overdue note (or a random one with --any)."""
    style, brief = _resolve(app, question_type, brief)
    svc = ReviewService(app.store, app.provider)

    picked = svc.random_note() if any_note else svc.next_due()
    if picked.error_code == "NOT_FOUND":
        if any_note:
            click.echo("You have no notes in your database to review!")
        else:
            click.echo("No notes are due for review. Great job!")
        return
    if not picked.ok:
        app.emit(picked)

    note = Note.model_validate(picked.data["note"])
    click.echo(f"Reviewing: {note.title}")
    app.emit(run_card(svc, note, style=style, brief=brief))


@click.command()
@with_examples("""\
  neuron mix
  neuron mix --limit 5 --brief
  neuron mix --question-type application""")
@click.option("--limit", type=click.IntRange(min=1), default=None, help="Notes per session.")
@_brief_option
@_question_type_option
@click.pass_obj
def mix(
    app: AppContext,
    limit: int | None,
    brief: bool | None,
    question_type: str | None,
) -> None:
    """Interleaved review of a few randomly chosen due notes."""
    style, brief = _resolve(app, question_type, brief)
    limit = limit or app.settings.review.mix_limit
    svc = ReviewService(app.store, app.provider)

    batch = svc.due_batch(limit)
    if not batch.ok:
        app.emit(batch)
    if batch.data["count"] == 0:
        click.echo("No notes are due for review. Great job!")
        return

    notes = [Note.model_validate(n) for n in batch.data["notes"]]
    click.echo(f"--- Starting Interleaved Review Session ({len(notes)} notes) ---")

    reviewed: list[dict[str, object]] = []
    skipped: list[str] = []
    for i, note in enumerate(notes, start=1):
        click.echo(f"\n--- Card {i} of {len(notes)} ---")
        outcome = run_card(svc, note, style=style, brief=brief)
        if outcome.op == "rate" and outcome.ok:
            click.echo(f"Scheduled for review in about {outcome.data['days']} day(s).")
            reviewed.append(outcome.data)
            continue
        if outcome.op == "rate":
            # The store failed underneath us; stop the session.
            app.emit(outcome)
        message = outcome.error.message if outcome.error else "unknown error"
        click.echo(f"Error on '{note.title}': {message}. Skipping.", err=True)
        skipped.append(note.title)

    app.emit(
        ServiceResult(
            ok=True,
            op="mix",
            data={"reviewed": len(reviewed), "skipped": skipped, "results": reviewed},
        )
    )
