"""Command: record a recall rating without an interactive session."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from neuron.commands._base import with_examples

if TYPE_CHECKING:
    from neuron.commands._context import AppContext

_RATINGS = ["1", "2", "3", "again", "good", "easy"]


@click.command()
@with_examples("""\
  neuron rate "binary search" good
  neuron rate graphs.md 3
  neuron --json rate kafka again""")
@click.argument("term")
@click.argument("rating", type=click.Choice(_RATINGS, case_sensitive=False))
@click.pass_obj
def rate(app: AppContext, term: str, rating: str) -> None:
    """Rate the note matching TERM and reschedule it.

    RATING is 1/again (forgot), 2/good (recalled), or 3/easy (effortless).
    """
    from neuron.services.review import ReviewService

    svc = ReviewService(app.store)
    found = svc.find(term)
    if not found.ok:
        app.emit(found)
    app.emit(svc.rate(found.data["note"]["source_path"], rating))
