"""Command: look up a note by title or path fragment."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from neuron.commands._base import with_examples

if TYPE_CHECKING:
    from neuron.commands._context import AppContext


@click.command()
@with_examples("""\
  neuron find "binary search"
  neuron find graphs.md --render
  neuron --json find kafka""")
@click.argument("term")
@click.option("--render", is_flag=True, help="Also print the rendered note body.")
@click.pass_obj
def find(app: AppContext, term: str, render: bool) -> None:
    """Show the note whose title or path contains TERM.

    Matching is case-insensitive. If several notes match, one of them is
    shown; use a more specific TERM to pick another.
    """
    from neuron.output.renderers import render_or_raw
    from neuron.services.review import ReviewService

    result = ReviewService(app.store).find(term)
    app.emit(result)
    if render and not app.settings.json_output:
        click.echo(render_or_raw(result.data["note"]["body"]))
