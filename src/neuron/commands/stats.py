"""Command: store summary."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from neuron.commands._base import with_examples

if TYPE_CHECKING:
    from neuron.commands._context import AppContext


@click.command()
@with_examples("""\
  neuron stats
  neuron --json stats""")
@click.pass_obj
def stats(app: AppContext) -> None:
    """Show how many notes are stored and how many are due."""
    from neuron.services.review import ReviewService

    app.emit(ReviewService(app.store).stats())
