"""Command: import and reconcile a directory of Markdown notes."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from neuron.commands._base import with_examples

if TYPE_CHECKING:
    from neuron.commands._context import AppContext


@click.command()
@with_examples("""\
  neuron sync ~/notes
  neuron sync ~/notes --no-prune
  neuron -v sync ./zettelkasten
  neuron --json sync ~/notes""")
@click.argument(
    "directory",
    type=click.Path(exists=True, file_okay=False, dir_okay=True, path_type=Path),
)
@click.option(
    "--prune/--no-prune",
    default=None,
    help="Remove stored notes whose file no longer exists (default from config: on).",
)
@click.pass_obj
def sync(app: AppContext, directory: Path, prune: bool | None) -> None:
    """Import and sync notes from DIRECTORY.

    New files are added, changed files are updated, and (with --prune)
    notes whose file has been deleted are removed. Review schedules of
    existing notes are kept.
    """
    from neuron.services.sync import SyncService

    if prune is None:
        prune = app.settings.sync.prune
    app.emit(SyncService(app.store).sync(directory, prune=prune))
