"""AppContext — shared Click context for all commands.

Created once by the root CLI group and passed to subcommands via
``@click.pass_obj``. Owns the process's single NoteStore and question
provider; both are built on first use so ``--help`` and ``--version``
never touch the database.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from neuron.domain.errors import StorageError
from neuron.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from neuron.config.settings import NeuronSettings
    from neuron.infrastructure.provider import QuestionProvider
    from neuron.infrastructure.store import NoteStore
    from neuron.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy."""

    def __init__(self, settings: NeuronSettings) -> None:
        self.settings = settings
        self._store: NoteStore | None = None
        self._provider: QuestionProvider | None = None

        from neuron.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def store(self) -> NoteStore:
        """The note store. Failing to open it ends the process."""
        if self._store is None:
            from neuron.infrastructure.database import init_database
            from neuron.infrastructure.store import NoteStore

            db_path = self.settings.resolved_db_path()
            try:
                engine = init_database(db_path)
            except StorageError as exc:
                msg = f"Cannot open note store at {db_path}: {exc.reason}"
                raise click.ClickException(msg) from exc
            self._store = NoteStore(engine)
        return self._store

    @property
    def provider(self) -> QuestionProvider:
        if self._provider is None:
            from neuron.infrastructure.provider import OllamaProvider

            cfg = self.settings.provider
            self._provider = OllamaProvider(
                base_url=cfg.base_url, model=cfg.model, timeout=cfg.timeout
            )
        return self._provider

    def close(self) -> None:
        if self._store is not None:
            self._store.close()
            self._store = None

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: writes to stdout; warnings go to stderr.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
