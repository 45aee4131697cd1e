"""Entry point: the `neuron` group, its global flags, and the shared AppContext."""

from __future__ import annotations

from pathlib import Path

import click

from neuron import __version__
from neuron.commands import register_commands
from neuron.commands._context import AppContext
from neuron.config.settings import NeuronSettings


@click.group(
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.version_option(version=__version__, prog_name="neuron")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug logging.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option(
    "--db",
    "db_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Override the note database location.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    db_path: Path | None,
) -> None:
    """neuron — spaced-repetition review for your Markdown notes.

    Start with `neuron sync DIR` to import a notes folder, then run
    `neuron review` (one card) or `neuron mix` (a short interleaved session)
    each day. Question generation needs a local Ollama server.
    """
    settings = NeuronSettings.from_cli(
        config_path=config_path,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
        db_path=db_path,
    )
    app = AppContext(settings)
    ctx.obj = app
    ctx.call_on_close(app.close)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
