"""Subcommand modules for neuron.

Provides register_commands() which uses deferred imports to keep
``neuron --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from neuron.commands.find import find
    from neuron.commands.rate import rate
    from neuron.commands.review import mix, review
    from neuron.commands.stats import stats
    from neuron.commands.sync import sync

    cli.add_command(sync)
    cli.add_command(review)
    cli.add_command(mix)
    cli.add_command(find)
    cli.add_command(rate)
    cli.add_command(stats)
