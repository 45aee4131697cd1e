"""Shared Click decorators.

``@with_examples(...)`` adds an eager ``--examples`` flag that prints usage
examples and exits, keeping ``--help`` short.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

import click

F = TypeVar("F", bound=Callable[..., Any])


def with_examples(examples: str) -> Callable[[F], F]:
    """Decorate a command with an ``--examples`` flag showing *examples*."""

    def show(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or ctx.resilient_parsing:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(examples)
        ctx.exit(0)

    return click.option(
        "--examples",
        is_flag=True,
        expose_value=False,
        is_eager=True,
        callback=show,
        help="Show usage examples.",
    )
