"""Rich consoles that render into strings.

Renderers print to a Console backed by ``StringIO`` and hand the text back
to the command layer, which decides between stdout and stderr. Inside
CliRunner or a pipe Rich drops colour codes on its own.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

DEFAULT_WIDTH = 100

NEURON_THEME = Theme(
    {
        "neuron.ok": "bold green",
        "neuron.error": "bold red",
        "neuron.op": "bold cyan",
        "neuron.key": "dim",
        "neuron.path": "dim",
        "neuron.title": "bold",
        "neuron.rating.again": "red",
        "neuron.rating.good": "yellow",
        "neuron.rating.easy": "green",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """A theme-aware Console writing into a fresh buffer."""
    return Console(
        file=StringIO(),
        theme=NEURON_THEME,
        no_color=no_color,
        highlight=False,
        width=width or DEFAULT_WIDTH,
    )


def get_output(console: Console) -> str:
    """Everything printed to *console* so far."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_rating(rating: str) -> str:
    """Theme style for a rating name (``again``/``good``/``easy``)."""
    return f"neuron.rating.{rating.lower()}"
