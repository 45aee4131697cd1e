"""Terminal rendering of Markdown notes and review cards."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, Any

from rich.markdown import Markdown
from rich.markup import escape
from rich.rule import Rule
from rich.table import Table
from rich.text import Text

from neuron.domain.errors import RenderError
from neuron.output.console import create_console, get_output, style_for_rating

if TYPE_CHECKING:
    from rich.console import Console

    from neuron.services.result import ServiceResult


def render_markdown(text: str, *, width: int | None = None, no_color: bool = False) -> str:
    """Render Markdown for the terminal.

    Raises:
        RenderError: If rich cannot render *text*. Callers fall back to
            showing the raw text.
    """
    console = create_console(no_color=no_color, width=width)
    try:
        console.print(Markdown(text))
    except Exception as exc:
        raise RenderError(f"Could not render markdown: {exc}") from exc
    return get_output(console)


def render_or_raw(text: str, *, width: int | None = None, no_color: bool = False) -> str:
    """:func:`render_markdown`, falling back to *text* unchanged."""
    try:
        return render_markdown(text, width=width, no_color=no_color)
    except RenderError:
        return text


def render_note_summary(note: dict[str, Any], *, no_color: bool = False) -> str:
    """One-screen summary of a note payload (title, path, tags, schedule)."""
    console = create_console(no_color=no_color)
    _print_note_summary(console, note)
    return get_output(console)


def _print_note_summary(console: Console, note: dict[str, Any]) -> None:
    console.print(Rule(f"[neuron.title]{escape(note['title'])}[/]"))
    console.print(f"[neuron.key]path:[/] [neuron.path]{escape(note['source_path'])}[/]")
    if note.get("tags"):
        console.print(f"[neuron.key]tags:[/] {escape(', '.join(note['tags']))}")
    console.print(
        f"[neuron.key]due:[/] {note['due_at']}  "
        f"[neuron.key]interval:[/] {note['interval']:g}d  "
        f"[neuron.key]ease:[/] {note['ease_factor']:.2f}"
    )


# ── ServiceResult rendering ───────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()
    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)
    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} - {msg}"
    return f"OK: {result.op}"


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="neuron.ok"), Text(f"  {result.op}", style="neuron.op"))


def _render_error(result: ServiceResult, console: Console, *, verbose: bool) -> None:
    msg = result.error.message if result.error else "Unknown error"
    console.print(
        Text("ERROR", style="neuron.error"),
        Text(f"  {result.op}", style="neuron.op"),
        Text(f" - {msg}"),
    )
    if verbose and result.error and result.error.detail:
        for key, value in result.error.detail.items():
            console.print(f"  [neuron.key]{key}:[/] {escape(str(value))}")


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        console.print(f"  [neuron.key]{key}:[/] {escape(str(value))}")


def _render_sync(result: ServiceResult, console: Console, *, verbose: bool) -> None:
    data = result.data
    if verbose:
        for title in data.get("synced_titles", []):
            console.print(f"[neuron.ok]✓[/] Synced: {escape(title)}")
    for path in data.get("removed_paths", []):
        console.print(f"[neuron.error]✗[/] Removed: {escape(Path(path).name)}")
    line = f"Sync complete. Processed {data['synced']} notes."
    if data.get("removed"):
        line += f" Removed {data['removed']} deleted notes."
    if data.get("skipped"):
        line += f" Skipped {data['skipped']} files."
    console.print(line)


def _render_rate(result: ServiceResult, console: Console, *, verbose: bool) -> None:
    data = result.data
    style = style_for_rating(data["rating"])
    console.print(
        f"[{style}]{data['rating'].capitalize()}[/] {escape(data['title'])}: "
        f"scheduled for review in about {data['days']} day(s)."
    )
    if verbose:
        console.print(
            f"  [neuron.key]interval:[/] {data['interval']:g}d  "
            f"[neuron.key]ease:[/] {data['ease_factor']:.2f}  "
            f"[neuron.key]due:[/] {data['due_at']}"
        )


def _render_note(result: ServiceResult, console: Console, *, verbose: bool) -> None:
    _print_note_summary(console, result.data["note"])


def _render_batch(result: ServiceResult, console: Console, *, verbose: bool) -> None:
    table = Table(show_header=True, header_style="neuron.key", box=None)
    table.add_column("Title", style="neuron.title")
    table.add_column("Due")
    table.add_column("Path", style="neuron.path")
    for note in result.data["notes"]:
        table.add_row(escape(note["title"]), note["due_at"], escape(note["source_path"]))
    console.print(f"{result.data['count']} due note(s)")
    if result.data["notes"]:
        console.print(table)


def _render_mix(result: ServiceResult, console: Console, *, verbose: bool) -> None:
    line = f"--- Interleaved session complete! Reviewed {result.data['reviewed']} note(s)"
    if result.data["skipped"]:
        line += f", skipped {len(result.data['skipped'])}"
    console.print(escape(line + " ---"))


def _render_stats(result: ServiceResult, console: Console, *, verbose: bool) -> None:
    console.print(f"Notes: {result.data['total']}  Due now: {result.data['due']}")


_OP_RENDERERS: dict[str, Callable[..., None]] = {
    "sync": _render_sync,
    "rate": _render_rate,
    "find": _render_note,
    "next_due": _render_note,
    "random_note": _render_note,
    "due_batch": _render_batch,
    "stats": _render_stats,
    "mix": _render_mix,
}
