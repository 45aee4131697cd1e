"""Filesystem discovery of Markdown notes.

Pure parsing lives in :mod:`neuron.domain.parser`; this module only
walks directories.
"""

from __future__ import annotations

from pathlib import Path

MARKDOWN_SUFFIX = ".md"


def is_markdown(path: Path) -> bool:
    """True for files whose suffix is ``.md`` in any letter case."""
    return path.suffix.lower() == MARKDOWN_SUFFIX


def find_markdown_files(root: Path) -> list[Path]:
    """Recursively discover every Markdown file under *root*.

    Paths are resolved to absolute form so they serve as stable note keys
    regardless of the caller's working directory. Sorted for a stable
    processing order.

    Raises:
        NotADirectoryError: If *root* is not an existing directory.
    """
    if not root.is_dir():
        msg = f"Not a directory: {root}"
        raise NotADirectoryError(msg)

    results: list[Path] = []
    for path in root.resolve().rglob("*"):
        if path.is_file() and is_markdown(path):
            results.append(path)
    return sorted(results)
