"""Locate ``neuron.toml``.

``NEURON_CONFIG`` names the file outright. Otherwise the nearest
``neuron.toml`` in the start directory or one of its ancestors is used,
so a notes repository can carry its own settings.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "neuron.toml"
CONFIG_ENV_VAR = "NEURON_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file in effect, or None.

    A ``NEURON_CONFIG`` that points at a missing file disables the
    walk-up rather than silently falling back to another file.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        path = Path(override)
        return path if path.is_file() else None

    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None
