"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``NEURON_*`` prefix, ``__`` for nested sections
  3. TOML file    — ``neuron.toml`` discovered via walk-up
  4. Code defaults — baked into the section models
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from neuron.config.discovery import find_config
from neuron.config.models import ProviderConfig, ReviewConfig, StoreConfig, SyncConfig
from neuron.infrastructure.database import DB_FILENAME

APP_NAME = "neuron"


def load_toml(path: Path) -> dict[str, Any]:
    """Parse *path*, anchoring a relative ``[store] path`` at the file's directory.

    Raises:
        click.ClickException: If the file is not valid TOML.
    """
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {path}: {exc}"
        raise click.ClickException(msg) from exc

    store = data.get("store")
    if isinstance(store, dict) and isinstance(store.get("path"), str):
        db = Path(store["path"]).expanduser()
        if not db.is_absolute():
            store["path"] = str(path.parent / db)
    return data


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Settings layer fed by ``neuron.toml``; empty when no file was found."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data = load_toml(toml_path) if toml_path and toml_path.is_file() else {}

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return self._data.get(field_name), field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


# The TOML path reaches settings_customise_sources through here during from_cli().
_tls = threading.local()


class NeuronSettings(BaseSettings):
    """Settings for the neuron CLI, frozen after construction.

    Attributes:
        config_path: The TOML file that was loaded, if any.
        db_path: Explicit ``--db`` override for the store location.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "NEURON_",
        "env_nested_delimiter": "__",
    }

    config_path: Path | None = None
    db_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    store: StoreConfig = Field(default_factory=StoreConfig)
    provider: ProviderConfig = Field(default_factory=ProviderConfig)
    review: ReviewConfig = Field(default_factory=ReviewConfig)
    sync: SyncConfig = Field(default_factory=SyncConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        start: Path | None = None,
        **cli_flags: Any,
    ) -> NeuronSettings:
        """Construct settings from a CLI invocation.

        Uses the explicit *config_path* if given, otherwise walks up from
        *start* (default: CWD) for ``neuron.toml``. ``None`` flag values
        are dropped so they do not mask env vars or TOML.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if not p.is_file():
                msg = f"Config file not found: {config_path}"
                raise click.ClickException(msg)
            toml_path = p
        else:
            toml_path = find_config(start)

        flags = {k: v for k, v in cli_flags.items() if v is not None}
        _tls.toml_path = toml_path
        try:
            return cls(config_path=toml_path, **flags)
        finally:
            _tls.toml_path = None

    def resolved_db_path(self) -> Path:
        """Where the store lives: ``--db``, then ``[store] path``, then the app dir."""
        if self.db_path is not None:
            return self.db_path.expanduser()
        if self.store.path is not None:
            return self.store.path.expanduser()
        return Path(click.get_app_dir(APP_NAME)) / DB_FILENAME
