"""Database engine setup for SQLite with WAL mode.

SQLAlchemy Core (not ORM) is used because neuron is a short-lived CLI
process — no benefit from session management or identity maps.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from neuron.domain.errors import StorageError
from neuron.infrastructure.database.schema import metadata

logger = logging.getLogger(__name__)

DB_FILENAME = "neuron.db"


def create_db_engine(db_path: Path) -> Engine:
    """Create a SQLite engine with WAL mode enabled."""
    engine = create_engine(f"sqlite:///{db_path}", echo=False)

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    return engine


def init_database(db_path: Path) -> Engine:
    """Open (creating if needed) the database at *db_path*.

    Creates parent directories and the ``notes`` table. Idempotent.

    Raises:
        StorageError: If the directory or database cannot be created.
    """
    try:
        db_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise StorageError("init", str(exc), source_path=str(db_path)) from exc

    engine = create_db_engine(db_path)
    try:
        metadata.create_all(engine)
    except SQLAlchemyError as exc:
        engine.dispose()
        raise StorageError("init", str(exc), source_path=str(db_path)) from exc

    logger.debug("Database ready at %s", db_path)
    return engine
