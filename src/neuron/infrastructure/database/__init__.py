"""SQLite database engine and schema via SQLAlchemy Core."""

from neuron.infrastructure.database.engine import DB_FILENAME, create_db_engine, init_database
from neuron.infrastructure.database.schema import metadata, notes

__all__ = [
    "DB_FILENAME",
    "create_db_engine",
    "init_database",
    "metadata",
    "notes",
]
