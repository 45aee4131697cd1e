"""SQLAlchemy Core table definitions for the neuron database.

One table, ``notes``, keyed by ``source_path``. Timestamps are stored as
UTC ISO-8601 text with a fixed layout so that string comparison in SQL
orders them chronologically.
"""

from __future__ import annotations

from sqlalchemy import REAL, Column, Index, Integer, MetaData, Table, Text

metadata = MetaData()

notes = Table(
    "notes",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("source_path", Text, nullable=False, unique=True),
    Column("title", Text, nullable=False),
    Column("tags", Text, nullable=False, default="[]", server_default="[]"),  # JSON array
    Column("body", Text, nullable=False),
    Column("created_at", Text),
    Column("due_at", Text, nullable=False),
    Column("interval", REAL, nullable=False, default=1.0, server_default="1.0"),
    Column("ease_factor", REAL, nullable=False, default=2.5, server_default="2.5"),
)

Index("ix_notes_due_at", notes.c.due_at)
