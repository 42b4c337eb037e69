"""SQLAlchemy Core table definitions for the pagetree database.

Layouts are stored whole, as a JSON tree document, never as deltas.
"""

from __future__ import annotations

from sqlalchemy import (
    Column,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    Table,
    Text,
)

metadata = MetaData()

projects = Table(
    "projects",
    metadata,
    Column("id", Text, primary_key=True),
    Column("name", Text, nullable=False),
    Column("layout", Text, nullable=False, default="[]", server_default="[]"),  # JSON
    # Generation of the stored layout; saves carrying an older one are ignored
    Column("generation", Integer, nullable=False, default=0, server_default="0"),
    Column("created", Text, nullable=False),
    Column("modified", Text, nullable=False),
)

components = Table(
    "components",
    metadata,
    Column("id", Text, primary_key=True),
    Column("project_id", Text, ForeignKey("projects.id"), nullable=False),
    Column("type", Text, nullable=False),
    Column("name", Text, nullable=False, default="", server_default=""),
    Column("config", Text, nullable=False, default="{}", server_default="{}"),  # JSON
    # Set once no leaf references the component any more
    Column("archived", Integer, default=0, server_default="0"),
    Column("created", Text, nullable=False),
    Column("modified", Text, nullable=False),
)

Index("ix_components_project", components.c.project_id)
Index("ix_components_archived", components.c.archived)

id_counters = Table(
    "id_counters",
    metadata,
    Column("type_prefix", Text, primary_key=True),
    Column("next_value", Integer, nullable=False, default=1, server_default="1"),
)
