"""SQLite storage for projects and components (SQLAlchemy Core)."""

from pagetree.infrastructure.database.counters import claim_project_id
from pagetree.infrastructure.database.engine import create_db_engine, init_database
from pagetree.infrastructure.database.schema import components, metadata, projects

__all__ = [
    "claim_project_id",
    "components",
    "create_db_engine",
    "init_database",
    "metadata",
    "projects",
]
