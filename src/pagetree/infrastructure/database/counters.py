"""Project id allocation.

Ids come from a counter row rather than ``MAX(id) + 1`` so an id is never
handed out twice, even after a project row is deleted by hand.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select, update

from pagetree.infrastructure.database.schema import id_counters

if TYPE_CHECKING:
    from sqlalchemy import Connection

PROJECT_PREFIX = "PRJ-"


def format_project_id(number: int) -> str:
    """``7`` -> ``PRJ-0007``; widths past four digits are kept as-is."""
    return f"{PROJECT_PREFIX}{number:04d}"


def claim_project_id(conn: Connection) -> str:
    """Bump the project counter on *conn* and return the id it pointed at.

    Runs inside the caller's transaction, so a rolled-back project insert
    gives its id back.
    """
    counter = id_counters.c.next_value
    conn.execute(
        update(id_counters)
        .where(id_counters.c.type_prefix == PROJECT_PREFIX)
        .values(next_value=counter + 1)
    )
    claimed = conn.execute(
        select(counter).where(id_counters.c.type_prefix == PROJECT_PREFIX)
    ).scalar_one()
    return format_project_id(claimed - 1)
