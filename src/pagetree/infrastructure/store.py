"""ProjectStore — the persistence and catalog collaborator.

Stores each project's layout as a whole JSON tree document together with
the generation it was produced at, and the project's component instances.

Out-of-order saves are resolved by generation: a layout save only lands if
its generation is newer than the stored one. Components no longer
referenced by any leaf of the saved layout are archived in the same
transaction (logical destruction); referenced ones are restored.
"""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, Literal

from sqlalchemy import and_, insert, select, update

from pagetree.domain.layout import ComponentInstance, Layout
from pagetree.domain.project import ProjectSnapshot
from pagetree.infrastructure.database.counters import claim_project_id
from pagetree.infrastructure.database.schema import components, projects

if TYPE_CHECKING:
    from sqlalchemy import Connection, Row
    from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)

SaveStatus = Literal["saved", "stale", "missing"]


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()


class ProjectStore:
    """Reads and writes projects and components through a SQLAlchemy engine.

    Safe to call from the persistence queue's worker threads: every method
    opens its own connection.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    # ------------------------------------------------------------------
    # Projects
    # ------------------------------------------------------------------

    def create_project(self, name: str, layout: Layout | None = None) -> ProjectSnapshot:
        """Insert a new project and return its snapshot."""
        layout = layout or Layout()
        now = _now_iso()
        with self._engine.begin() as conn:
            project_id = claim_project_id(conn)
            conn.execute(
                insert(projects).values(
                    id=project_id,
                    name=name,
                    layout=layout.to_json(),
                    generation=0,
                    created=now,
                    modified=now,
                )
            )
        logger.debug("Created project %s (%s)", project_id, name)
        return ProjectSnapshot(id=project_id, name=name, layout=layout)

    def list_projects(self) -> list[dict[str, Any]]:
        """Summaries of all projects, oldest first."""
        with self._engine.connect() as conn:
            rows = conn.execute(
                select(
                    projects.c.id,
                    projects.c.name,
                    projects.c.generation,
                    projects.c.modified,
                ).order_by(projects.c.id)
            ).fetchall()
        return [
            {
                "id": row.id,
                "name": row.name,
                "generation": row.generation,
                "modified": row.modified,
            }
            for row in rows
        ]

    def load_project(self, project_id: str) -> ProjectSnapshot | None:
        """Load a project's layout and live components, or None if unknown."""
        with self._engine.connect() as conn:
            row = conn.execute(select(projects).where(projects.c.id == project_id)).first()
            if row is None:
                return None
            component_rows = conn.execute(
                select(components)
                .where(and_(components.c.project_id == project_id, components.c.archived == 0))
                .order_by(components.c.created, components.c.id)
            ).fetchall()

        return ProjectSnapshot(
            id=row.id,
            name=row.name,
            layout=Layout.from_json(row.layout),
            components={r.id: _component_from_row(r) for r in component_rows},
            generation=row.generation,
        )

    def save_layout(self, project_id: str, layout: Layout, generation: int) -> SaveStatus:
        """Replace the stored layout if *generation* is newer than the stored one.

        Returns:
            ``"saved"`` when written, ``"stale"`` when a newer generation is
            already stored, ``"missing"`` when the project does not exist.
        """
        referenced = sorted({leaf.component_id for leaf in layout.leaves()})
        now = _now_iso()
        with self._engine.begin() as conn:
            result = conn.execute(
                update(projects)
                .where(and_(projects.c.id == project_id, projects.c.generation < generation))
                .values(layout=layout.to_json(), generation=generation, modified=now)
            )
            if result.rowcount == 0:
                exists = conn.execute(
                    select(projects.c.id).where(projects.c.id == project_id)
                ).first()
                status: SaveStatus = "stale" if exists is not None else "missing"
                logger.debug("Layout save for %s at %d: %s", project_id, generation, status)
                return status
            self._sync_archived(conn, project_id, referenced, now)

        logger.debug("Saved layout for %s at generation %d", project_id, generation)
        return "saved"

    # ------------------------------------------------------------------
    # Components
    # ------------------------------------------------------------------

    def save_component(self, project_id: str, component: ComponentInstance) -> SaveStatus:
        """Insert or replace a component instance owned by *project_id*.

        The component starts archived unless the stored layout already
        references it, so component and layout saves converge in either order.
        """
        now = _now_iso()
        values = {
            "type": component.type,
            "name": component.name,
            "config": json.dumps(component.config, sort_keys=True),
            "modified": now,
        }
        with self._engine.begin() as conn:
            project_row = conn.execute(
                select(projects.c.layout).where(projects.c.id == project_id)
            ).first()
            if project_row is None:
                return "missing"
            stored = Layout.from_json(project_row.layout)
            referenced = component.id in {leaf.component_id for leaf in stored.leaves()}
            current = conn.execute(
                select(components.c.id).where(components.c.id == component.id)
            ).first()
            if current is None:
                conn.execute(
                    insert(components).values(
                        id=component.id,
                        project_id=project_id,
                        archived=0 if referenced else 1,
                        created=now,
                        **values,
                    )
                )
            else:
                conn.execute(
                    update(components).where(components.c.id == component.id).values(**values)
                )
        return "saved"

    def list_components(
        self,
        project_id: str,
        *,
        include_archived: bool = False,
    ) -> list[dict[str, Any]]:
        """Component rows for a project as plain dicts."""
        stmt = select(components).where(components.c.project_id == project_id)
        if not include_archived:
            stmt = stmt.where(components.c.archived == 0)
        with self._engine.connect() as conn:
            rows = conn.execute(stmt.order_by(components.c.created, components.c.id)).fetchall()
        return [
            {
                **_component_from_row(r).model_dump(),
                "archived": bool(r.archived),
                "created": r.created,
            }
            for r in rows
        ]

    def component_ids(self) -> set[str]:
        """Every component id in the catalog, archived ones included."""
        with self._engine.connect() as conn:
            return set(conn.execute(select(components.c.id)).scalars())

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    @staticmethod
    def _sync_archived(
        conn: Connection,
        project_id: str,
        referenced: list[str],
        now: str,
    ) -> None:
        owned = components.c.project_id == project_id
        conn.execute(
            update(components)
            .where(and_(owned, components.c.archived == 0, components.c.id.not_in(referenced)))
            .values(archived=1, modified=now)
        )
        if referenced:
            conn.execute(
                update(components)
                .where(and_(owned, components.c.archived == 1, components.c.id.in_(referenced)))
                .values(archived=0, modified=now)
            )


def _component_from_row(row: Row[Any]) -> ComponentInstance:
    return ComponentInstance(
        id=row.id,
        type=row.type,
        name=row.name,
        config=json.loads(row.config or "{}"),
    )
