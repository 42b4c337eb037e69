"""ProjectService — create, list, load, and refresh projects."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pagetree.services.base import BaseService
from pagetree.services.result import ServiceResult
from pagetree.services.state import EditorState
from pagetree.services.telemetry import traced

if TYPE_CHECKING:
    from pagetree.domain.project import ProjectSnapshot


class ProjectService(BaseService):
    """Catalog-facing operations on projects."""

    @traced
    def create(self, name: str) -> ServiceResult:
        op = "create_project"
        name = name.strip()
        if not name:
            return ServiceResult.failure(op, "INVALID_NAME", "Project name must not be blank")
        snapshot = self._workspace.store.create_project(name)
        return ServiceResult(
            ok=True,
            op=op,
            data={"id": snapshot.id, "name": snapshot.name, "generation": snapshot.generation},
        )

    @traced
    def list_projects(self) -> ServiceResult:
        items = self._workspace.store.list_projects()
        data = {"items": items, "count": len(items)}
        return ServiceResult(ok=True, op="list_projects", data=data)

    @traced
    def show(self, project_id: str) -> ServiceResult:
        """Full layout document and live components of a project."""
        op = "show_project"
        snapshot = self._workspace.store.load_project(project_id)
        if snapshot is None:
            return not_found(op, project_id)
        return ServiceResult(ok=True, op=op, data=_snapshot_data(snapshot))

    @traced
    def list_components(self, project_id: str, *, include_archived: bool = False) -> ServiceResult:
        op = "list_components"
        store = self._workspace.store
        if store.load_project(project_id) is None:
            return not_found(op, project_id)
        items = store.list_components(project_id, include_archived=include_archived)
        return ServiceResult(
            ok=True,
            op=op,
            data={"project_id": project_id, "items": items, "count": len(items)},
        )

    def load_state(self, project_id: str) -> EditorState | None:
        """Open an editor state on the stored project, or None if unknown."""
        snapshot = self._workspace.store.load_project(project_id)
        if snapshot is None:
            return None
        return EditorState.from_snapshot(snapshot)

    @traced
    def refresh(self, state: EditorState) -> ServiceResult:
        """Re-read the stored project into *state* unless it has local edits since.

        The snapshot is discarded when a drop was committed while it loaded.
        """
        op = "refresh"
        requested_at = state.begin_refresh()
        snapshot = self._workspace.store.load_project(state.project_id)
        if snapshot is None:
            return not_found(op, state.project_id)
        applied = state.apply_refresh(snapshot, requested_at)
        warnings = [] if applied else ["Local edits are newer than the stored project"]
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "project_id": state.project_id,
                "applied": applied,
                "generation": state.generation,
            },
            warnings=warnings,
        )


def not_found(op: str, project_id: str) -> ServiceResult:
    return ServiceResult.failure(op, "NOT_FOUND", f"No project found with ID: {project_id}")


def _snapshot_data(snapshot: ProjectSnapshot) -> dict[str, object]:
    return {
        "id": snapshot.id,
        "name": snapshot.name,
        "generation": snapshot.generation,
        "node_count": snapshot.layout.count_nodes(),
        "layout": snapshot.layout.to_document(),
        "components": [c.model_dump() for c in snapshot.components.values()],
    }
