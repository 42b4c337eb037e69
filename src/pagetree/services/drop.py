"""DropService — classify drop events, mutate, commit, persist.

Pipeline per event: CLASSIFY → RESOLVE → MUTATE → COMMIT → PERSIST → RESPOND

Paths are resolved against the editor state's *current* layout at the
moment each event is applied, so a batch never reuses an index captured
before an earlier drop in the same batch. A failing event leaves the
state untouched. Persistence is handed off after the commit and never
rolls it back.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import structlog

from pagetree.domain.errors import LayoutError, StalePathError
from pagetree.domain.events import DraggedExisting, DraggedPalette, DropEvent, DropZone
from pagetree.domain.layout import ComponentInstance, Layout, LeafRef
from pagetree.domain.locator import Location, locate
from pagetree.domain.mutations import (
    insert_new_leaf,
    insert_node,
    move_to_different_parent,
    remove_node,
    reorder_within_parent,
    wrap_for_depth,
)
from pagetree.domain.paths import decode, encode
from pagetree.domain.policy import classify_drop
from pagetree.domain.types import KIND_DEPTH, DropAction, NodeKind
from pagetree.services.base import BaseService
from pagetree.services.ids import IdExhaustedError, IdService
from pagetree.services.result import ServiceError, ServiceResult
from pagetree.services.telemetry import get_current_span, trace_span, traced

if TYPE_CHECKING:
    from pagetree.infrastructure.persistence import SaveOutcome
    from pagetree.infrastructure.workspace import Workspace
    from pagetree.services.state import EditorState

log = structlog.get_logger(__name__)


@dataclass(frozen=True)
class _Mutation:
    action: DropAction
    layout: Layout
    node_id: str
    component: ComponentInstance | None = None


class DropService(BaseService):
    """Applies drag-and-drop events to one project's editor state."""

    def __init__(
        self,
        workspace: Workspace,
        state: EditorState,
        *,
        ids: IdService | None = None,
    ) -> None:
        super().__init__(workspace)
        self._state = state
        editor = workspace.settings.editor
        self._ids = ids or IdService(
            self._taken_ids,
            hex_length=editor.id_hex_length,
            max_attempts=editor.max_id_attempts,
        )
        # Outcomes of inline saves not yet reported by _settle
        self._outcomes: list[SaveOutcome] = []
        self._save_failed = False

    @property
    def state(self) -> EditorState:
        return self._state

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @traced
    def drop(self, event: DropEvent, *, settle: bool = False) -> ServiceResult:
        """Apply a single drop event.

        Args:
            event: The drop to apply.
            settle: Wait for pending saves and re-read the stored project as
                the new baseline before responding.
        """
        op = "drop"
        warnings: list[str] = []

        try:
            mutation = self._mutate(event)
        except LayoutError as exc:
            return self._rejected(op, exc)
        except IdExhaustedError as exc:
            return ServiceResult.failure(op, "ID_EXHAUSTED", str(exc))

        data = self._commit(mutation, warnings)
        if settle:
            data.update(self._settle(warnings))
        data["layout"] = self._state.layout.to_document()
        return ServiceResult(ok=True, op=op, data=data, warnings=warnings)

    @traced
    def drop_batch(self, events: Iterable[DropEvent], *, settle: bool = False) -> ServiceResult:
        """Apply events in order, each against the tree left by the previous one.

        Stops at the first failing event. Events applied before it stay
        committed; the failure reports how many were applied.
        """
        op = "drop_batch"
        warnings: list[str] = []
        applied: list[dict[str, Any]] = []
        failure: ServiceError | None = None

        for index, event in enumerate(events):
            with trace_span(f"event[{index}]"):
                try:
                    mutation = self._mutate(event)
                except (LayoutError, IdExhaustedError) as exc:
                    error = (
                        ServiceError.from_layout_error(exc)
                        if isinstance(exc, LayoutError)
                        else ServiceError(code="ID_EXHAUSTED", message=str(exc))
                    )
                    failure = error.model_copy(
                        update={
                            "message": f"Event {index}: {error.message}",
                            "detail": {**error.detail, "index": index},
                        }
                    )
                    break
                applied.append(self._commit(mutation, warnings))

        data: dict[str, Any] = {
            "project_id": self._state.project_id,
            "applied": applied,
            "count": len(applied),
            "generation": self._state.generation,
        }
        if settle:
            data.update(self._settle(warnings))
        data["layout"] = self._state.layout.to_document()

        if failure is not None:
            return ServiceResult(ok=False, op=op, data=data, warnings=warnings, error=failure)
        return ServiceResult(ok=True, op=op, data=data, warnings=warnings)

    # ------------------------------------------------------------------
    # CLASSIFY → RESOLVE → MUTATE
    # ------------------------------------------------------------------

    def _mutate(self, event: DropEvent) -> _Mutation:
        action = classify_drop(event)
        layout = self._state.layout
        item = event.item

        if action is DropAction.REMOVE:
            assert isinstance(item, DraggedExisting)
            source = self._resolve_source(layout, item)
            return _Mutation(action, remove_node(layout, source.path), source.node.id)

        assert isinstance(event.target, DropZone)
        destination = decode(event.target.path)

        if action is DropAction.INSERT_NEW:
            assert isinstance(item, DraggedPalette)
            return self._insert_palette_item(layout, item, destination)

        assert isinstance(item, DraggedExisting)
        source = self._resolve_source(layout, item)
        if action is DropAction.REORDER:
            new_layout = reorder_within_parent(layout, destination, source.path)
        else:
            payload = wrap_for_depth(source.node, len(destination), self._ids.new_id)
            new_layout = move_to_different_parent(layout, destination, source.path, payload)
        return _Mutation(action, new_layout, source.node.id)

    def _insert_palette_item(
        self,
        layout: Layout,
        item: DraggedPalette,
        destination: tuple[int, ...],
    ) -> _Mutation:
        definition = item.definition
        leaf_id = self._ids.new_id(NodeKind.COMPONENT)
        component = ComponentInstance(
            id=leaf_id,
            type=definition.type,
            name=definition.name,
            config=definition.config,
        )
        if len(destination) == KIND_DEPTH[NodeKind.COMPONENT]:
            new_layout = insert_new_leaf(layout, destination, leaf_id)
        else:
            # Dropped between rows or columns: wrap the new leaf in fresh containers
            payload = wrap_for_depth(LeafRef(id=leaf_id), len(destination), self._ids.new_id)
            new_layout = insert_node(layout, destination, payload)
        return _Mutation(DropAction.INSERT_NEW, new_layout, leaf_id, component)

    @staticmethod
    def _resolve_source(layout: Layout, item: DraggedExisting) -> Location:
        source = locate(layout, item.path)
        if item.node_id is not None and source.node.id != item.node_id:
            msg = (
                f"Path {item.path!r} now holds {source.node.id!r}, "
                f"not the dragged node {item.node_id!r}"
            )
            raise StalePathError(msg, path=item.path, expected=item.node_id, found=source.node.id)
        return source

    # ------------------------------------------------------------------
    # COMMIT → PERSIST
    # ------------------------------------------------------------------

    def _commit(self, mutation: _Mutation, warnings: list[str]) -> dict[str, Any]:
        state = self._state
        generation = state.commit(mutation.layout, mutation.component)
        project_id = state.project_id

        queue = self._workspace.persistence
        queue.save_layout(project_id, mutation.layout, generation)
        if mutation.component is not None:
            queue.save_component(project_id, mutation.component)
        if queue.is_sync:
            outcomes = queue.drain()
            self._outcomes.extend(outcomes)
            if _report_failures(outcomes, warnings):
                self._save_failed = True

        plugins = self._workspace.plugins
        if plugins is not None and not plugins.drop_applied(
            project_id=project_id,
            action=str(mutation.action),
            generation=generation,
            node_id=mutation.node_id,
        ):
            warnings.append("Plugin hook post_drop failed")

        path = mutation.layout.find_path(mutation.node_id)
        data: dict[str, Any] = {
            "project_id": project_id,
            "action": str(mutation.action),
            "node_id": mutation.node_id,
            "path": encode(path) if path is not None else None,
            "generation": generation,
            "node_count": mutation.layout.count_nodes(),
        }
        if mutation.component is not None:
            data["component_id"] = mutation.component.id

        span = get_current_span()
        if span is not None:
            span.record_drop(str(mutation.action), mutation.node_id, generation)
        log.info("drop.applied", **{k: v for k, v in data.items() if v is not None})
        return data

    def _settle(self, warnings: list[str]) -> dict[str, Any]:
        """Wait for saves; if all landed, adopt the stored project as the baseline."""
        drained = self._workspace.persistence.drain()
        if _report_failures(drained, warnings):
            self._save_failed = True
        outcomes, self._outcomes = [*self._outcomes, *drained], []

        # A failed save means the store is behind the local tree; keep the local tree.
        refreshed = False
        if not self._save_failed:
            requested_at = self._state.begin_refresh()
            snapshot = self._workspace.store.load_project(self._state.project_id)
            if snapshot is not None:
                refreshed = self._state.apply_refresh(snapshot, requested_at)
        return {
            "saves": [o.to_dict() for o in outcomes],
            "refreshed": refreshed,
            "generation": self._state.generation,
        }

    def _rejected(self, op: str, exc: LayoutError) -> ServiceResult:
        log.info("drop.rejected", code=exc.code, reason=exc.message)
        return ServiceResult(ok=False, op=op, error=ServiceError.from_layout_error(exc))

    def _taken_ids(self) -> set[str]:
        return (
            self._state.layout.node_ids()
            | set(self._state.components)
            | self._workspace.store.component_ids()
        )


def _report_failures(outcomes: list[SaveOutcome], warnings: list[str]) -> bool:
    """Append a warning per failed save. Returns True if any failed."""
    failed = False
    for outcome in outcomes:
        if outcome.ok:
            continue
        failed = True
        reason = f": {outcome.error}" if outcome.error else ""
        warnings.append(f"{outcome.op} {outcome.status} for {outcome.project_id}{reason}")
    return failed
