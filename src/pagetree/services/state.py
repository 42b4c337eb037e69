"""EditorState — the authoritative local copy of one project.

Holds the current layout, the live components, and a generation counter
that grows with every committed drop. Background refreshes from the store
are reconciled against the generation:

- :meth:`EditorState.begin_refresh` records the generation a refresh was
  requested at.
- :meth:`EditorState.apply_refresh` accepts the loaded snapshot only if no
  local drop was committed since; otherwise the snapshot is discarded so
  unsaved local edits are never clobbered.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pagetree.domain.layout import ComponentInstance, Layout
    from pagetree.domain.project import ProjectSnapshot


@dataclass
class EditorState:
    """Current layout and components of one project, plus its generation."""

    project_id: str
    name: str
    layout: Layout
    components: dict[str, ComponentInstance] = field(default_factory=dict)
    generation: int = 0

    @classmethod
    def from_snapshot(cls, snapshot: ProjectSnapshot) -> EditorState:
        return cls(
            project_id=snapshot.id,
            name=snapshot.name,
            layout=snapshot.layout,
            components=dict(snapshot.components),
            generation=snapshot.generation,
        )

    def commit(self, layout: Layout, component: ComponentInstance | None = None) -> int:
        """Replace the layout wholesale and return the new generation."""
        self.layout = layout
        if component is not None:
            self.components[component.id] = component
        referenced = {leaf.component_id for leaf in layout.leaves()}
        self.components = {k: v for k, v in self.components.items() if k in referenced}
        self.generation += 1
        return self.generation

    def begin_refresh(self) -> int:
        """Mark the start of a refresh; pass the result to :meth:`apply_refresh`."""
        return self.generation

    def apply_refresh(self, snapshot: ProjectSnapshot, requested_at: int) -> bool:
        """Adopt *snapshot* as the new baseline unless local edits happened since.

        Returns True if the snapshot was applied.
        """
        if snapshot.id != self.project_id:
            msg = f"Snapshot for {snapshot.id!r} cannot refresh {self.project_id!r}"
            raise ValueError(msg)
        if requested_at != self.generation:
            return False
        self.name = snapshot.name
        self.layout = snapshot.layout
        self.components = dict(snapshot.components)
        # Never move backwards: a later commit must still outrank the store.
        self.generation = max(self.generation, snapshot.generation)
        return True
