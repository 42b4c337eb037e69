"""Project aggregate as loaded from the catalog."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from pagetree.domain.layout import ComponentInstance, Layout


class ProjectSnapshot(BaseModel):
    """A project's layout and components at one stored generation.

    Attributes:
        id: Project id (``PRJ-0001``).
        name: Display name.
        layout: The stored layout tree.
        components: Live (non-archived) components keyed by id.
        generation: Generation of the stored layout; grows with every save.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    layout: Layout = Field(default_factory=Layout)
    components: dict[str, ComponentInstance] = Field(default_factory=dict)
    generation: int = 0
