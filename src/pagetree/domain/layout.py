"""Layout tree models.

A :class:`Layout` is an ordered tuple of :class:`Row` nodes. Rows hold
:class:`Column` nodes, columns hold :class:`LeafRef` nodes that reference
externally owned :class:`ComponentInstance` records.

INVARIANT: Every model is frozen. Mutations build new values and share
untouched subtrees with the input tree.
"""

from __future__ import annotations

import json
from collections.abc import Iterator
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from pagetree.domain.types import NodeKind


class LayoutNode(BaseModel):
    """Common base for all tree nodes."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(min_length=1)

    @property
    def kind(self) -> NodeKind:
        return NodeKind(self.type)  # type: ignore[attr-defined]

    def walk(self) -> Iterator[LayoutNode]:
        """Yield this node and all of its descendants, depth first."""
        yield self
        for child in child_nodes(self):
            yield from child.walk()


class LeafRef(LayoutNode):
    """Leaf pointing at a component instance."""

    type: Literal["component"] = "component"
    component_id: str = Field(min_length=1, alias="componentId")

    @model_validator(mode="before")
    @classmethod
    def _default_component_id(cls, data: Any) -> Any:
        # The editor uses the leaf id as the component id unless told otherwise.
        if isinstance(data, dict) and not (data.get("componentId") or data.get("component_id")):
            return {**data, "componentId": data.get("id", "")}
        return data


class Column(LayoutNode):
    type: Literal["column"] = "column"
    children: tuple[LeafRef, ...] = ()


class Row(LayoutNode):
    type: Literal["row"] = "row"
    children: tuple[Column, ...] = ()


class Layout(BaseModel):
    """The ordered root rows of one project."""

    model_config = ConfigDict(frozen=True)

    rows: tuple[Row, ...] = ()

    @model_validator(mode="after")
    def _unique_ids(self) -> Layout:
        seen: set[str] = set()
        for node in self.walk():
            if node.id in seen:
                msg = f"Duplicate node id in layout: {node.id!r}"
                raise ValueError(msg)
            seen.add(node.id)
        return self

    def walk(self) -> Iterator[LayoutNode]:
        for row in self.rows:
            yield from row.walk()

    def node_ids(self) -> set[str]:
        return {node.id for node in self.walk()}

    def count_nodes(self) -> int:
        return sum(1 for _ in self.walk())

    def leaves(self) -> list[LeafRef]:
        return [node for node in self.walk() if isinstance(node, LeafRef)]

    def find_path(self, node_id: str) -> tuple[int, ...] | None:
        """Return the current path of *node_id*, or None if absent."""

        def search(children: tuple[LayoutNode, ...], prefix: tuple[int, ...]) -> Any:
            for index, child in enumerate(children):
                here = (*prefix, index)
                if child.id == node_id:
                    return here
                found = search(child_nodes(child), here)
                if found is not None:
                    return found
            return None

        return search(self.rows, ())

    # ------------------------------------------------------------------
    # Tree document (de)serialization
    # ------------------------------------------------------------------

    def to_document(self) -> list[dict[str, Any]]:
        """Serialize as a list of nested records (``componentId`` for leaves)."""
        return [row.model_dump(mode="json", by_alias=True) for row in self.rows]

    def to_json(self) -> str:
        return json.dumps(self.to_document(), separators=(",", ":"))

    @classmethod
    def from_document(cls, document: list[dict[str, Any]] | None) -> Layout:
        return cls.model_validate({"rows": document or []})

    @classmethod
    def from_json(cls, raw: str | None) -> Layout:
        return cls.from_document(json.loads(raw) if raw else [])


def child_nodes(node: LayoutNode | Layout) -> tuple[LayoutNode, ...]:
    """Ordered children of *node*; rows for the layout root, none for leaves."""
    if isinstance(node, Layout):
        return node.rows
    if isinstance(node, Row | Column):
        return node.children
    return ()


class ComponentInstance(BaseModel):
    """Opaque component record owned by the catalog."""

    model_config = ConfigDict(frozen=True)

    id: str
    type: str
    name: str = ""
    config: dict[str, Any] = Field(default_factory=dict)
