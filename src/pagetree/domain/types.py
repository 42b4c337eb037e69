"""Node kinds, drop actions, and the fixed nesting table.

The layout tree has exactly two container levels below the root:
rows hold columns, columns hold components.
"""

from __future__ import annotations

from enum import StrEnum


class NodeKind(StrEnum):
    """Kinds of layout nodes. Values match the ``type`` tag in documents."""

    ROW = "row"
    COLUMN = "column"
    COMPONENT = "component"


class DropAction(StrEnum):
    """What a drop event resolves to."""

    INSERT_NEW = "insert_new"
    REORDER = "reorder"
    MOVE = "move"
    REMOVE = "remove"


# Path length of a node of each kind.
KIND_DEPTH: dict[NodeKind, int] = {
    NodeKind.ROW: 1,
    NodeKind.COLUMN: 2,
    NodeKind.COMPONENT: 3,
}

# Kind of child accepted by a container found at the given depth (0 = root).
CHILD_KIND: dict[int, NodeKind] = {
    0: NodeKind.ROW,
    1: NodeKind.COLUMN,
    2: NodeKind.COMPONENT,
}

MAX_DEPTH = KIND_DEPTH[NodeKind.COMPONENT]
