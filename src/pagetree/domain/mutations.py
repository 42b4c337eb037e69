"""Pure layout mutations.

Every operation takes the current :class:`Layout` and returns a new one.
Untouched subtrees are shared with the input; only the ancestors of the
modified container are rebuilt. Any :class:`LayoutError` aborts the whole
operation, so a caller either gets a consistent new tree or keeps the old one.

INVARIANT: Rows hold only columns and columns hold only components.
"""

from __future__ import annotations

from collections.abc import Callable

from pagetree.domain.errors import (
    DepthMismatchError,
    DuplicateNodeIdError,
    KindMismatchError,
    LayoutError,
    NotSiblingsError,
)
from pagetree.domain.layout import Column, Layout, LayoutNode, LeafRef, Row, child_nodes
from pagetree.domain.locator import locate, locate_slot
from pagetree.domain.paths import PathLike, decode, encode, same_parent
from pagetree.domain.types import KIND_DEPTH, NodeKind

NewId = Callable[[NodeKind], str]

_Children = tuple[LayoutNode, ...]


# ---------------------------------------------------------------------------
# Public operations
# ---------------------------------------------------------------------------


def reorder_within_parent(
    layout: Layout,
    destination_path: PathLike,
    source_path: PathLike,
) -> Layout:
    """Move a node to another position among its own siblings.

    The node is taken out of the sibling sequence and re-inserted at the
    destination index of the shortened sequence, so the destination index is
    the node's index after the move (a trailing drop zone appends). Dropping
    a node on its own position yields the input tree.

    Raises:
        NotSiblingsError: If the paths do not share a parent.
    """
    if not same_parent(destination_path, source_path):
        msg = (
            f"Cannot reorder {_show(source_path)!r} to {_show(destination_path)!r}: "
            "paths do not share a parent"
        )
        raise NotSiblingsError(msg, source=_show(source_path), destination=_show(destination_path))

    source = locate(layout, source_path)
    slot = locate_slot(layout, destination_path)

    target = min(slot.index, len(child_nodes(slot.container)) - 1)
    if target == source.index:
        return layout

    def reorder(children: _Children) -> _Children:
        remaining = children[: source.index] + children[source.index + 1 :]
        return remaining[:target] + (source.node,) + remaining[target:]

    return _update_children(layout, slot.container_path, reorder)


def move_to_different_parent(
    layout: Layout,
    destination_path: PathLike,
    source_path: PathLike,
    payload: LayoutNode,
) -> Layout:
    """Detach the node at *source_path* and insert *payload* at *destination_path*.

    *payload* is either the moved node itself or a container wrapping it
    (see :func:`wrap_for_depth`).

    Raises:
        KindMismatchError: If *payload* cannot live in the destination container.
        LayoutError: ``PAYLOAD_MISMATCH`` if *payload* does not carry the moved node.
    """
    source = locate(layout, source_path)
    if source.node.id not in {node.id for node in payload.walk()}:
        msg = f"Payload {payload.id!r} does not carry moved node {source.node.id!r}"
        raise LayoutError(msg, code="PAYLOAD_MISMATCH", payload=payload.id, node=source.node.id)

    # Validate the destination against the input tree so errors never
    # depend on the intermediate state.
    _check_slot(layout, destination_path, payload)

    detached = remove_node(layout, source.path)
    return _insert(detached, destination_path, payload)


def insert_new_leaf(
    layout: Layout,
    destination_path: PathLike,
    new_node_id: str,
    component_id: str | None = None,
) -> Layout:
    """Insert a fresh :class:`LeafRef` into the column at ``parent(destination_path)``.

    Raises:
        DepthMismatchError: If *destination_path* does not address a component slot.
        DuplicateNodeIdError: If *new_node_id* is already in the tree.
    """
    indices = decode(destination_path)
    if len(indices) != KIND_DEPTH[NodeKind.COMPONENT]:
        msg = f"Path {_show(destination_path)!r} is not a component drop zone"
        raise DepthMismatchError(msg, path=_show(destination_path))
    leaf = LeafRef(id=new_node_id, component_id=component_id or new_node_id)
    return insert_node(layout, indices, leaf)


def insert_node(layout: Layout, destination_path: PathLike, node: LayoutNode) -> Layout:
    """Insert a new subtree at *destination_path*.

    Raises:
        KindMismatchError: If *node* cannot live in the destination container.
        DuplicateNodeIdError: If any id in *node* already exists in the tree.
    """
    existing = layout.node_ids()
    clashes = sorted(n.id for n in node.walk() if n.id in existing)
    if clashes:
        msg = f"Node id(s) already present in layout: {', '.join(clashes)}"
        raise DuplicateNodeIdError(msg, ids=clashes)
    _check_slot(layout, destination_path, node)
    return _insert(layout, destination_path, node)


def remove_node(layout: Layout, target_path: PathLike) -> Layout:
    """Delete the node at *target_path* together with its descendants.

    Siblings are untouched; a container left empty stays in the tree.
    """
    target = locate(layout, target_path)

    def remove(children: _Children) -> _Children:
        return children[: target.index] + children[target.index + 1 :]

    return _update_children(layout, target.path[:-1], remove)


def wrap_for_depth(node: LayoutNode, depth: int, new_id: NewId) -> LayoutNode:
    """Wrap *node* in fresh containers so it can be dropped at *depth*.

    A component dropped between columns becomes a one-component column; a
    component or column dropped between rows becomes a new row. Nodes that
    already fit, or that cannot be wrapped to fit, are returned unchanged.
    """
    natural = KIND_DEPTH[node.kind]
    if depth >= natural:
        return node
    wrapped = node
    if isinstance(wrapped, LeafRef) and depth <= KIND_DEPTH[NodeKind.COLUMN]:
        wrapped = Column(id=new_id(NodeKind.COLUMN), children=(wrapped,))
    if isinstance(wrapped, Column) and depth <= KIND_DEPTH[NodeKind.ROW]:
        wrapped = Row(id=new_id(NodeKind.ROW), children=(wrapped,))
    return wrapped


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _check_slot(layout: Layout, destination_path: PathLike, node: LayoutNode) -> None:
    slot = locate_slot(layout, destination_path)
    if node.kind != slot.child_kind:
        msg = (
            f"Cannot place a {node.kind} at {_show(destination_path)!r}: "
            f"that container holds {slot.child_kind} nodes"
        )
        raise KindMismatchError(
            msg,
            path=_show(destination_path),
            kind=str(node.kind),
            expected=str(slot.child_kind),
        )


def _insert(layout: Layout, destination_path: PathLike, node: LayoutNode) -> Layout:
    slot = locate_slot(layout, destination_path)

    def insert(children: _Children) -> _Children:
        return children[: slot.index] + (node,) + children[slot.index :]

    return _update_children(layout, slot.container_path, insert)


def _update_children(
    layout: Layout,
    container_path: tuple[int, ...],
    update: Callable[[_Children], _Children],
) -> Layout:
    """Rebuild the spine from the root to *container_path*, applying *update* there."""

    def rebuild(children: _Children, path: tuple[int, ...]) -> _Children:
        if not path:
            return update(children)
        index, rest = path[0], path[1:]
        node = children[index]
        replaced = node.model_copy(update={"children": rebuild(child_nodes(node), rest)})
        return children[:index] + (replaced,) + children[index + 1 :]

    return Layout(rows=rebuild(layout.rows, container_path))  # type: ignore[arg-type]


def _show(path: PathLike) -> str:
    return path if isinstance(path, str) else encode(path)
