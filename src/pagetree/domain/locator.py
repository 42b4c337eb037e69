"""Tree locator — resolve paths against the current layout.

Paths are positional, so they must be resolved against the tree value the
mutation is about to transform, never against an earlier one.
"""

from __future__ import annotations

from dataclasses import dataclass

from pagetree.domain.errors import DepthMismatchError, PathOutOfRangeError
from pagetree.domain.layout import Layout, LayoutNode, child_nodes
from pagetree.domain.paths import PathLike, decode, encode
from pagetree.domain.types import CHILD_KIND, KIND_DEPTH, MAX_DEPTH, NodeKind


@dataclass(frozen=True)
class Location:
    """An existing node, its container, and its index in that container."""

    node: LayoutNode
    parent: LayoutNode | Layout
    index: int
    path: tuple[int, ...]

    @property
    def depth(self) -> int:
        return len(self.path)


@dataclass(frozen=True)
class Slot:
    """An insertion point: a container and a position between its children.

    ``index`` may equal the number of children (append).
    """

    container: LayoutNode | Layout
    container_path: tuple[int, ...]
    index: int

    @property
    def child_kind(self) -> NodeKind:
        """Kind of node this container accepts."""
        return CHILD_KIND[len(self.container_path)]


def locate(layout: Layout, path: PathLike, *, kind: NodeKind | None = None) -> Location:
    """Find the node addressed by *path*.

    Args:
        layout: The current tree.
        path: Path string or index sequence.
        kind: When given, the path length must match this kind's depth.

    Raises:
        MalformedPathError: If *path* cannot be decoded.
        DepthMismatchError: If *path* is deeper than the tree allows or does
            not match *kind*.
        PathOutOfRangeError: If an index exceeds its container.
    """
    indices = decode(path)
    _check_depth(indices, kind)

    parent: LayoutNode | Layout = layout
    node: LayoutNode | Layout = layout
    for depth, index in enumerate(indices):
        children = child_nodes(node)
        if index >= len(children):
            raise _out_of_range(indices, depth, len(children))
        parent, node = node, children[index]

    assert isinstance(node, LayoutNode)
    return Location(node=node, parent=parent, index=indices[-1], path=indices)


def locate_slot(layout: Layout, path: PathLike) -> Slot:
    """Resolve a drop-zone path to the container and insertion index.

    Raises:
        MalformedPathError: If *path* cannot be decoded.
        DepthMismatchError: If *path* is deeper than the tree allows.
        PathOutOfRangeError: If the container does not exist or the index is
            past its end.
    """
    indices = decode(path)
    _check_depth(indices, None)

    container_path = indices[:-1]
    container = _container_at(layout, container_path) if container_path else layout
    size = len(child_nodes(container))
    if indices[-1] > size:
        raise _out_of_range(indices, len(container_path), size)
    return Slot(container=container, container_path=container_path, index=indices[-1])


def _container_at(layout: Layout, indices: tuple[int, ...]) -> LayoutNode:
    return locate(layout, indices).node


def _check_depth(indices: tuple[int, ...], kind: NodeKind | None) -> None:
    if len(indices) > MAX_DEPTH:
        msg = f"Path {encode(indices)!r} is deeper than the layout ({MAX_DEPTH} levels)"
        raise DepthMismatchError(msg, path=encode(indices))
    if kind is not None and len(indices) != KIND_DEPTH[kind]:
        msg = (
            f"Path {encode(indices)!r} has depth {len(indices)}, "
            f"a {kind} lives at depth {KIND_DEPTH[kind]}"
        )
        raise DepthMismatchError(msg, path=encode(indices), kind=str(kind))


def _out_of_range(indices: tuple[int, ...], depth: int, size: int) -> PathOutOfRangeError:
    msg = (
        f"Index {indices[depth]} at depth {depth + 1} of path {encode(indices)!r} "
        f"is out of range (container has {size} children)"
    )
    return PathOutOfRangeError(msg, path=encode(indices), depth=depth + 1, size=size)
