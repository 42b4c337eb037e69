"""Path codec — tree positions as ``-``-joined sibling indices.

A path such as ``"0-1-2"`` addresses the third component of the second
column of the first row. Its length equals the depth of the addressed node.
"""

from __future__ import annotations

from collections.abc import Sequence

from pagetree.domain.errors import MalformedPathError, NoParentError

SEPARATOR = "-"

PathLike = str | Sequence[int]


def encode(indices: Sequence[int]) -> str:
    """Join sibling indices into a path string."""
    if not indices:
        msg = "Cannot encode an empty path"
        raise MalformedPathError(msg)
    for index in indices:
        if isinstance(index, bool) or not isinstance(index, int) or index < 0:
            msg = f"Path index must be a non-negative integer, got {index!r}"
            raise MalformedPathError(msg, indices=list(indices))
    return SEPARATOR.join(str(i) for i in indices)


def decode(path: PathLike) -> tuple[int, ...]:
    """Split a path into its sibling indices.

    Sequences of ints are validated and returned as a tuple, so callers may
    pass either form.

    Raises:
        MalformedPathError: If the path is empty or a segment is not a
            non-negative integer.
    """
    if not isinstance(path, str):
        encode(path)
        return tuple(path)

    if not path:
        msg = "Path is empty"
        raise MalformedPathError(msg, path=path)

    indices: list[int] = []
    for segment in path.split(SEPARATOR):
        # isdigit() rejects blanks, signs, and whitespace
        if not segment.isascii() or not segment.isdigit():
            msg = f"Invalid path segment {segment!r} in {path!r}"
            raise MalformedPathError(msg, path=path, segment=segment)
        indices.append(int(segment))
    return tuple(indices)


def parent(path: PathLike) -> PathLike:
    """Return the path of the containing node.

    Returns a string for string input and a tuple for sequence input.

    Raises:
        NoParentError: For a depth-1 path (rows live directly in the layout).
    """
    indices = decode(path)
    if len(indices) == 1:
        msg = f"Path {_show(path)!r} has no parent"
        raise NoParentError(msg, path=_show(path))
    head = indices[:-1]
    if isinstance(path, str):
        return encode(head)
    return head


def same_parent(a: PathLike, b: PathLike) -> bool:
    """Whether two paths have the same length and share a parent.

    Two depth-1 paths share the layout root as parent.
    """
    ia, ib = decode(a), decode(b)
    return len(ia) == len(ib) and ia[:-1] == ib[:-1]


def _show(path: PathLike) -> str:
    return path if isinstance(path, str) else SEPARATOR.join(str(i) for i in path)
