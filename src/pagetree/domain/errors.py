"""Layout mutation errors.

Every error aborts a single drop and leaves the prior tree untouched.
The service layer maps ``code`` onto ``ServiceError.code``.
"""

from __future__ import annotations

from typing import Any


class LayoutError(Exception):
    """Base class for failures raised by the layout engine."""

    code = "LAYOUT_ERROR"

    def __init__(self, message: str, *, code: str | None = None, **detail: Any) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        self.detail: dict[str, Any] = detail


class MalformedPathError(LayoutError):
    """A path string is empty or has a non-integer segment."""

    code = "MALFORMED_PATH"


class NoParentError(LayoutError):
    """The parent of a depth-1 path was requested."""

    code = "NO_PARENT"


class PathOutOfRangeError(LayoutError):
    """A path index exceeds the length of the container it walks into."""

    code = "PATH_OUT_OF_RANGE"


class DepthMismatchError(LayoutError):
    """A path's length does not fit the addressed node kind."""

    code = "DEPTH_MISMATCH"


class KindMismatchError(LayoutError):
    """A node kind cannot be placed in the addressed container."""

    code = "KIND_MISMATCH"


class NotSiblingsError(LayoutError):
    """A reorder was requested for paths that do not share a parent."""

    code = "NOT_SIBLINGS"


class DuplicateNodeIdError(LayoutError):
    """An inserted node id already exists in the tree."""

    code = "DUPLICATE_ID"


class StalePathError(LayoutError):
    """A dragged item's path no longer points at the node that was dragged."""

    code = "STALE_PATH"
