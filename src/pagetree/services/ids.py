"""IdService — the id-generation collaborator.

Proposes random ids and retries until one collides with nothing already
taken: the current tree, the component catalog, or an id this service
issued earlier in the same process.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from pagetree.domain.ids import generate_id
from pagetree.domain.types import NodeKind

logger = logging.getLogger(__name__)


class IdExhaustedError(RuntimeError):
    """No free id was found within the attempt budget."""


class IdService:
    """Issue ids that are unique across the tree and the catalog.

    Parameters:
        taken: Returns every id currently in use; consulted on each call.
        hex_length: Random hex characters after the kind prefix.
        max_attempts: Candidates tried before giving up.
    """

    def __init__(
        self,
        taken: Callable[[], Iterable[str]],
        *,
        hex_length: int = 8,
        max_attempts: int = 16,
    ) -> None:
        self._taken = taken
        self._hex_length = hex_length
        self._max_attempts = max_attempts
        self._issued: set[str] = set()

    def new_id(self, kind: NodeKind) -> str:
        """Return a fresh id for a node of *kind*."""
        taken = set(self._taken()) | self._issued
        for _ in range(self._max_attempts):
            candidate = generate_id(kind, hex_length=self._hex_length)
            if candidate not in taken:
                self._issued.add(candidate)
                return candidate
            logger.debug("Id collision on %s, retrying", candidate)
        msg = f"No free {kind} id after {self._max_attempts} attempts"
        raise IdExhaustedError(msg)
