"""Node and component id patterns and generation.

Ids are a kind prefix plus random hex (``row_1a2b3c4d``). Uniqueness is
checked by the caller against everything already taken; this module only
proposes candidates.

INVARIANT: Ids are permanent. A node keeps its id when it moves.
"""

from __future__ import annotations

import secrets

from pagetree.domain.types import NodeKind

ID_PREFIXES: dict[NodeKind, str] = {
    NodeKind.ROW: "row_",
    NodeKind.COLUMN: "col_",
    NodeKind.COMPONENT: "cmp_",
}


def generate_id(kind: NodeKind, *, hex_length: int = 8) -> str:
    """Return a random id candidate for a node of *kind*."""
    if hex_length < 4:
        msg = f"hex_length must be at least 4, got {hex_length}"
        raise ValueError(msg)
    token = secrets.token_hex((hex_length + 1) // 2)[:hex_length]
    return f"{ID_PREFIXES[kind]}{token}"

