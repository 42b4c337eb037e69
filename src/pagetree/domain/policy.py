"""Drop classification.

Maps a :class:`DropEvent` onto the mutation that handles it. The rules are
checked in order; the first match wins.
"""

from __future__ import annotations

from pagetree.domain.errors import LayoutError
from pagetree.domain.events import DraggedPalette, DropEvent, TrashZone
from pagetree.domain.paths import same_parent
from pagetree.domain.types import DropAction


def classify_drop(event: DropEvent) -> DropAction:
    """Decide which mutation a drop event needs.

    1. Trash target -> REMOVE (palette items have nothing to remove).
    2. Palette item -> INSERT_NEW.
    3. Same depth and same parent -> REORDER.
    4. Anything else -> MOVE (other parent, possibly another depth).
    """
    item = event.item
    if isinstance(event.target, TrashZone):
        if isinstance(item, DraggedPalette):
            msg = "A palette item is not in the layout and cannot be removed"
            raise LayoutError(msg, code="NOTHING_TO_REMOVE", type=item.definition.type)
        return DropAction.REMOVE

    if isinstance(item, DraggedPalette):
        return DropAction.INSERT_NEW

    if same_parent(item.path, event.target.path):
        return DropAction.REORDER
    return DropAction.MOVE
