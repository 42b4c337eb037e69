"""Drag-and-drop event models.

The dragged item is decided once, at the event boundary: either an
existing tree node addressed by its path, or a palette entry that has no
path yet. Mutations never re-infer it from the payload shape.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_core import PydanticCustomError

from pagetree.domain.errors import MalformedPathError
from pagetree.domain.paths import decode, encode


def _canonical_path(value: str) -> str:
    """Normalize *value* (``00-01`` to ``0-1``), failing validation if malformed."""
    try:
        return encode(decode(value))
    except MalformedPathError as exc:
        raise PydanticCustomError(
            MalformedPathError.code, "{message}", {"message": exc.message, "path": value}
        ) from exc


class PaletteItem(BaseModel):
    """A component type offered by the editor sidebar."""

    model_config = ConfigDict(frozen=True)

    type: str = Field(min_length=1)
    name: str = ""
    config: dict[str, Any] = Field(default_factory=dict)


class DraggedExisting(BaseModel):
    """A node already in the tree, dragged from *path*."""

    model_config = ConfigDict(frozen=True)

    source: Literal["existing"] = "existing"
    path: str
    node_id: str | None = None

    @field_validator("path")
    @classmethod
    def _normalize_path(cls, value: str) -> str:
        return _canonical_path(value)


class DraggedPalette(BaseModel):
    """A palette entry dragged from the sidebar."""

    model_config = ConfigDict(frozen=True)

    source: Literal["palette"] = "palette"
    definition: PaletteItem


DraggedItem = Annotated[DraggedExisting | DraggedPalette, Field(discriminator="source")]


class DropZone(BaseModel):
    """An insertion point between or after existing siblings."""

    model_config = ConfigDict(frozen=True)

    target: Literal["zone"] = "zone"
    path: str

    @field_validator("path")
    @classmethod
    def _normalize_path(cls, value: str) -> str:
        return _canonical_path(value)


class TrashZone(BaseModel):
    """The trash target; dropping here removes the dragged node."""

    model_config = ConfigDict(frozen=True)

    target: Literal["trash"] = "trash"


DropTarget = Annotated[DropZone | TrashZone, Field(discriminator="target")]


class DropEvent(BaseModel):
    """One completed drag: what was dragged and where it landed."""

    model_config = ConfigDict(frozen=True)

    item: DraggedItem
    target: DropTarget

    @classmethod
    def move(
        cls,
        source_path: str,
        destination_path: str,
        *,
        node_id: str | None = None,
    ) -> DropEvent:
        return cls(
            item=DraggedExisting(path=source_path, node_id=node_id),
            target=DropZone(path=destination_path),
        )

    @classmethod
    def insert(cls, definition: PaletteItem, destination_path: str) -> DropEvent:
        return cls(
            item=DraggedPalette(definition=definition),
            target=DropZone(path=destination_path),
        )

    @classmethod
    def trash(cls, source_path: str, *, node_id: str | None = None) -> DropEvent:
        return cls(item=DraggedExisting(path=source_path, node_id=node_id), target=TrashZone())
