"""Tests for drag-and-drop event models."""

import pytest
from pydantic import TypeAdapter, ValidationError

from pagetree.domain.events import (
    DraggedExisting,
    DraggedPalette,
    DropEvent,
    DropZone,
    PaletteItem,
    TrashZone,
)


class TestDropEventParsing:
    def test_existing_item_from_json(self) -> None:
        event = DropEvent.model_validate(
            {
                "item": {"source": "existing", "path": "0-1-0", "node_id": "cmp_1"},
                "target": {"target": "zone", "path": "0-0-2"},
            }
        )
        assert isinstance(event.item, DraggedExisting)
        assert event.item.node_id == "cmp_1"
        assert isinstance(event.target, DropZone)

    def test_palette_item_from_json(self) -> None:
        event = DropEvent.model_validate(
            {
                "item": {"source": "palette", "definition": {"type": "text"}},
                "target": {"target": "zone", "path": "0-0-0"},
            }
        )
        assert isinstance(event.item, DraggedPalette)
        assert event.item.definition.type == "text"

    def test_trash_target(self) -> None:
        event = DropEvent.model_validate(
            {"item": {"source": "existing", "path": "1"}, "target": {"target": "trash"}}
        )
        assert isinstance(event.target, TrashZone)

    def test_unknown_source_rejected(self) -> None:
        with pytest.raises(ValidationError):
            DropEvent.model_validate(
                {"item": {"source": "clipboard"}, "target": {"target": "trash"}}
            )

    def test_palette_item_requires_definition(self) -> None:
        """The variant is decided by the tag, never by which fields are present."""
        with pytest.raises(ValidationError):
            DropEvent.model_validate(
                {"item": {"source": "palette", "path": "0"}, "target": {"target": "trash"}}
            )

    def test_list_of_events(self) -> None:
        events = TypeAdapter(list[DropEvent]).validate_python(
            [
                {"item": {"source": "existing", "path": "0"}, "target": {"target": "trash"}},
                {"item": {"source": "existing", "path": "0"}, "target": {"target": "trash"}},
            ]
        )
        assert len(events) == 2


class TestPathNormalization:
    def test_leading_zeros_normalized(self) -> None:
        assert DraggedExisting(path="00-01").path == "0-1"

    def test_malformed_path_is_validation_error(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            DropZone(path="a-b")
        [error] = exc_info.value.errors()
        assert error["type"] == "MALFORMED_PATH"
        assert error["ctx"]["path"] == "a-b"

    def test_malformed_path_in_event_record(self) -> None:
        record = {"item": {"source": "existing", "path": "0--1"}, "target": {"target": "trash"}}
        with pytest.raises(ValidationError) as exc_info:
            DropEvent.model_validate(record)
        assert exc_info.value.errors()[0]["type"] == "MALFORMED_PATH"


class TestConstructors:
    def test_move(self) -> None:
        event = DropEvent.move("0-0-0", "0-0-1", node_id="L1")
        assert event.item == DraggedExisting(path="0-0-0", node_id="L1")
        assert event.target == DropZone(path="0-0-1")

    def test_insert(self) -> None:
        item = PaletteItem(type="image")
        event = DropEvent.insert(item, "1")
        assert event.item == DraggedPalette(definition=item)

    def test_trash(self) -> None:
        assert isinstance(DropEvent.trash("0").target, TrashZone)


class TestPaletteItem:
    def test_type_required(self) -> None:
        with pytest.raises(ValidationError):
            PaletteItem(type="")
