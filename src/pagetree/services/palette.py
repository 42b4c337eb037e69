"""PaletteService — component types offered for dropping into a layout."""

from __future__ import annotations

from pagetree.domain.events import PaletteItem
from pagetree.services.base import BaseService
from pagetree.services.result import ServiceResult


class PaletteService(BaseService):
    """Looks up palette items from the ``[palette]`` config section."""

    def items(self) -> list[PaletteItem]:
        return list(self._workspace.settings.palette.items)

    def get(self, item_type: str) -> PaletteItem | None:
        for item in self.items():
            if item.type == item_type:
                return item
        return None

    def list_items(self) -> ServiceResult:
        items = [item.model_dump() for item in self.items()]
        return ServiceResult(ok=True, op="palette", data={"items": items, "count": len(items)})
