"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, pagetree.toml only contains
overrides. A fresh workspace needs only ``[workspace] name``.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from pagetree.domain.events import PaletteItem


class WorkspaceConfig(BaseModel):
    """[workspace] section."""

    model_config = {"frozen": True}

    name: str = "my-site"


class PersistenceConfig(BaseModel):
    """[persistence] section."""

    model_config = {"frozen": True}

    async_saves: bool = True
    max_workers: int = Field(default=2, ge=1)
    timeout_seconds: float = Field(default=30.0, gt=0)


class EditorConfig(BaseModel):
    """[editor] section."""

    model_config = {"frozen": True}

    id_hex_length: int = Field(default=8, ge=4, le=32)
    max_id_attempts: int = Field(default=16, ge=1)


def _default_palette() -> list[PaletteItem]:
    return [
        PaletteItem(type="heading", name="Heading", config={"text": "Heading", "level": 1}),
        PaletteItem(type="text", name="Text", config={"text": ""}),
        PaletteItem(type="image", name="Image", config={"src": "", "alt": ""}),
        PaletteItem(type="button", name="Button", config={"label": "Click", "href": "#"}),
    ]


class PaletteConfig(BaseModel):
    """[palette] section."""

    model_config = {"frozen": True}

    items: list[PaletteItem] = Field(default_factory=_default_palette)

