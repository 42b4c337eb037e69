"""Command: list palette items."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from pagetree.commands._base import PtCommand

if TYPE_CHECKING:
    from pagetree.commands._context import AppContext


@click.command(cls=PtCommand)
@click.pass_obj
def palette(app: AppContext) -> None:
    """List the component types that can be dropped into a layout."""
    from pagetree.services.palette import PaletteService

    app.emit(PaletteService(app.workspace).list_items())
