"""Component command group."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from pagetree.commands._base import PtGroup

if TYPE_CHECKING:
    from pagetree.commands._context import AppContext


@click.group(cls=PtGroup)
def component() -> None:
    """Inspect component instances."""


@component.command(
    name="list",
    examples="""\
  pagetree component list PRJ-0001
  pagetree component list PRJ-0001 --archived""",
)
@click.argument("project_id")
@click.option("--archived", is_flag=True, help="Include components no longer in the layout.")
@click.pass_obj
def list_cmd(app: AppContext, project_id: str, archived: bool) -> None:
    """List the component instances of a project."""
    from pagetree.services.project import ProjectService

    app.emit(ProjectService(app.workspace).list_components(project_id, include_archived=archived))
