"""Project command group: create, list, show."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from pagetree.commands._base import PtGroup

if TYPE_CHECKING:
    from pagetree.commands._context import AppContext


@click.group(
    cls=PtGroup,
    examples="""\
  pagetree project create "Landing page"
  pagetree project list
  pagetree project show PRJ-0001
  pagetree --json project show PRJ-0001""",
)
def project() -> None:
    """Create and inspect projects."""


@project.command()
@click.argument("name")
@click.pass_obj
def create(app: AppContext, name: str) -> None:
    """Create an empty project called NAME."""
    from pagetree.services.project import ProjectService

    app.emit(ProjectService(app.workspace).create(name))


@project.command(name="list")
@click.pass_obj
def list_cmd(app: AppContext) -> None:
    """List all projects."""
    from pagetree.services.project import ProjectService

    app.emit(ProjectService(app.workspace).list_projects())


@project.command()
@click.argument("project_id")
@click.pass_obj
def show(app: AppContext, project_id: str) -> None:
    """Show a project's layout tree with node paths."""
    from pagetree.services.project import ProjectService

    app.emit(ProjectService(app.workspace).show(project_id))
