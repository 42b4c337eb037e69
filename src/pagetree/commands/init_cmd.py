"""Command: workspace initialization (named init_cmd to avoid shadowing builtins)."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from pagetree.commands._base import PtCommand

if TYPE_CHECKING:
    from pagetree.commands._context import AppContext

_INIT_EXAMPLES = """\
  pagetree init
  pagetree init ./site --name marketing"""


@click.command("init", cls=PtCommand, examples=_INIT_EXAMPLES)
@click.argument("path", required=False, default=".")
@click.option("--name", default=None, help="Workspace name (defaults to the directory name).")
@click.pass_obj
def init_cmd(app: AppContext, path: str, name: str | None) -> None:
    """Initialize a pagetree workspace in PATH."""
    root = Path(path).resolve()
    if name is None:
        name = root.name or "my-site"

    from pagetree.services.init import InitService

    app.emit(InitService.init_workspace(root, name=name))
