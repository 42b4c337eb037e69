"""Subcommand modules for pagetree.

Provides register_commands() which uses deferred imports to keep
``pagetree --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups and standalone commands on the root CLI group."""
    # --- Groups ---
    from pagetree.commands.component import component
    from pagetree.commands.project import project

    cli.add_command(project)
    cli.add_command(component)

    # --- Standalone commands ---
    from pagetree.commands.edit import apply, drop, trash
    from pagetree.commands.init_cmd import init_cmd
    from pagetree.commands.palette import palette

    cli.add_command(init_cmd)
    cli.add_command(drop)
    cli.add_command(trash)
    cli.add_command(apply)
    cli.add_command(palette)
