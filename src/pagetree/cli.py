"""``pagetree`` entry point: global output/persistence flags, then subcommands."""

from __future__ import annotations

import click

from pagetree import __version__
from pagetree.commands import register_commands
from pagetree.commands._base import PtGroup
from pagetree.commands._context import AppContext
from pagetree.config.settings import PagetreeSettings

_WORKFLOW = """\
  pagetree init
  pagetree project create "Landing page"
  pagetree drop PRJ-0001 --palette heading --to 0
  pagetree drop PRJ-0001 --palette text --to 0-0-1
  pagetree drop PRJ-0001 --from 0-0-1 --to 1
  pagetree --json project show PRJ-0001
"""


@click.group(cls=PtGroup, examples=_WORKFLOW, invoke_without_command=True)
@click.version_option(version=__version__, prog_name="pagetree")
@click.option("--json", "json_output", is_flag=True, help="Print results as JSON.")
@click.option("-q", "--quiet", is_flag=True, help="Print ids and paths only.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logs and a trace of each drop.")
@click.option("--log-json", is_flag=True, help="Write logs to stderr as JSON lines.")
@click.option("-c", "--config", "config_path", default=None, help="Use this pagetree.toml.")
@click.option("--sync", is_flag=True, help="Finish every save before returning.")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, **flags: bool) -> None:
    """pagetree - compose page layouts from rows, columns, and components."""
    app = AppContext(PagetreeSettings.from_cli(config_path=config_path, **flags))
    ctx.obj = app
    ctx.call_on_close(app.close)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
