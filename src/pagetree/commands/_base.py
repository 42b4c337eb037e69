"""Click classes shared by the pagetree commands.

Drop paths (``0-1-0``) are easier to show than to describe, so commands and
groups carry a block of example invocations that ``--examples`` prints.
"""

from __future__ import annotations

from typing import Any

import click


def _print_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
    if not value or ctx.resilient_parsing:
        return
    examples = getattr(ctx.command, "examples", None) or ""
    click.echo(f"{ctx.command_path} examples:\n\n{examples}")
    ctx.exit(0)


class _ExamplesMixin:
    """Adds an eager ``--examples`` flag when ``examples=`` is given."""

    params: list[click.Parameter]

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            self.params.append(
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    expose_value=False,
                    is_eager=True,
                    callback=_print_examples,
                    help="Show example invocations and exit.",
                )
            )


class PtCommand(_ExamplesMixin, click.Command):
    """A command with optional ``--examples``."""


class PtGroup(_ExamplesMixin, click.Group):
    """A group with optional ``--examples``; its subcommands default to :class:`PtCommand`."""

    command_class = PtCommand
