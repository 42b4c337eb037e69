"""State shared by one ``pagetree`` invocation: settings, workspace, output."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from pagetree.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from pagetree.config.settings import PagetreeSettings
    from pagetree.infrastructure.workspace import Workspace
    from pagetree.services.result import ServiceResult


class AppContext:
    """``ctx.obj`` for every subcommand.

    Logging and drop tracing are configured up front. The workspace (database
    engine, save queue, plugins) is opened on first use, so ``--help`` and
    ``--examples`` never create ``.pagetree/``.
    """

    def __init__(self, settings: PagetreeSettings) -> None:
        from pagetree.config.logging import configure_logging
        from pagetree.services.telemetry import set_telemetry

        self.settings = settings
        self._workspace: Workspace | None = None
        configure_logging(verbose=settings.verbose, log_json=settings.log_json)
        set_telemetry(settings.verbose)

    @property
    def workspace(self) -> Workspace:
        if self._workspace is None:
            from pagetree.infrastructure.workspace import Workspace

            workspace = Workspace(self.settings)
            workspace.init_plugins()
            self._workspace = workspace
        return self._workspace

    def close(self) -> None:
        """Wait for queued saves before the process exits."""
        workspace, self._workspace = self._workspace, None
        if workspace is not None:
            workspace.close()

    def emit(self, result: ServiceResult) -> None:
        """Print *result*; a failed result exits with status 1.

        Results go to stdout and failures to stderr. Warnings are echoed to
        stderr unless ``--json`` already carries them in the payload.
        """
        output_settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        text = format_result(result, settings=output_settings)
        if not result.ok:
            click.echo(text, err=True)
            raise SystemExit(1)
        click.echo(text)
        if not output_settings.json_output:
            for warning in result.warnings:
                click.echo(f"WARNING: {warning}", err=True)
