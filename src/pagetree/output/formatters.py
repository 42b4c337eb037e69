"""Output mode selection for ServiceResult.

The CLI renders results for humans (Rich) or machines (``--json``), or
as a terse one-liner with ``--quiet``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel

from pagetree.output.renderers import render_quiet, render_result

if TYPE_CHECKING:
    from pagetree.services.result import ServiceResult


class OutputSettings(BaseModel):
    """Output flags taken from the global CLI options."""

    model_config = {"frozen": True}

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False


def format_result(result: ServiceResult, *, settings: OutputSettings | None = None) -> str:
    """Format a ServiceResult according to *settings* (default: human)."""
    settings = settings or OutputSettings()
    if settings.json_output:
        return result.model_dump_json(indent=2)
    if settings.quiet:
        return render_quiet(result)
    return render_result(result, verbose=settings.verbose)
