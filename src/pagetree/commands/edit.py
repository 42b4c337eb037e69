"""Layout editing commands: drop, trash, apply.

Each command opens the stored project as an editor state, applies its
drop event(s), and settles pending saves before the process exits.
"""

from __future__ import annotations

import json
from typing import IO, TYPE_CHECKING

import click
from pydantic import TypeAdapter, ValidationError

from pagetree.commands._base import PtCommand
from pagetree.domain.errors import MalformedPathError
from pagetree.domain.events import DropEvent
from pagetree.services.result import ServiceResult

if TYPE_CHECKING:
    from pagetree.commands._context import AppContext
    from pagetree.services.state import EditorState

_EVENTS = TypeAdapter(list[DropEvent])


def _open_state(app: AppContext, op: str, project_id: str) -> EditorState | None:
    """Load *project_id*, emitting a NOT_FOUND failure if it does not exist."""
    from pagetree.services.project import ProjectService, not_found

    state = ProjectService(app.workspace).load_state(project_id)
    if state is None:
        app.emit(not_found(op, project_id))
    return state


def _invalid_event(op: str, exc: ValidationError) -> ServiceResult:
    for error in exc.errors():
        if error["type"] == MalformedPathError.code:
            path = error.get("ctx", {}).get("path")
            return ServiceResult.failure(op, MalformedPathError.code, error["msg"], path=path)
    return ServiceResult.failure(op, "INVALID_EVENT", str(exc))


_DROP_EXAMPLES = """\
  pagetree drop PRJ-0001 --palette heading --to 0-0-0
  pagetree drop PRJ-0001 --palette image --to 1
  pagetree drop PRJ-0001 --from 0-0-1 --to 0-0-0
  pagetree drop PRJ-0001 --from 0-1-0 --to 1-0-0 --id cmp_1a2b3c4d"""


@click.command(cls=PtCommand, examples=_DROP_EXAMPLES)
@click.argument("project_id")
@click.option("--to", "destination", required=True, help="Drop zone path, e.g. 0-1-0.")
@click.option("--from", "source", default=None, help="Path of the existing node to drag.")
@click.option("--id", "node_id", default=None, help="Expected id at --from (stale path guard).")
@click.option("--palette", "palette_type", default=None, help="Palette component type to insert.")
@click.pass_obj
def drop(
    app: AppContext,
    project_id: str,
    destination: str,
    source: str | None,
    node_id: str | None,
    palette_type: str | None,
) -> None:
    """Drop an existing node or a palette item into a project's layout."""
    op = "drop"
    if (source is None) == (palette_type is None):
        raise click.UsageError("Pass exactly one of --from or --palette.")
    if node_id is not None and source is None:
        raise click.UsageError("--id only applies together with --from.")

    from pagetree.services.drop import DropService
    from pagetree.services.palette import PaletteService

    try:
        if palette_type is not None:
            item = PaletteService(app.workspace).get(palette_type)
            if item is None:
                app.emit(
                    ServiceResult.failure(
                        op,
                        "UNKNOWN_PALETTE_TYPE",
                        f"No palette item of type {palette_type!r}",
                        type=palette_type,
                    )
                )
                return
            event = DropEvent.insert(item, destination)
        else:
            assert source is not None
            event = DropEvent.move(source, destination, node_id=node_id)
    except ValidationError as exc:
        app.emit(_invalid_event(op, exc))
        return

    state = _open_state(app, op, project_id)
    if state is None:
        return
    app.emit(DropService(app.workspace, state).drop(event, settle=True))


@click.command(
    cls=PtCommand,
    examples="""\
  pagetree trash PRJ-0001 0-0-1
  pagetree trash PRJ-0001 1 --id row_5e6f7a8b""",
)
@click.argument("project_id")
@click.argument("path")
@click.option("--id", "node_id", default=None, help="Expected id at PATH (stale path guard).")
@click.pass_obj
def trash(app: AppContext, project_id: str, path: str, node_id: str | None) -> None:
    """Remove the node at PATH (and everything under it)."""
    op = "drop"
    try:
        event = DropEvent.trash(path, node_id=node_id)
    except ValidationError as exc:
        app.emit(_invalid_event(op, exc))
        return

    from pagetree.services.drop import DropService

    state = _open_state(app, op, project_id)
    if state is None:
        return
    app.emit(DropService(app.workspace, state).drop(event, settle=True))


@click.command(
    cls=PtCommand,
    examples="""\
  pagetree apply PRJ-0001 events.json
  cat events.json | pagetree --json apply PRJ-0001 -""",
)
@click.argument("project_id")
@click.argument("events_file", type=click.File("r", encoding="utf-8"))
@click.pass_obj
def apply(app: AppContext, project_id: str, events_file: IO[str]) -> None:
    """Apply a JSON array of drop events in order.

    Each event is resolved against the layout left by the events before it.
    """
    op = "drop_batch"
    try:
        events = _EVENTS.validate_python(json.load(events_file))
    except json.JSONDecodeError as exc:
        app.emit(ServiceResult.failure(op, "INVALID_JSON", f"Invalid JSON: {exc}"))
        return
    except ValidationError as exc:
        app.emit(_invalid_event(op, exc))
        return

    from pagetree.services.drop import DropService

    state = _open_state(app, op, project_id)
    if state is None:
        return
    app.emit(DropService(app.workspace, state).drop_batch(events, settle=True))
