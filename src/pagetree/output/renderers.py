"""Operation-specific Rich renderers for ServiceResult.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from pagetree.output.console import create_console, get_output, style_for_kind

if TYPE_CHECKING:
    from rich.console import Console

    from pagetree.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich."""
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    items = result.data.get("items")
    if items and isinstance(items, list):
        return "\n".join(str(item.get("id") or item.get("type", "")) for item in items)
    for key in ("path", "id"):
        if result.data.get(key):
            return str(result.data[key])
    return f"OK: {result.op}"


def render_layout(
    document: list[dict[str, Any]],
    *,
    title: str = "layout",
    components: dict[str, dict[str, Any]] | None = None,
) -> Tree:
    """Build a Rich Tree for a layout document, labelling every node with its path."""
    components = components or {}
    tree = Tree(Text(title, style="bold"))

    def add(parent: Tree, nodes: list[dict[str, Any]], prefix: str) -> None:
        for index, node in enumerate(nodes):
            path = f"{prefix}-{index}" if prefix else str(index)
            label = Text()
            label.append(f"[{path}] ", style="pt.path")
            label.append(node["type"], style=style_for_kind(node["type"]))
            label.append(f" {node['id']}", style="pt.id")
            component = components.get(node.get("componentId", ""))
            if component is not None:
                name = component.get("name") or ""
                label.append(f"  {component['type']}" + (f" · {name}" if name else ""))
            branch = parent.add(label)
            add(branch, node.get("children", []), path)

    add(tree, document, "")
    if not document:
        tree.add(Text("(empty)", style="dim"))
    return tree


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="pt.ok"), Text(f"  {result.op}", style="pt.op"))


def _field(console: Console, key: str, value: Any) -> None:
    if key == "id" or key.endswith("_id"):
        style = "pt.id"
    elif key == "path":
        style = "pt.path"
    else:
        style = ""
    console.print(Text.assemble((f"  {key}: ", "pt.key"), (str(value), style)))


def _render_meta(console: Console, result: ServiceResult) -> None:
    if not result.meta:
        return
    console.print()
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        if k == "telemetry":
            _render_span(console, v, indent=4)
        else:
            console.print(f"    {k}: {v}")


def _render_span(console: Console, span: dict[str, Any], indent: int) -> None:
    duration = span.get("duration_ms", 0.0)
    style = "yellow" if duration > 100 else "dim"
    line = f"{' ' * indent}[{style}]{duration:>8.2f}ms[/{style}]  {span.get('name', '?')}"
    drop = span.get("drop")
    if drop:
        line += f"  {drop['action']} {drop['node_id']} -> g{drop['generation']}"
    console.print(line)
    for child in span.get("children", []):
        _render_span(console, child, indent + 4)


def _components_by_id(result: ServiceResult) -> dict[str, dict[str, Any]]:
    return {c["id"]: c for c in result.data.get("components", [])}


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    code = f" [{err.code}]" if err else ""
    console.print(
        Text("ERROR", style="pt.error"),
        Text(f"  {result.op}{code}", style="pt.op"),
        Text(" — "),
        Text(msg),
    )
    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")
    if result.data.get("applied"):
        console.print(f"  applied before failure: {len(result.data['applied'])}")


# ── Operation renderers ───────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (list, dict)):
            continue
        _field(console, key, value)
    if verbose:
        _render_meta(console, result)


def _render_project(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    title = f"{d.get('id', '?')} — {d.get('name', '')} (generation {d.get('generation', 0)})"
    tree = render_layout(d.get("layout", []), title=title, components=_components_by_id(result))
    console.print(tree)
    if verbose:
        _render_meta(console, result)


def _render_drop(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key in ("action", "node_id", "path", "component_id", "generation", "count", "refreshed"):
        if result.data.get(key) is not None:
            _field(console, key, result.data[key])
    if verbose:
        for entry in result.data.get("applied", []):
            target = entry.get("path") or "-"
            console.print(f"  {entry['action']:<10} {entry['node_id']} -> {target}")
        console.print(render_layout(result.data.get("layout", [])))
        _render_meta(console, result)


def _render_items(columns: list[str]) -> Callable[..., None]:
    def render(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
        items = result.data.get("items", [])
        table = Table(show_header=True, pad_edge=False, expand=False)
        for col in columns:
            table.add_column(col.replace("_", " ").title(), style="pt.id" if col == "id" else None)
        for item in items:
            table.add_row(*(_cell(item.get(col)) for col in columns))
        console.print(table)
        console.print(f"\n{result.data.get('count', len(items))} items")
        if verbose:
            _render_meta(console, result)

    return render


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, dict):
        return ", ".join(f"{k}={v}" for k, v in value.items())
    return str(value)


_OP_RENDERERS: dict[str, Callable[..., None]] = {
    "show_project": _render_project,
    "drop": _render_drop,
    "drop_batch": _render_drop,
    "list_projects": _render_items(["id", "name", "generation", "modified"]),
    "list_components": _render_items(["id", "type", "name", "archived"]),
    "palette": _render_items(["type", "name", "config"]),
}
