"""Rich Console factory and theme for pagetree output.

Consoles render to a StringIO buffer so renderers keep a plain
``-> str`` contract. In non-TTY environments (tests, pipes) Rich drops
color codes automatically.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

PAGETREE_THEME = Theme(
    {
        "pt.ok": "bold green",
        "pt.error": "bold red",
        "pt.warning": "bold yellow",
        "pt.op": "bold cyan",
        "pt.key": "dim",
        "pt.id": "bold blue",
        "pt.path": "magenta",
        "pt.kind.row": "bold",
        "pt.kind.column": "cyan",
        "pt.kind.component": "green",
    }
)

_KIND_STYLES: dict[str, str] = {
    "row": "pt.kind.row",
    "column": "pt.kind.column",
    "component": "pt.kind.component",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer."""
    return Console(
        file=StringIO(),
        theme=PAGETREE_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_kind(kind: str) -> str:
    return _KIND_STYLES.get(kind, "")
