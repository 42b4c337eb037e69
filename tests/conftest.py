"""Shared pytest fixtures and test helpers for pagetree tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner
from sqlalchemy.engine import Engine

from pagetree.config.settings import PagetreeSettings
from pagetree.domain.layout import Column, Layout, LeafRef, Row
from pagetree.infrastructure.database.engine import init_database
from pagetree.infrastructure.workspace import Workspace


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def db_engine(tmp_path: Path) -> Engine:
    """Initialized SQLite engine with all tables created."""
    engine = init_database(tmp_path)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Workspace:
    """Fully initialized workspace with inline (synchronous) saves."""
    monkeypatch.delenv("PAGETREE_CONFIG", raising=False)
    settings = PagetreeSettings.from_cli(workspace_root=tmp_path, sync=True)
    ws = Workspace(settings)
    try:
        yield ws
    finally:
        ws.close()


@pytest.fixture
def _isolated_workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp directory so the CLI creates an isolated workspace.

    Use via ``@pytest.mark.usefixtures("_isolated_workspace")`` on command
    test classes.
    """
    monkeypatch.delenv("PAGETREE_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def sample_layout() -> Layout:
    """Row R1 with columns C1 = [L1, L2] and C2 = [L3]."""
    return make_sample_layout()


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def make_sample_layout() -> Layout:
    return Layout(
        rows=(
            Row(
                id="R1",
                children=(
                    Column(id="C1", children=(LeafRef(id="L1"), LeafRef(id="L2"))),
                    Column(id="C2", children=(LeafRef(id="L3"),)),
                ),
            ),
        )
    )


def ids_of(node: Any) -> list[str]:
    """Ids of a node's (or the layout's) direct children."""
    from pagetree.domain.layout import child_nodes

    return [child.id for child in child_nodes(node)]


def column(layout: Layout, row: int, col: int) -> Column:
    return layout.rows[row].children[col]


def create_project(workspace: Workspace, name: str = "Landing page") -> dict[str, Any]:
    """Create a project via ProjectService, asserting success."""
    from pagetree.services.project import ProjectService

    result = ProjectService(workspace).create(name)
    assert result.ok, result.error
    return result.data
