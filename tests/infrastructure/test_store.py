"""Tests for ProjectStore: projects, generation-checked saves, component archival."""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest
from sqlalchemy.engine import Engine

from pagetree.domain.layout import ComponentInstance, Layout
from pagetree.domain.mutations import insert_new_leaf, remove_node
from pagetree.infrastructure.store import ProjectStore


@pytest.fixture
def store(db_engine: Engine) -> ProjectStore:
    return ProjectStore(db_engine)


def text_component(component_id: str, **config: str) -> ComponentInstance:
    return ComponentInstance(id=component_id, type="text", name="Text", config=config)


class TestProjects:
    def test_create_assigns_sequential_ids(self, store: ProjectStore) -> None:
        first = store.create_project("Home")
        second = store.create_project("About")
        assert (first.id, second.id) == ("PRJ-0001", "PRJ-0002")
        assert first.generation == 0
        assert first.layout == Layout()

    def test_create_with_layout(self, store: ProjectStore, sample_layout: Layout) -> None:
        project = store.create_project("Home", sample_layout)
        assert store.load_project(project.id).layout == sample_layout  # type: ignore[union-attr]

    def test_load_missing(self, store: ProjectStore) -> None:
        assert store.load_project("PRJ-9999") is None

    def test_list(self, store: ProjectStore) -> None:
        store.create_project("Home")
        store.create_project("About")
        items = store.list_projects()
        assert [p["name"] for p in items] == ["Home", "About"]
        assert set(items[0]) == {"id", "name", "generation", "modified"}


class TestSaveLayout:
    def test_saved(self, store: ProjectStore, sample_layout: Layout) -> None:
        project = store.create_project("Home")
        assert store.save_layout(project.id, sample_layout, 1) == "saved"
        loaded = store.load_project(project.id)
        assert loaded is not None
        assert loaded.layout == sample_layout
        assert loaded.generation == 1

    def test_older_generation_is_stale(self, store: ProjectStore, sample_layout: Layout) -> None:
        project = store.create_project("Home")
        newer = remove_node(sample_layout, "0-0-0")
        assert store.save_layout(project.id, newer, 2) == "saved"
        assert store.save_layout(project.id, sample_layout, 1) == "stale"
        loaded = store.load_project(project.id)
        assert loaded is not None
        assert loaded.layout == newer
        assert loaded.generation == 2

    def test_same_generation_is_stale(self, store: ProjectStore, sample_layout: Layout) -> None:
        project = store.create_project("Home")
        store.save_layout(project.id, sample_layout, 1)
        assert store.save_layout(project.id, Layout(), 1) == "stale"

    def test_missing_project(self, store: ProjectStore) -> None:
        assert store.save_layout("PRJ-9999", Layout(), 1) == "missing"


class TestComponents:
    def test_component_after_layout_is_live(
        self, store: ProjectStore, sample_layout: Layout
    ) -> None:
        project = store.create_project("Home", sample_layout)
        layout = insert_new_leaf(sample_layout, "0-0-0", "cmp_new")
        store.save_layout(project.id, layout, 1)
        assert store.save_component(project.id, text_component("cmp_new")) == "saved"
        loaded = store.load_project(project.id)
        assert loaded is not None
        assert "cmp_new" in loaded.components

    def test_component_before_layout_converges(
        self, store: ProjectStore, sample_layout: Layout
    ) -> None:
        project = store.create_project("Home", sample_layout)
        store.save_component(project.id, text_component("cmp_new"))
        assert store.list_components(project.id) == []

        store.save_layout(project.id, insert_new_leaf(sample_layout, "0-0-0", "cmp_new"), 1)
        assert [c["id"] for c in store.list_components(project.id)] == ["cmp_new"]

    def test_unreferenced_component_archived(
        self, store: ProjectStore, sample_layout: Layout
    ) -> None:
        project = store.create_project("Home", sample_layout)
        store.save_component(project.id, text_component("L2"))
        store.save_layout(project.id, remove_node(sample_layout, "0-0-1"), 1)

        assert store.list_components(project.id) == []
        archived = store.list_components(project.id, include_archived=True)
        assert [(c["id"], c["archived"]) for c in archived] == [("L2", True)]
        assert "L2" in store.component_ids()

    def test_update_keeps_archived_flag(self, store: ProjectStore, sample_layout: Layout) -> None:
        project = store.create_project("Home", sample_layout)
        store.save_component(project.id, text_component("L1", text="a"))
        store.save_component(project.id, text_component("L1", text="b"))
        [component] = store.list_components(project.id)
        assert component["config"] == {"text": "b"}
        assert component["archived"] is False

    def test_missing_project(self, store: ProjectStore) -> None:
        assert store.save_component("PRJ-9999", text_component("x")) == "missing"

    def test_components_scoped_to_project(
        self, store: ProjectStore, sample_layout: Layout
    ) -> None:
        home = store.create_project("Home", sample_layout)
        about = store.create_project("About", sample_layout)
        store.save_component(home.id, text_component("L1"))
        assert store.list_components(about.id) == []


class TestConcurrentSaves:
    """Layout and component saves racing on worker threads."""

    @staticmethod
    def _race(store: ProjectStore, project_id: str, layout: Layout, component_id: str) -> None:
        start = threading.Barrier(2)

        def save_layout() -> str:
            start.wait()
            return store.save_layout(project_id, layout, 1)

        def save_component() -> str:
            start.wait()
            return store.save_component(project_id, text_component(component_id))

        with ThreadPoolExecutor(max_workers=2) as pool:
            futures = [pool.submit(save_layout), pool.submit(save_component)]
            assert [f.result(timeout=30) for f in futures] == ["saved", "saved"]

    def test_referenced_component_stays_live(
        self, store: ProjectStore, sample_layout: Layout
    ) -> None:
        for n in range(30):
            project = store.create_project(f"Page {n}", sample_layout)
            component_id = f"cmp_{n:08x}"
            layout = insert_new_leaf(sample_layout, "0-0-0", component_id)

            self._race(store, project.id, layout, component_id)

            assert [c["id"] for c in store.list_components(project.id)] == [component_id]
