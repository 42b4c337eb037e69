"""Workspace — the single dependency injected into every service.

Owns the database engine, the project store, the persistence queue, and
the plugin manager. Constructed once per CLI invocation from
:class:`PagetreeSettings`; services receive it via :class:`BaseService`.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from pagetree.infrastructure.database.engine import init_database
from pagetree.infrastructure.persistence import PersistenceQueue, SaveOutcome
from pagetree.infrastructure.store import ProjectStore

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

    from pagetree.config.settings import PagetreeSettings
    from pagetree.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


class Workspace:
    """Database, store, persistence queue, and plugins for one workspace root."""

    def __init__(self, settings: PagetreeSettings) -> None:
        self._settings = settings
        self._engine: Engine = init_database(self.root)
        self._store = ProjectStore(self._engine)
        self._plugins: PluginManager | None = None
        self._queue = PersistenceQueue(
            self._store,
            sync=not settings.async_saves,
            max_workers=settings.persistence.max_workers,
            timeout=settings.persistence.timeout_seconds,
            on_complete=self._saved,
        )

    @property
    def root(self) -> Path:
        return self._settings.workspace_root

    @property
    def settings(self) -> PagetreeSettings:
        return self._settings

    @property
    def engine(self) -> Engine:
        return self._engine

    @property
    def store(self) -> ProjectStore:
        """The persistence and catalog collaborator."""
        return self._store

    @property
    def persistence(self) -> PersistenceQueue:
        return self._queue

    @property
    def plugins(self) -> PluginManager | None:
        """The plugin manager (None until :meth:`init_plugins`)."""
        return self._plugins

    def init_plugins(self) -> PluginManager:
        """Create the plugin manager and load entry-point plugins."""
        from pagetree.plugins.manager import PluginManager

        pm = PluginManager()
        names = pm.load_entry_points()
        if names:
            logger.debug("Plugins loaded: %s", ", ".join(names))
        self._plugins = pm
        return pm

    def close(self) -> list[SaveOutcome]:
        """Finish pending saves and release the engine."""
        outcomes = self._queue.shutdown()
        if outcomes:
            logger.debug("Settled %d pending save(s) on close", len(outcomes))
        self._engine.dispose()
        return outcomes

    def _saved(self, outcome: SaveOutcome) -> None:
        if self._plugins is not None:
            self._plugins.save_finished(outcome)
