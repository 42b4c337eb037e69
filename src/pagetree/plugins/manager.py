"""Plugins that observe the editor: drops as they are applied, saves as they land.

Plugins come from the ``pagetree.plugins`` entry-point group or are
registered in code. Hooks are notifications; a plugin can never veto a drop
or a save, and its exceptions are reported back as ``False``.
"""

from __future__ import annotations

import inspect
import logging
from typing import TYPE_CHECKING, Any

import pluggy

from pagetree.plugins.hookspecs import PagetreeHookSpec

if TYPE_CHECKING:
    from pagetree.infrastructure.persistence import SaveOutcome

ENTRY_POINT_GROUP = "pagetree.plugins"

logger = logging.getLogger(__name__)


class PluginManager:
    """pluggy registry for ``post_drop`` and ``post_save`` observers."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager("pagetree")
        self._pm.add_hookspecs(PagetreeHookSpec)

    def load_entry_points(self) -> list[str]:
        """Load installed plugins and return the names of everything registered.

        An entry point may name a plugin class; it is replaced by an instance
        so hooks are called bound. Classes that cannot be built are dropped.
        """
        self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        for plugin in list(self._pm.get_plugins()):
            if inspect.isclass(plugin):
                self._instantiate(plugin)
        return self.names()

    def register(self, plugin: object, name: str | None = None) -> None:
        name = name or plugin.__class__.__name__
        self._pm.register(plugin, name=name)
        logger.debug("Registered plugin: %s", name)

    def names(self) -> list[str]:
        return [self._pm.get_name(p) or p.__class__.__name__ for p in self._pm.get_plugins()]

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    def drop_applied(
        self,
        *,
        project_id: str,
        action: str,
        generation: int,
        node_id: str | None,
    ) -> bool:
        """Announce a committed drop. Returns False if a plugin raised."""
        return self._call(
            "post_drop",
            project_id=project_id,
            action=action,
            generation=generation,
            node_id=node_id,
        )

    def save_finished(self, outcome: SaveOutcome) -> bool:
        """Announce a completed persistence request (runs on the save worker)."""
        return self._call(
            "post_save",
            project_id=outcome.project_id,
            op=outcome.op,
            status=outcome.status,
            generation=outcome.generation,
        )

    def _call(self, hook_name: str, **payload: Any) -> bool:
        try:
            getattr(self._pm.hook, hook_name)(**payload)
        except Exception:
            logger.warning("Plugin hook %s failed", hook_name, exc_info=True)
            return False
        return True

    def _instantiate(self, plugin_cls: type) -> None:
        name = self._pm.get_name(plugin_cls) or plugin_cls.__name__
        self._pm.unregister(plugin_cls)
        try:
            instance = plugin_cls()
        except Exception:
            logger.warning("Dropping plugin %s: cannot instantiate", name, exc_info=True)
            return
        self._pm.register(instance, name=name)
