"""Hooks a pagetree plugin can implement.

Implement them with ``pluggy.HookimplMarker("pagetree")`` or :data:`hookimpl`.
"""

from __future__ import annotations

import pluggy

hookspec = pluggy.HookspecMarker("pagetree")
hookimpl = pluggy.HookimplMarker("pagetree")


class PagetreeHookSpec:
    @hookspec
    def post_drop(
        self,
        project_id: str,
        action: str,
        generation: int,
        node_id: str | None,
    ) -> None:
        """A drop was committed to the editor's layout.

        *action* is ``insert_new``, ``reorder``, ``move`` or ``remove``;
        *generation* is the local generation the drop produced. Fires before
        the layout is saved.
        """

    @hookspec
    def post_save(
        self,
        project_id: str,
        op: str,
        status: str,
        generation: int | None,
    ) -> None:
        """A ``save_layout`` or ``save_component`` request finished.

        *status* is ``saved``, ``stale`` (a newer layout was already stored),
        ``missing`` or ``failed``. Called from the persistence worker thread
        when saves are asynchronous.
        """
