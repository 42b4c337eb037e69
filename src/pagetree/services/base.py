"""BaseService — foundation for all pagetree services.

Every service receives a :class:`Workspace` at construction time. Mutations
stay pure; services own the calls to the store, the persistence queue, and
the plugin hooks, sequenced after a mutation succeeds.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pagetree.infrastructure.workspace import Workspace


class BaseService:
    """Base for service-layer classes.

    Usage::

        class ProjectService(BaseService):
            def show(self, project_id: str) -> ServiceResult:
                snapshot = self._workspace.store.load_project(project_id)
                ...
    """

    def __init__(self, workspace: Workspace) -> None:
        self._workspace = workspace

