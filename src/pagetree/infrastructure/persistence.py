"""Fire-and-forget persistence via ThreadPoolExecutor.

The editor hands every post-mutation state to the queue and moves on
without waiting. Saves may finish out of order; the store's generation
check keeps the newest layout. ``drain()`` is the sync barrier used before
the process exits or before re-reading the store as the new baseline.

INVARIANT: Persistence failures are reported, never raised into the editor,
and never roll back the local tree.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pagetree.config.logging import SAVE_THREAD_PREFIX

if TYPE_CHECKING:
    from pagetree.domain.layout import ComponentInstance, Layout
    from pagetree.infrastructure.store import ProjectStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SaveOutcome:
    """Result of one persistence request."""

    op: str
    project_id: str
    status: str  # saved | stale | missing | failed
    generation: int | None = None
    target_id: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status in ("saved", "stale")

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "op": self.op,
            "project_id": self.project_id,
            "status": self.status,
        }
        if self.generation is not None:
            result["generation"] = self.generation
        if self.target_id is not None:
            result["target_id"] = self.target_id
        if self.error is not None:
            result["error"] = self.error
        return result


class PersistenceQueue:
    """Submit layout/component saves to the store without blocking the editor.

    Parameters:
        store: The persistence collaborator.
        sync: Run saves inline (``--sync`` and tests).
        max_workers: Worker threads; more than one allows out-of-order completion.
        timeout: Seconds ``drain()`` waits for each in-flight save.
        on_complete: Called with every :class:`SaveOutcome`; its failures are logged.
    """

    def __init__(
        self,
        store: ProjectStore,
        *,
        sync: bool = False,
        max_workers: int = 2,
        timeout: float = 30.0,
        on_complete: Callable[[SaveOutcome], None] | None = None,
    ) -> None:
        self._store = store
        self._sync = sync
        self._timeout = timeout
        self._on_complete = on_complete
        self._executor: ThreadPoolExecutor | None = (
            None
            if sync
            else ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix=SAVE_THREAD_PREFIX)
        )
        self._futures: list[Future[SaveOutcome]] = []
        self._completed: list[SaveOutcome] = []

    @property
    def is_sync(self) -> bool:
        return self._sync

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def save_layout(self, project_id: str, layout: Layout, generation: int) -> SaveOutcome | None:
        """Persist a full layout. Returns the outcome in sync mode, else None."""

        def run() -> SaveOutcome:
            status = self._store.save_layout(project_id, layout, generation)
            return SaveOutcome("save_layout", project_id, status, generation=generation)

        return self._submit(run, SaveOutcome("save_layout", project_id, "failed", generation))

    def save_component(
        self,
        project_id: str,
        component: ComponentInstance,
    ) -> SaveOutcome | None:
        """Persist a component instance. Returns the outcome in sync mode, else None."""

        def run() -> SaveOutcome:
            status = self._store.save_component(project_id, component)
            return SaveOutcome("save_component", project_id, status, target_id=component.id)

        return self._submit(
            run, SaveOutcome("save_component", project_id, "failed", target_id=component.id)
        )

    def drain(self) -> list[SaveOutcome]:
        """Wait for in-flight saves and return every outcome since the last drain."""
        for future in self._futures:
            try:
                future.result(timeout=self._timeout)
            except Exception:
                logger.warning("Persistence request did not finish", exc_info=True)
        self._futures.clear()
        outcomes, self._completed = self._completed, []
        return outcomes

    def shutdown(self) -> list[SaveOutcome]:
        """Drain, then stop the worker threads."""
        outcomes = self.drain()
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
        return outcomes

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _submit(self, run: Callable[[], SaveOutcome], failed: SaveOutcome) -> SaveOutcome | None:
        if self._executor is None:
            return self._execute(run, failed)
        self._futures.append(self._executor.submit(self._execute, run, failed))
        return None

    def _execute(self, run: Callable[[], SaveOutcome], failed: SaveOutcome) -> SaveOutcome:
        try:
            outcome = run()
        except Exception as exc:
            logger.warning("%s failed for %s: %s", failed.op, failed.project_id, exc)
            outcome = SaveOutcome(
                failed.op,
                failed.project_id,
                "failed",
                generation=failed.generation,
                target_id=failed.target_id,
                error=str(exc),
            )
        self._completed.append(outcome)
        if self._on_complete is not None:
            try:
                self._on_complete(outcome)
            except Exception:
                logger.debug("on_complete callback failed for %s", outcome.op, exc_info=True)
        return outcome
