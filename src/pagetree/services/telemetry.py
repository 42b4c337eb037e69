"""Drop tracing for ``--verbose`` runs.

Every ``@traced`` service call opens a root :class:`Span`; a batch opens one
child span per event via :func:`trace_span`. A span records the drop it
committed (action, node, generation), so a verbose result shows what each
step did and how long it took. Outside ``--verbose`` the decorator costs a
single ContextVar read.
"""

from __future__ import annotations

import functools
import time
from collections.abc import Callable, Generator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, ParamSpec, TypeVar

import structlog

from pagetree.services.result import ServiceResult

log = structlog.get_logger("pagetree.telemetry")

_enabled: ContextVar[bool] = ContextVar("pagetree_telemetry", default=False)
_active: ContextVar[Span | None] = ContextVar("pagetree_span", default=None)


@dataclass
class Span:
    """One timed step, optionally tied to the drop it committed."""

    name: str
    children: list[Span] = field(default_factory=list)
    started: float = field(default_factory=time.perf_counter)
    ended: float | None = None
    action: str | None = None
    node_id: str | None = None
    generation: int | None = None

    @property
    def duration_ms(self) -> float:
        if self.ended is None:
            return 0.0
        return (self.ended - self.started) * 1000

    def end(self) -> None:
        self.ended = time.perf_counter()

    def record_drop(self, action: str, node_id: str, generation: int) -> None:
        self.action = action
        self.node_id = node_id
        self.generation = generation

    def drops(self) -> int:
        """Drops recorded on this span and its descendants."""
        own = 1 if self.action is not None else 0
        return own + sum(child.drops() for child in self.children)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"name": self.name, "duration_ms": round(self.duration_ms, 2)}
        if self.action is not None:
            result["drop"] = {
                "action": self.action,
                "node_id": self.node_id,
                "generation": self.generation,
            }
        if self.children:
            result["children"] = [child.to_dict() for child in self.children]
        return result


@contextmanager
def _entered(span: Span) -> Generator[Span]:
    token = _active.set(span)
    try:
        yield span
    finally:
        span.end()
        _active.reset(token)


@contextmanager
def trace_span(name: str) -> Generator[Span | None]:
    """Open a child span under the active one; yields None when not tracing."""
    parent = get_current_span()
    if parent is None:
        yield None
        return
    child = Span(name=name)
    parent.children.append(child)
    with _entered(child):
        yield child


_P = ParamSpec("_P")
_R = TypeVar("_R")


def traced(func: Callable[_P, _R]) -> Callable[_P, _R]:  # noqa: UP047
    """Time a service method and attach its span tree to ``ServiceResult.meta``."""

    @functools.wraps(func)
    def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> _R:
        if not _enabled.get():
            return func(*args, **kwargs)

        span = Span(name=func.__qualname__)
        ok = False
        try:
            with _entered(span):
                result = func(*args, **kwargs)
            ok = result.ok if isinstance(result, ServiceResult) else True
        finally:
            log.debug(
                "span.complete",
                span_name=span.name,
                duration_ms=round(span.duration_ms, 2),
                ok=ok,
                drops=span.drops(),
            )

        if isinstance(result, ServiceResult):
            meta = {**(result.meta or {}), "telemetry": span.to_dict()}
            return result.model_copy(update={"meta": meta})  # type: ignore[return-value]
        return result

    return wrapper


def set_telemetry(enabled: bool) -> None:
    """Turn span collection on (``--verbose``) or off for the current context."""
    _enabled.set(enabled)


def get_current_span() -> Span | None:
    """The active span, or None when not tracing."""
    if not _enabled.get():
        return None
    return _active.get()
