"""What every pagetree service hands back to the CLI.

Layout rule violations travel as ``ok=False`` results carrying the error
code (``OUT_OF_BOUNDS``, ``MALFORMED_PATH``...); services do not raise them.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from pagetree.domain.errors import LayoutError


class ServiceError(BaseModel):
    """Machine-readable failure: a stable ``code`` plus context in ``detail``."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_layout_error(cls, exc: LayoutError) -> ServiceError:
        return cls(code=exc.code, message=exc.message, detail=dict(exc.detail))


class ServiceResult(BaseModel):
    """Outcome of one editor operation.

    ``data`` holds the layout, ids or listing the operation produced.
    ``warnings`` collects problems that did not undo the operation, such as a
    background save that failed or a plugin that raised. ``meta`` is only
    filled by ``--verbose`` tracing.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def failure(cls, op: str, code: str, message: str, **detail: Any) -> ServiceResult:
        return cls(ok=False, op=op, error=ServiceError(code=code, message=message, detail=detail))
