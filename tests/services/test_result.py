"""Tests for the ServiceResult contract."""

import pytest
from pydantic import ValidationError

from pagetree.domain.errors import KindMismatchError, LayoutError
from pagetree.services.result import ServiceError, ServiceResult


class TestServiceResult:
    def test_success_defaults(self) -> None:
        result = ServiceResult(ok=True, op="drop")
        assert result.data == {}
        assert result.warnings == []
        assert result.error is None
        assert result.meta is None

    def test_failure(self) -> None:
        result = ServiceResult.failure("drop", "NOT_FOUND", "missing", project_id="PRJ-0001")
        assert not result.ok
        assert result.error == ServiceError(
            code="NOT_FOUND", message="missing", detail={"project_id": "PRJ-0001"}
        )

    def test_frozen(self) -> None:
        result = ServiceResult(ok=True, op="drop")
        with pytest.raises(ValidationError):
            result.ok = False  # type: ignore[misc]

    def test_json_round_trip(self) -> None:
        result = ServiceResult(ok=True, op="drop", data={"path": "0-1"}, warnings=["w"])
        assert ServiceResult.model_validate_json(result.model_dump_json()) == result


class TestServiceError:
    def test_from_layout_error(self) -> None:
        exc = KindMismatchError("bad kind", path="0-0-0", kind="row")
        error = ServiceError.from_layout_error(exc)
        assert error.code == "KIND_MISMATCH"
        assert error.message == "bad kind"
        assert error.detail == {"path": "0-0-0", "kind": "row"}

    def test_explicit_code_overrides_class_code(self) -> None:
        error = ServiceError.from_layout_error(LayoutError("x", code="PAYLOAD_MISMATCH"))
        assert error.code == "PAYLOAD_MISMATCH"

    def test_base_code(self) -> None:
        assert ServiceError.from_layout_error(LayoutError("x")).code == "LAYOUT_ERROR"
