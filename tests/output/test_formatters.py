"""Tests for output mode selection."""

import json

from pagetree.output.formatters import OutputSettings, format_result
from pagetree.services.result import ServiceResult


def drop_result() -> ServiceResult:
    return ServiceResult(
        ok=True,
        op="drop",
        data={"action": "move", "node_id": "L3", "path": "0-0-2", "generation": 1, "layout": []},
    )


class TestFormatResult:
    def test_json(self) -> None:
        output = format_result(drop_result(), settings=OutputSettings(json_output=True))
        parsed = json.loads(output)
        assert parsed["ok"] is True
        assert parsed["data"]["path"] == "0-0-2"

    def test_json_wins_over_quiet(self) -> None:
        settings = OutputSettings(json_output=True, quiet=True)
        assert json.loads(format_result(drop_result(), settings=settings))["op"] == "drop"

    def test_quiet(self) -> None:
        assert format_result(drop_result(), settings=OutputSettings(quiet=True)) == "0-0-2"

    def test_human_default(self) -> None:
        output = format_result(drop_result())
        assert "OK" in output
        assert "move" in output
