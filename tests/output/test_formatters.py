"""Tests for output mode selection."""

import json

from rangeconf.output.formatters import OutputSettings, format_result
from rangeconf.services.result import ServiceResult


def _result() -> ServiceResult:
    return ServiceResult(ok=True, op="defaults", data={"schema": "Demo", "config": {"port": 8080}})


class TestFormatResult:
    def test_default_is_rich(self) -> None:
        output = format_result(_result())
        assert "OK" in output
        assert "8080" in output

    def test_json_mode(self) -> None:
        output = format_result(_result(), settings=OutputSettings(json_output=True))
        parsed = json.loads(output)
        assert parsed["ok"] is True
        assert parsed["data"]["config"] == {"port": 8080}

    def test_json_wins_over_quiet(self) -> None:
        output = format_result(_result(), settings=OutputSettings(json_output=True, quiet=True))
        assert json.loads(output)["op"] == "defaults"

    def test_quiet_mode(self) -> None:
        assert format_result(_result(), settings=OutputSettings(quiet=True)) == "OK: defaults"
