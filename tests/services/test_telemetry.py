"""Tests for telemetry primitives: Span, trace_span, @traced."""

from __future__ import annotations

import time
from collections.abc import Generator
from pathlib import Path

import pytest

from rangeconf.domain.schema import Schema
from rangeconf.services.result import ServiceError, ServiceResult
from rangeconf.services.telemetry import (
    Span,
    _current_span,
    disable_telemetry,
    enable_telemetry,
    trace_span,
    traced,
)
from rangeconf.services.validation import ValidationService


@pytest.fixture(autouse=True)
def _reset_telemetry_state() -> Generator[None]:
    """Ensure clean telemetry state for every test."""
    yield
    disable_telemetry()
    _current_span.set(None)


# ── Span unit tests ──────────────────────────────────────────────────


class TestSpan:
    def test_duration_before_end_is_zero(self) -> None:
        assert Span(name="test").duration_ms == 0.0

    def test_duration_after_end(self) -> None:
        span = Span(name="test")
        time.sleep(0.005)
        span.end()
        assert span.duration_ms > 0

    def test_to_dict_minimal(self) -> None:
        span = Span(name="root")
        span.end()
        d = span.to_dict()
        assert d["name"] == "root"
        assert "duration_ms" in d
        assert "children" not in d
        assert "annotations" not in d

    def test_to_dict_with_children(self) -> None:
        root = Span(name="root")
        child = Span(name="child", parent=root)
        root.children.append(child)
        child.end()
        root.end()
        assert root.to_dict()["children"][0]["name"] == "child"

    def test_annotate(self) -> None:
        span = Span(name="test")
        span.annotate("leaves", 42)
        span.end()
        assert span.to_dict()["annotations"] == {"leaves": 42}


# ── trace_span tests ─────────────────────────────────────────────────


class TestTraceSpan:
    def test_disabled_yields_none(self) -> None:
        with trace_span("test") as span:
            assert span is None

    def test_no_root_yields_none(self) -> None:
        enable_telemetry()
        with trace_span("test") as span:
            assert span is None

    def test_nested_spans(self) -> None:
        enable_telemetry()
        root = Span(name="root")
        token = _current_span.set(root)
        try:
            with trace_span("a"):
                with trace_span("b"):
                    pass
            assert root.children[0].name == "a"
            assert root.children[0].children[0].name == "b"
            assert root.children[0].end_time is not None
        finally:
            _current_span.reset(token)


# ── @traced decorator tests ──────────────────────────────────────────


class TestTracedDecorator:
    def test_noop_when_disabled(self) -> None:
        @traced
        def my_func() -> ServiceResult:
            return ServiceResult(ok=True, op="test")

        assert my_func().meta is None

    def test_injects_meta_when_enabled(self) -> None:
        @traced
        def my_func() -> ServiceResult:
            return ServiceResult(ok=True, op="test", meta={"existing": "data"})

        enable_telemetry()
        result = my_func()
        assert result.meta is not None
        assert result.meta["existing"] == "data"
        assert result.meta["telemetry"]["name"].endswith("my_func")

    def test_non_service_result_passthrough(self) -> None:
        @traced
        def my_func() -> str:
            return "hello"

        enable_telemetry()
        assert my_func() == "hello"

    def test_exception_propagates(self) -> None:
        @traced
        def my_func() -> ServiceResult:
            msg = "boom"
            raise ValueError(msg)

        enable_telemetry()
        with pytest.raises(ValueError, match="boom"):
            my_func()
        assert _current_span.get() is None

    def test_error_result_gets_telemetry(self) -> None:
        @traced
        def my_func() -> ServiceResult:
            return ServiceResult(ok=False, op="test", error=ServiceError(code="FAIL", message="oops"))

        enable_telemetry()
        result = my_func()
        assert result.meta is not None
        assert result.meta["telemetry"]["error"] == "FAIL"


# ── trace_span in the validation service ────────────────────────────


class TestTraceSpanInServices:
    def test_validate_has_child_spans(self, demo_schema: Schema) -> None:
        enable_telemetry()
        result = ValidationService(demo_schema).validate([{"port": 1}])
        assert result.ok
        assert result.meta is not None
        tel = result.meta["telemetry"]
        assert "ValidationService.validate" in tel["name"]
        names = [c["name"] for c in tel["children"]]
        assert names == ["load", "merge", "normalize", "count_leaves"]
        assert tel["children"][-1]["annotations"] == {"leaves": 2}

    def test_diff_has_child_spans(self, demo_schema: Schema) -> None:
        enable_telemetry()
        result = ValidationService(demo_schema).diff({}, {"port": 1})
        assert result.meta is not None
        names = [c["name"] for c in result.meta["telemetry"]["children"]]
        assert names[-1] == "diff_configurations"

    def test_failed_stage_is_marked(self, demo_schema: Schema) -> None:
        enable_telemetry()
        result = ValidationService(demo_schema).validate([{"port": 0}])
        assert not result.ok
        assert result.meta is not None
        tel = result.meta["telemetry"]
        assert tel["error"] == "INVALID_CONFIGURATION"
        assert "error" not in tel["children"][-1]

    def test_load_failure_marks_load_stage(self, demo_schema: Schema, tmp_path: Path) -> None:
        enable_telemetry()
        result = ValidationService(demo_schema).validate([tmp_path / "missing.toml"])
        assert result.meta is not None
        load = result.meta["telemetry"]["children"][0]
        assert load["name"] == "load"
        assert load["error"] == "LOAD_ERROR"


class TestTraceSpanErrors:
    def test_exception_recorded_and_reraised(self) -> None:
        enable_telemetry()
        root = Span(name="root")
        token = _current_span.set(root)
        try:
            with pytest.raises(KeyError):
                with trace_span("lookup"):
                    raise KeyError("x")
        finally:
            _current_span.reset(token)
        assert root.children[0].error == "KeyError"
        assert root.children[0].to_dict()["error"] == "KeyError"
