"""Telemetry for ``--verbose`` — a span per service call, a child per stage.

Disabled by default; then ``@traced`` and ``trace_span`` cost one
ContextVar lookup.  When enabled, a service method decorated with
``@traced`` becomes the root span, each ``trace_span`` block inside it
(load, merge, normalize, ...) a child, and the finished tree is attached
to ``ServiceResult.meta["telemetry"]`` together with the outcome.
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

from rangeconf.services.result import ServiceResult

log = structlog.get_logger("rangeconf.telemetry")

_enabled: ContextVar[bool] = ContextVar("_enabled", default=False)
_current_span: ContextVar[Span | None] = ContextVar("_current_span", default=None)


@dataclass
class Span:
    """One timed stage.

    ``error`` holds the ServiceError code (or exception name) when the
    stage's operation failed.
    """

    name: str
    parent: Span | None = None
    children: list[Span] = field(default_factory=list)
    start_time: float = field(default_factory=time.perf_counter)
    end_time: float | None = None
    annotations: dict[str, Any] = field(default_factory=dict)
    error: str | None = None

    @property
    def duration_ms(self) -> float:
        if self.end_time is None:
            return 0.0
        return (self.end_time - self.start_time) * 1000

    def end(self, *, error: str | None = None) -> None:
        self.end_time = time.perf_counter()
        if error is not None:
            self.error = error

    def annotate(self, key: str, value: Any) -> None:
        self.annotations[key] = value

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"name": self.name, "duration_ms": round(self.duration_ms, 2)}
        if self.error is not None:
            out["error"] = self.error
        if self.annotations:
            out["annotations"] = dict(self.annotations)
        if self.children:
            out["children"] = [c.to_dict() for c in self.children]
        return out


@contextmanager
def trace_span(name: str) -> Generator[Span | None]:
    """Time a stage as a child of the active span.

    Yields None when telemetry is off or no ``@traced`` call is running.
    An exception escaping the block is recorded on the span and re-raised.
    """
    parent = _current_span.get() if _enabled.get() else None
    if parent is None:
        yield None
        return

    child = Span(name=name, parent=parent)
    parent.children.append(child)
    token = _current_span.set(child)
    error: str | None = None
    try:
        yield child
    except Exception as exc:
        error = getattr(exc, "code", None) or type(exc).__name__
        raise
    finally:
        child.end(error=error)
        _current_span.reset(token)


_P = ParamSpec("_P")
_R = TypeVar("_R")


def traced(func: Callable[_P, _R]) -> Callable[_P, _R]:  # noqa: UP047
    """Run a service method as a root span and attach the tree to its result."""

    @functools.wraps(func)
    def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> _R:
        if not _enabled.get():
            return func(*args, **kwargs)

        span = Span(name=func.__qualname__)
        token = _current_span.set(span)
        try:
            result = func(*args, **kwargs)
        except Exception as exc:
            span.end(error=type(exc).__name__)
            _log_span(span)
            raise
        finally:
            _current_span.reset(token)

        if isinstance(result, ServiceResult):
            span.end(error=result.error.code if result.error else None)
            meta = {**(result.meta or {}), "telemetry": span.to_dict()}
            result = result.model_copy(update={"meta": meta})  # type: ignore[assignment]
        else:
            span.end()
        _log_span(span)
        return result

    return wrapper


def _log_span(span: Span) -> None:
    log.debug(
        "span.complete",
        span_name=span.name,
        duration_ms=round(span.duration_ms, 2),
        ok=span.error is None,
        error=span.error,
        stages=[c.name for c in span.children],
    )


def enable_telemetry() -> None:
    """Turn span collection on for this context (``--verbose``)."""
    _enabled.set(True)


def disable_telemetry() -> None:
    _enabled.set(False)

