"""Service-call timing for ``scorectl --verbose``.

``@traced`` wraps a service method in a span and ``trace_span`` opens a
child span inside one. Traced calls made from another traced call nest
under it. Only the outermost call attaches the finished tree to
``ServiceResult.meta["telemetry"]``, which the verbose renderer prints.
With telemetry off, both cost a single ContextVar read.
"""

from __future__ import annotations

import functools
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, ParamSpec, TypeVar

import structlog

from scorectl.services.result import ServiceResult

log = structlog.get_logger("scorectl.telemetry")

_enabled: ContextVar[bool] = ContextVar("scorectl_telemetry", default=False)
_active: ContextVar[Span | None] = ContextVar("scorectl_span", default=None)


@dataclass
class Span:
    """One timed step; ``elapsed_ms`` is set when the span closes."""

    name: str
    annotations: dict[str, Any] = field(default_factory=dict)
    children: list[Span] = field(default_factory=list)
    started: float = field(default_factory=time.perf_counter)
    elapsed_ms: float = 0.0

    def close(self) -> None:
        self.elapsed_ms = (time.perf_counter() - self.started) * 1000

    def to_dict(self) -> dict[str, Any]:
        node: dict[str, Any] = {"name": self.name, "duration_ms": round(self.elapsed_ms, 2)}
        if self.annotations:
            node["annotations"] = dict(self.annotations)
        if self.children:
            node["children"] = [c.to_dict() for c in self.children]
        return node


@contextmanager
def _activate(span: Span) -> Iterator[Span]:
    parent = _active.get()
    if parent is not None:
        parent.children.append(span)
    token = _active.set(span)
    try:
        yield span
    finally:
        span.close()
        _active.reset(token)


@contextmanager
def trace_span(name: str, **annotations: Any) -> Iterator[Span | None]:
    """Open a child span of the active one.

    Yields None when telemetry is off or no traced call is running.
    """
    if not _enabled.get() or _active.get() is None:
        yield None
        return
    with _activate(Span(name, annotations)) as span:
        yield span


def _outcome(result: Any) -> str | None:
    if not isinstance(result, ServiceResult):
        return None
    if result.ok:
        return "ok"
    return result.error.code if result.error else "failed"


def _log_span(span: Span) -> None:
    log.debug(
        "span.complete",
        span_name=span.name,
        duration_ms=round(span.elapsed_ms, 2),
        outcome=span.annotations.get("outcome"),
        children=len(span.children),
    )


_P = ParamSpec("_P")
_R = TypeVar("_R")


def traced(func: Callable[_P, _R]) -> Callable[_P, _R]:  # noqa: UP047
    """Time a service method and record its outcome on the span."""

    @functools.wraps(func)
    def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> _R:
        if not _enabled.get():
            return func(*args, **kwargs)

        outermost = _active.get() is None
        span = Span(func.__qualname__)
        try:
            with _activate(span):
                result = func(*args, **kwargs)
        except Exception as exc:
            span.annotations["outcome"] = type(exc).__name__
            _log_span(span)
            raise

        outcome = _outcome(result)
        if outcome is not None:
            span.annotations["outcome"] = outcome
        _log_span(span)
        if outermost and isinstance(result, ServiceResult):
            meta = {**(result.meta or {}), "telemetry": span.to_dict()}
            return result.model_copy(update={"meta": meta})  # type: ignore[return-value]
        return result

    return wrapper


def enable_telemetry(enabled: bool = True) -> None:
    """Switch span collection on (``--verbose``) or off."""
    _enabled.set(enabled)
