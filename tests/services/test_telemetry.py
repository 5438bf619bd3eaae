"""Tests for telemetry primitives: Span, trace_span, @traced."""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path

import pytest
from openpyxl import Workbook

from scorectl.infrastructure.store import Store
from scorectl.services.result import ServiceError, ServiceResult
from scorectl.services.supervisor import SupervisorService
from scorectl.services.telemetry import Span, _active, enable_telemetry, trace_span, traced
from scorectl.services.transfer import TransferService


@pytest.fixture(autouse=True)
def _reset_telemetry_state() -> Generator[None]:
    """Ensure clean telemetry state for every test."""
    yield
    enable_telemetry(False)
    _active.set(None)


@traced
def _lookup() -> ServiceResult:
    return ServiceResult(
        ok=False, op="lookup", error=ServiceError(code="NOT_FOUND", message="gone")
    )


class TestSpan:
    def test_open_span_has_no_duration(self) -> None:
        assert Span(name="test").elapsed_ms == 0.0

    def test_to_dict_minimal(self) -> None:
        span = Span(name="root")
        span.close()
        d = span.to_dict()
        assert d["name"] == "root"
        assert d["duration_ms"] >= 0
        assert "children" not in d
        assert "annotations" not in d

    def test_annotations(self) -> None:
        assert Span("row", {"row": 3}).to_dict()["annotations"] == {"row": 3}


class TestTraceSpan:
    def test_disabled_yields_none(self) -> None:
        with trace_span("x") as span:
            assert span is None

    def test_outside_traced_call_yields_none(self) -> None:
        enable_telemetry()
        with trace_span("x") as span:
            assert span is None


class TestTraced:
    def test_disabled_passthrough(self) -> None:
        @traced
        def op() -> ServiceResult:
            return ServiceResult(ok=True, op="op")

        assert op().meta is None

    def test_enabled_injects_tree(self) -> None:
        @traced
        def op() -> ServiceResult:
            with trace_span("inner", step=1) as span:
                assert span is not None
            return ServiceResult(ok=True, op="op")

        enable_telemetry()
        telemetry = op().meta["telemetry"]
        assert telemetry["annotations"] == {"outcome": "ok"}
        assert telemetry["children"] == [
            {
                "name": "inner",
                "duration_ms": telemetry["children"][0]["duration_ms"],
                "annotations": {"step": 1},
            }
        ]

    def test_nested_call_becomes_child(self) -> None:
        @traced
        def outer() -> ServiceResult:
            inner = _lookup()
            assert inner.meta is None
            return ServiceResult(ok=True, op="outer")

        enable_telemetry()
        telemetry = outer().meta["telemetry"]
        (child,) = telemetry["children"]
        assert child["name"] == "_lookup"
        assert child["annotations"] == {"outcome": "NOT_FOUND"}

    def test_exception_resets_active_span(self) -> None:
        @traced
        def boom() -> ServiceResult:
            raise RuntimeError("x")

        enable_telemetry()
        with pytest.raises(RuntimeError):
            boom()
        assert _active.get() is None

    def test_service_method_spans(self, store: Store) -> None:
        enable_telemetry()
        result = SupervisorService(store).create_supervisor(
            {
                "name": "Amina Haddad",
                "hire_date": "2019-09-01",
                "department": "Mathematics",
                "qualification": "MSc",
            }
        )
        assert result.ok
        telemetry = result.meta["telemetry"]
        assert telemetry["name"] == "SupervisorService.create_supervisor"
        assert "validate" in [c["name"] for c in telemetry["children"]]

    def test_import_rows_nest_create_calls(self, store: Store, tmp_path: Path) -> None:
        wb = Workbook()
        ws = wb.active
        ws.append(["Name", "Hire Date", "Department", "Qualification"])
        ws.append(["Amina Haddad", "2019-09-01", "Mathematics", "MSc"])
        ws.append(["K", "2019-09-01", "Physics", "PhD"])
        wb.save(tmp_path / "staff.xlsx")

        enable_telemetry()
        result = TransferService(store).import_supervisors(tmp_path / "staff.xlsx")
        telemetry = result.meta["telemetry"]
        assert telemetry["annotations"] == {"outcome": "IMPORT_PARTIAL"}
        rows = [c for c in telemetry["children"] if c["name"] == "row"]
        assert [r["annotations"]["row"] for r in rows] == [2, 3]
        outcomes = [r["children"][0]["annotations"]["outcome"] for r in rows]
        assert outcomes == ["ok", "VALIDATION_FAILED"]
