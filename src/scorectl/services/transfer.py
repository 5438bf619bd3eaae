"""TransferService — spreadsheet import and export with openpyxl.

Imports read the first worksheet of an ``.xlsx`` workbook and locate
columns by header name (case-insensitive). Rows are processed one at a
time, each through the regular create operation in its own transaction:
a failing row is reported as ``"Row N: message"`` and later rows still
run.

Exports write one bold header row followed by data rows, using the
fixed column layout of each record kind.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any
from zipfile import BadZipFile

from openpyxl import Workbook, load_workbook
from openpyxl.styles import Font
from openpyxl.utils.exceptions import InvalidFileException
from openpyxl.worksheet.worksheet import Worksheet

from scorectl.domain.aggregates import is_passing
from scorectl.services._helpers import failure, not_found
from scorectl.services.base import BaseService
from scorectl.services.contestant import ContestantService
from scorectl.services.contracts import ExportResultData, ImportResultData, dump_validated
from scorectl.services.result import ErrorCode, ServiceError, ServiceResult
from scorectl.services.score import ScoreService
from scorectl.services.stats import supervisor_stats_for
from scorectl.services.supervisor import SupervisorService
from scorectl.services.telemetry import trace_span, traced

logger = logging.getLogger(__name__)

XLSX_SUFFIX = ".xlsx"
_DATE_NUMBER_FORMAT = "yyyy-mm-dd"

CONTESTANT_HEADERS = [
    "Name",
    "Birth Date",
    "Education Level",
    "Address",
    "Supervisor",
    "Registration Number",
    "Registered On",
]
SUPERVISOR_HEADERS = [
    "Name",
    "Hire Date",
    "Department",
    "Qualification",
    "Employee ID",
    "Contestants",
    "Average Score",
    "Status",
]
SCORE_HEADERS = [
    "Competition",
    "Contestant",
    "Supervisor",
    "Score",
    "Result",
    "Entry Date",
    "Notes",
]
RESULT_HEADERS = ["Contestant", "Supervisor", "Score", "Result", "Entry Date"]


@dataclass(frozen=True)
class Column:
    """One importable column: spreadsheet header → field key."""

    header: str
    key: str
    required: bool = True


CONTESTANT_COLUMNS = (
    Column("Name", "name"),
    Column("Birth Date", "birth_date"),
    Column("Education Level", "education_level"),
    Column("Address", "address", required=False),
    Column("Supervisor", "supervisor", required=False),
    Column("Registration Number", "registration_number", required=False),
)
SUPERVISOR_COLUMNS = (
    Column("Name", "name"),
    Column("Hire Date", "hire_date"),
    Column("Department", "department"),
    Column("Qualification", "qualification"),
    Column("Max Contestants", "max_contestants", required=False),
    Column("Employee ID", "employee_id", required=False),
)
SCORE_COLUMNS = (
    Column("Competition", "competition"),
    Column("Contestant", "contestant"),
    Column("Supervisor", "supervisor"),
    Column("Score", "score_value"),
    Column("Notes", "notes", required=False),
)


def _cell_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _result_label(score_value: float, passing_score: float) -> str:
    return "Passed" if is_passing(score_value, passing_score) else "Failed"


def _style_header(ws: Worksheet) -> None:
    for cell in ws[1]:
        cell.font = Font(bold=True)


def _format_dates(ws: Worksheet, min_row: int = 2) -> None:
    for row in ws.iter_rows(min_row=min_row):
        for cell in row:
            if isinstance(cell.value, date):
                cell.number_format = _DATE_NUMBER_FORMAT


class _RowError(Exception):
    """A row-level failure raised while resolving names in one row."""


class TransferService(BaseService):
    """Bulk spreadsheet import and export."""

    # ------------------------------------------------------------------
    # Import
    # ------------------------------------------------------------------

    @traced
    def import_contestants(self, path: Path) -> ServiceResult:
        """Create one contestant per row; ``Supervisor`` is matched by name."""
        contestants = ContestantService(self._store)

        def create(row: dict[str, Any]) -> ServiceResult:
            fields = {k: v for k, v in row.items() if k != "supervisor"}
            supervisor_name = _cell_text(row.get("supervisor"))
            if supervisor_name is not None:
                fields["supervisor_id"] = self._supervisor_id(supervisor_name)
            return contestants.create_contestant(fields)

        return self._import_rows("import_contestants", path, CONTESTANT_COLUMNS, create)

    @traced
    def import_supervisors(self, path: Path) -> ServiceResult:
        """Create one supervisor per row; ``Max Contestants`` defaults from config."""
        supervisors = SupervisorService(self._store)
        return self._import_rows(
            "import_supervisors", path, SUPERVISOR_COLUMNS, supervisors.create_supervisor
        )

    @traced
    def import_scores(self, path: Path) -> ServiceResult:
        """Record one score per row, resolving competition, contestant and supervisor by name."""
        scores = ScoreService(self._store)

        def record(row: dict[str, Any]) -> ServiceResult:
            competition = self._records.find_competition_by_title(str(row["competition"]))
            if competition is None:
                raise _RowError(f"Competition not found: {row['competition']}")
            contestant = self._records.find_contestant_by_name(str(row["contestant"]))
            if contestant is None:
                raise _RowError(f"Contestant not found: {row['contestant']}")
            return scores.record_score(
                competition["id"],
                contestant["id"],
                self._supervisor_id(str(row["supervisor"])),
                row["score_value"],
                notes=_cell_text(row.get("notes")),
            )

        return self._import_rows("import_scores", path, SCORE_COLUMNS, record)

    def _supervisor_id(self, name: str) -> int:
        supervisor = self._records.find_supervisor_by_name(name)
        if supervisor is None:
            raise _RowError(f"Supervisor not found: {name}")
        return int(supervisor["id"])

    def _import_rows(
        self,
        op: str,
        path: Path,
        columns: tuple[Column, ...],
        create: Callable[[dict[str, Any]], ServiceResult],
    ) -> ServiceResult:
        path = Path(path)
        if path.suffix.lower() != XLSX_SUFFIX:
            return failure(
                op,
                ErrorCode.UNSUPPORTED_FORMAT,
                f"Only {XLSX_SUFFIX} workbooks are supported: {path.name}",
                path=str(path),
            )
        if not path.is_file():
            return failure(op, ErrorCode.NOT_FOUND, f"File not found: {path}", path=str(path))

        try:
            wb = load_workbook(filename=path, data_only=True)
        except (BadZipFile, InvalidFileException) as exc:
            return failure(
                op,
                ErrorCode.UNSUPPORTED_FORMAT,
                f"Not a readable {XLSX_SUFFIX} workbook: {path.name}",
                path=str(path),
                reason=str(exc),
            )
        ws = wb.worksheets[0]
        header_row = next(ws.iter_rows(min_row=1, max_row=1, values_only=True), ())
        headers_norm = {
            str(h).strip().lower(): idx for idx, h in enumerate(header_row) if h is not None
        }
        missing = [
            c.header for c in columns if c.required and c.header.lower() not in headers_norm
        ]
        if missing:
            return failure(
                op,
                ErrorCode.VALIDATION_FAILED,
                f"Missing columns: {', '.join(missing)}",
                errors=[{"field": h, "message": f"Missing column: {h}"} for h in missing],
            )

        success_count = 0
        errors: list[str] = []
        for row_idx, raw in enumerate(ws.iter_rows(min_row=2, values_only=True), start=2):
            if all(_cell_text(v) is None for v in raw):
                continue
            row: dict[str, Any] = {}
            for column in columns:
                idx = headers_norm.get(column.header.lower())
                value = raw[idx] if idx is not None and idx < len(raw) else None
                row[column.key] = value.strip() if isinstance(value, str) else value

            with trace_span("row", row=row_idx):
                try:
                    result = create(row)
                except _RowError as exc:
                    message = str(exc)
                else:
                    if result.ok:
                        success_count += 1
                        continue
                    message = result.error.message if result.error else "Unknown error"
            errors.append(f"Row {row_idx}: {message}")
            logger.debug("%s row %d failed: %s", op, row_idx, message)

        wb.close()
        data = dump_validated(
            ImportResultData,
            {
                "path": str(path),
                "success_count": success_count,
                "error_count": len(errors),
                "errors": errors,
            },
        )
        logger.info("%s: %d imported, %d failed", op, success_count, len(errors))
        if errors:
            return ServiceResult(
                ok=False,
                op=op,
                data=data,
                error=ServiceError(
                    code=ErrorCode.IMPORT_PARTIAL,
                    message=f"{len(errors)} of {success_count + len(errors)} rows failed",
                    detail=data,
                ),
            )
        return ServiceResult(ok=True, op=op, data=data)

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    @traced
    def export_contestants(self, path: Path, ids: list[int] | None = None) -> ServiceResult:
        """Write contestants (optionally only *ids*) to *path*."""
        fmt = self._settings.export.date_format
        rows = [
            [
                r["name"],
                r["birth_date"],
                r["education_level"],
                r["address"],
                r["supervisor_name"],
                r["registration_number"],
                r["created_at"].strftime(fmt),
            ]
            for r in self._records.contestant_export_rows(ids)
        ]
        return self._write("export_contestants", path, "Contestants", CONTESTANT_HEADERS, rows)

    @traced
    def export_supervisors(self, path: Path) -> ServiceResult:
        rows = []
        for r in self._records.all_supervisor_rows():
            stats = supervisor_stats_for(self._records, r)
            rows.append(
                [
                    r["name"],
                    r["hire_date"],
                    r["department"],
                    r["qualification"],
                    r["employee_id"],
                    stats.contestants_count,
                    stats.average_score,
                    "Active" if r["is_active"] else "Inactive",
                ]
            )
        return self._write("export_supervisors", path, "Supervisors", SUPERVISOR_HEADERS, rows)

    @traced
    def export_scores(
        self,
        path: Path,
        competition_id: int | None = None,
        supervisor_id: int | None = None,
    ) -> ServiceResult:
        fmt = self._settings.export.datetime_format
        rows = [
            [
                r["competition_title"],
                r["contestant_name"],
                r["supervisor_name"],
                r["score_value"],
                _result_label(r["score_value"], r["passing_score"]),
                r["entry_date"].strftime(fmt),
                r["notes"],
            ]
            for r in self._records.score_export_rows(
                competition_id=competition_id, supervisor_id=supervisor_id
            )
        ]
        return self._write("export_scores", path, "Scores", SCORE_HEADERS, rows)

    @traced
    def export_competition_results(self, path: Path, competition_id: int) -> ServiceResult:
        """Write one competition's scores, best first, followed by a competition info block."""
        op = "export_competition_results"
        competition = self._records.get_competition(competition_id)
        if competition is None:
            return not_found(op, "competition", competition_id)

        fmt = self._settings.export.datetime_format
        rows: list[list[Any]] = [
            [
                r["contestant_name"],
                r["supervisor_name"],
                r["score_value"],
                _result_label(r["score_value"], r["passing_score"]),
                r["entry_date"].strftime(fmt),
            ]
            for r in self._records.score_export_rows(competition_id=competition_id)
        ]
        info: list[list[Any]] = [
            [],
            ["Competition"],
            ["Title", competition["title"]],
            ["Start Date", competition["start_date"]],
            ["End Date", competition["end_date"]],
            ["Max Score", competition["max_score"]],
            ["Passing Score", competition["passing_score"]],
        ]
        result = self._write(op, path, "Results", RESULT_HEADERS, rows, trailer=info)
        if result.ok:
            return result.model_copy(
                update={"data": {**result.data, "competition_id": competition_id}}
            )
        return result

    def _write(
        self,
        op: str,
        path: Path,
        sheet: str,
        headers: list[str],
        rows: list[list[Any]],
        *,
        trailer: list[list[Any]] | None = None,
    ) -> ServiceResult:
        path = Path(path)
        if path.suffix.lower() != XLSX_SUFFIX:
            return failure(
                op,
                ErrorCode.UNSUPPORTED_FORMAT,
                f"Exports are written as {XLSX_SUFFIX}: {path.name}",
                path=str(path),
            )

        wb = Workbook()
        ws = wb.active
        ws.title = sheet
        ws.append(headers)
        for row in rows:
            ws.append(row)
        _style_header(ws)
        if trailer:
            first_trailer_row = ws.max_row + 2
            for row in trailer:
                ws.append(row)
            ws.cell(row=first_trailer_row, column=1).font = Font(bold=True)
        _format_dates(ws)

        path.parent.mkdir(parents=True, exist_ok=True)
        wb.save(path)
        logger.info("%s: wrote %d rows to %s", op, len(rows), path)

        data = {"path": str(path), "sheet": sheet, "row_count": len(rows)}
        return ServiceResult(ok=True, op=op, data=dump_validated(ExportResultData, data))
