"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from scorectl.output.console import create_console, get_output, style_for_status

if TYPE_CHECKING:
    from rich.console import Console

    from scorectl.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op}: {msg}"

    # For list results, return IDs only
    items = result.data.get("items")
    if items and isinstance(items, list):
        return "\n".join(_extract_id(item) for item in items if _extract_id(item))
    if result.data.get("id") is not None:
        return str(result.data["id"])

    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _extract_id(item: Any) -> str:
    if isinstance(item, dict):
        for key in ("id", "username"):
            val = item.get(key)
            if val is not None:
                return str(val)
    return ""


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK status line."""
    label = Text("OK", style="score.ok")
    op = Text(f"  {result.op}", style="score.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="score.key")
    if key == "id" or key.endswith("_id"):
        v = Text(str(value), style="score.id")
    elif key == "path":
        v = Text(str(value), style="score.path")
    elif key in ("name", "title", "username"):
        v = Text(str(value), style="score.name")
    else:
        v = Text(str(value))
    console.print(k, v, end="")
    console.print()


def _num(value: Any) -> str:
    if isinstance(value, float):
        return f"{float(value):.2f}"
    return str(value if value is not None else "")


def _passed_text(passed: Any) -> Text:
    if passed:
        return Text("Passed", style="score.passed")
    return Text("Failed", style="score.failed")


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print meta block including telemetry span tree (verbose only)."""
    if not result.meta:
        return

    console.print()
    console.print(Text("  meta:", style="dim"))

    for k, v in result.meta.items():
        if k == "telemetry":
            _render_telemetry_tree(console, v, indent=4)
        else:
            console.print(f"    {k}: {v}")


def _render_telemetry_tree(
    console: Console,
    span_data: dict[str, Any],
    indent: int = 4,
) -> None:
    """Render a hierarchical span tree with color-coded timing."""
    prefix = " " * indent
    name = span_data.get("name", "?")
    duration = span_data.get("duration_ms", 0.0)

    if duration > 1000:
        style = "bold red"
    elif duration > 100:
        style = "yellow"
    else:
        style = "dim"

    line = f"{prefix}[{style}]{duration:>8.2f}ms[/{style}]  {name}"
    annotations = span_data.get("annotations") or {}
    if annotations:
        line += "  (" + ", ".join(f"{ak}={av}" for ak, av in annotations.items()) + ")"

    console.print(line)

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


def _stats_lines(stats: dict[str, Any] | None) -> list[str]:
    if not stats:
        return []
    return [f"{key.replace('_', ' ')}: {_num(val)}" for key, val in stats.items()]


def _new_table() -> Table:
    return Table(show_header=True, show_lines=False, pad_edge=False, expand=False)


def _page_footer(console: Console, result: ServiceResult, noun: str) -> None:
    d = result.data
    console.print(
        f"\n{d.get('count', 0)} of {d.get('total', 0)} {noun} "
        f"(page {d.get('page', 1)} of {max(d.get('pages', 0), 1)})"
    )


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="score.error")
    op = Text(f"  {result.op}", style="score.op")
    code = Text(f" [{err.code}] " if err else " ")
    console.print(label, op, code, msg)

    # Row failures of a partial import are always listed
    for line in result.data.get("errors", []):
        console.print(f"  [score.error]error[/score.error] {line}")

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")
        _render_meta(console, result)


# ── Record renderers ──────────────────────────────────────────────────


def _render_supervisor(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render create/update/get supervisor as a panel with statistics."""
    d = result.data
    _status_line(console, result)
    lines = [
        f"department: {d.get('department')}",
        f"qualification: {d.get('qualification')}",
        f"hire date: {d.get('hire_date')}",
        f"max contestants: {d.get('max_contestants')}",
        f"active: {'yes' if d.get('is_active') else 'no'}",
        *_stats_lines(d.get("statistics")),
    ]
    if d.get("notes"):
        lines.append(f"\n{d['notes']}")
    title = f"{d.get('id')} · {d.get('employee_id')} · {d.get('name')}"
    console.print(Panel("\n".join(lines), title=title, border_style="dim", expand=False))
    if verbose:
        _render_meta(console, result)


def _render_contestant(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result)
    supervisor = d.get("supervisor_name") or "(unassigned)"
    lines = [
        f"birth date: {d.get('birth_date')}",
        f"education level: {d.get('education_level')}",
        f"supervisor: {supervisor}",
        f"active: {'yes' if d.get('is_active') else 'no'}",
    ]
    if d.get("address"):
        lines.append(f"address: {d['address']}")
    if d.get("notes"):
        lines.append(f"\n{d['notes']}")
    title = f"{d.get('id')} · {d.get('registration_number')} · {d.get('name')}"
    console.print(Panel("\n".join(lines), title=title, border_style="dim", expand=False))
    if verbose:
        _render_meta(console, result)


def _render_competition(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result)
    status = str(d.get("status", ""))
    lines = [
        f"status: [{style_for_status(status)}]{status}[/]" if status else "status: ?",
        f"period: {d.get('start_date')} to {d.get('end_date')}",
        f"max score: {_num(d.get('max_score'))}",
        f"passing score: {_num(d.get('passing_score'))}",
        f"max contestants: {d.get('max_contestants')}",
        *_stats_lines(d.get("statistics")),
    ]
    if d.get("description"):
        lines.append(f"\n{d['description']}")
    title = f"{d.get('id')} · {d.get('title')}"
    console.print(Panel("\n".join(lines), title=title, border_style="dim", expand=False))
    if verbose:
        _render_meta(console, result)


def _render_score(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result)
    _field(console, "id", d.get("id"))
    _field(console, "competition", d.get("competition_title"))
    _field(console, "contestant", d.get("contestant_name"))
    _field(console, "supervisor", d.get("supervisor_name"))
    console.print(Text("  score: ", style="score.key"), end="")
    console.print(Text(_num(d.get("score_value")), style="score.value"), end=" ")
    console.print(_passed_text(d.get("passed")))
    _field(console, "entry_date", d.get("entry_date"))
    if d.get("notes"):
        _field(console, "notes", d["notes"])
    if verbose:
        _render_meta(console, result)


def _render_user(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key in ("username", "full_name", "role", "is_active", "last_login"):
        if key in result.data:
            _field(console, key, result.data[key])
    if verbose:
        _render_meta(console, result)


def _render_mutation(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render deletes and bulk updates."""
    _status_line(console, result)
    for key in ("id", "deleted", "scores_deleted", "competition_id", "updated_count"):
        if key in result.data:
            _field(console, key, result.data[key])
    if verbose:
        _render_meta(console, result)


# ── List renderers ────────────────────────────────────────────────────


def _render_supervisor_table(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    table = _new_table()
    table.add_column("ID", style="score.id", no_wrap=True)
    table.add_column("Employee ID", no_wrap=True)
    table.add_column("Name", style="score.name")
    table.add_column("Department")
    table.add_column("Contestants", justify="right")
    table.add_column("Average", style="score.value", justify="right")
    if verbose:
        table.add_column("Qualification", style="dim")

    for item in result.data.get("items", []):
        stats = item.get("statistics") or {}
        row = [
            str(item.get("id", "")),
            str(item.get("employee_id", "")),
            str(item.get("name", "")),
            str(item.get("department", "")),
            f"{stats.get('contestants_count', 0)}/{item.get('max_contestants', '')}",
            _num(stats.get("average_score", 0)),
        ]
        if verbose:
            row.append(str(item.get("qualification", "")))
        table.add_row(*row)

    console.print(table)
    _page_footer(console, result, "supervisors")


def _render_contestant_table(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    table = _new_table()
    table.add_column("ID", style="score.id", no_wrap=True)
    table.add_column("Registration", no_wrap=True)
    table.add_column("Name", style="score.name")
    table.add_column("Birth Date")
    table.add_column("Education")
    table.add_column("Supervisor")
    if verbose:
        table.add_column("Address", style="dim")

    for item in result.data.get("items", []):
        row = [
            str(item.get("id", "")),
            str(item.get("registration_number", "")),
            str(item.get("name", "")),
            str(item.get("birth_date", "")),
            str(item.get("education_level", "")),
            str(item.get("supervisor_name") or ""),
        ]
        if verbose:
            row.append(str(item.get("address") or ""))
        table.add_row(*row)

    console.print(table)
    if result.op == "search_contestants":
        console.print(f"\n{result.data.get('count', 0)} matches for {result.data.get('query')!r}")
    else:
        _page_footer(console, result, "contestants")


def _render_competition_table(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    table = _new_table()
    table.add_column("ID", style="score.id", no_wrap=True)
    table.add_column("Title", style="score.name")
    table.add_column("Start")
    table.add_column("End")
    table.add_column("Status")
    table.add_column("Entries", justify="right")
    table.add_column("Average", style="score.value", justify="right")
    if verbose:
        table.add_column("Success %", justify="right")

    for item in result.data.get("items", []):
        stats = item.get("statistics") or {}
        status = str(item.get("status", ""))
        row: list[Any] = [
            str(item.get("id", "")),
            str(item.get("title", "")),
            str(item.get("start_date", "")),
            str(item.get("end_date", "")),
            Text(status, style=style_for_status(status)),
            str(stats.get("total_contestants", 0)),
            _num(stats.get("average_score", 0)),
        ]
        if verbose:
            row.append(_num(stats.get("success_rate", 0)))
        table.add_row(*row)

    console.print(table)
    _page_footer(console, result, "competitions")


def _render_score_table(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    table = _new_table()
    table.add_column("ID", style="score.id", no_wrap=True)
    table.add_column("Competition")
    table.add_column("Contestant", style="score.name")
    table.add_column("Supervisor")
    table.add_column("Score", style="score.value", justify="right")
    table.add_column("Result")
    table.add_column("Entry Date")
    if verbose:
        table.add_column("Notes", style="dim")

    for item in result.data.get("items", []):
        row: list[Any] = [
            str(item.get("id", "")),
            str(item.get("competition_title") or ""),
            str(item.get("contestant_name") or ""),
            str(item.get("supervisor_name") or ""),
            _num(item.get("score_value")),
            _passed_text(item.get("passed")),
            str(item.get("entry_date", "")),
        ]
        if verbose:
            row.append(str(item.get("notes") or ""))
        table.add_row(*row)

    console.print(table)
    _page_footer(console, result, "scores")


def _render_user_table(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    table = _new_table()
    table.add_column("Username", style="score.name")
    table.add_column("Full Name")
    table.add_column("Role")
    table.add_column("Active")
    table.add_column("Last Login", style="dim")
    for item in result.data.get("items", []):
        table.add_row(
            str(item.get("username", "")),
            str(item.get("full_name", "")),
            str(item.get("role", "")),
            "yes" if item.get("is_active") else "no",
            str(item.get("last_login") or ""),
        )
    console.print(table)
    console.print(f"\n{result.data.get('count', 0)} users")


# ── Statistics renderers ──────────────────────────────────────────────


def _render_stats(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render competition/supervisor statistics and contestant averages."""
    _status_line(console, result)
    for key, value in result.data.items():
        if key.endswith("_id"):
            _field(console, key, value)
        elif isinstance(value, float):
            _field(console, key, _num(value))
        else:
            _field(console, key, value)
    if verbose:
        _render_meta(console, result)


def _render_rank(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result)
    _field(console, "score_id", d.get("score_id"))
    _field(console, "competition_id", d.get("competition_id"))
    _field(console, "rank", f"{d.get('rank')} of {d.get('out_of')}")


def _render_latest_score(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    d = result.data
    score = d.get("score")
    if score is None:
        _status_line(console, result)
        _field(console, "contestant_id", d.get("contestant_id"))
        console.print("  no scores recorded")
        return
    _render_score(result.model_copy(update={"data": score}), console, verbose=verbose)


# ── Transfer renderers ────────────────────────────────────────────────


def _render_import(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    d = result.data
    _field(console, "path", d.get("path"))
    _field(console, "success_count", d.get("success_count", 0))
    _field(console, "error_count", d.get("error_count", 0))
    if verbose:
        _render_meta(console, result)


def _render_export(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key in ("path", "sheet", "row_count", "competition_id"):
        if key in result.data:
            _field(console, key, result.data[key])
    if verbose:
        _render_meta(console, result)


# ── Store renderers ───────────────────────────────────────────────────


def _render_init(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key in ("root", "name", "config_path", "db_path", "revision"):
        if result.data.get(key) is not None:
            _field(console, key, result.data[key])


def _render_upgrade(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render upgrade/migration results."""
    _status_line(console, result)
    d = result.data
    for key in (
        "applied_count",
        "pending_count",
        "current",
        "head",
        "backup_path",
        "message",
    ):
        if key in d:
            _field(console, key, d[key])
    if verbose and d.get("pending"):
        console.print()
        for p in d["pending"]:
            console.print(f"  {p['revision']}: {p['description']}")


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, _json.dumps(value, separators=(",", ":"), default=str))
        else:
            _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    # Supervisors
    "create_supervisor": _render_supervisor,
    "update_supervisor": _render_supervisor,
    "get_supervisor": _render_supervisor,
    "delete_supervisor": _render_mutation,
    "list_supervisors": _render_supervisor_table,
    # Contestants
    "create_contestant": _render_contestant,
    "update_contestant": _render_contestant,
    "get_contestant": _render_contestant,
    "delete_contestant": _render_mutation,
    "list_contestants": _render_contestant_table,
    "search_contestants": _render_contestant_table,
    # Competitions
    "create_competition": _render_competition,
    "update_competition": _render_competition,
    "get_competition": _render_competition,
    "delete_competition": _render_mutation,
    "list_competitions": _render_competition_table,
    # Scores
    "record_score": _render_score,
    "update_score": _render_score,
    "get_score": _render_score,
    "delete_score": _render_mutation,
    "set_competition_scores": _render_mutation,
    "list_scores": _render_score_table,
    "get_latest_score": _render_latest_score,
    # Statistics
    "competition_statistics": _render_stats,
    "supervisor_statistics": _render_stats,
    "contestant_average": _render_stats,
    "score_rank": _render_rank,
    # Users
    "create_user": _render_user,
    "authenticate": _render_user,
    "change_password": _render_user,
    "set_role": _render_user,
    "deactivate": _render_user,
    "list_users": _render_user_table,
    # Transfer
    "import_contestants": _render_import,
    "import_supervisors": _render_import,
    "import_scores": _render_import,
    "export_contestants": _render_export,
    "export_supervisors": _render_export,
    "export_scores": _render_export,
    "export_competition_results": _render_export,
    # Store
    "init_store": _render_init,
    "upgrade": _render_upgrade,
}
