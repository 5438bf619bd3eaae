"""Rich Console factory and theme for scorectl output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract.  In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

SCORE_THEME = Theme(
    {
        "score.ok": "bold green",
        "score.error": "bold red",
        "score.warning": "bold yellow",
        "score.op": "bold cyan",
        "score.key": "dim",
        "score.id": "bold blue",
        "score.path": "dim",
        "score.name": "bold",
        "score.value": "magenta",
        "score.passed": "green",
        "score.failed": "red",
        "score.status.upcoming": "cyan",
        "score.status.ongoing": "green",
        "score.status.ended": "dim",
    }
)

_STATUS_STYLES: dict[str, str] = {
    "upcoming": "score.status.upcoming",
    "ongoing": "score.status.ongoing",
    "ended": "score.status.ended",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=SCORE_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_status(status: str) -> str:
    """Return the Rich style name for a competition status."""
    return _STATUS_STYLES.get(status, "")
