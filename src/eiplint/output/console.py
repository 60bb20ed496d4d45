"""Rich Console factory and theme for eiplint output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract. In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

LINT_THEME = Theme(
    {
        "lint.ok": "bold green",
        "lint.error": "bold red",
        "lint.warning": "bold yellow",
        "lint.info": "bold blue",
        "lint.note": "bold",
        "lint.help": "bold cyan",
        "lint.op": "bold cyan",
        "lint.key": "dim",
        "lint.slug": "bold",
        "lint.gutter": "bold blue",
        "lint.origin": "dim",
    }
)

_SEVERITY_STYLES: dict[str, str] = {
    "error": "lint.error",
    "warning": "lint.warning",
    "info": "lint.info",
    "note": "lint.note",
    "help": "lint.help",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=LINT_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_severity(annotation_type: str) -> str:
    """Return the Rich style name for an annotation type."""
    return _SEVERITY_STYLES.get(annotation_type, "")
