"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). The caller
extracts the rendered text via ``get_output(console)``.

Diagnostics are drawn in the familiar compiler layout::

    error[preamble-requires-status]: preamble header `requires` ...
     --> eip-5.md:6
      |
    6 | requires: 1, 2
      |             ^^ has a less advanced status
      |
      = help: valid `status` values for this proposal are: `Draft`

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.cells import cell_len
from rich.table import Table
from rich.text import Text

from eiplint.output.console import create_console, get_output, style_for_severity

if TYPE_CHECKING:
    from rich.console import Console

    from eiplint.services.result import ServiceResult

# Annotation types drawn with the primary marker.
_PRIMARY = frozenset({"error", "warning"})


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
    elif result.error is not None and result.error.code == "LINT_FAILED":
        _render_check(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    diagnostics = result.data.get("diagnostics")
    if diagnostics is not None:
        return "\n".join(_diagnostic_line(d) for d in diagnostics)

    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    items = result.data.get("items")
    if items and isinstance(items, list):
        return "\n".join(str(item.get("slug", "")) for item in items)

    return f"OK: {result.op}"


def render_snippet(console: Console, diagnostic: dict[str, Any]) -> None:
    """Draw a single diagnostic (as produced by ``Snippet.to_dict()``)."""
    title = diagnostic.get("title") or {}
    severity = str(title.get("annotation_type", "error"))
    style = style_for_severity(severity)

    head = Text(severity, style=style)
    if title.get("id"):
        head.append(f"[{title['id']}]", style=style)
    head.append(f": {title.get('label') or ''}", style="bold")
    console.print(head, soft_wrap=True)

    origin = diagnostic.get("origin")
    slices = diagnostic.get("slices") or []
    if not slices and origin:
        console.print(Text(f" --> {origin}", style="lint.origin"), soft_wrap=True)

    for slice_ in slices:
        _render_slice(console, slice_, default_origin=origin)

    for note in diagnostic.get("footer") or []:
        kind = str(note.get("annotation_type", "note"))
        line = Text("  = ")
        line.append(kind, style=style_for_severity(kind))
        line.append(f": {note.get('label') or ''}")
        console.print(line, soft_wrap=True)

    console.print()


# ── Helpers ───────────────────────────────────────────────────────────


def _diagnostic_line(diagnostic: dict[str, Any]) -> str:
    """``origin:line: severity[slug]: label`` for quiet mode."""
    title = diagnostic.get("title") or {}
    location = str(diagnostic.get("origin") or "")
    slices = diagnostic.get("slices") or []
    if slices:
        location = f"{location}:{slices[0]['line_start']}"
    severity = title.get("annotation_type", "error")
    return f"{location}: {severity}[{title.get('id') or ''}]: {title.get('label') or ''}"


def _render_slice(
    console: Console,
    slice_: dict[str, Any],
    *,
    default_origin: str | None,
) -> None:
    """Draw the source lines of a slice with caret underlines."""
    source = str(slice_.get("source", ""))
    line_start = int(slice_.get("line_start", 1))
    origin = slice_.get("origin") or default_origin
    annotations = slice_.get("annotations") or []

    lines = source.split("\n")
    width = len(str(line_start + len(lines) - 1))
    pad = " " * width

    if origin:
        console.print(Text(f"{pad}--> {origin}:{line_start}", style="lint.origin"), soft_wrap=True)
    console.print(Text(f"{pad} |", style="lint.gutter"))

    offset = 0
    for idx, line in enumerate(lines):
        line_end = offset + len(line)
        row = Text(f"{line_start + idx:>{width}} | ", style="lint.gutter")
        row.append(line)
        console.print(row, soft_wrap=True)

        for ann in annotations:
            start, end = ann["range"]
            if not offset <= start <= line_end:
                continue
            col = start - offset
            spanned = line[col : min(end, line_end) - offset]
            severity = str(ann.get("annotation_type", "error"))
            marker = "^" if severity in _PRIMARY else "-"
            under = Text(f"{pad} | ", style="lint.gutter")
            under.append(" " * cell_len(line[:col]))
            under.append(
                f"{marker * max(1, cell_len(spanned))} {ann.get('label', '')}",
                style=style_for_severity(severity),
            )
            console.print(under, soft_wrap=True)

        offset = line_end + 1

    console.print(Text(f"{pad} |", style="lint.gutter"))


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    console.print(Text(f"  {key}: ", style="lint.key"), Text(str(value)), sep="")


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK status line."""
    console.print(Text("OK", style="lint.ok"), Text(f"  {result.op}", style="lint.op"), sep="")


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    console.print(
        Text("ERROR", style="lint.error"),
        Text(f"  {result.op}", style="lint.op"),
        Text(" — "),
        Text(msg),
        sep="",
    )

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(Text(f"    {k}: {v}"))


# ── Check renderers ───────────────────────────────────────────────────


def _render_check(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render every diagnostic followed by a summary line."""
    diagnostics = result.data.get("diagnostics", [])
    files = result.data.get("files", 0)

    if not diagnostics:
        console.print(f"[lint.ok]OK[/lint.ok]  No issues found in {files} file(s).")
        return

    for diagnostic in diagnostics:
        render_snippet(console, diagnostic)

    errors = result.data.get("error_count", 0)
    warnings = result.data.get("warning_count", 0)
    console.print(f"{errors} errors, {warnings} warnings in {files} file(s)")


def _render_lints(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render active lints as a table."""
    _status_line(console, result)
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Slug", style="lint.slug", no_wrap=True)
    table.add_column("Kind")
    table.add_column("Level")
    if verbose:
        table.add_column("Source", style="dim")

    for item in result.data.get("items", []):
        row = [str(item.get("slug", "")), str(item.get("kind", "")), str(item.get("level", ""))]
        if verbose:
            row.append(str(item.get("source", "")))
        table.add_row(*row)
    console.print(table)


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, _json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "check": _render_check,
    "list_lints": _render_lints,
}
