"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from rangeconf.output.console import create_console, get_output, value_text

if TYPE_CHECKING:
    from rich.console import Console

    from rangeconf.services.result import ServiceResult

Renderer = Callable[["ServiceResult", "Console"], None]


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console)
    else:
        _render_error(result, console, verbose=verbose)
    if verbose:
        _render_meta(console, result)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    label = Text("OK", style="rc.ok")
    op = Text(f"  {result.op}", style="rc.op")
    console.print(label, op)


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="rc.key")
    if isinstance(value, (dict, list)):
        value = json.dumps(value, separators=(",", ":"))
    console.print(k, Text(str(value)), sep="")


def _flatten(value: Any, prefix: str = "") -> list[tuple[str, Any]]:
    """Flatten nested maps into ``(dotted.path, leaf)`` rows."""
    if isinstance(value, dict) and value:
        rows: list[tuple[str, Any]] = []
        for k, v in value.items():
            rows.extend(_flatten(v, f"{prefix}.{k}" if prefix else str(k)))
        return rows
    return [(prefix, value)]


def _config_table(config: dict[str, Any]) -> Table:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Setting", style="rc.path", no_wrap=True)
    table.add_column("Value")
    for path, value in _flatten(config):
        table.add_row(path, value_text(value))
    return table


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print meta block including telemetry span tree."""
    if not result.meta:
        return
    console.print()
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        if k == "telemetry":
            _render_telemetry_tree(console, v, indent=4)
        else:
            console.print(f"    {k}: {v}")


def _render_telemetry_tree(console: Console, span_data: dict[str, Any], indent: int = 4) -> None:
    """Render a hierarchical span tree with color-coded timing."""
    prefix = " " * indent
    name = span_data.get("name", "?")
    duration = span_data.get("duration_ms", 0.0)
    style = "yellow" if duration > 100 else "dim"

    line = f"{prefix}[{style}]{duration:>8.2f}ms[/{style}]  {name}"
    annotations = span_data.get("annotations") or {}
    if annotations:
        line += "  (" + ", ".join(f"{k}={v}" for k, v in annotations.items()) + ")"
    if span_data.get("error"):
        line += f"  [rc.error]failed: {span_data['error']}[/rc.error]"
    console.print(line)

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="rc.error")
    op = Text(f"  {result.op}", style="rc.op")
    console.print(label, op, Text(" — "), Text(msg), sep="")

    if err and err.detail:
        for k, v in err.detail.items():
            if verbose or k in ("path", "range"):
                _field(console, k, v)


# ── Operation renderers ───────────────────────────────────────────────


def _render_config(result: ServiceResult, console: Console) -> None:
    """Render validate/defaults results as a setting table."""
    _status_line(console, result)
    d = result.data
    for key in ("schema", "profiles", "leaves"):
        if d.get(key):
            _field(console, key, d[key])
    console.print(_config_table(d.get("config", {})))


def _render_diff(result: ServiceResult, console: Console) -> None:
    _status_line(console, result)
    changes = result.data.get("changes", [])
    if not changes:
        console.print(Text("  no differences", style="dim"))
        return
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Setting", style="rc.path", no_wrap=True)
    table.add_column("Old", style="rc.old")
    table.add_column("New", style="rc.new")
    for change in changes:
        table.add_row(change["path"], value_text(change["old"]), value_text(change["new"]))
    console.print(table)


def _render_generic(result: ServiceResult, console: Console) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Renderer] = {
    "validate": _render_config,
    "defaults": _render_config,
    "diff": _render_diff,
}
