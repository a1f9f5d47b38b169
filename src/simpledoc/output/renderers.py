"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any

from rich.text import Text

from simpledoc.output.console import create_console, get_output, style_for_action

if TYPE_CHECKING:
    from rich.console import Console

    from simpledoc.services.result import ServiceResult

# Action lines shown per preview step before truncating.
MAX_PREVIEW_LINES = 20


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal, which is
    the case inside Click's CliRunner and piped output.
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
        return f"ERROR: {result.op} - {msg}"
    return f"OK: {result.op}"


def render_steps(steps: Sequence[dict[str, Any]]) -> str:
    """Render plan preview steps on their own (used before confirmation)."""
    console = create_console()
    _render_steps(console, steps)
    return get_output(console).rstrip("\n")


# ── Helpers ───────────────────────────────────────────────────────────


def limit_lines(lines: Sequence[str], max_lines: int = MAX_PREVIEW_LINES) -> list[str]:
    """First *max_lines* lines plus a ``…and N more`` marker when truncated."""
    if len(lines) <= max_lines:
        return list(lines)
    return [*lines[:max_lines], f"- …and {len(lines) - max_lines} more"]


def _status_line(console: Console, result: ServiceResult, message: str | None = None) -> None:
    """Print the OK status line, optionally followed by a message."""
    parts = [Text("OK", style="sd.ok"), Text(f"  {result.op}", style="sd.op")]
    if message:
        parts.append(Text(f"  {message}"))
    console.print(*parts, sep="", end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="sd.key")
    v = Text(str(value), style="sd.path" if key.endswith("root") else "")
    console.print(k, v, sep="", end="")
    console.print()


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print the meta block (verbose only)."""
    if not result.meta:
        return
    console.print()
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        console.print(Text(f"    {k}: {v}"))


def _render_summary(console: Console, summary: Sequence[str]) -> None:
    for line in summary:
        console.print(Text(f"- {line}"))


def _render_steps(console: Console, steps: Sequence[dict[str, Any]]) -> None:
    """Print ``Planned changes:`` and each step with its action lines."""
    if not steps:
        return
    console.print(Text("Planned changes:", style="sd.step"))
    for number, step in enumerate(steps, start=1):
        actions: list[str] = step.get("actions", [])
        console.print()
        console.print(
            Text(f"Step {number}: ", style="sd.step"),
            Text(str(step.get("title", ""))),
            Text(f" ({len(actions)})", style="sd.count"),
            sep="",
        )
        for line in limit_lines(actions):
            console.print(Text(line, style=style_for_action(line)))


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    console.print(
        Text("ERROR", style="sd.error"),
        Text(f"  {result.op}", style="sd.op"),
        Text(" - "),
        Text(msg),
        sep="",
    )

    # Plan previews travel in detail (check) or data (migrate guards).
    payload = (err.detail if err else {}) or result.data
    summary = payload.get("summary") or []
    steps = payload.get("steps") or []
    if summary:
        console.print()
        _render_summary(console, summary)
    if steps:
        console.print()
        _render_steps(console, steps)
    if verbose:
        _render_meta(console, result)


# ── Operation renderers ───────────────────────────────────────────────


def _render_check(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render a passing check."""
    _status_line(console, result, str(result.data.get("message", "")))
    if verbose:
        _render_meta(console, result)


def _render_migrate(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render a migrate preview (dry run) or the outcome of an applied plan."""
    data = result.data
    steps = data.get("steps") or []
    if not steps:
        _status_line(console, result, str(data.get("message", "")))
    elif data.get("applied"):
        _status_line(console, result, f"applied {data.get('count', 0)} actions")
        _render_summary(console, data.get("summary") or [])
        console.print()
        console.print(Text(str(data.get("message", ""))))
    else:
        _status_line(console, result, "dry run, nothing changed")
        console.print()
        _render_steps(console, steps)
    if verbose:
        _render_meta(console, result)


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, _json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Callable[..., None]] = {
    "check": _render_check,
    "migrate": _render_migrate,
}
