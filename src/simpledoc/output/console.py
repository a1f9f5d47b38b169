"""Rich Console factory and theme for simpledoc output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract. In non-TTY environments (tests,
pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

SIMPLEDOC_THEME = Theme(
    {
        "sd.ok": "bold green",
        "sd.error": "bold red",
        "sd.warning": "bold yellow",
        "sd.op": "bold cyan",
        "sd.key": "dim",
        "sd.path": "dim",
        "sd.step": "bold",
        "sd.count": "magenta",
        "sd.action.rename": "blue",
        "sd.action.frontmatter": "green",
        "sd.action.references": "yellow",
    }
)

_ACTION_STYLES: dict[str, str] = {
    "rename": "sd.action.rename",
    "frontmatter": "sd.action.frontmatter",
    "update references": "sd.action.references",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=SIMPLEDOC_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_action(line: str) -> str:
    """Rich style for a rendered action line (``- rename: a -> b``)."""
    kind = line.removeprefix("- ").split(":", 1)[0]
    return _ACTION_STYLES.get(kind, "")
