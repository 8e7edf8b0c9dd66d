"""Rich Console factory, theme, and value styling for rangeconf output.

Consoles render into a StringIO buffer so renderers can return plain
strings.  Rich drops color codes by itself when not attached to a
terminal (tests, pipes).

Configuration values are always shown in their JSON spelling, styled by
JSON type, so ``"8080"`` and ``8080`` never look alike.
"""

from __future__ import annotations

import json
from io import StringIO
from typing import Any

from rich.console import Console
from rich.text import Text
from rich.theme import Theme

RANGECONF_THEME = Theme(
    {
        "rc.ok": "bold green",
        "rc.error": "bold red",
        "rc.warning": "bold yellow",
        "rc.op": "bold cyan",
        "rc.key": "dim",
        "rc.path": "bold blue",
        "rc.old": "red",
        "rc.new": "green",
        "rc.value.string": "green",
        "rc.value.number": "magenta",
        "rc.value.bool": "yellow",
        "rc.value.null": "dim italic",
        "rc.value.collection": "default",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes.
        width: Override terminal width; defaults to 120 for stable output.
    """
    return Console(
        file=StringIO(),
        theme=RANGECONF_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_value(value: Any) -> str:
    """Theme style for a configuration value, by JSON type."""
    if value is None:
        return "rc.value.null"
    if isinstance(value, bool):
        return "rc.value.bool"
    if isinstance(value, (int, float)):
        return "rc.value.number"
    if isinstance(value, str):
        return "rc.value.string"
    return "rc.value.collection"


def value_text(value: Any) -> Text:
    """A configuration value as styled JSON text (never parsed as markup)."""
    return Text(json.dumps(value, default=repr), style=style_for_value(value))
