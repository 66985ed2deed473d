"""Rich console, theme and styled labels for plan output.

Consoles render into a StringIO so renderers return plain strings; Rich
drops color codes on its own when the buffer is not a terminal.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.text import Text
from rich.theme import Theme

DEFAULT_WIDTH = 120

WEAVE_THEME = Theme(
    {
        "weave.ok": "bold green",
        "weave.error": "bold red",
        "weave.op": "bold cyan",
        "weave.key": "dim",
        "weave.target": "bold blue",
        "weave.handler": "magenta",
        "weave.inactive": "dim yellow",
        "weave.kind.constructor": "yellow",
        "weave.kind.method": "green",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    return Console(
        file=StringIO(),
        theme=WEAVE_THEME,
        no_color=no_color,
        highlight=False,
        width=width or DEFAULT_WIDTH,
    )


def get_output(console: Console) -> str:
    """Everything printed to a console made by :func:`create_console`."""
    if not isinstance(console.file, StringIO):
        msg = "console does not render to a buffer"
        raise TypeError(msg)
    return console.file.getvalue()


def style_for_kind(kind: str) -> str:
    """Theme style for an element kind, ``""`` for unknown kinds."""
    style = f"weave.kind.{kind}"
    return style if style in WEAVE_THEME.styles else ""


def kind_label(kind: str) -> Text:
    return Text(kind, style=style_for_kind(kind))


def active_label(active: bool) -> Text:
    return Text("active", style="weave.ok") if active else Text("inactive", style="weave.inactive")
