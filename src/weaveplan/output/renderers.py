"""Operation-specific Rich renderers for ServiceResult.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from weaveplan.output.console import active_label, create_console, get_output, kind_label

if TYPE_CHECKING:
    from rich.console import Console

    from weaveplan.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich."""
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
        return f"ERROR: {result.op} — {msg}"

    directives = result.data.get("directives")
    if directives:
        return "\n".join(f"{d['element']} {d['handler']}" for d in directives)
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    label = Text("OK", style="weave.ok")
    op = Text(f"  {result.op}", style="weave.op")
    console.print(label, op)


def _field(console: Console, key: str, value: Any) -> None:
    k = Text(f"  {key}: ", style="weave.key")
    style = "weave.target" if key == "target" else ""
    console.print(Text.assemble(k, Text(str(value), style=style)))


# ── Renderers ─────────────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)


def _render_plan(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _field(console, "target", result.data.get("target"))
    _field(console, "definition", result.data.get("definition") or "-")
    if "active" in result.data:
        state = active_label(result.data["active"])
        console.print(Text.assemble(Text("  state: ", style="weave.key"), state))

    directives: list[dict[str, Any]] = result.data.get("directives", [])
    if not directives:
        console.print(Text("  no directives", style="dim"))
        return

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Kind")
    table.add_column("Element", no_wrap=True)
    table.add_column("Handler", style="weave.handler")
    if verbose:
        table.add_column("Params", style="dim")
        table.add_column("Override", justify="right")

    for d in directives:
        row = [kind_label(d["kind"]), d["element"], d["handler"]]
        if verbose:
            row.extend([", ".join(d["param_types"]), str(d["override_args"])])
        table.add_row(*row)
    console.print(table)


def _render_definitions(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    _status_line(console, result)
    definitions: list[dict[str, Any]] = result.data.get("definitions", [])

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Name", no_wrap=True)
    table.add_column("Target", style="weave.target")
    table.add_column("Points", justify="right")
    table.add_column("Witness")
    for d in definitions:
        table.add_row(d["name"], d["target"], str(len(d["points"])), ", ".join(d["witness"]))
    console.print(table)

    if verbose:
        for d in definitions:
            console.print(Text(f"  {d['name']}", style="weave.op"))
            for p in d["points"]:
                console.print(Text(f"    {p['kind']:<12} {p['match']} -> {p['handler']}"))


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="weave.error")
    op = Text(f"  {result.op}", style="weave.op")
    console.print(label, op, Text(" — "), Text(msg))
    if err is None:
        return
    for rejection in err.detail.get("rejections", []):
        line = f"  {rejection['source']}: [{rejection['code']}] {rejection['message']}"
        console.print(Text(line))
    if verbose and err.detail and "rejections" not in err.detail:
        for key, value in err.detail.items():
            _field(console, key, value)


_OP_RENDERERS: dict[str, Callable[..., None]] = {
    "plan": _render_plan,
    "definitions": _render_definitions,
}
