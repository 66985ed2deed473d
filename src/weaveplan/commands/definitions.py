"""Command: list loaded plugin definitions."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from weaveplan.commands._base import WeaveCommand

if TYPE_CHECKING:
    from weaveplan.commands._context import AppContext


@click.command(
    cls=WeaveCommand,
    examples=(
        "weaveplan definitions",
        "weaveplan -v definitions",
        "weaveplan --json definitions",
    ),
)
@click.pass_obj
def definitions(app: AppContext) -> None:
    """List loaded definitions and any rejections."""
    app.emit(app.service.list_definitions())
